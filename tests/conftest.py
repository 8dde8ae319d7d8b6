import io
import json
import warnings
import zipfile
from typing import Callable, Dict, Iterable, Tuple, Union

import pytest

from msapparchive.persistence.archive import ArchiveMode, MsappArchive

APP_YAML = """\
App:
  Name: MyApp
  FormatVersion: '0.24'
  Properties:
    Theme: =PowerAppsTheme
  Header:
    DocVersion: 1.336
"""

SCREEN1_YAML = """\
Screen:
  Name: Screen1
  Properties:
    Fill: =RGBA(255, 255, 255, 1)
  Controls:
  - Name: Label1
    Control: Label
    Properties:
      Text: ="Hello"
  - Name: Container1
    Control: GroupContainer
    Variant: manualLayoutContainer
    Controls:
    - Name: Button1
      Control: Button
"""

SCREEN2_YAML = """\
Screen:
  Name: Screen2
"""


def editor_state_json(top_parent: dict) -> str:
    return json.dumps({"TopParent": top_parent})


SCREEN1_EDITOR_STATE = {
    "Name": "Screen1",
    "StyleName": "defaultScreenStyle",
    "Controls": [
        {"Name": "Label1", "X": 40, "Y": 40},
        {"Name": "Orphan", "X": 0},
        {
            "Name": "Container1",
            "Controls": [{"Name": "Button1", "IsLocked": True}],
        },
    ],
}


Entries = Union[Dict[str, str], Iterable[Tuple[str, str]]]


def build_zip(entries: Entries) -> io.BytesIO:
    """Zip the given (name, text) entries into an in-memory stream. Duplicates are kept."""
    items = entries.items() if isinstance(entries, dict) else entries
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as zf, warnings.catch_warnings():
        warnings.simplefilter("ignore", UserWarning)
        for name, text in items:
            zf.writestr(zipfile.ZipInfo(name), text)
    buffer.seek(0)
    return buffer


@pytest.fixture
def make_archive() -> Callable[..., MsappArchive]:
    opened = []

    def _make(entries: Entries, mode: ArchiveMode = ArchiveMode.READ) -> MsappArchive:
        archive = MsappArchive(build_zip(entries), mode)
        opened.append(archive)
        return archive

    yield _make
    for archive in opened:
        archive.close()


@pytest.fixture
def sample_entries() -> Dict[str, str]:
    return {
        "Src/Controls/1.fx.yaml": APP_YAML,
        "Src/Controls/Screen1.fx.yaml": SCREEN1_YAML,
        "Src/Controls/Screen2.fx.yaml": SCREEN2_YAML,
        "Controls/Screen1.json": editor_state_json(SCREEN1_EDITOR_STATE),
        "Controls/Unused.json": editor_state_json({"Name": "Unused"}),
        "References/DataSources.json": "{}",
    }
