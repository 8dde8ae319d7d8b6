import pytest

from msapparchive import config
from msapparchive.persistence.paths import join_entry_path, normalize_path


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("Src/Controls/1.fx.yaml", "src/controls/1.fx.yaml"),
        ("  Src\\Controls\\Screen1.fx.yaml  ", "src/controls/screen1.fx.yaml"),
        ("/Controls/", "controls"),
        ("\\\\References\\", "references"),
        ("", ""),
        ("   ", ""),
    ],
)
def test_normalize_path(raw: str, expected: str) -> None:
    assert normalize_path(raw) == expected


def test_normalize_is_case_and_separator_insensitive() -> None:
    assert normalize_path("A\\B/") == normalize_path("a/b")


@pytest.mark.parametrize("raw", ["A\\B/", " /X/y\\Z.JSON ", "", "already/normal"])
def test_normalize_is_idempotent(raw: str) -> None:
    once = normalize_path(raw)
    assert normalize_path(once) == once


def test_join_entry_path_uses_forward_slash() -> None:
    assert join_entry_path("Src", "Controls", "1.fx.yaml") == "Src/Controls/1.fx.yaml"
    assert join_entry_path("Src/", "\\Controls") == "Src/Controls"


def test_fixed_layout() -> None:
    assert config.app_entry_path() == "Src/Controls/1.fx.yaml"
    assert config.screen_entry_path("Screen1") == "Src/Controls/Screen1.fx.yaml"
    assert config.controls_source_dir() == "Src/Controls"


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("\u0130mages/Logo.png", "images/logo.png"),
        ("\u0391\u03a3", "\u03b1\u03c3"),
        ("Stra\u00dfe.json", "stra\u00dfe.json"),
    ],
)
def test_normalize_lowercases_per_character(raw: str, expected: str) -> None:
    key = normalize_path(raw)
    assert key == expected
    assert len(key) == len(raw)
