import io
import zipfile

import pytest

from msapparchive.model.controls import App, Control, ControlEditorState, Screen
from msapparchive.persistence.archive import ArchiveMode, MsappArchive
from msapparchive.persistence.errors import EntryConflictError, PersistenceException


def make_app() -> App:
    return App(
        name="RoundTrip",
        format_version="0.24",
        properties={"Theme": "=PowerAppsTheme"},
        header={"DocVersion": "1.336"},
        publish_info={"LogoFileName": "logo.png"},
        screens=[
            Screen(
                name="S1",
                properties={"Fill": "=White"},
                controls=[
                    Control(name="Label1", control_type="Label", properties={"Text": '="Hi"'}),
                    Control(
                        name="Group1",
                        control_type="GroupContainer",
                        variant="manualLayoutContainer",
                        controls=[Control(name="Button1", control_type="Button")],
                    ),
                ],
            ),
            Screen(name="S2"),
        ],
    )


def save_to_bytes(app: App) -> io.BytesIO:
    stream = io.BytesIO()
    with MsappArchive(stream, ArchiveMode.CREATE, leave_open=True) as archive:
        archive.app = app
        archive.save()
    stream.seek(0)
    return stream


def test_save_writes_canonical_entry_names() -> None:
    stream = save_to_bytes(make_app())

    with zipfile.ZipFile(stream) as zf:
        assert zf.namelist() == [
            "Src/Controls/1.fx.yaml",
            "Src/Controls/S1.fx.yaml",
            "Src/Controls/S2.fx.yaml",
        ]


def test_round_trip_preserves_app_and_screens() -> None:
    original = make_app()

    with MsappArchive(save_to_bytes(original)) as archive:
        loaded = archive.app

    assert loaded.format_version == original.format_version
    assert loaded.properties == original.properties
    assert loaded.header == original.header
    assert loaded.publish_info == original.publish_info
    assert set(loaded.screen_names) == {"S1", "S2"}
    for screen in original.screens:
        assert loaded.get_screen(screen.name) == screen


def test_editor_state_is_not_saved() -> None:
    app = make_app()
    app.screens[0].editor_state = ControlEditorState(name="S1", data={"X": 1})

    with MsappArchive(save_to_bytes(app)) as archive:
        assert archive.app.get_screen("S1").editor_state is None
        assert list(archive.list_under("Controls", ".json")) == []


def test_save_without_app_fails() -> None:
    with MsappArchive(io.BytesIO(), ArchiveMode.CREATE) as archive:
        with pytest.raises(RuntimeError):
            archive.save()


def test_duplicate_screen_names_abort_save_without_rollback() -> None:
    app = App(name="Dupes", screens=[Screen(name="Main"), Screen(name="MAIN"), Screen(name="Other")])
    stream = io.BytesIO()

    with MsappArchive(stream, ArchiveMode.CREATE, leave_open=True) as archive:
        archive.app = app
        with pytest.raises(EntryConflictError) as exc_info:
            archive.save()

    assert exc_info.value.file_name == "Src/Controls/MAIN.fx.yaml"
    stream.seek(0)
    with zipfile.ZipFile(stream) as zf:
        assert zf.namelist() == ["Src/Controls/1.fx.yaml", "Src/Controls/Main.fx.yaml"]


def test_saving_twice_conflicts_on_app_entry() -> None:
    with MsappArchive(io.BytesIO(), ArchiveMode.CREATE) as archive:
        archive.app = App(name="Once")
        archive.save()

        with pytest.raises(EntryConflictError):
            archive.save()


def test_unencodable_app_leaves_no_phantom_entry() -> None:
    stream = io.BytesIO()

    with MsappArchive(stream, ArchiveMode.CREATE, leave_open=True) as archive:
        archive.app = App(name="Broken", properties={"Theme": object()})
        with pytest.raises(PersistenceException) as exc_info:
            archive.save()

        assert exc_info.value.file_name == "Src/Controls/1.fx.yaml"
        assert dict(archive.canonical_entries) == {}

        # The failed entry can be created again once the value is fixed
        archive.app = App(name="Fixed")
        archive.save()

    stream.seek(0)
    with zipfile.ZipFile(stream) as zf:
        assert zf.namelist() == ["Src/Controls/1.fx.yaml"]
