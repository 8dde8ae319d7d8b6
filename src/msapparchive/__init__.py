"""Read and write packaged (.msapp) app archives."""
from importlib.metadata import PackageNotFoundError, version

from msapparchive.model.controls import App, Control, ControlEditorState, Screen
from msapparchive.persistence.archive import ArchiveMode, MsappArchive
from msapparchive.persistence.errors import EntryConflictError, EntryNotFoundError, PersistenceException
from msapparchive.persistence.paths import normalize_path

try:
    __version__ = version("msapparchive")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"

__all__ = [
    "App",
    "ArchiveMode",
    "Control",
    "ControlEditorState",
    "EntryConflictError",
    "EntryNotFoundError",
    "MsappArchive",
    "PersistenceException",
    "Screen",
    "normalize_path",
]
