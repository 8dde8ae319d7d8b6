"""
Msapp Archive (Zip Container Facade)
====================================
Represents an open .msapp file.

Why is this file needed?
------------------------
1. Addressing: Entry names inside an .msapp are compared case-insensitively and
   without regard to the path separator. The archive exposes every lookup
   through the canonical EntryIndex instead of the raw zip names.
2. Decoding: It is the single place where entry payloads are turned into
   model objects, so every decode failure is reported with the entry name.
3. Resource scope: It owns the zip container and (unless `leave_open`) the
   underlying stream, and releases both exactly once.

Classes:
    ArchiveMode: Read / Create / Update.
    MsappArchive: The facade.
"""
from __future__ import annotations

import logging
import time
import zipfile
from enum import StrEnum
from typing import IO, Any, Iterator, Mapping, Optional, Set, Type, TypeVar

from msapparchive import config
from msapparchive.model.controls import App, ControlEditorState
from msapparchive.persistence.codecs import EditorStateCodec, StructuralCodec, YamlCodec
from msapparchive.persistence.entry_index import EntryIndex
from msapparchive.persistence.errors import EntryConflictError, PersistenceException
from msapparchive.persistence.loader import AppLoader
from msapparchive.persistence.paths import normalize_path
from msapparchive.persistence.saver import AppSaver

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ArchiveMode(StrEnum):
    READ = "r"
    CREATE = "w"
    UPDATE = "a"


class MsappArchive:
    """
    Facade over a zip container holding an app.

    Args:
        stream: Binary file-like object holding (or receiving) the zip data.
        mode: ArchiveMode. CREATE starts with an empty entry set.
        leave_open: True to leave the stream open after the archive is closed.
        codec: Structural (yaml) codec, defaults to YamlCodec.
        editor_state_codec: Editor state (json) codec, defaults to EditorStateCodec.
    """

    def __init__(
        self,
        stream: IO[bytes],
        mode: ArchiveMode = ArchiveMode.READ,
        leave_open: bool = False,
        codec: Optional[StructuralCodec] = None,
        editor_state_codec: Optional[EditorStateCodec] = None,
        name: Optional[str] = None,
    ):
        self._stream = stream
        self._mode = ArchiveMode(mode)
        self._leave_open = leave_open
        self._codec: StructuralCodec = codec or YamlCodec()
        self._editor_state_codec = editor_state_codec or EditorStateCodec()
        self.name = name or getattr(stream, "name", None)

        self._is_closed = False
        self._app: Optional[App] = None
        self._app_loaded = False
        self._written: Set[str] = set()

        try:
            self.zip_file = zipfile.ZipFile(stream, mode=self._mode.value, compression=config.ZIP_COMPRESSION)
        except (zipfile.BadZipFile, OSError, ValueError) as e:
            if not leave_open:
                stream.close()
            raise PersistenceException("Failed to open msapp archive.", file_name=self.name) from e

        # If we're creating a new archive, there are no entries to canonicalize.
        if self._mode is ArchiveMode.CREATE:
            self._index: EntryIndex[zipfile.ZipInfo] = EntryIndex.empty()
        else:
            self._index = EntryIndex(lambda: ((info.filename, info) for info in self.zip_file.infolist()))

    # ---- Factory Methods ----

    @classmethod
    def open(cls, path: str, **kwargs: Any) -> MsappArchive:
        """Open an existing .msapp file read-only."""
        logger.info(f"Opening msapp archive: {path}")
        stream = open(path, "rb")
        return cls(stream, ArchiveMode.READ, leave_open=False, name=str(path), **kwargs)

    @classmethod
    def create(cls, path: str, **kwargs: Any) -> MsappArchive:
        """Create a new .msapp file. Fails if the file already exists."""
        logger.info(f"Creating msapp archive: {path}")
        stream = open(path, "xb")
        return cls(stream, ArchiveMode.CREATE, leave_open=False, name=str(path), **kwargs)

    # ---- Properties ----

    @property
    def mode(self) -> ArchiveMode:
        return self._mode

    @property
    def is_closed(self) -> bool:
        return self._is_closed

    @property
    def canonical_entries(self) -> Mapping[str, zipfile.ZipInfo]:
        """Canonical entries in the archive. Keys are normalized paths (lowercase, forward slashes, no trailing slash)."""
        return self._index.as_mapping()

    @property
    def decompressed_size(self) -> int:
        """Total sum of decompressed sizes of all entries in the archive."""
        return sum(info.file_size for info in self.zip_file.infolist())

    @property
    def compressed_size(self) -> int:
        """Total sum of compressed sizes of all entries in the archive."""
        return sum(info.compress_size for info in self.zip_file.infolist())

    @property
    def app(self) -> Optional[App]:
        if not self._app_loaded:
            self._app = AppLoader(self).load()
            self._app_loaded = True
        return self._app

    @app.setter
    def app(self, value: Optional[App]) -> None:
        self._app = value
        self._app_loaded = True

    # ---- Entry Lookup ----

    def list_under(self, directory: str, extension: Optional[str] = None, recursive: bool = True) -> Iterator[zipfile.ZipInfo]:
        """
        Yield the entries located in `directory`, in index order.

        Args:
            directory: Raw directory name, normalized before matching.
            extension: Optional case-insensitive suffix filter (e.g. ".json").
            recursive: False to skip entries in nested directories.
        """
        if directory is None:
            raise ValueError("Directory name cannot be None.")

        prefix = normalize_path(directory) + "/"
        suffix = extension.lower() if extension is not None else None

        for key, entry in self._index.items():
            if not key.startswith(prefix):
                continue
            if not recursive and "/" in key[len(prefix):]:
                continue
            if suffix is not None and not key.endswith(suffix):
                continue
            yield entry

    def get_entry(self, entry_name: str) -> Optional[zipfile.ZipInfo]:
        return self._index.lookup(entry_name)

    def get_required_entry(self, entry_name: str) -> zipfile.ZipInfo:
        """Returns the entry with the given name or raises EntryNotFoundError."""
        return self._index.require(entry_name)

    # ---- Entry Creation ----

    def create_entry(self, entry_name: str) -> zipfile.ZipInfo:
        """
        Register a new entry under its raw name. The entry can be written once
        (see `write_entry`).
        """
        if entry_name is None or not entry_name.strip():
            raise ValueError("Entry name cannot be None or whitespace.")
        if self._mode is ArchiveMode.READ:
            raise ValueError("Cannot create entries in an archive opened for reading.")

        entry = zipfile.ZipInfo(entry_name, date_time=time.localtime(time.time())[:6])
        entry.compress_type = config.ZIP_COMPRESSION
        return self._index.insert(entry_name, entry)

    def write_entry(self, entry: zipfile.ZipInfo, text: str) -> None:
        key = normalize_path(entry.filename)
        if key in self._written:
            raise EntryConflictError("Entry has already been written.", file_name=entry.filename)
        self._written.add(key)

        with self.zip_file.open(entry, "w") as fh:
            fh.write(text.encode(config.ENTRY_ENCODING))

    # ---- Payload Codecs ----

    def read_text(self, entry: zipfile.ZipInfo) -> str:
        with self.zip_file.open(entry) as fh:
            # tolerate a BOM
            return fh.read().decode(config.ENTRY_READ_ENCODING)

    def deserialize(self, entry: zipfile.ZipInfo, kind: Type[T]) -> T:
        """Decode a structural entry. Never returns None."""
        if entry is None:
            raise ValueError("Archive entry cannot be None.")
        try:
            result = self._codec.deserialize(self.read_text(entry), kind)
        except Exception as e:
            raise PersistenceException("Failed to deserialize archive entry.", file_name=entry.filename) from e

        if result is None:
            raise PersistenceException("Failed to deserialize archive entry.", file_name=entry.filename)
        return result

    def deserialize_editor_state(self, entry: zipfile.ZipInfo) -> ControlEditorState:
        try:
            return self._editor_state_codec.deserialize_top_parent(self.read_text(entry))
        except Exception as e:
            raise PersistenceException("Failed to deserialize control editor state file.", file_name=entry.filename) from e

    def serialize(self, entry: zipfile.ZipInfo, value: Any) -> None:
        try:
            text = self._codec.serialize(value)
        except Exception as e:
            # Nothing was written, so the entry must not stay registered
            if normalize_path(entry.filename) not in self._written:
                self._index.discard(entry.filename, entry)
            raise PersistenceException("Failed to serialize archive entry.", file_name=entry.filename) from e
        self.write_entry(entry, text)

    # ---- Load / Save ----

    def save(self) -> None:
        AppSaver(self).save(self._app)

    # ---- Resource Scope ----

    def close(self) -> None:
        """Release the zip container and (unless leave_open) the stream. Idempotent."""
        if self._is_closed:
            return
        self._is_closed = True
        try:
            self.zip_file.close()
        finally:
            if not self._leave_open:
                self._stream.close()

    def __enter__(self) -> MsappArchive:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"MsappArchive(name={self.name!r}, mode={self._mode.name})"
