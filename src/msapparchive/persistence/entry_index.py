"""
Canonical Entry Index
=====================
Maps canonical entry paths to the entry handles of the underlying container.

The index has an explicit two-phase lifecycle: it starts UNBUILT and is built
exactly once, on first access, from a source callable supplied by the archive.
After that only ``insert`` (entry creation) changes it.

Not thread-safe: one archive instance, one owner.
"""
from __future__ import annotations

import logging
from enum import Enum
from types import MappingProxyType
from typing import Callable, Dict, Generic, Iterable, Iterator, Mapping, Optional, Tuple, TypeVar

from msapparchive.persistence.errors import EntryConflictError, EntryNotFoundError
from msapparchive.persistence.paths import normalize_path

logger = logging.getLogger(__name__)

H = TypeVar("H")

EntrySource = Callable[[], Iterable[Tuple[str, H]]]


class IndexState(Enum):
    UNBUILT = "unbuilt"
    BUILT = "built"


class EntryIndex(Generic[H]):
    """
    Canonical path -> entry handle, first occurrence wins.

    Args:
        source: Returns (raw_name, handle) pairs. Called once, on first access.
    """

    def __init__(self, source: EntrySource):
        self._source = source
        self._entries: Dict[str, H] = {}
        self._state = IndexState.UNBUILT

    @classmethod
    def empty(cls) -> EntryIndex:
        """Index for a container opened in create mode."""
        return cls(lambda: ())

    @property
    def state(self) -> IndexState:
        return self._state

    @property
    def is_built(self) -> bool:
        return self._state is IndexState.BUILT

    def _ensure_built(self) -> Dict[str, H]:
        if self._state is IndexState.UNBUILT:
            entries: Dict[str, H] = {}
            for raw_name, handle in self._source():
                key = normalize_path(raw_name)
                if key in entries:
                    logger.info(f"Duplicate entry found in archive: {raw_name}")
                    continue
                entries[key] = handle
            self._entries = entries
            self._state = IndexState.BUILT
            logger.debug(f"Entry index built with {len(entries)} canonical entries.")
        return self._entries

    # ---- Queries ----

    def lookup(self, path: str) -> Optional[H]:
        if path is None or not path.strip():
            return None
        return self._ensure_built().get(normalize_path(path))

    def require(self, path: str) -> H:
        handle = self.lookup(path)
        if handle is None:
            raise EntryNotFoundError(f"Entry '{path}' not found in msapp archive.", file_name=path)
        return handle

    def items(self) -> Iterator[Tuple[str, H]]:
        return iter(list(self._ensure_built().items()))

    def as_mapping(self) -> Mapping[str, H]:
        """Read-only view of the canonical entries."""
        return MappingProxyType(self._ensure_built())

    def __contains__(self, path: object) -> bool:
        if not isinstance(path, str):
            return False
        return normalize_path(path) in self._ensure_built()

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._ensure_built()))

    def __len__(self) -> int:
        return len(self._ensure_built())

    # ---- Mutation ----

    def insert(self, path: str, handle: H) -> H:
        """Register a newly created entry. Fails if its canonical path is taken."""
        entries = self._ensure_built()
        key = normalize_path(path)
        if key in entries:
            raise EntryConflictError(f"Entry {path} already exists in the archive.", file_name=path)
        entries[key] = handle
        return handle

    def discard(self, path: str, handle: Optional[H] = None) -> None:
        """
        Unregister a path. With `handle`, only that exact registration is removed,
        so an entry that was already in the archive is never dropped by mistake.
        """
        entries = self._ensure_built()
        key = normalize_path(path)
        if key in entries and (handle is None or entries[key] is handle):
            del entries[key]
