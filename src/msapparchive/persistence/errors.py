"""Exceptions raised by the archive persistence layer."""
from typing import Optional


class PersistenceException(Exception):
    """
    Failure while reading or writing an archive entry.

    ``file_name`` is the raw name of the entry whose processing failed, or the
    archive path for failures that concern the container as a whole.
    The underlying cause is chained (``raise ... from exc``).
    """

    def __init__(self, message: str, file_name: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.file_name = file_name

    def __str__(self) -> str:
        if self.file_name:
            return f"{self.message} (entry: '{self.file_name}')"
        return self.message


class EntryNotFoundError(PersistenceException):
    """A required entry is not present in the archive."""


class EntryConflictError(PersistenceException):
    """An entry with the same canonical path already exists."""
