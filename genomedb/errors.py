# genomedb/errors.py
"""
Exceptions raised by the track registry.

A missing track is not an error: lookups return None. Everything below
aborts the current operation and propagates to the caller.
"""

from typing import List, Optional


class GenomeDBError(Exception):
    """Base class for track registry errors."""


class DuplicateTrackError(GenomeDBError):
    """More than one record in the track list shares a label."""

    def __init__(self, label: str, count: int):
        self.label = label
        self.count = count
        super().__init__(f"multiple tracks labeled {label!r} ({count} records)")


class UnknownTrackTypeError(GenomeDBError, LookupError):
    """No handler is registered for a type or any of its ancestors."""

    def __init__(self, type_name: str, candidates: Optional[List[str]] = None):
        self.type_name = type_name
        self.candidates = list(candidates or [])
        tried = ", ".join(self.candidates) or "none"
        super().__init__(f"no track handler for type {type_name!r} (tried: {tried})")


class InvalidTrackLabelError(GenomeDBError, ValueError):
    """A track label cannot be mapped onto the track directory tree."""


class StorageError(GenomeDBError):
    """Reading or writing a JSON document failed."""

    def __init__(self, path, message: str):
        self.path = path
        super().__init__(f"{path}: {message}")
