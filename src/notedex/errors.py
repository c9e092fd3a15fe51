"""Exception types raised by the note store and its indexes."""

from __future__ import annotations


class NotedexError(Exception):
    """Base class for every notedex failure."""


class RecordError(NotedexError, ValueError):
    """A note record (or an index line) could not be parsed."""


class IncompleteRecord(RecordError):
    """The record has fewer lines than the five required fields."""


class MalformedRecord(RecordError):
    """A field is present but does not parse as its type."""


class StoreError(NotedexError, OSError):
    """Underlying file I/O failed (disk, permissions, ...)."""


class InvalidNoteId(NotedexError, ValueError):
    """A note identifier string is not a UUID."""


class BlankTag(NotedexError, ValueError):
    """An empty or whitespace-only tag name was used for a lookup."""
