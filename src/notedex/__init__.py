"""Flat-file note store: one text record per note, append-only tag and author indexes.

Layout (under the configured storage root):
    MyNotes/
        Note_<uuid>.txt      # record: NoteID/Title/Content/Author ID/Date/Tags lines
    Tags/
        <tag>.txt            # one note id per line, tag lowercased
    Authors/
        Author_<id>.txt      # one note id per line

A note's tags are derived on read by scanning Tags/ for its id; the Tags:
line inside the record is for humans only.

Concurrent writes: index appends are single O_APPEND writes under
flock(LOCK_EX); records are written to a temp file and renamed into place.
"""

from notedex.codec import decode, encode
from notedex.config import NotedexConfig, init_config, load_config
from notedex.errors import (
    BlankTag,
    IncompleteRecord,
    InvalidNoteId,
    MalformedRecord,
    NotedexError,
    RecordError,
    StoreError,
)
from notedex.index import AuthorIndex, TagIndex, normalize_tag
from notedex.models import Note, new_note_id
from notedex.queries import NoteQueries, StaleEntry
from notedex.store import NoteStore

__all__ = [
    "AuthorIndex",
    "BlankTag",
    "IncompleteRecord",
    "InvalidNoteId",
    "MalformedRecord",
    "Note",
    "NoteQueries",
    "NoteStore",
    "NotedexConfig",
    "NotedexError",
    "RecordError",
    "StaleEntry",
    "StoreError",
    "TagIndex",
    "decode",
    "encode",
    "init_config",
    "load_config",
    "new_note_id",
    "normalize_tag",
]
