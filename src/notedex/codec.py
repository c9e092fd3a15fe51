"""Encode and decode note records.

A record is six ``\\n``-separated lines with fixed labels:

    NoteID: 3f2b9c1e-...
    Title: Test Note
    Content: This is a test note.
    Author ID: 1
    Date: 2026-10-19T14:03:22.125000+00:00
    Tags: testtag, work

Fields are read by line position; the labels are cosmetic. The ``Tags:`` line
is informational only, tag membership lives in the tag index. A value that
contains a line break shifts every following field and cannot be read back.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from notedex.errors import IncompleteRecord, MalformedRecord
from notedex.models import Note

if TYPE_CHECKING:
    from collections.abc import Iterable

ID_LABEL = "NoteID: "
TITLE_LABEL = "Title: "
CONTENT_LABEL = "Content: "
AUTHOR_LABEL = "Author ID: "
DATE_LABEL = "Date: "
TAGS_LABEL = "Tags: "
NO_TAGS = "None"

_FIELD_COUNT = 5
# Default DateTime.ToString() output of the legacy writer (en-US)
_LEGACY_DATE_FORMAT = "%m/%d/%Y %I:%M:%S %p"


def encode(note: Note, tags: Iterable[str] | None = None) -> str:
    """Serialize a note to its record text.

    ``tags`` overrides ``note.tags`` for the informational line (the store
    passes the tags as given by the caller of ``create``).
    """
    tag_list = list(note.tags if tags is None else tags)
    lines = [
        f"{ID_LABEL}{note.note_id}",
        f"{TITLE_LABEL}{note.title or ''}",
        f"{CONTENT_LABEL}{note.content or ''}",
        f"{AUTHOR_LABEL}{note.author_id}",
        f"{DATE_LABEL}{note.created_at.isoformat()}",
        f"{TAGS_LABEL}{', '.join(tag_list) if tag_list else NO_TAGS}",
    ]
    return "\n".join(lines)


def decode(blob: str) -> Note:
    """Parse record text back into a Note (with an empty tag list).

    Raises IncompleteRecord when fewer than five lines are present and
    MalformedRecord when the id, author id or date does not parse.
    """
    lines = blob.split("\n")
    # a single trailing newline does not open another field
    if lines[-1] == "":
        lines.pop()
    if len(lines) < _FIELD_COUNT:
        msg = f"record has {len(lines)} lines, expected at least {_FIELD_COUNT}"
        raise IncompleteRecord(msg)

    raw_id, title, content, raw_author, raw_date = (
        _strip_label(line, label)
        for line, label in zip(
            lines, (ID_LABEL, TITLE_LABEL, CONTENT_LABEL, AUTHOR_LABEL, DATE_LABEL), strict=False
        )
    )

    try:
        note_id = uuid.UUID(raw_id.strip())
    except ValueError as exc:
        msg = f"invalid note id: {raw_id!r}"
        raise MalformedRecord(msg) from exc

    try:
        author_id = int(raw_author.strip())
    except ValueError as exc:
        msg = f"invalid author id: {raw_author!r}"
        raise MalformedRecord(msg) from exc

    return Note(
        note_id=note_id,
        title=title,
        content=content,
        author_id=author_id,
        created_at=parse_timestamp(raw_date),
    )


def parse_timestamp(text: str) -> datetime:
    """Parse an ISO 8601 timestamp, or the legacy ``M/D/YYYY h:mm:ss AM`` form."""
    text = text.strip()
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.strptime(text, _LEGACY_DATE_FORMAT)
    except ValueError as exc:
        msg = f"invalid date: {text!r}"
        raise MalformedRecord(msg) from exc


def _strip_label(line: str, label: str) -> str:
    line = line.removesuffix("\r")
    head = label.rstrip()
    if line.startswith(head):
        line = line[len(head):]
        if line.startswith(" "):
            line = line[1:]
    return line
