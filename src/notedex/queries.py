"""NoteQueries: the API callers use, and the place the store gets wired up.

    queries = NoteQueries.from_config(load_config("/srv/notes"))
    queries.create("Test Note", "This is a test note.", 1, tags=["TestTag"])
    queries.get_by_tag("testtag")      # [Note(...)]
    queries.get_by_author(1)           # [UUID(...)]

"Nothing found" is always None or an empty list. Only bad input (a
malformed id string, a blank tag name), unreadable records and I/O
failures raise.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import TYPE_CHECKING

from notedex.errors import BlankTag, InvalidNoteId, RecordError
from notedex.index import AuthorIndex, TagIndex
from notedex.store import NoteStore

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import datetime

    from notedex.config import NotedexConfig
    from notedex.index import KeyedLog
    from notedex.models import Note

logger = logging.getLogger("notedex.queries")


@dataclass(frozen=True)
class StaleEntry:
    """An index line whose note id does not resolve to a readable record.

    ``note_id`` is None when the entry file itself cannot be parsed.
    """

    index: str          # tag | author
    key: str | int
    note_id: uuid.UUID | None
    reason: str         # missing | unreadable | corrupt entry


class NoteQueries:
    """Lookups by id, tag and author on top of a NoteStore."""

    def __init__(self, store: NoteStore, tags: TagIndex, authors: AuthorIndex) -> None:
        self.store = store
        self.tags = tags
        self.authors = authors

    @classmethod
    def from_config(cls, cfg: NotedexConfig) -> NoteQueries:
        tags = TagIndex(cfg.tags_dir)
        authors = AuthorIndex(cfg.authors_dir)
        return cls(NoteStore(cfg.notes_dir, tags, authors), tags, authors)

    # ------------------------------------------------------------------
    # Notes
    # ------------------------------------------------------------------

    def create(
        self,
        title: str,
        content: str,
        author_id: int,
        note_id: uuid.UUID | None = None,
        created_at: datetime | None = None,
        tags: Iterable[str] | None = None,
    ) -> int:
        return self.store.create(title, content, author_id, note_id, created_at, tags)

    def get(self, note_id: uuid.UUID | str) -> Note | None:
        return self.store.get(parse_note_id(note_id))

    def list_all(self) -> list[Note]:
        return self.store.list_all()

    # ------------------------------------------------------------------
    # Tags / authors
    # ------------------------------------------------------------------

    def get_by_tag(self, tag_name: str) -> list[Note]:
        """Notes carrying ``tag_name``. Blank names raise BlankTag."""
        if tag_name is None or not tag_name.strip():
            raise BlankTag("Tag name cannot be empty")
        notes = self.store.get_by_tag(tag_name)
        logger.debug("found %d notes for tag %s", len(notes), tag_name)
        return notes

    def get_by_author(self, author_id: int) -> list[uuid.UUID]:
        """Ids of the notes written by ``author_id``, in creation order."""
        return self.authors.list_ids(author_id)

    def notes_by_author(self, author_id: int) -> list[Note]:
        notes: list[Note] = []
        for note_id in self.get_by_author(author_id):
            note = self.store.get(note_id)
            if note is not None:
                notes.append(note)
        return notes

    def tag_counts(self) -> dict[str, int]:
        """Every tag entry with its number of lines."""
        return {tag: self.tags.count(tag) for tag in self.tags.keys()}

    # ------------------------------------------------------------------
    # Consistency
    # ------------------------------------------------------------------

    def stale_entries(self) -> list[StaleEntry]:
        """Index lines pointing at missing or unreadable records. Nothing is pruned."""
        stale: list[StaleEntry] = []
        checked: dict[uuid.UUID, str | None] = {}
        for name, index in (("tag", self.tags), ("author", self.authors)):
            for key in index.keys():
                try:
                    note_ids = _unique(index, key)
                except RecordError:
                    logger.warning("corrupt %s index entry: %s", name, key)
                    stale.append(StaleEntry(name, key, None, "corrupt entry"))
                    continue
                for note_id in note_ids:
                    if note_id not in checked:
                        checked[note_id] = self._check(note_id)
                    reason = checked[note_id]
                    if reason is not None:
                        stale.append(StaleEntry(name, key, note_id, reason))
        return stale

    def _check(self, note_id: uuid.UUID) -> str | None:
        try:
            note = self.store.get(note_id)
        except RecordError:
            return "unreadable"
        return "missing" if note is None else None


def parse_note_id(note_id: uuid.UUID | str) -> uuid.UUID:
    """Accept a UUID or its string form; anything else raises InvalidNoteId."""
    if isinstance(note_id, uuid.UUID):
        return note_id
    try:
        return uuid.UUID(str(note_id).strip())
    except ValueError as exc:
        msg = f"Invalid note id: {note_id!r}. Must be a valid UUID."
        raise InvalidNoteId(msg) from exc


def _unique(index: KeyedLog, key: object) -> list[uuid.UUID]:
    return list(dict.fromkeys(index.list_ids(key)))
