"""NoteStore: note records as flat files, tags and authors as derived indexes.

    store = NoteStore(root / "MyNotes", TagIndex(root / "Tags"), AuthorIndex(root / "Authors"))
    store.create("Test Note", "This is a test note.", 1, tags=["TestTag"])
    note = store.get(note_id)          # None if there is no record
    notes = store.get_by_tag("testtag")

Write order in create(): record first (temp file + rename), then one append
per tag, then the author append. A failure part way leaves the record and any
appends already made in place; nothing is rolled back.
"""

from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING

from notedex.codec import decode, encode
from notedex.errors import MalformedRecord, RecordError, StoreError
from notedex.models import Note, new_note_id

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from notedex.index import AuthorIndex, TagIndex

logger = logging.getLogger("notedex.store")

_RECORD_PREFIX = "Note_"
_RECORD_SUFFIX = ".txt"


class NoteStore:
    """Flat-file note store."""

    def __init__(self, notes_dir: Path | str, tags: TagIndex, authors: AuthorIndex) -> None:
        self.notes_dir = Path(notes_dir)
        self.tags = tags
        self.authors = authors

    # ------------------------------------------------------------------
    # Paths
    # ------------------------------------------------------------------

    def _record_path(self, note_id: uuid.UUID) -> Path:
        return self.notes_dir / f"{_RECORD_PREFIX}{note_id}{_RECORD_SUFFIX}"

    def record_paths(self) -> list[Path]:
        """All note record files, sorted by name."""
        if not self.notes_dir.is_dir():
            return []
        try:
            return sorted(self.notes_dir.glob(f"{_RECORD_PREFIX}*{_RECORD_SUFFIX}"))
        except OSError as exc:
            msg = f"Cannot list notes in {self.notes_dir}: {exc}"
            raise StoreError(msg) from exc

    def exists(self, note_id: uuid.UUID) -> bool:
        return self._record_path(note_id).exists()

    # ------------------------------------------------------------------
    # Write
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
        """Persist a note and index it by tag and author. Returns 1.

        Input is not validated: a negative author id or a None title is
        written as given (None becomes an empty string). Blank tag names are
        skipped since no lookup can reach them. Duplicate tags are appended
        once per occurrence.
        """
        if note_id is None:
            note_id = new_note_id()
        kept: list[str] = []
        for tag in tags or []:
            if tag is None or not tag.strip():
                logger.warning("skipping blank tag for note %s", note_id)
                continue
            kept.append(tag)

        note = Note(
            note_id=note_id,
            title=title,
            content=content,
            author_id=author_id,
            created_at=created_at or datetime.now(UTC),
            tags=kept,
        )
        logger.info("creating note %s: %s", note_id, title)

        path = self._record_path(note_id)
        try:
            self._write_record(path, encode(note))
        except OSError as exc:
            logger.exception("failed to write note %s", note_id)
            msg = f"Cannot write note {note_id} to {path}: {exc}"
            raise StoreError(msg) from exc
        logger.info("note saved to %s", path)

        try:
            for tag in kept:
                self.tags.append(tag, note_id)
            self.authors.append(author_id, note_id)
        except StoreError:
            logger.exception("note %s saved but indexing failed", note_id)
            raise

        return 1

    def _write_record(self, path: Path, text: str) -> None:
        """Write to a temp file then rename, so readers never see half a record."""
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = path.with_name(f".{path.name}.{uuid.uuid4().hex[:8]}.tmp")
        try:
            with tmp.open("w", encoding="utf-8", newline="") as f:
                f.write(text)
            tmp.replace(path)
        finally:
            tmp.unlink(missing_ok=True)

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get(self, note_id: uuid.UUID) -> Note | None:
        """Load a note with its tags. None if no record exists.

        RecordError propagates when the record exists but does not parse.
        """
        logger.debug("fetching note %s", note_id)
        path = self._record_path(note_id)
        text = self._read_record(path)
        if text is None:
            logger.debug("note %s not found", note_id)
            return None
        note = decode(text)
        note.tags = self.tags.entries_containing(note.note_id)
        return note

    def list_all(self) -> list[Note]:
        """Every readable note. Records that fail to decode are logged and skipped."""
        return list(self.iter_notes())

    def iter_notes(self) -> Iterator[Note]:
        for path in self.record_paths():
            try:
                text = self._read_record(path)
                if text is None:
                    continue
                note = decode(text)
            except RecordError:
                logger.exception("skipping unreadable note record %s", path.name)
                continue
            note.tags = self.tags.entries_containing(note.note_id)
            yield note

    def get_by_tag(self, tag_name: str) -> list[Note]:
        """Notes indexed under ``tag_name`` (any case). Stale ids are dropped."""
        logger.debug("fetching notes for tag %s", tag_name)
        notes: list[Note] = []
        for note_id in self.tags.list_ids(tag_name):
            note = self.get(note_id)
            if note is None:
                logger.debug("tag %s references missing note %s", tag_name, note_id)
                continue
            notes.append(note)
        return notes

    def _read_record(self, path: Path) -> str | None:
        try:
            with path.open(encoding="utf-8", newline="") as f:
                return f.read()
        except FileNotFoundError:
            return None
        except UnicodeDecodeError as exc:
            msg = f"{path.name}: not valid UTF-8"
            raise MalformedRecord(msg) from exc
        except OSError as exc:
            msg = f"Cannot read note record {path}: {exc}"
            raise StoreError(msg) from exc
