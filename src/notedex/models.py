"""Data model for the flat-file note store."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime


def new_note_id() -> uuid.UUID:
    """Generate a fresh note identifier."""
    return uuid.uuid4()


@dataclass
class Note:
    """A note loaded from MyNotes/Note_<id>.txt."""

    note_id: uuid.UUID
    title: str
    content: str = ""
    author_id: int = 0
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    # Derived from the tag index on read, never from the record itself
    tags: list[str] = field(default_factory=list)

    def preview(self, width: int = 60) -> str:
        """One-line summary: id, title and the start of the content."""
        text = self.content if len(self.content) <= width else self.content[: width - 1] + "…"
        return f"{self.note_id}  {self.title}  {text}".rstrip()
