"""Tag and author indexes: one append-only text file per key.

Each entry file holds one note id per line:

    Tags/work.txt          # tag "Work", "WORK", "work"
    Authors/Author_1.txt   # author 1

Appends are a single write on a file opened in append mode under
flock(LOCK_EX), so concurrent writers never lose each other's lines and no
read-before-write is needed. Readers take flock(LOCK_SH). An entry with no
lines and a missing entry look the same to callers.
"""

from __future__ import annotations

import fcntl
import logging
import re
import uuid
from pathlib import Path
from typing import Generic, TypeVar

from notedex.errors import MalformedRecord, StoreError

logger = logging.getLogger("notedex.index")

K = TypeVar("K")

_ENTRY_SUFFIX = ".txt"
# Characters rejected in file names on at least one common platform
_INVALID_FILENAME_RE = re.compile(r'[<>:"/\\|?*\x00-\x1f]')
_AUTHOR_FILE_RE = re.compile(r"^Author_(-?\d+)\.txt$")


def normalize_tag(name: str) -> str:
    """Lowercase a tag name and replace file-name-illegal characters with ``_``."""
    return _INVALID_FILENAME_RE.sub("_", name.lower())


class KeyedLog(Generic[K]):
    """Append-only mapping key -> sequence of note ids, backed by files."""

    def __init__(self, directory: Path | str) -> None:
        self.directory = Path(directory)

    # ------------------------------------------------------------------
    # Key <-> file name
    # ------------------------------------------------------------------

    def file_name(self, key: K) -> str:
        raise NotImplementedError

    def key_for(self, file_name: str) -> K | None:
        """Key stored in ``file_name``, or None if the file is not an entry."""
        raise NotImplementedError

    def path_for(self, key: K) -> Path:
        return self.directory / self.file_name(key)

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    def append(self, key: K, note_id: uuid.UUID) -> None:
        """Append ``note_id`` to the entry for ``key``, creating it if absent."""
        path = self.path_for(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with path.open("a", encoding="utf-8") as f:
                fcntl.flock(f, fcntl.LOCK_EX)
                f.write(f"{note_id}\n")
        except OSError as exc:
            msg = f"Cannot append to index entry {path}: {exc}"
            raise StoreError(msg) from exc
        logger.info("indexed %s under %s", note_id, path.name)

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def list_ids(self, key: K) -> list[uuid.UUID]:
        """Every id recorded for ``key``, in append order (duplicates kept)."""
        path = self.path_for(key)
        ids: list[uuid.UUID] = []
        for n, line in enumerate(self._read_lines(path), start=1):
            try:
                ids.append(uuid.UUID(line))
            except ValueError as exc:
                msg = f"{path.name}:{n}: invalid note id {line!r}"
                raise MalformedRecord(msg) from exc
        return ids

    def keys(self) -> list[K]:
        """All keys with an entry file, in file-name order."""
        if not self.directory.is_dir():
            return []
        found: list[K] = []
        for path in sorted(self.directory.glob(f"*{_ENTRY_SUFFIX}")):
            key = self.key_for(path.name)
            if key is not None and path.is_file():
                found.append(key)
        return found

    def entries_containing(self, note_id: uuid.UUID) -> list[K]:
        """Keys whose entry contains ``note_id``. Scans every entry file.

        Entries that cannot be decoded are logged and left out.
        """
        target = str(note_id)
        found: list[K] = []
        for key in self.keys():
            try:
                lines = self._read_lines(self.path_for(key))
            except MalformedRecord:
                logger.warning("skipping unreadable index entry %s", self.file_name(key))
                continue
            if target in lines:
                found.append(key)
        return found

    def count(self, key: K) -> int:
        return len(self._read_lines(self.path_for(key)))

    def _read_lines(self, path: Path) -> list[str]:
        try:
            with path.open(encoding="utf-8") as f:
                fcntl.flock(f, fcntl.LOCK_SH)
                text = f.read()
        except FileNotFoundError:
            return []
        except UnicodeDecodeError as exc:
            msg = f"{path.name}: not valid UTF-8"
            raise MalformedRecord(msg) from exc
        except OSError as exc:
            msg = f"Cannot read index entry {path}: {exc}"
            raise StoreError(msg) from exc
        return [line.strip() for line in text.splitlines() if line.strip()]


class TagIndex(KeyedLog[str]):
    """Tag name -> note ids. Keys are case-insensitive (see normalize_tag)."""

    def file_name(self, key: str) -> str:
        return normalize_tag(key) + _ENTRY_SUFFIX

    def key_for(self, file_name: str) -> str | None:
        if not file_name.endswith(_ENTRY_SUFFIX):
            return None
        return file_name[: -len(_ENTRY_SUFFIX)]


class AuthorIndex(KeyedLog[int]):
    """Author id -> note ids."""

    def file_name(self, key: int) -> str:
        return f"Author_{int(key)}{_ENTRY_SUFFIX}"

    def key_for(self, file_name: str) -> int | None:
        m = _AUTHOR_FILE_RE.match(file_name)
        return int(m.group(1)) if m else None
