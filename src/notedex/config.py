"""NotedexConfig: storage locations for a note store.

Default layout (all relative to the storage root):

    notedex.toml          # optional config
    MyNotes/              # one Note_<uuid>.txt record per note
    Tags/                 # one <tag>.txt entry per tag
    Authors/              # one Author_<id>.txt entry per author

notedex.toml example:

    [store]
    notes_dir = "MyNotes"
    tags_dir = "Tags"
    authors_dir = "Authors"

    [logging]
    level = "WARNING"

The root is always given explicitly; nothing is looked up relative to the
working directory of the process.
"""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

_CONFIG_FILENAME = "notedex.toml"
_DEFAULT_NOTES_DIR = "MyNotes"
_DEFAULT_TAGS_DIR = "Tags"
_DEFAULT_AUTHORS_DIR = "Authors"
_DEFAULT_LOG_LEVEL = "WARNING"


@dataclass
class NotedexConfig:
    """Resolved configuration for one storage root."""

    root: Path
    notes_dir: Path = field(default_factory=Path)
    tags_dir: Path = field(default_factory=Path)
    authors_dir: Path = field(default_factory=Path)
    log_level: str = _DEFAULT_LOG_LEVEL

    @property
    def config_path(self) -> Path:
        return self.root / _CONFIG_FILENAME

    @property
    def log_level_number(self) -> int:
        level = logging.getLevelName(self.log_level.upper())
        return level if isinstance(level, int) else logging.WARNING

    def ensure_dirs(self) -> None:
        """Create the notes, tags and authors directories if missing."""
        for directory in (self.notes_dir, self.tags_dir, self.authors_dir):
            directory.mkdir(parents=True, exist_ok=True)


def load_config(root: Path | str) -> NotedexConfig:
    """Load notedex.toml from root; defaults apply when the file is absent."""
    root_path = Path(root).resolve()
    config_path = root_path / _CONFIG_FILENAME

    raw: dict[str, Any] = {}
    if config_path.exists():
        with config_path.open("rb") as f:
            raw = tomllib.load(f)

    store_section = raw.get("store", {})
    log_section = raw.get("logging", {})

    return NotedexConfig(
        root=root_path,
        notes_dir=root_path / store_section.get("notes_dir", _DEFAULT_NOTES_DIR),
        tags_dir=root_path / store_section.get("tags_dir", _DEFAULT_TAGS_DIR),
        authors_dir=root_path / store_section.get("authors_dir", _DEFAULT_AUTHORS_DIR),
        log_level=str(log_section.get("level", _DEFAULT_LOG_LEVEL)),
    )


def init_config(root: Path) -> Path:
    """Write a default notedex.toml at root. Raises if already exists."""
    config_path = root / _CONFIG_FILENAME
    if config_path.exists():
        msg = f"notedex.toml already exists at {config_path}"
        raise FileExistsError(msg)

    content = f"""\
[store]
# notes_dir = "{_DEFAULT_NOTES_DIR}"       # default
# tags_dir = "{_DEFAULT_TAGS_DIR}"           # default
# authors_dir = "{_DEFAULT_AUTHORS_DIR}"     # default

[logging]
# level = "{_DEFAULT_LOG_LEVEL}"         # DEBUG | INFO | WARNING | ERROR
"""
    root.mkdir(parents=True, exist_ok=True)
    config_path.write_text(content)
    return config_path
