from __future__ import annotations

import pytest

from notedex.config import NotedexConfig, load_config
from notedex.queries import NoteQueries
from notedex.store import NoteStore


@pytest.fixture
def cfg(tmp_path) -> NotedexConfig:
    return load_config(tmp_path)


@pytest.fixture
def queries(cfg) -> NoteQueries:
    return NoteQueries.from_config(cfg)


@pytest.fixture
def store(queries) -> NoteStore:
    return queries.store
