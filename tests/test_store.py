import uuid
from datetime import UTC, datetime

import pytest

from notedex.errors import RecordError, StoreError
from notedex.index import AuthorIndex, TagIndex
from notedex.store import NoteStore

WHEN = datetime(2026, 10, 19, 14, 3, 22, 125000, tzinfo=UTC)


def _record(note_id, title="Note", author_id=1):
    return (
        f"NoteID: {note_id}\nTitle: {title}\nContent: body\n"
        f"Author ID: {author_id}\nDate: {WHEN.isoformat()}"
    )


def test_create_get_and_lookup_by_tag(store, cfg):
    nid = uuid.uuid4()
    result = store.create("Test Note", "This is a test note.", 1, nid, WHEN, ["TestTag"])
    assert result == 1

    note = store.get(nid)
    assert note is not None
    assert note.note_id == nid
    assert note.title == "Test Note"
    assert note.content == "This is a test note."
    assert note.author_id == 1
    assert note.created_at == WHEN
    assert note.tags == ["testtag"]

    by_tag = store.get_by_tag("TestTag")
    assert [n.note_id for n in by_tag] == [nid]

    record = (cfg.notes_dir / f"Note_{nid}.txt").read_text()
    assert record.startswith(f"NoteID: {nid}\nTitle: Test Note\n")
    assert record.endswith("Tags: TestTag")


def test_create_without_tags(store, cfg):
    nid = uuid.uuid4()
    assert store.create("Note Without Tags", "No tags here.", 1, nid, WHEN) == 1
    assert (cfg.notes_dir / f"Note_{nid}.txt").read_text().endswith("Tags: None")
    assert not cfg.tags_dir.exists() or list(cfg.tags_dir.iterdir()) == []
    assert store.get(nid).tags == []
    assert store.authors.list_ids(1) == [nid]


def test_create_defaults_id_and_timestamp(store):
    assert store.create("t", "c", 3) == 1
    [note] = store.list_all()
    assert note.author_id == 3
    assert note.created_at.tzinfo is not None


def test_duplicate_tags_append_twice(store):
    nid = uuid.uuid4()
    assert store.create("Dup", "", 1, nid, WHEN, ["TestTag", "TestTag"]) == 1
    assert store.tags.list_ids("testtag") == [nid, nid]
    assert store.get(nid).tags == ["testtag"]


def test_blank_tags_are_skipped(store, cfg):
    nid = uuid.uuid4()
    store.create("Blank", "", 1, nid, WHEN, ["", "   ", "ok"])
    assert sorted(p.name for p in cfg.tags_dir.iterdir()) == ["ok.txt"]


def test_tags_come_back_in_index_order(store):
    nid = uuid.uuid4()
    store.create("Order", "", 1, nid, WHEN, ["zeta", "Alpha", "mid"])
    assert store.get(nid).tags == ["alpha", "mid", "zeta"]


def test_case_insensitive_tag_lookup(store):
    nid = uuid.uuid4()
    store.create("Work item", "", 1, nid, WHEN, ["Work"])
    assert [n.note_id for n in store.get_by_tag("work")] == [nid]
    assert [n.note_id for n in store.get_by_tag("WORK")] == [nid]


def test_store_is_permissive(store):
    nid = uuid.uuid4()
    store.create(None, None, -5, nid, WHEN)
    note = store.get(nid)
    assert note.title == ""
    assert note.content == ""
    assert note.author_id == -5
    assert store.authors.list_ids(-5) == [nid]


def test_get_missing_returns_none(store):
    assert store.get(uuid.uuid4()) is None


def test_get_malformed_raises(store, cfg):
    nid = uuid.uuid4()
    cfg.notes_dir.mkdir(parents=True)
    (cfg.notes_dir / f"Note_{nid}.txt").write_text("NoteID: broken\nTitle: x")
    with pytest.raises(RecordError):
        store.get(nid)


def test_list_all_skips_malformed_records(store, cfg):
    good = [uuid.uuid4() for _ in range(3)]
    for i, nid in enumerate(good):
        store.create(f"Note {i}", "body", i, nid, WHEN, ["shared"])
    bad = uuid.uuid4()
    (cfg.notes_dir / f"Note_{bad}.txt").write_text(_record(bad).replace("Author ID: 1", "Author ID: x"))

    notes = store.list_all()
    assert {n.note_id for n in notes} == set(good)
    assert all(n.tags == ["shared"] for n in notes)


def test_list_all_skips_undecodable_records(store, cfg):
    good = uuid.uuid4()
    store.create("Good", "body", 1, good, WHEN)
    bad = uuid.uuid4()
    (cfg.notes_dir / f"Note_{bad}.txt").write_bytes(b"\xff\xfe")

    assert [n.note_id for n in store.list_all()] == [good]
    with pytest.raises(RecordError, match="not valid UTF-8"):
        store.get(bad)


def test_undecodable_tag_entry_does_not_hide_notes(store, cfg):
    nid = uuid.uuid4()
    store.create("Tagged", "", 1, nid, WHEN, ["work"])
    (cfg.tags_dir / "junk.txt").write_bytes(b"\xff\xfe\n")

    assert store.get(nid).tags == ["work"]
    assert [n.tags for n in store.list_all()] == [["work"]]


def test_list_all_empty_store(store):
    assert store.list_all() == []


def test_list_all_reads_legacy_records(store, cfg):
    nid = uuid.uuid4()
    cfg.notes_dir.mkdir(parents=True)
    (cfg.notes_dir / f"Note_{nid}.txt").write_text(
        f"NoteID: {nid}\nTitle: Old\nContent: from before\nAuthor ID: 2\n"
        "Date: 1/2/2024 9:05:00 AM\nTags: None"
    )
    [note] = store.list_all()
    assert note.title == "Old"
    assert note.created_at.year == 2024


def test_get_by_tag_drops_stale_ids(store):
    nid = uuid.uuid4()
    store.create("Real", "", 1, nid, WHEN, ["work"])
    store.tags.append("work", uuid.uuid4())
    assert [n.note_id for n in store.get_by_tag("work")] == [nid]


def test_get_by_unknown_tag(store):
    assert store.get_by_tag("nothing") == []


def test_no_temp_files_left(store, cfg):
    for _ in range(3):
        store.create("t", "c", 1, tags=["x"])
    names = [p.name for p in cfg.notes_dir.iterdir()]
    assert len(names) == 3
    assert all(name.startswith("Note_") and name.endswith(".txt") for name in names)


def test_write_failure_raises_store_error(tmp_path):
    notes_dir = tmp_path / "MyNotes"
    notes_dir.write_text("a file where the directory should be")
    store = NoteStore(notes_dir, TagIndex(tmp_path / "Tags"), AuthorIndex(tmp_path / "Authors"))
    with pytest.raises(StoreError):
        store.create("t", "c", 1, uuid.uuid4(), WHEN, ["x"])
    assert not (tmp_path / "Tags").exists()


def test_index_failure_keeps_record(tmp_path):
    (tmp_path / "Tags").write_text("not a directory")
    store = NoteStore(tmp_path / "MyNotes", TagIndex(tmp_path / "Tags"), AuthorIndex(tmp_path / "Authors"))
    nid = uuid.uuid4()
    with pytest.raises(StoreError):
        store.create("t", "c", 1, nid, WHEN, ["x"])
    assert (tmp_path / "MyNotes" / f"Note_{nid}.txt").exists()
    assert isinstance(StoreError("x"), OSError)
