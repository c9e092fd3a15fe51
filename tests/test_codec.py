import uuid
from datetime import UTC, datetime, timedelta, timezone

import pytest

from notedex.codec import decode, encode
from notedex.errors import IncompleteRecord, MalformedRecord, RecordError
from notedex.models import Note

NOTE_ID = uuid.UUID("3f2b9c1e-8d4a-4c55-9a57-0b8f6c2d1e77")
WHEN = datetime(2026, 10, 19, 14, 3, 22, 125000, tzinfo=UTC)


def _note(**kw) -> Note:
    fields = {
        "note_id": NOTE_ID,
        "title": "Test Note",
        "content": "This is a test note.",
        "author_id": 1,
        "created_at": WHEN,
    }
    fields.update(kw)
    return Note(**fields)


def test_encode_layout():
    text = encode(_note(tags=["TestTag", "Work"]))
    assert text.split("\n") == [
        f"NoteID: {NOTE_ID}",
        "Title: Test Note",
        "Content: This is a test note.",
        "Author ID: 1",
        "Date: 2026-10-19T14:03:22.125000+00:00",
        "Tags: TestTag, Work",
    ]


def test_encode_without_tags_writes_none_marker():
    assert encode(_note()).endswith("\nTags: None")


def test_round_trip_keeps_every_field():
    original = _note(title="  padded title ", content="colons: are fine", author_id=-3)
    note = decode(encode(original))
    assert note.note_id == original.note_id
    assert note.title == original.title
    assert note.content == original.content
    assert note.author_id == original.author_id
    assert note.created_at == original.created_at
    assert note.tags == []


def test_round_trip_naive_and_offset_timestamps():
    naive = datetime(2024, 2, 29, 23, 59, 59, 999999)
    offset = datetime(2024, 1, 1, 8, 0, tzinfo=timezone(timedelta(hours=5, minutes=30)))
    assert decode(encode(_note(created_at=naive))).created_at == naive
    assert decode(encode(_note(created_at=offset))).created_at == offset


def test_tags_line_is_not_read_back():
    note = decode(encode(_note(tags=["a", "b"])))
    assert note.tags == []


def test_decode_without_tags_line():
    blob = f"NoteID: {NOTE_ID}\nTitle: T\nContent: C\nAuthor ID: 2\nDate: 2026-01-01T00:00:00"
    note = decode(blob)
    assert note.title == "T"
    assert note.author_id == 2


def test_decode_is_positional():
    blob = f"{NOTE_ID}\nHello\nBody\n7\n2026-01-01T00:00:00"
    note = decode(blob)
    assert (note.title, note.content, note.author_id) == ("Hello", "Body", 7)


def test_decode_crlf_record():
    blob = encode(_note()).replace("\n", "\r\n")
    note = decode(blob)
    assert note.title == "Test Note"
    assert note.content == "This is a test note."


def test_decode_legacy_date_format():
    blob = (
        f"NoteID: {NOTE_ID}\nTitle: Note 1\nContent: This is note 1.\n"
        "Author ID: 1\nDate: 10/19/2026 3:04:05 PM"
    )
    assert decode(blob).created_at == datetime(2026, 10, 19, 15, 4, 5)


def test_decode_too_few_lines():
    with pytest.raises(IncompleteRecord):
        decode(f"NoteID: {NOTE_ID}\nTitle: only two")


def test_decode_trailing_newline_is_not_a_field():
    with pytest.raises(IncompleteRecord):
        decode("a\nb\nc\nd\n")
    blob = encode(_note()) + "\n"
    assert decode(blob).note_id == NOTE_ID


def test_decode_empty_blob():
    with pytest.raises(IncompleteRecord):
        decode("")


@pytest.mark.parametrize(
    ("line", "value"),
    [
        (0, "NoteID: not-a-uuid"),
        (3, "Author ID: one"),
        (4, "Date: yesterday"),
    ],
)
def test_decode_malformed_field(line, value):
    lines = encode(_note()).split("\n")
    lines[line] = value
    with pytest.raises(MalformedRecord):
        decode("\n".join(lines))


def test_record_errors_are_value_errors():
    assert issubclass(IncompleteRecord, RecordError)
    assert issubclass(MalformedRecord, ValueError)


def test_line_break_in_content_breaks_the_record():
    blob = encode(_note(content="first\nsecond"))
    with pytest.raises(MalformedRecord):
        decode(blob)
