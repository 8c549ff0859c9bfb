"""Tests for formatter module."""

import json

import pytest

from src.reducer.config import ReducerConfig
from src.reducer.exceptions import InvariantViolationError
from src.reducer.formatter import describe, format_history, format_trace, to_json
from src.reducer.models import (
    CopyEvent,
    CreateEvent,
    DeleteEvent,
    ModifyEvent,
    MoveEvent,
    ObjectKind,
    primitive_event,
)
from src.reducer.paths import EventPath
from src.reducer.reader import read_events


def p(raw):
    return EventPath.parse(raw)


def move(old, new, kind=ObjectKind.FILE):
    return MoveEvent(timestamp=1, kind=kind, old_path=p(old), new_path=p(new))


class TestDescribe:
    """Tests for describe function."""

    def test_create_file(self):
        event = primitive_event("ADD", 1, p("/a/b.t"), "1111")
        assert describe(event) == (
            'Created the file "b.t" in the folder "/a" with the hash value "1111".'
        )

    def test_create_folder(self):
        event = primitive_event("ADD", 1, p("/a"), "-")
        assert describe(event) == 'Created the folder "a" in the folder "/".'

    def test_delete(self):
        event = primitive_event("DEL", 1, p("/a/b"), "-")
        assert describe(event) == 'Deleted the folder "b" in the folder "/a".'

    def test_modify(self):
        event = ModifyEvent(timestamp=1, kind=ObjectKind.FILE, path=p("/a/b.t"), old_hash="1", new_hash="2")
        assert describe(event) == (
            'Modified the file "b.t" in the folder "/a". The new hash value is "2".'
        )

    def test_rename(self):
        assert describe(move("/a/c.t", "/a/d.t")) == (
            'Renamed the file "c.t" in the folder "/a" to "d.t".'
        )

    def test_move(self):
        assert describe(move("/a/c.t", "/b/c.t")) == (
            'Moved the file "c.t" in the folder "/a" to the folder "/b".'
        )

    def test_move_and_rename(self):
        assert describe(move("/f", "/g/h", ObjectKind.FOLDER)) == (
            'Moved the folder "f" in the folder "/" to the folder "/g" with the name "h".'
        )

    def test_degenerate_move_is_silent(self):
        assert describe(move("/a/b.t", "/a/b.t")) is None

    def test_copy(self):
        event = CopyEvent(timestamp=1, kind=ObjectKind.FILE, src_path=p("/a/b.t"), dest_path=p("/a/e/f.t"))
        assert describe(event) == (
            'Copied the file "b.t" from the folder "/a" to the folder "/a/e" with the name "f.t".'
        )

    def test_root_has_empty_folder(self):
        event = primitive_event("DEL", 1, p("/"), "-")
        assert describe(event) == 'Deleted the folder "/" in the folder "".'


class TestFormatHistory:
    """Tests for format_history function."""

    def test_skips_degenerate_moves(self):
        lines = format_history([
            primitive_event("ADD", 1, p("/a"), "-"),
            move("/a/b.t", "/a/b.t"),
            primitive_event("DEL", 3, p("/a"), "-"),
        ])
        assert len(lines) == 2


class TestToJson:
    """Tests for to_json function."""

    def test_lists_event_dicts(self):
        data = json.loads(to_json([move("/a/c.t", "/a/d.t")]))
        assert data == [{
            "event_type": "move",
            "kind": "file",
            "timestamp": 1,
            "old_path": "/a/c.t",
            "new_path": "/a/d.t",
            "is_rename": True,
            "is_move": False,
        }]

    def test_renders_paths_with_configured_separator(self):
        config = ReducerConfig(separator="\\")
        events = read_events(["ADD 1 \\a -", "ADD 2 \\a\\b.t h"], config)
        data = json.loads(to_json(events, sep=config.separator))
        assert [e["path"] for e in data] == ["\\a", "\\a\\b.t"]


class TestFormatTrace:
    """Tests for format_trace function."""

    def test_records_with_count_header(self):
        lines = format_trace([
            primitive_event("ADD", 10, p("/a"), "-"),
            primitive_event("DEL", 11, p("/a/b.t"), "h"),
        ])
        assert lines == ["2", "ADD 10 /a -", "DEL 11 /a/b.t h"]

    def test_semantic_events_have_no_record(self):
        with pytest.raises(InvariantViolationError):
            format_trace([move("/a", "/b")])
