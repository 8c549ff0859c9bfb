"""Tests for trace reading."""

import io

import pytest

from src.reducer.config import ReducerConfig
from src.reducer.exceptions import (
    MalformedEventError,
    OutOfOrderEventError,
    UnknownOperationError,
)
from src.reducer.models import CreateEvent, DeleteEvent, ObjectKind
from src.reducer.paths import EventPath
from src.reducer.reader import parse_record, read_events, read_trace


class TestParseRecord:
    """Tests for parse_record function."""

    def test_four_fields(self):
        event = parse_record("ADD 7 /a/b.t 1111", 1)
        assert isinstance(event, CreateEvent)
        assert event.timestamp == 7
        assert event.path == EventPath.parse("/a/b.t")
        assert event.hash == "1111"
        assert event.kind is ObjectKind.FILE

    def test_three_fields_use_position(self):
        event = parse_record("DEL /f -", 4)
        assert isinstance(event, DeleteEvent)
        assert event.timestamp == 4
        assert event.kind is ObjectKind.FOLDER

    def test_bad_timestamp(self):
        with pytest.raises(MalformedEventError, match="invalid timestamp"):
            parse_record("ADD x /a -", 1)

    def test_wrong_field_count(self):
        with pytest.raises(MalformedEventError, match="expected 3 or 4 fields"):
            parse_record("ADD /a", 1)

    def test_unknown_operation(self):
        with pytest.raises(UnknownOperationError, match="record 2"):
            parse_record("MOV 1 /a -", 2)

    def test_custom_null_hash(self):
        config = ReducerConfig(null_hash="*")
        assert parse_record("ADD /a *", 1, config).kind is ObjectKind.FOLDER
        assert parse_record("ADD /a -", 1, config).kind is ObjectKind.FILE


class TestReadEvents:
    """Tests for read_events function."""

    def test_original_format_with_count(self):
        lines = [
            "3",
            "ADD 1 /test -",
            "ADD 2 /test/1.txt f2fa762f",
            "DEL 3 /test/1.txt f2fa762f",
        ]
        events = read_events(lines)
        assert len(events) == 3
        assert [e.timestamp for e in events] == [1, 2, 3]

    def test_count_mismatch(self):
        with pytest.raises(MalformedEventError, match="announces 2"):
            read_events(["2", "ADD 1 /a -"])

    def test_non_decimal_header_is_malformed(self):
        with pytest.raises(MalformedEventError):
            read_events(["\u00b2", "ADD 1 /a -"])

    def test_comments_and_blank_lines(self):
        events = read_events(["# trace", "", "ADD /a -", "   ", "DEL /a -"])
        assert [e.timestamp for e in events] == [1, 2]

    def test_equal_timestamps_allowed(self):
        events = read_events(["ADD 5 /a -", "ADD 5 /b -"])
        assert len(events) == 2

    def test_out_of_order(self):
        with pytest.raises(OutOfOrderEventError):
            read_events(["ADD 5 /a -", "ADD 4 /b -"])

    def test_malformed_record_yields_nothing(self):
        with pytest.raises(MalformedEventError):
            read_events(["ADD 1 /a -", "BAD"])

    def test_empty_trace(self):
        assert read_events([]) == []


class TestReadTrace:
    """Tests for read_trace function."""

    def test_from_path(self, tmp_path):
        trace = tmp_path / "events.txt"
        trace.write_text("1\nADD 1 /a -\n")
        assert len(read_trace(trace)) == 1
        assert len(read_trace(str(trace))) == 1

    def test_from_stream(self):
        assert len(read_trace(io.StringIO("DEL /f/b/c.t H1\nDEL /f/b -\n"))) == 2
