"""Unit tests for the Timetrap database reader."""

import datetime as dt

import pytest

from wfm_sync.readers.timetrap_reader import TimetrapReader, parse_timestamp


class TestParseTimestamp:
    """Test suite for parse_timestamp."""

    def test_without_microseconds(self):
        """Test the plain Timetrap format."""
        assert parse_timestamp("2024-01-01 09:30:00") == dt.datetime(2024, 1, 1, 9, 30)

    def test_with_microseconds(self):
        """Test timestamps carrying fractional seconds."""
        assert parse_timestamp("2024-01-01 09:30:00.250000") == dt.datetime(
            2024, 1, 1, 9, 30, 0, 250000
        )

    def test_utc_offset_dropped(self):
        """Test that a trailing offset is ignored."""
        assert parse_timestamp("2024-01-01 09:30:00 +01:00") == dt.datetime(
            2024, 1, 1, 9, 30
        )

    def test_invalid(self):
        """Test that unknown formats raise ValueError."""
        with pytest.raises(ValueError, match="Unrecognized"):
            parse_timestamp("01/01/2024 09:30")


class TestTimetrapReader:
    """Test suite for TimetrapReader."""

    def test_reads_finished_entries(self, timetrap_db):
        """Test reading entries with durations and notes."""
        timetrap_db("client-a", "2024-01-01 09:00:00", "2024-01-01 09:30:00", "x")
        timetrap_db("client-a", "2024-01-01 14:00:00", "2024-01-01 14:30:00", "y")

        entries = TimetrapReader(timetrap_db.path).read_entries()

        assert [(e.sheet, e.duration, e.note) for e in entries] == [
            ("client-a", 1800, "x"),
            ("client-a", 1800, "y"),
        ]
        assert entries[0].start == dt.datetime(2024, 1, 1, 9, 0)

    def test_ordered_by_start(self, timetrap_db):
        """Test that entries come back oldest first."""
        timetrap_db("client-a", "2024-01-02 09:00:00", "2024-01-02 10:00:00")
        timetrap_db("client-b", "2024-01-01 09:00:00", "2024-01-01 10:00:00")

        entries = TimetrapReader(timetrap_db.path).read_entries()

        assert [e.sheet for e in entries] == ["client-b", "client-a"]

    def test_null_note_becomes_empty(self, timetrap_db):
        """Test entries logged without a note."""
        timetrap_db("client-a", "2024-01-01 09:00:00", "2024-01-01 09:01:00", None)

        entries = TimetrapReader(timetrap_db.path).read_entries()

        assert entries[0].note == ""

    def test_running_entry_skipped(self, timetrap_db):
        """Test that an entry without end time is ignored."""
        timetrap_db("client-a", "2024-01-01 09:00:00", "2024-01-01 10:00:00")
        timetrap_db("client-a", "2024-01-01 11:00:00", None)

        entries = TimetrapReader(timetrap_db.path).read_entries()

        assert len(entries) == 1

    def test_archived_sheets_skipped(self, timetrap_db):
        """Test that sheets starting with an underscore are ignored by default."""
        timetrap_db("_old", "2024-01-01 09:00:00", "2024-01-01 10:00:00")
        timetrap_db("client-a", "2024-01-01 09:00:00", "2024-01-01 10:00:00")

        reader = TimetrapReader(timetrap_db.path)

        assert [e.sheet for e in reader.read_entries()] == ["client-a"]
        assert [e.sheet for e in reader.read_entries(sheets=["_old"])] == ["_old"]

    def test_sheet_filter(self, timetrap_db):
        """Test restricting entries to named sheets."""
        timetrap_db("client-a", "2024-01-01 09:00:00", "2024-01-01 10:00:00")
        timetrap_db("client-b", "2024-01-01 09:00:00", "2024-01-01 10:00:00")

        entries = TimetrapReader(timetrap_db.path).read_entries(sheets=("client-b",))

        assert [e.sheet for e in entries] == ["client-b"]

    def test_date_filters_inclusive(self, timetrap_db):
        """Test that start and end dates include their own day."""
        for day in (1, 2, 3, 4):
            timetrap_db(
                "client-a", f"2024-01-0{day} 23:00:00", f"2024-01-0{day} 23:30:00"
            )

        entries = TimetrapReader(timetrap_db.path).read_entries(
            start=dt.date(2024, 1, 2), end=dt.date(2024, 1, 3)
        )

        assert [e.start.day for e in entries] == [2, 3]

    def test_entry_past_midnight_keeps_start_day(self, timetrap_db):
        """Test that duration covers the whole interval across midnight."""
        timetrap_db("client-a", "2024-01-01 23:30:00", "2024-01-02 00:30:00")

        entries = TimetrapReader(timetrap_db.path).read_entries()

        assert entries[0].duration == 3600
        assert entries[0].day_key == "20240101"

    def test_end_before_start_gives_zero(self, timetrap_db):
        """Test that a clock correction never yields a negative duration."""
        timetrap_db("client-a", "2024-01-01 10:00:00", "2024-01-01 09:00:00")

        entries = TimetrapReader(timetrap_db.path).read_entries()

        assert entries[0].duration == 0

    def test_missing_database(self, tmp_path):
        """Test that a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            TimetrapReader(tmp_path / "missing.db").read_entries()

    def test_list_sheets(self, timetrap_db):
        """Test listing non-archived sheets."""
        timetrap_db("client-b", "2024-01-01 09:00:00", "2024-01-01 10:00:00")
        timetrap_db("client-a", "2024-01-01 09:00:00", None)
        timetrap_db("_old", "2024-01-01 09:00:00", "2024-01-01 10:00:00")

        assert TimetrapReader(timetrap_db.path).list_sheets() == ["client-a", "client-b"]
