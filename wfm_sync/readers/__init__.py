"""Readers for local time-tracking data."""

from wfm_sync.readers.timetrap_reader import TimetrapReader, parse_timestamp

__all__ = ["TimetrapReader", "parse_timestamp"]
