"""Time entry data models for the WorkflowMax sync.

This module defines RawEntry, a single logged Timetrap work interval, and
AggregatedDay, the per-sheet, per-day total that is uploaded to WorkflowMax
as one time entry.
"""

import datetime as dt

from pydantic import ConfigDict, Field, field_validator

from wfm_sync.calculators.time_utils import format_day_key, seconds_to_minutes
from wfm_sync.models.base import BaseDataModel


class RawEntry(BaseDataModel):
    """Represents a single logged work interval.

    Attributes:
        sheet: Timetrap sheet the entry was logged on (the billing group)
        start: When the interval started (local time)
        duration: Length of the interval in seconds
        note: Free-text note, may be empty

    Example:
        >>> entry = RawEntry(
        ...     sheet="client-a",
        ...     start=dt.datetime(2024, 1, 1, 9, 0),
        ...     duration=1800,
        ...     note="standup",
        ... )
        >>> entry.day_key
        '20240101'
    """

    model_config = ConfigDict(frozen=True)

    sheet: str = Field(..., min_length=1, description="Timetrap sheet name")
    start: dt.datetime = Field(..., description="Interval start time")
    duration: int = Field(..., ge=0, description="Interval length in seconds")
    note: str = Field("", description="Entry note")

    @field_validator("sheet")
    @classmethod
    def validate_sheet(cls, v: str) -> str:
        """Reject whitespace-only sheet names.

        Raises:
            ValueError: If the sheet name is blank
        """
        if not v.strip():
            raise ValueError("sheet cannot be empty or whitespace")
        return v

    @field_validator("note", mode="before")
    @classmethod
    def coerce_missing_note(cls, v):
        """Treat a missing note as an empty one."""
        return "" if v is None else v

    @property
    def day_key(self) -> str:
        """Calendar day of the entry start as YYYYMMDD."""
        return format_day_key(self.start)


class AggregatedDay(BaseDataModel):
    """All time logged on one sheet on one calendar day.

    Built by merging every RawEntry sharing (sheet, day). The combined note
    keeps the notes in the order the entries were merged, separated by
    newlines.

    Attributes:
        sheet: Timetrap sheet name
        day: Calendar day (no time-of-day)
        total_seconds: Sum of merged entry durations
        combined_note: Newline-joined notes of merged entries
    """

    sheet: str = Field(..., min_length=1)
    day: dt.date
    total_seconds: int = Field(0, ge=0)
    combined_note: str = ""

    @classmethod
    def from_entry(cls, entry: RawEntry) -> "AggregatedDay":
        """Start a new day total from its first entry."""
        return cls(
            sheet=entry.sheet,
            day=entry.start.date(),
            total_seconds=entry.duration,
            combined_note=entry.note,
        )

    def merge(self, entry: RawEntry) -> None:
        """Add another entry of the same sheet and day to this total.

        An accumulated note that is still empty (or only whitespace) is
        replaced by the entry's note rather than extended, so a blank first
        note never leaves a leading newline.

        Raises:
            ValueError: If the entry belongs to another sheet or day
        """
        if entry.sheet != self.sheet or entry.start.date() != self.day:
            raise ValueError(
                f"Cannot merge entry for {entry.sheet}/{entry.day_key} "
                f"into {self.sheet}/{self.day_key}"
            )

        self.total_seconds += entry.duration
        if self.combined_note.strip():
            self.combined_note = f"{self.combined_note}\n{entry.note}"
        else:
            self.combined_note = entry.note

    @property
    def day_key(self) -> str:
        """Calendar day as YYYYMMDD."""
        return format_day_key(self.day)

    @property
    def minutes(self) -> int:
        """Total time in whole minutes, rounded to nearest."""
        return seconds_to_minutes(self.total_seconds)
