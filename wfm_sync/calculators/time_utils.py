"""Time calculation utilities for the WorkflowMax sync.

This module provides low-level utilities for time calculations including:
- Formatting and parsing day keys (YYYYMMDD)
- Converting tracked seconds to billable WorkflowMax minutes
- Converting minutes to hours for reporting

These utilities are timezone-agnostic and work with naive dt.date and
dt.datetime values as recorded by Timetrap.
"""

import datetime as dt
from typing import Union

DAY_KEY_FORMAT = "%Y%m%d"


def format_day_key(day: Union[dt.date, dt.datetime]) -> str:
    """Format a date (or the date part of a datetime) as a day key.

    Args:
        day: The date or datetime to format

    Returns:
        8-digit calendar date string (YYYYMMDD)

    Example:
        >>> format_day_key(dt.date(2024, 1, 1))
        '20240101'
        >>> format_day_key(dt.datetime(2024, 12, 31, 23, 59))
        '20241231'
    """
    return day.strftime(DAY_KEY_FORMAT)


def parse_day_key(day_key: str) -> dt.date:
    """Parse a YYYYMMDD day key back into a date.

    Args:
        day_key: 8-digit calendar date string

    Returns:
        The corresponding date

    Raises:
        ValueError: If the key is not a valid YYYYMMDD date

    Example:
        >>> parse_day_key("20240229")
        datetime.date(2024, 2, 29)
    """
    if len(day_key) != 8 or not day_key.isdigit():
        raise ValueError(f"Invalid day key: {day_key!r}. Expected YYYYMMDD")
    return dt.datetime.strptime(day_key, DAY_KEY_FORMAT).date()


def next_day_key(day_key: str) -> str:
    """Return the day key of the calendar day after ``day_key``.

    Example:
        >>> next_day_key("20241231")
        '20250101'
    """
    return format_day_key(parse_day_key(day_key) + dt.timedelta(days=1))


def seconds_to_minutes(seconds: int) -> int:
    """Convert tracked seconds to whole minutes, rounding to nearest.

    Uses Python's built-in ``round``, which rounds exact halves to the
    nearest even integer.

    Args:
        seconds: Duration in seconds

    Returns:
        Duration in whole minutes

    Example:
        >>> seconds_to_minutes(90)
        2
        >>> seconds_to_minutes(89)
        1
        >>> seconds_to_minutes(150)
        2
        >>> seconds_to_minutes(0)
        0
    """
    return round(seconds / 60.0)


def minutes_to_hours(minutes: int) -> float:
    """Convert minutes to hours rounded to one decimal place.

    Example:
        >>> minutes_to_hours(90)
        1.5
        >>> minutes_to_hours(100)
        1.7
    """
    return round(minutes / 60.0, 1)
