"""Calculator modules for the WorkflowMax sync."""

from wfm_sync.calculators.time_utils import (
    DAY_KEY_FORMAT,
    format_day_key,
    minutes_to_hours,
    next_day_key,
    parse_day_key,
    seconds_to_minutes,
)

__all__ = [
    "DAY_KEY_FORMAT",
    "format_day_key",
    "minutes_to_hours",
    "next_day_key",
    "parse_day_key",
    "seconds_to_minutes",
]
