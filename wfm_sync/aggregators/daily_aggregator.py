"""Daily aggregator for collapsing Timetrap entries into per-day totals.

WorkflowMax receives a single time entry per sheet and day, so every raw
work interval logged on the same sheet and calendar day is combined into
one AggregatedDay before anything is compared with the remote ledger.
"""

import logging
from typing import Dict, Iterable

from wfm_sync.models.entry import AggregatedDay, RawEntry

logger = logging.getLogger(__name__)

# sheet -> day key (YYYYMMDD) -> day total
AggregatedEntries = Dict[str, Dict[str, AggregatedDay]]


def aggregate_entries(entries: Iterable[RawEntry]) -> AggregatedEntries:
    """Combine raw entries into one total per sheet and calendar day.

    Durations are summed. Notes are joined with newlines in the order the
    entries are iterated, so the combined note (but not the total) depends
    on input order. Entries with zero duration or an empty note are kept.

    Sheets and days appear in the result in first-encounter order.

    Args:
        entries: Raw Timetrap entries, in the order they should be merged

    Returns:
        Nested mapping of sheet -> day key -> AggregatedDay

    Example:
        >>> import datetime as dt
        >>> start = dt.datetime(2024, 1, 1, 9, 0)
        >>> result = aggregate_entries([
        ...     RawEntry(sheet="A", start=start, duration=1800, note="x"),
        ...     RawEntry(sheet="A", start=start, duration=1800, note="y"),
        ... ])
        >>> day = result["A"]["20240101"]
        >>> day.total_seconds, day.combined_note
        (3600, 'x\\ny')
    """
    aggregated: AggregatedEntries = {}
    entry_count = 0

    for entry in entries:
        entry_count += 1
        days = aggregated.setdefault(entry.sheet, {})
        day_key = entry.day_key

        if day_key in days:
            days[day_key].merge(entry)
        else:
            days[day_key] = AggregatedDay.from_entry(entry)

    day_count = count_days(aggregated)
    logger.info(
        f"Aggregated {entry_count} entries into {day_count} day totals "
        f"across {len(aggregated)} sheets"
    )
    return aggregated


def count_days(aggregated: AggregatedEntries) -> int:
    """Count the day totals in an aggregated mapping."""
    return sum(len(days) for days in aggregated.values())
