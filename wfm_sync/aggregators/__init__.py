"""Aggregators module for combining raw time entries.

This module provides functionality to collapse Timetrap work intervals into
the per-sheet, per-day totals that are uploaded to WorkflowMax.
"""

from wfm_sync.aggregators.daily_aggregator import (
    AggregatedEntries,
    aggregate_entries,
    count_days,
)

__all__ = [
    "AggregatedEntries",
    "aggregate_entries",
    "count_days",
]
