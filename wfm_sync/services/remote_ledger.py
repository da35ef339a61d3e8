"""
Run-scoped, cached access to the time already recorded in WorkflowMax.

Every sheet logged on the same day needs the same remote lookup, so the
records of each (staff, day) pair are fetched once per sync run and served
from memory afterwards. The cache is never invalidated: a run assumes no
one else changes the remote ledger while it is in progress.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, FrozenSet, Tuple

from wfm_sync.models.remote import RemoteEntry
from wfm_sync.services.exceptions import RemoteQueryFailure

logger = logging.getLogger(__name__)


class RecordShape(Enum):
    """How many time records the remote payload contained."""

    ZERO = "zero"
    ONE = "one"
    MANY = "many"


@dataclass(frozen=True)
class DecodedRecords:
    """Remote time records in a uniform shape.

    Attributes:
        shape: Shape of the payload as returned by WorkflowMax
        records: The records, always as a tuple of mappings
    """

    shape: RecordShape
    records: Tuple[Dict[str, Any], ...]


def decode_time_records(payload: Any) -> DecodedRecords:
    """
    Normalize a Times/Time payload into a tuple of records.

    WorkflowMax returns nothing for a day without time, a single mapping for
    a day with one record, and a list of mappings for a day with several.

    Args:
        payload: Parsed Times/Time value

    Returns:
        DecodedRecords tagged with the original shape

    Raises:
        ValueError: If the payload is none of the three expected shapes
    """
    if payload is None:
        return DecodedRecords(RecordShape.ZERO, ())

    if isinstance(payload, dict):
        return DecodedRecords(RecordShape.ONE, (payload,))

    if isinstance(payload, list):
        if not all(isinstance(record, dict) for record in payload):
            raise ValueError(f"Time list contains non-record items: {payload!r}")
        if not payload:
            return DecodedRecords(RecordShape.ZERO, ())
        return DecodedRecords(RecordShape.MANY, tuple(payload))

    raise ValueError(f"Unexpected time payload of type {type(payload).__name__}")


def _to_remote_entry(record: Dict[str, Any]) -> RemoteEntry:
    """Build a RemoteEntry from one parsed time record."""
    task = record.get("Task")
    task_id = task.get("ID") if isinstance(task, dict) else task
    if task_id is None or not str(task_id).strip():
        raise ValueError(f"Time record without task id: {record!r}")

    job = record.get("Job")
    job_id = job.get("ID") if isinstance(job, dict) else job
    minutes = record.get("Minutes")

    return RemoteEntry(
        task_id=str(task_id).strip(),
        entry_id=str(record["ID"]) if record.get("ID") is not None else None,
        job_id=str(job_id) if job_id is not None else None,
        minutes=int(minutes) if minutes is not None else None,
    )


class RemoteLedgerQuery:
    """
    Cached lookup of the time records already present in WorkflowMax.

    One instance belongs to one sync run. Repeated lookups for the same
    staff member and day cost a single remote call.

    Example:
        >>> ledger = RemoteLedgerQuery(client)
        >>> entries = ledger.fetch("123", "20240101")
        >>> any(entry.task_id == "39034523" for entry in entries)
        False
    """

    def __init__(self, client):
        """
        Initialize the ledger query.

        Args:
            client: WorkflowMaxClient (or anything with get_time_records)
        """
        self.client = client
        self._cache: Dict[Tuple[str, str], FrozenSet[RemoteEntry]] = {}
        self._stats = {"hits": 0, "remote_calls": 0}

    def fetch(self, staff_id: str, day_key: str) -> FrozenSet[RemoteEntry]:
        """
        Get the remote entries recorded for a staff member on a day.

        Args:
            staff_id: WorkflowMax staff id
            day_key: Day as YYYYMMDD

        Returns:
            Set of remote entries, empty when nothing is recorded

        Raises:
            RemoteQueryFailure: If the day cannot be queried or its payload
                cannot be decoded
        """
        cache_key = (staff_id, day_key)
        if cache_key in self._cache:
            self._stats["hits"] += 1
            logger.debug(f"Ledger cache hit for {day_key}")
            return self._cache[cache_key]

        self._stats["remote_calls"] += 1
        try:
            payload = self.client.get_time_records(staff_id, day_key)
            decoded = decode_time_records(payload)
            entries = frozenset(_to_remote_entry(record) for record in decoded.records)
        except Exception as e:
            logger.error(f"Failed to query WorkflowMax time for {day_key}: {e}")
            raise RemoteQueryFailure(day_key, f"{type(e).__name__}: {e}") from e

        logger.debug(
            f"WorkflowMax has {len(decoded.records)} time record(s) on {day_key} "
            f"(payload shape: {decoded.shape.value})"
        )
        self._cache[cache_key] = entries
        return entries

    def cache_info(self) -> Dict[str, int]:
        """
        Get cache statistics.

        Returns:
            Dictionary with cache hits, remote calls and cached days
        """
        return {**self._stats, "cached_days": len(self._cache)}
