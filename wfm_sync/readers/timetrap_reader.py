"""Timetrap database reader.

This module reads logged work intervals from a Timetrap SQLite database
and converts them into RawEntry models.
"""

import datetime as dt
import logging
import sqlite3
from contextlib import closing
from pathlib import Path
from typing import Iterable, List, Optional, Union

from wfm_sync.models.entry import RawEntry

logger = logging.getLogger(__name__)

# Timetrap stores local times as text, with or without microseconds
TIMESTAMP_FORMATS = ("%Y-%m-%d %H:%M:%S.%f", "%Y-%m-%d %H:%M:%S")


def parse_timestamp(value: str) -> dt.datetime:
    """Parse a Timetrap timestamp string.

    Args:
        value: Timestamp as stored by Timetrap, e.g. "2024-01-01 09:00:00"

    Returns:
        Naive local datetime

    Raises:
        ValueError: If the value matches no known format

    Example:
        >>> parse_timestamp("2024-01-01 09:30:00.250000")
        datetime.datetime(2024, 1, 1, 9, 30, 0, 250000)
    """
    text = value.strip()
    # Some Timetrap versions append a UTC offset; the stored time is local
    if len(text) > 19 and text[-6] in "+-" and text[-3] == ":":
        text = text[:-6].rstrip()

    for fmt in TIMESTAMP_FORMATS:
        try:
            return dt.datetime.strptime(text, fmt)
        except ValueError:
            continue
    raise ValueError(f"Unrecognized Timetrap timestamp: {value!r}")


class TimetrapReader:
    """Reads entries from a Timetrap SQLite database.

    Attributes:
        database_path: Path to the Timetrap database file

    Example:
        >>> reader = TimetrapReader("~/.timetrap.db")
        >>> entries = reader.read_entries(start=dt.date(2024, 1, 1))
        >>> entries[0].sheet
        'client-a'
    """

    def __init__(self, database_path: Union[str, Path]):
        """Initialize the reader.

        Args:
            database_path: Path to the Timetrap database (``~`` is expanded)
        """
        self.database_path = Path(database_path).expanduser()

    def _connect(self) -> sqlite3.Connection:
        if not self.database_path.exists():
            raise FileNotFoundError(
                f"Timetrap database not found: {self.database_path}"
            )
        connection = sqlite3.connect(self.database_path)
        connection.row_factory = sqlite3.Row
        return connection

    def read_entries(
        self,
        start: Optional[dt.date] = None,
        end: Optional[dt.date] = None,
        sheets: Optional[Iterable[str]] = None,
    ) -> List[RawEntry]:
        """Read finished entries, oldest first.

        Running entries (no end time yet) are skipped. Archived sheets,
        whose names start with an underscore, are skipped unless they are
        requested explicitly through ``sheets``.

        Args:
            start: Only entries starting on or after this date
            end: Only entries starting on or before this date
            sheets: Only entries on these sheets

        Returns:
            List of RawEntry ordered by start time

        Raises:
            FileNotFoundError: If the database file does not exist
            sqlite3.DatabaseError: If the file is not a Timetrap database
        """
        sheet_filter = set(sheets) if sheets is not None else None

        query = 'SELECT id, note, start, "end", sheet FROM entries'
        params: List[str] = []
        if sheet_filter:
            placeholders = ", ".join("?" for _ in sheet_filter)
            query += f" WHERE sheet IN ({placeholders})"
            params.extend(sorted(sheet_filter))
        query += " ORDER BY start, id"

        with closing(self._connect()) as connection:
            rows = connection.execute(query, params).fetchall()

        entries: List[RawEntry] = []
        running = 0
        for row in rows:
            sheet = row["sheet"]
            if sheet_filter is None and sheet.startswith("_"):
                continue

            if row["end"] is None:
                running += 1
                continue

            started = parse_timestamp(row["start"])
            if start is not None and started.date() < start:
                continue
            if end is not None and started.date() > end:
                continue

            ended = parse_timestamp(row["end"])
            duration = max(0, int((ended - started).total_seconds()))
            entries.append(
                RawEntry(sheet=sheet, start=started, duration=duration, note=row["note"])
            )

        if running:
            logger.info(f"Skipped {running} running Timetrap entries")
        logger.info(f"Read {len(entries)} Timetrap entries from {self.database_path}")
        return entries

    def list_sheets(self) -> List[str]:
        """Return the names of all non-archived sheets with entries.

        Returns:
            Sorted list of sheet names

        Raises:
            FileNotFoundError: If the database file does not exist
        """
        with closing(self._connect()) as connection:
            rows = connection.execute(
                "SELECT DISTINCT sheet FROM entries ORDER BY sheet"
            ).fetchall()
        return [row["sheet"] for row in rows if not row["sheet"].startswith("_")]
