"""Reconciler that removes days already submitted to WorkflowMax.

This module compares the aggregated Timetrap day totals with the time
already recorded in WorkflowMax and keeps only the days that still need to
be uploaded. Sheets without WorkflowMax details are reported and skipped.
"""

import logging
from dataclasses import dataclass, field
from typing import Set

from wfm_sync.aggregators.daily_aggregator import AggregatedEntries
from wfm_sync.models.billing import BillingMapping
from wfm_sync.services.remote_ledger import RemoteLedgerQuery
from wfm_sync.utils.logging_utils import LogContext

logger = logging.getLogger(__name__)


@dataclass
class ReconciliationResult:
    """Outcome of filtering aggregated days against the remote ledger.

    Attributes:
        uploadable: Sheet -> day key -> AggregatedDay still to be uploaded.
            Sheets with no remaining days are absent.
        skipped_unmapped: Sheets with no billing target configured
        already_submitted: Number of days dropped because WorkflowMax
            already has time for the sheet's task on that day
    """

    uploadable: AggregatedEntries = field(default_factory=dict)
    skipped_unmapped: Set[str] = field(default_factory=set)
    already_submitted: int = 0


class Reconciler:
    """Filters aggregated day totals down to those not yet in WorkflowMax.

    A day is considered submitted when WorkflowMax holds any time record on
    that day for the sheet's task. Minutes, notes and jobs of the remote
    record are not compared.

    Attributes:
        ledger: Run-scoped remote ledger lookup
        staff_id: WorkflowMax staff id whose time is reconciled

    Example:
        >>> reconciler = Reconciler(RemoteLedgerQuery(client), staff_id="123")
        >>> result = reconciler.filter(aggregate_entries(entries), mapping)
        >>> sorted(result.skipped_unmapped)
        ['personal']
    """

    def __init__(self, ledger: RemoteLedgerQuery, staff_id: str):
        """Initialize the reconciler.

        Args:
            ledger: Remote ledger lookup shared by the whole run
            staff_id: WorkflowMax staff id to query time for
        """
        self.ledger = ledger
        self.staff_id = staff_id

    def filter(
        self, aggregated: AggregatedEntries, mapping: BillingMapping
    ) -> ReconciliationResult:
        """Drop unmapped sheets and days already recorded in WorkflowMax.

        The input mapping is left untouched.

        Args:
            aggregated: Output of aggregate_entries
            mapping: Sheet to WorkflowMax job/task lookup

        Returns:
            ReconciliationResult with the days still to upload

        Raises:
            RemoteQueryFailure: If any day cannot be checked remotely
        """
        result = ReconciliationResult()

        for sheet, days in aggregated.items():
            with LogContext(sheet=sheet):
                target = mapping.get(sheet)
                if target is None:
                    logger.warning(
                        f"Timetrap sheet '{sheet}' not configured with WFM details; "
                        f"skipping {len(days)} day(s)"
                    )
                    result.skipped_unmapped.add(sheet)
                    continue

                remaining = {}
                for day_key, day in days.items():
                    remote_entries = self.ledger.fetch(self.staff_id, day_key)
                    if any(entry.task_id == target.task_id for entry in remote_entries):
                        logger.info(
                            f"{day_key}: already recorded against task "
                            f"{target.task_id}, skipping"
                        )
                        result.already_submitted += 1
                        continue
                    remaining[day_key] = day

                if remaining:
                    result.uploadable[sheet] = remaining
                else:
                    logger.debug("Every day already submitted")

        return result
