"""
Sync run orchestration: Timetrap entries in, WorkflowMax time entries out.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Set

from wfm_sync.aggregators.daily_aggregator import aggregate_entries, count_days
from wfm_sync.calculators.time_utils import minutes_to_hours
from wfm_sync.models.billing import BillingMapping
from wfm_sync.models.entry import RawEntry
from wfm_sync.models.remote import UploadRequest
from wfm_sync.reconcilers.day_reconciler import Reconciler
from wfm_sync.services.exceptions import IdentityResolutionFailure
from wfm_sync.services.remote_ledger import RemoteLedgerQuery
from wfm_sync.uploaders.time_uploader import TimeUploader, build_upload_requests
from wfm_sync.utils.logging_utils import LogContext, generate_correlation_id

logger = logging.getLogger(__name__)


@dataclass
class SyncReport:
    """Result of one sync run.

    Attributes:
        requests: Entries that were (or, in a dry run, would be) uploaded
        uploaded_minutes: Minutes recorded in WorkflowMax
        skipped_unmapped: Sheets without WorkflowMax details
        already_submitted: Days skipped because they were already recorded
        dry_run: Whether uploads were suppressed
    """

    requests: List[UploadRequest] = field(default_factory=list)
    uploaded_minutes: int = 0
    skipped_unmapped: Set[str] = field(default_factory=set)
    already_submitted: int = 0
    dry_run: bool = False

    @property
    def has_new_entries(self) -> bool:
        """Whether there was anything left to upload."""
        return bool(self.requests)

    @property
    def planned_minutes(self) -> int:
        """Minutes across all requests, uploaded or not."""
        return sum(request.minutes for request in self.requests)

    @property
    def uploaded_hours(self) -> float:
        """Uploaded time in hours, rounded to one decimal."""
        return minutes_to_hours(self.uploaded_minutes)

    def summary_lines(self) -> List[str]:
        """Build the user-facing run summary."""
        lines = [
            f"Timetrap sheet '{sheet}' not configured with WFM details; skipping..."
            for sheet in sorted(self.skipped_unmapped)
        ]

        if not self.has_new_entries:
            lines.append("No new entries found to upload")
        elif self.dry_run:
            lines.append(
                f"Dry run: {len(self.requests)} entries, {self.planned_minutes} "
                f"minutes ({minutes_to_hours(self.planned_minutes)} hours) "
                f"would be recorded."
            )
        else:
            lines.append(
                f"Upload complete. {self.uploaded_minutes} minutes "
                f"({self.uploaded_hours} hours) recorded."
            )
        return lines


class SyncService:
    """
    Runs the Timetrap to WorkflowMax reconciliation.

    A run resolves the staff id, aggregates the entries, drops days already
    recorded remotely and uploads the rest. All remote lookups happen before
    the first upload, so a failed lookup aborts the run with nothing sent.

    Example:
        >>> client = WorkflowMaxClient.from_config(get_config(), mapping)
        >>> service = SyncService(client, mapping)
        >>> report = service.run(TimetrapReader(db_path).read_entries())
        >>> for line in report.summary_lines():
        ...     print(line)
    """

    def __init__(self, client, mapping: BillingMapping):
        """
        Initialize the sync service.

        Args:
            client: WorkflowMaxClient used for every remote call
            mapping: Sheet to WorkflowMax job/task lookup and staff email
        """
        self.client = client
        self.mapping = mapping

    def resolve_staff_id(self) -> str:
        """
        Look up the WorkflowMax staff id of the configured email.

        Returns:
            Staff id

        Raises:
            IdentityResolutionFailure: If no staff member has the email
        """
        email = self.mapping.staff_email.lower()
        for member in self.client.list_staff():
            if member.email.strip().lower() == email:
                logger.info(
                    f"Resolved {self.mapping.staff_email} to staff id {member.staff_id}"
                )
                return member.staff_id

        raise IdentityResolutionFailure(self.mapping.staff_email)

    def run(self, entries: Iterable[RawEntry], dry_run: bool = False) -> SyncReport:
        """
        Reconcile entries with WorkflowMax and upload what is missing.

        Args:
            entries: Raw Timetrap entries
            dry_run: Plan the uploads without sending them

        Returns:
            SyncReport describing the run

        Raises:
            IdentityResolutionFailure: If the staff email is unknown
            RemoteQueryFailure: If a day cannot be checked remotely
            RemoteUploadFailure: If any upload failed
        """
        with LogContext(correlation_id=generate_correlation_id()):
            staff_id = self.resolve_staff_id()

            aggregated = aggregate_entries(entries)

            ledger = RemoteLedgerQuery(self.client)
            result = Reconciler(ledger, staff_id).filter(aggregated, self.mapping)
            logger.info(
                f"{count_days(result.uploadable)} day(s) to upload, "
                f"{result.already_submitted} already submitted, "
                f"{len(result.skipped_unmapped)} unmapped sheet(s); "
                f"ledger cache: {ledger.cache_info()}"
            )

            requests = build_upload_requests(result.uploadable, self.mapping, staff_id)
            report = SyncReport(
                requests=requests,
                skipped_unmapped=set(result.skipped_unmapped),
                already_submitted=result.already_submitted,
                dry_run=dry_run,
            )

            if dry_run or not report.requests:
                return report

            report.uploaded_minutes = TimeUploader(self.client).upload(report.requests)
            return report
