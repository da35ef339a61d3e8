"""Uploader that records day totals as WorkflowMax time entries.

This module turns reconciled day totals into UploadRequests and sends them
to WorkflowMax one at a time.
"""

import logging
from typing import List, Sequence

from wfm_sync.aggregators.daily_aggregator import AggregatedEntries
from wfm_sync.models.billing import BillingMapping
from wfm_sync.models.remote import UploadRequest
from wfm_sync.services.exceptions import RemoteUploadFailure

logger = logging.getLogger(__name__)


def build_upload_requests(
    uploadable: AggregatedEntries, mapping: BillingMapping, staff_id: str
) -> List[UploadRequest]:
    """Create one UploadRequest per remaining sheet and day.

    Requests follow the iteration order of sheets, then days.

    Args:
        uploadable: Reconciled day totals (every sheet must be mapped)
        mapping: Sheet to WorkflowMax job/task lookup
        staff_id: WorkflowMax staff id the time belongs to

    Returns:
        List of upload requests

    Raises:
        KeyError: If a sheet has no billing target
    """
    requests: List[UploadRequest] = []

    for sheet, days in uploadable.items():
        target = mapping.get(sheet)
        if target is None:
            raise KeyError(f"No WorkflowMax job/task configured for sheet '{sheet}'")

        for day_key, day in days.items():
            requests.append(
                UploadRequest(
                    job_id=target.job_id,
                    task_id=target.task_id,
                    staff_id=staff_id,
                    day_key=day_key,
                    minutes=day.minutes,
                    note=day.combined_note,
                )
            )

    return requests


class TimeUploader:
    """Sends upload requests to WorkflowMax sequentially.

    Nothing is retried: adding a time entry twice would double-bill the day.
    A failed request does not stop the remaining ones; the failures are
    raised together once every request has been attempted.

    Attributes:
        client: WorkflowMaxClient (or anything with add_time_entry)
    """

    def __init__(self, client):
        self.client = client

    def upload(self, requests: Sequence[UploadRequest]) -> int:
        """Record every request in WorkflowMax.

        Args:
            requests: Requests to send, in order

        Returns:
            Total minutes recorded

        Raises:
            RemoteUploadFailure: If at least one request failed. Carries the
                failed requests and the minutes recorded by the others.
        """
        uploaded_minutes = 0
        failed: List[UploadRequest] = []
        errors: List[Exception] = []

        for request in requests:
            try:
                self.client.add_time_entry(request)
            except Exception as e:
                logger.error(
                    f"Failed to upload {request.minutes} minutes on "
                    f"{request.day_key} for task {request.task_id}: {e}"
                )
                failed.append(request)
                errors.append(e)
                continue

            uploaded_minutes += request.minutes
            logger.info(
                f"Uploaded {request.minutes} minutes on {request.day_key} "
                f"(job {request.job_id}, task {request.task_id})"
            )

        if failed:
            raise RemoteUploadFailure(failed, errors, uploaded_minutes)

        return uploaded_minutes
