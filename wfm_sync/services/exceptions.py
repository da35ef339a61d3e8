"""
Exceptions raised by the WorkflowMax sync services.
"""

from typing import List, Optional, Sequence

from wfm_sync.models.remote import UploadRequest


class WfmSyncError(Exception):
    """Base class for all sync errors."""

    pass


class WorkflowMaxAPIError(WfmSyncError):
    """WorkflowMax rejected a call (HTTP error or error status in the response)."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class BillingMappingError(WfmSyncError):
    """The sheet to job/task mapping could not be loaded."""

    pass


class MissingCredentialsError(WfmSyncError):
    """No WorkflowMax API key or account key is configured."""

    pass


class IdentityResolutionFailure(WfmSyncError):
    """The configured staff email is not in the WorkflowMax staff list."""

    def __init__(self, staff_email: str):
        super().__init__(f"No WorkflowMax staff member found with email {staff_email}")
        self.staff_email = staff_email


class RemoteQueryFailure(WfmSyncError):
    """The remote ledger could not be queried for a day.

    Without the day's remote records there is no safe upload decision, so
    this aborts the whole run.
    """

    def __init__(self, day_key: str, reason: str):
        super().__init__(f"Could not query WorkflowMax time for {day_key}: {reason}")
        self.day_key = day_key
        self.reason = reason


class RemoteUploadFailure(WfmSyncError):
    """One or more add-entry calls failed.

    Raised after every request of the batch has been attempted.

    Attributes:
        failed_requests: Requests that were not recorded
        errors: Exception for each failed request, in the same order
        uploaded_minutes: Minutes recorded by the requests that succeeded
    """

    def __init__(
        self,
        failed_requests: Sequence[UploadRequest],
        errors: Sequence[Exception],
        uploaded_minutes: int,
    ):
        self.failed_requests: List[UploadRequest] = list(failed_requests)
        self.errors: List[Exception] = list(errors)
        self.uploaded_minutes = uploaded_minutes
        super().__init__(
            f"{len(self.failed_requests)} time entr"
            f"{'y' if len(self.failed_requests) == 1 else 'ies'} failed to upload "
            f"({uploaded_minutes} minutes recorded by the remaining entries)"
        )
