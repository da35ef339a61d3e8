"""WorkflowMax-side data models.

This module defines the records exchanged with WorkflowMax: staff members
used for identity resolution, time records already present on the remote
ledger, and the requests that add new time entries.
"""

from typing import FrozenSet, Optional

from pydantic import ConfigDict, Field

from wfm_sync.models.base import BaseDataModel


class StaffMember(BaseDataModel):
    """A WorkflowMax staff member.

    Attributes:
        staff_id: WorkflowMax staff identifier
        name: Display name
        email: Login email, used to resolve the staff id
    """

    model_config = ConfigDict(frozen=True)

    staff_id: str = Field(..., min_length=1)
    name: str = ""
    email: str = ""


class RemoteEntry(BaseDataModel):
    """A time record already present on the WorkflowMax ledger.

    Only ``task_id`` takes part in the already-submitted check. The other
    fields are carried for logging.

    Attributes:
        task_id: WorkflowMax task the time was recorded against
        entry_id: WorkflowMax time record id, if reported
        job_id: WorkflowMax job number, if reported
        minutes: Recorded minutes, if reported
    """

    model_config = ConfigDict(frozen=True)

    task_id: str = Field(..., min_length=1)
    entry_id: Optional[str] = None
    job_id: Optional[str] = None
    minutes: Optional[int] = None


# All remote entries recorded for one staff member on one day
RemoteDayRecord = FrozenSet[RemoteEntry]


class UploadRequest(BaseDataModel):
    """One WorkflowMax "add time entry" call.

    Attributes:
        job_id: WorkflowMax job number
        task_id: WorkflowMax task id
        staff_id: WorkflowMax staff id the time belongs to
        day_key: Calendar day as YYYYMMDD
        minutes: Whole minutes to record
        note: Combined note for the day
    """

    model_config = ConfigDict(frozen=True)

    job_id: str = Field(..., min_length=1)
    task_id: str = Field(..., min_length=1)
    staff_id: str = Field(..., min_length=1)
    day_key: str = Field(..., pattern=r"^\d{8}$")
    minutes: int = Field(..., ge=0)
    note: str = ""
