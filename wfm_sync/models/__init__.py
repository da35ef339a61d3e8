"""Data models for the WorkflowMax sync.

This package contains Pydantic models for all sync entities:
- BaseDataModel: Base class with common configuration
- RawEntry: Individual Timetrap work interval
- AggregatedDay: Per-sheet, per-day total
- BillingTarget / BillingMapping: Sheet to WorkflowMax job/task lookup
- StaffMember, RemoteEntry, UploadRequest: WorkflowMax records
"""

from wfm_sync.models.base import BaseDataModel
from wfm_sync.models.billing import BillingMapping, BillingTarget
from wfm_sync.models.entry import AggregatedDay, RawEntry
from wfm_sync.models.remote import (
    RemoteDayRecord,
    RemoteEntry,
    StaffMember,
    UploadRequest,
)

__all__ = [
    "BaseDataModel",
    "RawEntry",
    "AggregatedDay",
    "BillingTarget",
    "BillingMapping",
    "StaffMember",
    "RemoteEntry",
    "RemoteDayRecord",
    "UploadRequest",
]
