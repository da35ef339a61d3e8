"""
WorkflowMax services for the sync.

This package provides:
- WorkflowMaxClient: XML API client with retry handling for read calls
- RemoteLedgerQuery: run-scoped cached lookup of recorded time
- SyncService: orchestration of a full sync run
- RetryHandler: exponential backoff with jitter and circuit breaker
"""

from .exceptions import (
    BillingMappingError,
    IdentityResolutionFailure,
    MissingCredentialsError,
    RemoteQueryFailure,
    RemoteUploadFailure,
    WfmSyncError,
    WorkflowMaxAPIError,
)
from .remote_ledger import DecodedRecords, RecordShape, RemoteLedgerQuery
from .retry_handler import CircuitBreakerError, RetryExhaustedException, RetryHandler
from .sync_service import SyncReport, SyncService
from .workflowmax_client import WorkflowMaxClient

__all__ = [
    "WfmSyncError",
    "WorkflowMaxAPIError",
    "BillingMappingError",
    "IdentityResolutionFailure",
    "MissingCredentialsError",
    "RemoteQueryFailure",
    "RemoteUploadFailure",
    "DecodedRecords",
    "RecordShape",
    "RemoteLedgerQuery",
    "RetryHandler",
    "RetryExhaustedException",
    "CircuitBreakerError",
    "SyncReport",
    "SyncService",
    "WorkflowMaxClient",
]
