"""Uploaders that send reconciled time to WorkflowMax."""

from wfm_sync.uploaders.time_uploader import TimeUploader, build_upload_requests

__all__ = ["TimeUploader", "build_upload_requests"]
