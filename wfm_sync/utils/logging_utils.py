"""Run context for log records and redaction of WorkflowMax credentials.

A sync run tags its records with a short correlation id, and the reconciler
adds the sheet it is working on, so interleaved output from repeated cron
runs can be told apart.
"""

import logging
import threading
import uuid
from typing import Dict, Mapping, Optional

# Fields a LogContext may set; RunContextFilter stamps each onto every record
CONTEXT_FIELDS = ("correlation_id", "sheet")

# Query parameters that authenticate a WorkflowMax call
AUTH_PARAMS = {"apikey", "accountkey"}

_local = threading.local()


def generate_correlation_id() -> str:
    """Return a short random id for one sync run."""
    return uuid.uuid4().hex[:12]


def current_context() -> Dict[str, str]:
    """Return a copy of the fields active in the calling thread."""
    return dict(getattr(_local, "fields", {}))


class LogContext:
    """
    Tag the log records emitted inside a block.

    Nested contexts add to (or override) the enclosing fields and restore
    them on exit, including when the block raises.

    Example:
        with LogContext(correlation_id=generate_correlation_id()):
            with LogContext(sheet="client-a"):
                logger.info("Checking 3 day(s)")
    """

    def __init__(self, **fields: str):
        unknown = set(fields) - set(CONTEXT_FIELDS)
        if unknown:
            raise ValueError(f"Unknown log context field(s): {sorted(unknown)}")
        self.fields = fields
        self._saved: Optional[Dict[str, str]] = None

    def __enter__(self):
        self._saved = current_context()
        _local.fields = {**self._saved, **self.fields}
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        _local.fields = self._saved or {}
        return False


class RunContextFilter(logging.Filter):
    """
    Stamp the run context onto records.

    Every field in CONTEXT_FIELDS is set (None outside a context), and
    ``record.run_context`` holds a ready-made `` [run=... sheet=...]`` suffix
    for plain-text formats, empty when no context is active.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        fields = current_context()
        parts = []
        for field in CONTEXT_FIELDS:
            value = fields.get(field)
            setattr(record, field, value)
            if value is not None:
                label = "run" if field == "correlation_id" else field
                parts.append(f"{label}={value}")
        record.run_context = f" [{' '.join(parts)}]" if parts else ""
        return True


def redact_auth_params(params: Mapping[str, str]) -> Dict[str, str]:
    """
    Copy request parameters with the WorkflowMax keys masked.

    Args:
        params: Query parameters of a WorkflowMax call

    Returns:
        New dict that is safe to log
    """
    return {
        key: "***" if key.lower() in AUTH_PARAMS else value
        for key, value in params.items()
    }
