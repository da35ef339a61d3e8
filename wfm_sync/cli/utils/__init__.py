"""CLI utility functions."""

from wfm_sync.cli.utils.formatters import (
    format_error,
    format_info,
    format_success,
    format_table,
    format_warning,
)
from wfm_sync.cli.utils.progress import StageProgress

__all__ = [
    "format_error",
    "format_info",
    "format_success",
    "format_table",
    "format_warning",
    "StageProgress",
]
