"""Logging setup for the wfm-sync command line.

Logging is configured from the environment once per CLI invocation:

    LOG_LEVEL   DEBUG, INFO, WARNING (default), ERROR or CRITICAL
    LOG_FORMAT  ``standard`` (default) or ``json`` for one object per line
    LOG_FILE    also write records to this file, rotated at 1 MB

Records always go to stderr so they do not mix with command output.
"""

import json
import logging
import logging.handlers
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from wfm_sync.utils.logging_utils import CONTEXT_FIELDS, RunContextFilter

VALID_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
VALID_FORMATS = ("standard", "json")

STANDARD_FORMAT = "%(asctime)s %(levelname)-7s %(name)s%(run_context)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

LOG_FILE_MAX_BYTES = 1024 * 1024
LOG_FILE_BACKUPS = 3


class JSONFormatter(logging.Formatter):
    """Format records as single-line JSON, including the run context."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": self.formatTime(record, DATE_FORMAT),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for field in CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                entry[field] = value
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


@dataclass(frozen=True)
class LoggingConfig:
    """
    Where and how wfm-sync logs.

    Attributes:
        level: Root log level
        log_format: ``standard`` or ``json``
        log_file: Optional file that receives a copy of every record
    """

    level: str = "WARNING"
    log_format: str = "standard"
    log_file: Optional[str] = None

    def __post_init__(self):
        if self.level.upper() not in VALID_LEVELS:
            raise ValueError(
                f"Invalid LOG_LEVEL {self.level!r}; use one of {', '.join(VALID_LEVELS)}"
            )
        if self.log_format not in VALID_FORMATS:
            raise ValueError(
                f"Invalid LOG_FORMAT {self.log_format!r}; "
                f"use one of {', '.join(VALID_FORMATS)}"
            )
        object.__setattr__(self, "level", self.level.upper())

    @classmethod
    def from_env(cls) -> "LoggingConfig":
        """Build the configuration from LOG_LEVEL, LOG_FORMAT and LOG_FILE."""
        return cls(
            level=os.getenv("LOG_LEVEL", "WARNING"),
            log_format=os.getenv("LOG_FORMAT", "standard").lower(),
            log_file=os.getenv("LOG_FILE") or None,
        )


def configure_logging(config: LoggingConfig) -> None:
    """
    Install wfm-sync's handlers on the root logger.

    Existing root handlers are replaced, so calling this again (as every
    CLI invocation in a test session does) never duplicates output.

    Args:
        config: LoggingConfig to apply
    """
    reset_logging()

    root_logger = logging.getLogger()
    root_logger.setLevel(config.level)

    if config.log_format == "json":
        formatter: logging.Formatter = JSONFormatter()
    else:
        formatter = logging.Formatter(STANDARD_FORMAT, datefmt=DATE_FORMAT)

    handlers: list = [logging.StreamHandler()]
    if config.log_file:
        log_path = Path(config.log_file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            logging.handlers.RotatingFileHandler(
                log_path,
                maxBytes=LOG_FILE_MAX_BYTES,
                backupCount=LOG_FILE_BACKUPS,
                encoding="utf-8",
            )
        )

    context_filter = RunContextFilter()
    for handler in handlers:
        handler.setFormatter(formatter)
        handler.addFilter(context_filter)
        root_logger.addHandler(handler)


def reset_logging() -> None:
    """Remove and close all root handlers and restore the WARNING level."""
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()
    root_logger.setLevel(logging.WARNING)
