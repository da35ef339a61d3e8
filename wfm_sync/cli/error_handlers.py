"""Enhanced error handling for CLI commands."""

import sys
import traceback
from typing import Optional

import click
import requests
from pydantic import ValidationError

from wfm_sync.cli.utils.formatters import format_error, format_warning
from wfm_sync.services.exceptions import (
    BillingMappingError,
    IdentityResolutionFailure,
    MissingCredentialsError,
    RemoteQueryFailure,
    RemoteUploadFailure,
    WorkflowMaxAPIError,
)
from wfm_sync.services.retry_handler import CircuitBreakerError, RetryExhaustedException


class CLIError(Exception):
    """Base exception for CLI errors with user-friendly messages."""

    def __init__(self, message: str, recovery_hint: Optional[str] = None):
        """
        Initialize CLI error.

        Args:
            message: Error message to display
            recovery_hint: Optional hint for recovering from the error
        """
        self.message = message
        self.recovery_hint = recovery_hint
        super().__init__(message)


class ConfigurationError(CLIError):
    """Error related to configuration issues."""

    pass


def _echo_hint(hint: str) -> None:
    click.echo(format_warning(f"Hint: {hint}"))


def handle_cli_error(error: Exception, debug: bool = False) -> int:
    """
    Handle CLI errors with user-friendly messages.

    Args:
        error: The exception that occurred
        debug: Whether to show full stack trace

    Returns:
        Exit code (1-6 for the known error types)
    """
    if isinstance(error, ConfigurationError):
        click.echo(format_error(f"Configuration Error: {error.message}"))
        if error.recovery_hint:
            _echo_hint(error.recovery_hint)
        return 1

    elif isinstance(error, BillingMappingError):
        click.echo(format_error(f"Configuration Error: {error}"))
        _echo_hint("Add a 'wfm' section with email and aliases to your .timetrap.yml")
        return 1

    elif isinstance(error, MissingCredentialsError):
        click.echo(format_error(f"Configuration Error: {error}"))
        _echo_hint(
            "Set WFM_API_KEY and WFM_ACCOUNT_KEY, or wfm.apiKey and wfm.accountKey "
            "in your .timetrap.yml"
        )
        return 1

    elif isinstance(error, ValidationError):
        click.echo(format_error("Configuration Error: invalid settings"))
        for detail in error.errors():
            location = ".".join(str(part) for part in detail["loc"])
            click.echo(f"  - {location}: {detail['msg']}")
        _echo_hint("Check the WFM_* and TIMETRAP_* settings in your environment or .env")
        return 1

    elif isinstance(error, WorkflowMaxAPIError):
        click.echo(format_error(f"API Error: {error}"))
        if error.status_code in (401, 403):
            _echo_hint("Check WFM_API_KEY/WFM_ACCOUNT_KEY or wfm.apiKey/wfm.accountKey")
        return 2

    elif isinstance(error, RemoteQueryFailure):
        click.echo(format_error(str(error)))
        _echo_hint(
            "Nothing was uploaded. Re-run once WorkflowMax is reachable; "
            "days already recorded will be skipped"
        )
        return 3

    elif isinstance(error, RemoteUploadFailure):
        click.echo(format_error(str(error)))
        for request, cause in zip(error.failed_requests, error.errors):
            click.echo(
                f"  - {request.day_key} job {request.job_id} task {request.task_id} "
                f"({request.minutes} min): {cause}"
            )
        _echo_hint("Re-run the upload; days recorded successfully will be skipped")
        return 4

    elif isinstance(error, IdentityResolutionFailure):
        click.echo(format_error(str(error)))
        _echo_hint("Check wfm.email in .timetrap.yml or set WFM_STAFF_EMAIL")
        return 5

    elif isinstance(
        error,
        (
            requests.exceptions.ConnectionError,
            requests.exceptions.Timeout,
            RetryExhaustedException,
            CircuitBreakerError,
        ),
    ):
        click.echo(format_error(f"Network Error: {error}"))
        _echo_hint("Check your connection and WFM_BASE_URL, then try again")
        return 6

    # User cancellation
    elif isinstance(error, click.Abort):
        click.echo(format_warning("\nOperation cancelled by user"))
        return 130  # Standard exit code for SIGINT

    else:
        click.echo(format_error(f"Unexpected Error: {type(error).__name__}"))
        click.echo(str(error))

        if debug:
            click.echo("\nFull stack trace:")
            click.echo(
                "".join(
                    traceback.format_exception(type(error), error, error.__traceback__)
                )
            )
        else:
            click.echo(format_warning("\nRun with --debug flag for full stack trace"))

        return 255


def with_error_handling(debug: bool = False):
    """
    Context manager adding standardized error handling to CLI commands.

    Args:
        debug: Whether to show full stack traces

    Returns:
        Context manager that exits with the mapped exit code on error

    Example:
        @click.command()
        @click.option('--debug', is_flag=True)
        def my_command(debug):
            with with_error_handling(debug):
                # Command implementation
                pass
    """

    class ErrorHandler:
        """Context manager for error handling."""

        def __init__(self, show_debug: bool):
            self.show_debug = show_debug

        def __enter__(self):
            return self

        def __exit__(self, exc_type, exc_val, exc_tb):
            if exc_val is not None and not isinstance(exc_val, SystemExit):
                exit_code = handle_cli_error(exc_val, self.show_debug)
                sys.exit(exit_code)
            return False

    return ErrorHandler(debug)
