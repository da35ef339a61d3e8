"""Unit tests for CLI error handling."""

import click
import pytest
import requests
from pydantic import BaseModel, ValidationError

from wfm_sync.cli.error_handlers import (
    ConfigurationError,
    handle_cli_error,
    with_error_handling,
)
from wfm_sync.models.remote import UploadRequest
from wfm_sync.services.exceptions import (
    BillingMappingError,
    IdentityResolutionFailure,
    MissingCredentialsError,
    RemoteQueryFailure,
    RemoteUploadFailure,
    WorkflowMaxAPIError,
)
from wfm_sync.services.retry_handler import CircuitBreakerError, RetryExhaustedException


def validation_error():
    class Settings(BaseModel):
        value: int

    try:
        Settings(value="x")
    except ValidationError as e:
        return e


class TestHandleCliError:
    """Test suite for handle_cli_error."""

    @pytest.mark.parametrize(
        "error,exit_code",
        [
            (ConfigurationError("bad"), 1),
            (BillingMappingError("no wfm section"), 1),
            (MissingCredentialsError("no keys"), 1),
            (WorkflowMaxAPIError("Unauthorized", 401), 2),
            (RemoteQueryFailure("20240101", "timeout"), 3),
            (RemoteUploadFailure([], [], 0), 4),
            (IdentityResolutionFailure("me@example.org"), 5),
            (requests.exceptions.ConnectionError("refused"), 6),
            (requests.exceptions.Timeout("slow"), 6),
            (RetryExhaustedException("gave up"), 6),
            (CircuitBreakerError("open"), 6),
            (click.Abort(), 130),
            (RuntimeError("boom"), 255),
        ],
    )
    def test_exit_codes(self, error, exit_code, capsys):
        """Test the exit code for each error type."""
        assert handle_cli_error(error) == exit_code

    def test_missing_credentials_hint(self, capsys):
        """Test that both places a key can be configured are named."""
        handle_cli_error(MissingCredentialsError("WFM_API_KEY / wfm.apiKey"))

        output = capsys.readouterr().out
        assert "Configuration Error" in output
        assert "WFM_API_KEY" in output
        assert "wfm.accountKey" in output

    def test_validation_error_lists_fields(self, capsys):
        """Test that settings validation errors name the failing field."""
        assert handle_cli_error(validation_error()) == 1
        assert "value" in capsys.readouterr().out

    def test_recovery_hint_shown(self, capsys):
        """Test that CLIError hints are printed."""
        handle_cli_error(ConfigurationError("bad", "Set WFM_API_KEY"))
        assert "Hint: Set WFM_API_KEY" in capsys.readouterr().out

    def test_auth_hint_for_401(self, capsys):
        """Test the credentials hint on authentication failures."""
        handle_cli_error(WorkflowMaxAPIError("Unauthorized", 401))
        assert "WFM_ACCOUNT_KEY" in capsys.readouterr().out

    def test_upload_failure_lists_requests(self, capsys):
        """Test that every failed request is listed with its cause."""
        request = UploadRequest(
            job_id="J1", task_id="42", staff_id="200", day_key="20240101", minutes=30
        )
        handle_cli_error(RemoteUploadFailure([request], [ValueError("rejected")], 90))

        output = capsys.readouterr().out
        assert "90 minutes recorded" in output
        assert "20240101 job J1 task 42 (30 min): rejected" in output

    def test_debug_shows_traceback(self, capsys):
        """Test that unexpected errors show a stack trace with debug."""
        try:
            raise RuntimeError("boom")
        except RuntimeError as e:
            handle_cli_error(e, debug=True)

        assert "Traceback" in capsys.readouterr().out


class TestWithErrorHandling:
    """Test suite for with_error_handling."""

    def test_exits_with_mapped_code(self, capsys):
        """Test that errors inside the block exit the process."""
        with pytest.raises(SystemExit) as exc_info:
            with with_error_handling():
                raise IdentityResolutionFailure("me@example.org")

        assert exc_info.value.code == 5

    def test_no_error_passes_through(self):
        """Test that a clean block does nothing."""
        with with_error_handling():
            value = 1
        assert value == 1

    def test_system_exit_not_handled(self):
        """Test that explicit exits keep their code."""
        with pytest.raises(SystemExit) as exc_info:
            with with_error_handling():
                raise SystemExit(0)

        assert exc_info.value.code == 0
