"""Unit tests for check-config command."""

from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner

from wfm_sync.cli.commands.check_config import check_config


class TestCheckConfigCommand:
    """Test suite for check-config command."""

    @pytest.fixture
    def runner(self):
        """Create a Click CLI test runner."""
        return CliRunner()

    @pytest.fixture
    def settings(self):
        """Patched settings."""
        settings = MagicMock()
        settings.wfm_staff_email = None
        with patch(
            "wfm_sync.cli.commands.check_config.get_config", return_value=settings
        ):
            yield settings

    def test_lists_mapping_and_unmapped_sheets(
        self, runner, settings, timetrap_db, timetrap_config_file
    ):
        """Test the mapping table and the unmapped sheet warning."""
        timetrap_db("client-a", "2024-01-01 09:00:00", "2024-01-01 10:00:00")
        timetrap_db("personal", "2024-01-01 09:00:00", "2024-01-01 10:00:00")

        result = runner.invoke(
            check_config,
            [
                "--database",
                str(timetrap_db.path),
                "--config-file",
                str(timetrap_config_file),
            ],
        )

        assert result.exit_code == 0, result.output
        assert "Staff email: me@example.org" in result.output
        assert "J000150" in result.output
        assert "39034524" in result.output
        assert "Timetrap sheet 'personal' has no WFM details" in result.output
        assert "client-a' has no WFM details" not in result.output
        assert "2 sheet(s) configured" in result.output

    def test_missing_database_is_a_warning(
        self, runner, settings, timetrap_config_file, tmp_path
    ):
        """Test that a missing database does not fail the check."""
        result = runner.invoke(
            check_config,
            [
                "--database",
                str(tmp_path / "missing.db"),
                "--config-file",
                str(timetrap_config_file),
            ],
        )

        assert result.exit_code == 0, result.output
        assert "Timetrap database not found" in result.output

    def test_remote_resolves_staff_id(
        self, runner, settings, timetrap_config_file, tmp_path, mock_wfm_client
    ):
        """Test --remote resolves the staff email against WorkflowMax."""
        with patch(
            "wfm_sync.cli.commands.check_config.WorkflowMaxClient"
        ) as mock_client_class:
            mock_client_class.from_config.return_value = mock_wfm_client
            result = runner.invoke(
                check_config,
                [
                    "--database",
                    str(tmp_path / "missing.db"),
                    "--config-file",
                    str(timetrap_config_file),
                    "--remote",
                ],
            )

        assert result.exit_code == 0, result.output
        assert "WorkflowMax staff id: 200" in result.output

    def test_missing_config_file(self, runner, settings, tmp_path):
        """Test that a missing Timetrap config exits with code 1."""
        result = runner.invoke(
            check_config, ["--config-file", str(tmp_path / "missing.yml")]
        )

        assert result.exit_code == 1
        assert "Timetrap config file not found" in result.output
