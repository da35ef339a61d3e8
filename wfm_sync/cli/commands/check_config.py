"""Check configuration command."""

from typing import Optional

import click

from wfm_sync.cli.error_handlers import with_error_handling
from wfm_sync.cli.utils.formatters import (
    format_info,
    format_success,
    format_table,
    format_warning,
)
from wfm_sync.config.billing_mapping import load_billing_mapping
from wfm_sync.config.settings import get_config
from wfm_sync.readers.timetrap_reader import TimetrapReader
from wfm_sync.services.sync_service import SyncService
from wfm_sync.services.workflowmax_client import WorkflowMaxClient


@click.command(name="check-config")
@click.option(
    "--database",
    type=str,
    default=None,
    help="Timetrap database file (optional, uses default from config)",
)
@click.option(
    "--config-file",
    type=str,
    default=None,
    help="Timetrap config file with the wfm section (optional)",
)
@click.option(
    "--remote",
    is_flag=True,
    default=False,
    help="Also resolve the staff email against WorkflowMax",
)
@click.option("--debug", is_flag=True, default=False, help="Show full stack traces")
def check_config(
    database: Optional[str],
    config_file: Optional[str],
    remote: bool,
    debug: bool,
):
    """Show the sheet to WorkflowMax mapping and flag unmapped sheets.

    Example:
        wfm-sync check-config
        wfm-sync check-config --remote
    """
    with with_error_handling(debug):
        settings = get_config()
        mapping = load_billing_mapping(
            config_file or settings.timetrap_config_file,
            staff_email_override=settings.wfm_staff_email,
        )

        click.echo(format_info(f"Staff email: {mapping.staff_email}"))
        click.echo()

        headers = ["Sheet", "Job", "Task"]
        rows = [
            [sheet, mapping.get(sheet).job_id, mapping.get(sheet).task_id]
            for sheet in sorted(mapping.sheets())
        ]
        click.echo(format_table(headers, rows))
        click.echo()

        reader = TimetrapReader(database or settings.timetrap_database_file)
        if reader.database_path.exists():
            unmapped = [sheet for sheet in reader.list_sheets() if sheet not in mapping]
            for sheet in unmapped:
                message = f"Timetrap sheet '{sheet}' has no WFM details; skipped on upload"
                click.echo(format_warning(message))
        else:
            click.echo(
                format_warning(f"Timetrap database not found: {reader.database_path}")
            )

        if remote:
            client = WorkflowMaxClient.from_config(settings, mapping)
            staff_id = SyncService(client, mapping).resolve_staff_id()
            click.echo(format_info(f"WorkflowMax staff id: {staff_id}"))

        click.echo(format_success(f"{len(mapping)} sheet(s) configured"))
