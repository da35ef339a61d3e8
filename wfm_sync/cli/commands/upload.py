"""Upload command."""

import datetime as dt
from typing import Optional, Tuple

import click

from wfm_sync.calculators.time_utils import parse_day_key
from wfm_sync.cli.error_handlers import ConfigurationError, with_error_handling
from wfm_sync.cli.utils.formatters import (
    format_info,
    format_success,
    format_table,
    format_warning,
)
from wfm_sync.cli.utils.progress import StageProgress
from wfm_sync.config.billing_mapping import load_billing_mapping
from wfm_sync.config.settings import get_config
from wfm_sync.readers.timetrap_reader import TimetrapReader
from wfm_sync.services.sync_service import SyncReport, SyncService
from wfm_sync.services.workflowmax_client import WorkflowMaxClient


def parse_date_input(date_str: str) -> dt.date:
    """Parse date string in YYYY-MM-DD format.

    Args:
        date_str: Date string in YYYY-MM-DD format

    Returns:
        Parsed date object

    Raises:
        ValueError: If date format is invalid
    """
    try:
        return dt.datetime.strptime(date_str, "%Y-%m-%d").date()
    except ValueError:
        raise ValueError(f"Invalid date format: {date_str}. Expected YYYY-MM-DD")


def _date_option(ctx, param, value: Optional[str]) -> Optional[dt.date]:
    if value is None:
        return None
    try:
        return parse_date_input(value)
    except ValueError as e:
        raise click.BadParameter(str(e))


def _print_planned_requests(report: SyncReport) -> None:
    headers = ["Date", "Job", "Task", "Minutes", "Note"]
    rows = [
        [
            parse_day_key(request.day_key).isoformat(),
            request.job_id,
            request.task_id,
            str(request.minutes),
            request.note,
        ]
        for request in report.requests
    ]
    click.echo()
    click.echo(format_table(headers, rows))


def _print_summary(report: SyncReport) -> None:
    lines = report.summary_lines()
    click.echo()
    for line in lines[:-1]:
        click.echo(format_warning(line))

    if report.has_new_entries and not report.dry_run:
        click.echo(format_success(lines[-1]))
    else:
        click.echo(format_info(lines[-1]))


@click.command(name="upload")
@click.option(
    "--start",
    "start_date",
    type=str,
    default=None,
    callback=_date_option,
    help="Only entries starting on or after this date (YYYY-MM-DD)",
)
@click.option(
    "--end",
    "end_date",
    type=str,
    default=None,
    callback=_date_option,
    help="Only entries starting on or before this date (YYYY-MM-DD)",
)
@click.option(
    "--sheet",
    "sheets",
    type=str,
    multiple=True,
    help="Only entries on this Timetrap sheet (repeatable)",
)
@click.option(
    "--dry-run",
    is_flag=True,
    default=False,
    help="Show what would be uploaded without recording anything",
)
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
@click.option("--debug", is_flag=True, default=False, help="Show full stack traces")
def upload(
    start_date: Optional[dt.date],
    end_date: Optional[dt.date],
    sheets: Tuple[str, ...],
    dry_run: bool,
    database: Optional[str],
    config_file: Optional[str],
    debug: bool,
):
    """Upload Timetrap entries to WorkflowMax.

    Entries are totalled per sheet and day. Days that already have a
    WorkflowMax time entry for the sheet's task are skipped, so the command
    is safe to run repeatedly.

    Example:
        wfm-sync upload
        wfm-sync upload --start 2024-01-01 --end 2024-01-31
        wfm-sync upload --sheet client-a --dry-run
    """
    with with_error_handling(debug):
        if start_date and end_date and start_date > end_date:
            raise ConfigurationError(
                "--start must be before or equal to --end",
                f"Got {start_date} to {end_date}",
            )

        stages = [
            "Loading configuration",
            "Reading Timetrap entries",
            "Reconciling with WorkflowMax",
            "Complete",
        ]
        progress = StageProgress(stages)

        # Stage 1: Settings and sheet mapping
        progress.begin()
        settings = get_config()
        mapping = load_billing_mapping(
            config_file or settings.timetrap_config_file,
            staff_email_override=settings.wfm_staff_email,
        )
        progress.done(f"{len(mapping)} sheet(s) mapped for {mapping.staff_email}")

        # Stage 2: Timetrap entries
        reader = TimetrapReader(database or settings.timetrap_database_file)
        try:
            entries = reader.read_entries(
                start=start_date, end=end_date, sheets=sheets or None
            )
        except FileNotFoundError as e:
            raise ConfigurationError(
                str(e), "Set TIMETRAP_DATABASE_FILE or pass --database"
            )
        progress.done(f"Read {len(entries)} entries")

        # Stage 3: Reconcile and upload
        client = WorkflowMaxClient.from_config(settings, mapping)
        report = SyncService(client, mapping).run(entries, dry_run=dry_run)
        progress.done(
            f"{len(report.requests)} new day(s), "
            f"{report.already_submitted} already submitted"
        )

        if report.dry_run and report.has_new_entries:
            _print_planned_requests(report)
        _print_summary(report)
