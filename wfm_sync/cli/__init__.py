"""WorkflowMax Sync CLI.

This module provides a command-line interface for uploading Timetrap time
entries to WorkflowMax and for checking the sheet mapping configuration.
"""

import click

from wfm_sync.cli.commands.check_config import check_config
from wfm_sync.cli.commands.upload import upload
from wfm_sync.config.logging_config import LoggingConfig, configure_logging

__version__ = "1.0.0"


@click.group(help="WFM Sync CLI - Record Timetrap time entries in WorkflowMax")
@click.version_option(version=__version__)
def cli():
    """WFM Sync CLI main entry point."""
    try:
        logging_config = LoggingConfig.from_env()
    except ValueError as e:
        raise click.ClickException(str(e))
    configure_logging(logging_config)


# Register commands
cli.add_command(upload)
cli.add_command(check_config)


def main():
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
