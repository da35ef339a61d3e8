"""CLI commands for the WorkflowMax sync."""
