"""Output formatting utilities for CLI."""

from typing import List, Sequence

import click


def format_success(message: str) -> str:
    """Format a success message with green color."""
    return click.style(f"✓ {message}", fg="green", bold=True)


def format_error(message: str) -> str:
    """Format an error message with red color."""
    return click.style(f"✗ {message}", fg="red", bold=True)


def format_warning(message: str) -> str:
    """Format a warning message with yellow color."""
    return click.style(f"⚠ {message}", fg="yellow", bold=True)


def format_info(message: str) -> str:
    """Format an info message with blue color."""
    return click.style(f"ℹ {message}", fg="blue")


def _flatten(cell) -> str:
    """Render a cell on one line; multi-line notes are joined with " / "."""
    return " / ".join(str(cell).splitlines())


def _clip(text: str, width: int) -> str:
    if len(text) <= width:
        return text
    return text[: max(width - 3, 0)] + "..."


def format_table(
    headers: Sequence[str], rows: Sequence[Sequence], max_width: int = 60
) -> str:
    """Format data as a plain-text table.

    Columns whose values are all digits (minutes, ids) are right-aligned.
    Cells longer than ``max_width`` are cut and end in "...".

    Args:
        headers: Column headers
        rows: Data rows; cells are converted with str()
        max_width: Maximum width for each column (default: 60)

    Returns:
        Formatted table as a string, or "" without headers

    Example:
        >>> print(format_table(["Date", "Minutes"], [["2024-01-01", 60]]))
        +------------+---------+
        | Date       | Minutes |
        +------------+---------+
        | 2024-01-01 |      60 |
        +------------+---------+
    """
    if not headers:
        return ""

    columns = len(headers)
    cells: List[List[str]] = [
        [_clip(_flatten(cell), max_width) for cell in list(row)[:columns]]
        for row in rows
    ]
    for row in cells:
        row.extend([""] * (columns - len(row)))

    widths = [
        min(max([len(h)] + [len(row[i]) for row in cells]), max_width)
        for i, h in enumerate(headers)
    ]
    numeric = [
        bool(cells) and all(row[i].isdigit() for row in cells if row[i])
        for i in range(columns)
    ]

    def render(values: Sequence[str], align_numbers: bool) -> str:
        parts = []
        for i, value in enumerate(values):
            if align_numbers and numeric[i]:
                parts.append(f" {value:>{widths[i]}} ")
            else:
                parts.append(f" {value:<{widths[i]}} ")
        return "|" + "|".join(parts) + "|"

    separator = "+" + "+".join("-" * (w + 2) for w in widths) + "+"
    lines = [separator, render([_clip(h, max_width) for h in headers], False), separator]
    if cells:
        lines.extend(render(row, True) for row in cells)
        lines.append(separator)
    return "\n".join(lines)
