"""Stage progress output for CLI commands."""

from typing import Callable, List, Optional

import click


class StageProgress:
    """Prints a numbered header for each step of a command.

    Attributes:
        stages: Stage names in the order they run
        position: Index of the running stage; equals len(stages) when done

    Example:
        >>> progress = StageProgress(["Reading entries", "Uploading"])
        >>> progress.begin()
        [1/2] Reading entries
        >>> progress.done("Read 4 entries")
          Read 4 entries
        [2/2] Uploading
    """

    def __init__(self, stages: List[str], echo: Callable[[str], None] = click.echo):
        self.stages = stages
        self.position = 0
        self._echo = echo

    @property
    def complete(self) -> bool:
        """Whether every stage has finished."""
        return self.position >= len(self.stages)

    def header(self) -> str:
        """Header line of the running stage."""
        total = len(self.stages)
        if self.complete:
            return f"[{total}/{total}] Complete"
        return f"[{self.position + 1}/{total}] {self.stages[self.position]}"

    def begin(self) -> None:
        """Print the header of the running stage."""
        self._echo(self.header())

    def done(self, detail: Optional[str] = None) -> None:
        """Finish the running stage and announce the next one.

        Args:
            detail: Optional one-line result of the finished stage
        """
        if detail:
            self._echo(f"  {detail}")
        self.position += 1
        if not self.complete:
            self.begin()
