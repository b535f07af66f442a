"""Rich console output for the CLI."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.table import Table

if TYPE_CHECKING:
    from treecopy.config import TreecopyConfig
    from treecopy.types import CopyOutcome


class ConsoleOutput:
    """Formats CLI messages and copy summaries."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def show_outcome(self, outcome: CopyOutcome, show_skipped: bool = False) -> None:
        """Display a summary table for a finished copy.

        Args:
            outcome: Result of the copy.
            show_skipped: Also list each skipped entry with its reason.
        """
        table = Table(title="Copy Summary")
        table.add_column("Metric", style="cyan")
        table.add_column("Value", justify="right")
        table.add_row("Files copied", str(outcome.files_copied))
        table.add_row("Bytes copied", f"{outcome.bytes_copied:,}")
        table.add_row("Directories created", str(outcome.directories_created))
        table.add_row("Symlinks created", str(outcome.symlinks_created))
        table.add_row("Skipped", str(len(outcome.skipped)))
        table.add_row("Errors", str(outcome.error_count))
        self.console.print(table)

        if show_skipped:
            for skipped in outcome.skipped:
                self.console.print(f"  [dim]- {escape(str(skipped.path))} ({skipped.reason})[/dim]")

        for error in outcome.errors:
            self.show_error(escape(str(error)))

    def show_config(self, config: TreecopyConfig, config_file: Path) -> None:
        """Display stored default options."""
        self.console.print("\n[bold]Configuration[/bold]")
        self.console.print(f"  Config file: {config_file}")
        for key in config.option_keys():
            value = getattr(config, key)
            value = getattr(value, "value", value)
            self.console.print(f"  {key.replace('_', '-')}: {value}")

    def show_success(self, message: str) -> None:
        """Show success message."""
        self.console.print(f"[green]✓[/green] {message}")

    def show_error(self, message: str) -> None:
        """Show error message."""
        self.console.print(f"[red]✗[/red] {message}")

    def show_warning(self, message: str) -> None:
        """Show warning message."""
        self.console.print(f"[yellow]![/yellow] {message}")
