"""Rich-based output formatting utilities for PathHound CLI commands."""

from typing import Any

from rich.console import Console
from rich.table import Table


class RichOutputFormatter:
    """Terminal status formatter using Rich library.

    Status goes to stderr so stdout stays a clean stream of paths.
    """

    def __init__(self, verbose: bool = False, console: Console | None = None):
        """Initialize Rich output formatter.

        Args:
            verbose: Whether to enable verbose output
            console: Console to write to (default: stderr)
        """
        self.verbose = verbose
        self.console = console or Console(stderr=True)

    def error(self, message: str) -> None:
        """Print an error message."""
        self.console.print(f"[red][ERROR][/red] {message}", style="red")

    def verbose_info(self, message: str) -> None:
        """Print a verbose info message if verbose mode is enabled."""
        if self.verbose:
            self.console.print(f"[cyan][DEBUG][/cyan] {message}")

    def stats_table(self, stats: dict[str, Any], elapsed: float) -> None:
        """Display loading statistics as a table."""
        table = Table(title="Path loading summary", show_header=False)
        table.add_column(style="cyan")
        table.add_column(justify="right")

        table.add_row("Roots", str(stats.get("roots", 0)))
        table.add_row("  via git", str(stats.get("git_roots", 0)))
        table.add_row("  via walk", str(stats.get("walked_roots", 0)))
        if stats.get("failed_roots"):
            table.add_row("  failed", f"[red]{stats['failed_roots']}[/red]")
        table.add_row("Paths", f"[green]{stats.get('paths', 0)}[/green]")
        table.add_row("Batches", str(stats.get("batches", 0)))
        table.add_row("Duplicates skipped", str(stats.get("duplicates", 0)))
        table.add_row("Elapsed", f"{elapsed:.2f}s")

        self.console.print(table)


def format_stats(stats: dict[str, Any]) -> str:
    """Format loading statistics as a single line."""
    return (
        f"{stats.get('paths', 0)} paths, {stats.get('roots', 0)} roots "
        f"({stats.get('git_roots', 0)} git, {stats.get('walked_roots', 0)} walked)"
    )
