"""Rich console event log for sync runs."""

from typing import Optional

from rich.console import Console
from rich.markup import escape


class SyncLogger:
    """Rich console output for sync operations.

    Shared by the scanner, snapshot reader and executor; safe to call from
    worker threads since rich serializes console writes.
    """

    def __init__(self, console: Optional[Console] = None, verbose: bool = False, quiet: bool = False):
        """Initialize logger.

        Args:
            console: Rich Console instance
            verbose: Enable debug messages
            quiet: Suppress everything except errors
        """
        self.console = console or Console(stderr=True)
        self.verbose = verbose
        self.quiet = quiet

    def debug(self, message: str) -> None:
        """Dim debug message, shown only in verbose mode."""
        if self.verbose and not self.quiet:
            self.console.print(f"[dim]· {escape(message)}[/dim]")

    def info(self, message: str) -> None:
        """Blue info message."""
        if not self.quiet:
            self.console.print(f"[blue]ℹ[/blue] {escape(message)}")

    def success(self, message: str) -> None:
        """Green success message."""
        if not self.quiet:
            self.console.print(f"[green]✓[/green] {escape(message)}")

    def warning(self, message: str) -> None:
        """Yellow warning message."""
        if not self.quiet:
            self.console.print(f"[yellow]⚠[/yellow] {escape(message)}")

    def error(self, message: str) -> None:
        """Red error message."""
        self.console.print(f"[red]✗[/red] {escape(message)}")


def null_logger() -> SyncLogger:
    """Logger that only reports errors."""
    return SyncLogger(quiet=True)
