# VSSYNC Console Output
# Rich-based console output for plans and run summaries

from rich.console import Console as RichConsole
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from vssync.sync.engine import SyncResult
from vssync.sync.executor import Phase, PhaseResult
from vssync.sync.plan import Plan

PHASE_LABELS = {
    Phase.DELETE: "Unlink + delete",
    Phase.CREATE: "Upload + link",
    Phase.LINK: "Link only",
}


class Console:
    """
    Console output manager using Rich.

    Provides formatted output for sync operations.
    """

    def __init__(self, *, verbose: bool = False, colored: bool = True):
        """
        Initialize console.

        Args:
            verbose: Enable verbose output.
            colored: Enable colored output.
        """
        self.verbose = verbose
        self._console = RichConsole(no_color=not colored)

    @property
    def colored(self) -> bool:
        """Whether output carries colors."""
        return not self._console.no_color

    @colored.setter
    def colored(self, value: bool) -> None:
        self._console.no_color = not value

    def print(self, *args, **kwargs) -> None:
        """Print to console."""
        self._console.print(*args, **kwargs)

    def print_error(self, message: str) -> None:
        """Print error message."""
        self._console.print(f"[red]Error:[/red] {escape(message)}")

    def print_warning(self, message: str) -> None:
        """Print warning message."""
        self._console.print(f"[yellow]Warning:[/yellow] {escape(message)}")

    def print_success(self, message: str) -> None:
        """Print success message."""
        self._console.print(f"[green]{escape(message)}[/green]")

    def print_info(self, message: str) -> None:
        """Print info message."""
        self._console.print(f"[blue]{escape(message)}[/blue]")

    def print_plan(self, plan: Plan, *, dry_run: bool = False) -> None:
        """
        Print planned operations as a table.

        Args:
            plan: Plan to display.
            dry_run: Whether the plan will not be applied (changes title).
        """
        if plan.is_empty:
            self._console.print("[green]✓[/green] Everything is in sync")
            return

        title = "Planned Changes (dry-run)" if dry_run else "Changes to Apply"
        table = Table(title=title, show_header=True, header_style="bold")
        table.add_column("Action", style="magenta")
        table.add_column("Name", style="cyan")
        table.add_column("Detail", style="dim")

        for entry in plan.to_delete:
            detail = "linked" if entry.linked else "unlinked"
            table.add_row("[red]delete[/red]", escape(entry.key), f"{entry.object.id} ({detail})")
        for local in plan.to_create_and_link:
            table.add_row("[green]upload[/green]", escape(local.key), escape(str(local.absolute_path)))
        for link in plan.to_link_only:
            table.add_row("[yellow]link[/yellow]", escape(link.key), link.object_id)

        self._console.print()
        self._console.print(table)
        self._console.print()

    def print_sync_result(self, result: SyncResult) -> None:
        """
        Print per-phase counts and the overall status.

        Args:
            result: Sync result to display.
        """
        self._console.print()

        if result.execution is not None:
            table = Table(title="Phases", show_header=True, header_style="bold")
            table.add_column("Phase")
            table.add_column("Attempted", justify="right")
            table.add_column("Succeeded", justify="right", style="green")
            table.add_column("Failed", justify="right")

            for phase in result.execution.phases.values():
                failed = f"[red]{phase.failed}[/red]" if phase.failed else "0"
                table.add_row(PHASE_LABELS[phase.phase], str(phase.attempted), str(phase.succeeded), failed)

            self._console.print(table)
            for phase in result.execution.phases.values():
                self._print_items(phase)

        for path, error in result.scan.errors:
            self._console.print(f"    [red]✗[/red] {escape(str(path))}: {escape(error)}")

        lines = [
            f"Namespace: {escape(result.namespace)}",
            f"Local files: {result.scan.total} ({len(result.scan.skipped)} ignored, {len(result.scan.errors)} errors)",
            f"Remote files: {len(result.snapshot.objects)}",
        ]
        if result.index is not None:
            lines.append(f"Vector store: {escape(result.index.id)}")

        if result.aborted:
            status, border = f"[red]Sync aborted[/red]\n{escape(result.error or '')}", "red"
        elif result.dry_run:
            status, border = f"[blue]Dry run completed[/blue] - {result.plan.total} planned operations", "blue"
        elif not result.success:
            status, border = "[red]Sync completed with errors[/red]", "red"
        elif result.has_item_failures:
            status, border = "[yellow]Sync completed with item failures[/yellow]", "yellow"
        else:
            status, border = "[green]Sync completed[/green]", "green"

        self._console.print(Panel("\n".join([status, *lines]), title="Summary", border_style=border))

    def _print_items(self, phase: PhaseResult) -> None:
        """Print failed items of a phase, and successful ones when verbose."""
        for item in phase.results:
            if item.success:
                if self.verbose:
                    self._console.print(f"    [green]✓[/green] {escape(item.key)} ({item.action.value})")
                continue
            self._console.print(
                f"    [red]✗[/red] {escape(item.key)} ({item.action.value}): {escape(item.error or 'unknown error')}"
            )


def create_console(*, verbose: bool = False, colored: bool = True) -> Console:
    """
    Create a console instance.

    Args:
        verbose: Enable verbose output.
        colored: Enable colored output.

    Returns:
        Console instance.
    """
    return Console(verbose=verbose, colored=colored)
