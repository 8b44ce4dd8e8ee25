"""Console output and logging setup shared by CLI commands."""

import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from ..pipeline import BatchReport, SourceState

console = Console()


def configure_logging(verbose: bool = False) -> None:
    """Route library logging through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=verbose)],
        force=True,
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.DEBUG if verbose else logging.WARNING)


def print_summary(report: BatchReport) -> None:
    """Aggregate counters; printed in every mode."""
    counts = report.summary()
    console.print(
        Panel(
            f"Sources: {counts['sources']}\n"
            f"Discovered: {counts['discovered']}\n"
            f"Inserted: [green]{counts['inserted']}[/green]\n"
            f"Updated: {counts['updated']}\n"
            f"Skipped: {counts['skipped']}\n"
            f"Errors: [red]{counts['errors']}[/red]",
            title="Ingest Summary",
            style="bold",
        )
    )


def print_diagnostics(report: BatchReport) -> None:
    """Per-source table and full error list (verbose mode)."""
    table = Table(title="Sources")
    table.add_column("ID", justify="right", style="dim")
    table.add_column("Source", style="cyan")
    table.add_column("State")
    table.add_column("Mode")
    table.add_column("Seen", justify="right")
    table.add_column("Added", justify="right", style="green")
    table.add_column("Skipped", justify="right")
    table.add_column("Rejected", justify="right")
    table.add_column("Resolved URL", overflow="fold")

    for source in report.sources:
        state = source.state.value
        if source.state == SourceState.FETCH_FAILED:
            state = f"[red]{state}[/red]"
        resolved = source.resolved_url or "-"
        if source.healed:
            resolved += " [yellow](healed)[/yellow]"
        table.add_row(
            str(source.source_id or ""),
            source.name,
            state,
            source.mode or "-",
            str(source.seen),
            str(source.added),
            str(source.skipped),
            str(source.rejected),
            resolved,
        )
    console.print(table)

    for source in report.sources:
        if source.attempted and source.state == SourceState.FETCH_FAILED:
            console.print(f"[dim]{source.name} tried:[/dim] " + ", ".join(source.attempted))

    if report.errors:
        console.print("\n[bold red]Errors:[/bold red]")
        for error in report.errors:
            console.print(f"  - {error}")
