"""Ingest command implementation."""

from pathlib import Path
from typing import Optional

import typer

from ..config import Config
from ..errors import StoreUnavailableError
from ..pipeline import run_ingest_sync
from .output import configure_logging, console, print_diagnostics, print_summary


def ingest_command(
    source_id: Optional[int] = typer.Option(
        None,
        "--source-id",
        "-s",
        help="Only ingest this source",
    ),
    limit: Optional[int] = typer.Option(
        None,
        "--limit",
        "-n",
        min=1,
        help="Maximum items per source. Default: from config (150)",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Print per-source diagnostics and debug logging",
    ),
    config_path: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to config.yaml",
    ),
) -> None:
    """Run one ingest batch across all allowed sources."""
    configure_logging(verbose)

    try:
        config = Config(config_path)
        report = run_ingest_sync(config, source_id=source_id, limit=limit)
    except StoreUnavailableError as e:
        console.print(f"[red]❌ Ingest aborted: {e}[/red]")
        raise typer.Exit(1)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]❌ {e}[/red]")
        raise typer.Exit(1)
    except KeyboardInterrupt:
        console.print("\n[yellow]Ingest interrupted by user[/yellow]")
        raise typer.Exit(1)

    if verbose:
        print_diagnostics(report)
    print_summary(report)
