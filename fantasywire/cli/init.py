"""Init command implementation."""

from pathlib import Path

import typer
from rich.panel import Panel

from ..config import ConfigModel, save_config
from ..db import init_database, validate_connection
from .output import configure_logging, console


def init_command(
    config_dir: Path = typer.Option(
        Path.home() / ".config" / "fantasywire",
        "--config-dir",
        "-c",
        help="Configuration directory",
    ),
    db_host: str = typer.Option("localhost", "--db-host", help="Postgres host"),
    db_port: int = typer.Option(5432, "--db-port", help="Postgres port"),
    db_name: str = typer.Option("fantasywire", "--db-name", help="Database name"),
    db_user: str = typer.Option("fantasywire", "--db-user", help="Database user"),
) -> None:
    """Write a default configuration and create the database schema."""
    configure_logging()
    console.print(Panel.fit("🏈 FantasyWire - Initialization", style="bold blue"))

    # Create configuration directory
    config_dir.mkdir(parents=True, exist_ok=True)
    config_path = config_dir / "config.yaml"

    # Create default configuration
    config = ConfigModel(
        postgres={
            "host": db_host,
            "port": db_port,
            "database": db_name,
            "user": db_user,
            "password_env": "FANTASYWIRE_DB_PASSWORD",
        },
    )

    # Save configuration
    save_config(config, config_path)
    console.print(f"✅ Created config: {config_path}")

    # Validate database connection
    console.print("\n[bold]Testing database connection...[/bold]")
    db_config = config.postgres.model_dump()

    if not validate_connection(db_config):
        console.print(
            "[red]❌ Database connection failed![/red]\n"
            "Please ensure Postgres is running and credentials are correct.\n"
            "Set the password via environment variable: "
            "[bold]export FANTASYWIRE_DB_PASSWORD=your_password[/bold]"
        )
        raise typer.Exit(1)

    console.print("✅ Database connection successful")

    # Initialize database schema
    console.print("\n[bold]Initializing database schema...[/bold]")
    try:
        init_database(db_config)
        console.print("✅ Database schema initialized")
    except Exception as e:
        console.print(f"[red]❌ Failed to initialize database: {e}[/red]")
        raise typer.Exit(1)

    console.print(
        Panel(
            f"[green]✅ FantasyWire initialized successfully![/green]\n\n"
            f"Configuration: {config_path}\n\n"
            f"Next steps:\n"
            f"1. Set database password: [bold]export FANTASYWIRE_DB_PASSWORD=your_password[/bold]\n"
            f"2. Register sources in the [bold]sources[/bold] table\n"
            f"3. Run: [bold]fantasywire ingest[/bold]",
            style="green",
        )
    )
