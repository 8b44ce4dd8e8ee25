"""Main CLI application."""

import typer
from dotenv import load_dotenv

# Load .env file if it exists
load_dotenv()

from .ingest import ingest_command
from .init import init_command

app = typer.Typer(
    name="fantasywire",
    help="FantasyWire - NFL fantasy news ingestion and classification",
    no_args_is_help=True,
)

# Register commands
app.command("init")(init_command)
app.command("ingest")(ingest_command)


if __name__ == "__main__":
    app()
