"""Helpers shared by CLI commands."""

from pathlib import Path
from typing import Any, Optional

import typer
from rich.console import Console

from ..config import Config
from ..db import validate_connection

console = Console()


def config_option() -> Any:
    """Shared --config option."""
    return typer.Option(
        None,
        "--config",
        "-c",
        help="Path to config.yaml (default: ~/.config/blogrefresh/config.yaml)",
    )


def load_cli_config(config_path: Optional[Path]) -> Config:
    """Load configuration, exiting on an invalid file."""
    config = Config(config_path)
    try:
        config.config
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    return config


def require_database(config: Config) -> None:
    """Exit with an error unless the database is reachable."""
    console.print("[dim]Checking database connection...[/dim]")
    if not validate_connection(config.get_db_config()):
        console.print("[red]❌ Database connection failed![/red]")
        console.print("Please check your database configuration and ensure Postgres is running.")
        raise typer.Exit(1)
    console.print("[dim]DB connected[/dim]\n")
