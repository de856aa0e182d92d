"""Init command implementation."""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel

from ..config import DEFAULT_CONFIG_PATH, Config, ConfigModel, save_config
from ..db import close_connection_pool, init_database, validate_connection

console = Console()


def init_command(
    config_path: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Where to write config.yaml",
    ),
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Overwrite an existing config file",
    ),
) -> None:
    """Write a default configuration and create the database schema."""
    config_path = config_path or DEFAULT_CONFIG_PATH

    if config_path.exists() and not force:
        console.print(f"[yellow]Config already exists at {config_path} (use --force to overwrite)[/yellow]")
    else:
        save_config(ConfigModel(), config_path)
        console.print(f"✅ Configuration written to {config_path}")

    config = Config(config_path)
    db_config = config.get_db_config()

    console.print("\n[bold]Checking database connection...[/bold]")
    try:
        if not validate_connection(db_config):
            console.print("[red]❌ Database connection failed[/red]")
            raise typer.Exit(1)
        console.print("✅ Database connection successful")

        console.print("\n[bold]Initializing database schema...[/bold]")
        try:
            init_database(db_config)
            console.print("✅ Database schema initialized")
        except Exception as e:
            console.print(f"[red]❌ Failed to initialize database: {e}[/red]")
            raise typer.Exit(1)
    finally:
        close_connection_pool()

    console.print(
        Panel(
            f"[green]✅ blogrefresh initialized successfully![/green]\n\n"
            f"Configuration: {config_path}\n\n"
            f"Next steps:\n"
            f"1. Set search API key: [bold]export SERPER_API_KEY=your_key[/bold]\n"
            f"2. Set LLM API key: [bold]export GROQ_API_KEY=your_key[/bold]\n"
            f"3. Run: [bold]blogrefresh discover[/bold], then [bold]blogrefresh refresh[/bold]",
            style="green",
        )
    )
