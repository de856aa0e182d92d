"""Discover command implementation."""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from ..db import ArticleStore, close_connection_pool, get_connection
from ..pipeline import DiscoveryJob, print_discovery_summary
from .common import config_option, load_cli_config, require_database

console = Console()


def discover_command(
    config_path: Optional[Path] = config_option(),
    count: Optional[int] = typer.Option(
        None,
        "--count",
        "-n",
        help="Number of oldest articles to collect",
        min=1,
    ),
) -> None:
    """Scrape the oldest blog articles and store the new ones."""
    config = load_cli_config(config_path)
    site = config.config.site
    if count is not None:
        site = site.model_copy(update={"articles_to_collect": count})

    try:
        require_database(config)
        with get_connection(config.get_db_config()) as conn:
            job = DiscoveryJob(site, ArticleStore())
            report = job.run_sync(conn)
        print_discovery_summary(report)
        console.print("[green]Scraping completed![/green]")
    except typer.Exit:
        raise
    except KeyboardInterrupt:
        console.print("\n[yellow]Discovery interrupted by user[/yellow]")
        raise typer.Exit(1)
    except Exception as e:
        console.print(f"[red]Discovery failed: {e}[/red]")
        raise typer.Exit(1)
    finally:
        close_connection_pool()
