"""Refresh command implementation."""

from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

import typer
from rich.console import Console

from ..config import Config
from ..db import ArticleStore, close_connection_pool, get_connection
from ..generation import create_llm_provider
from ..pipeline import RefreshJob, print_refresh_summary
from ..scraping import ReferenceSearcher
from .common import config_option, load_cli_config, require_database

console = Console()


def build_searcher(config: Config) -> ReferenceSearcher:
    """Reference searcher that never returns pages from the source blog."""
    search_config = config.get_search_config()
    blocked = list(search_config["blocked_domains"])
    site_host = (urlparse(config.config.site.base_url).hostname or "").lower()
    if site_host.startswith("www."):
        site_host = site_host[4:]
    if site_host and site_host not in blocked:
        blocked.insert(0, site_host)

    return ReferenceSearcher(
        api_key=search_config.get("api_key"),
        endpoint=search_config["endpoint"],
        num_results=search_config["num_results"],
        max_references=search_config["max_references"],
        query_suffix=search_config["query_suffix"],
        blocked_domains=blocked,
        timeout=search_config["timeout"],
    )


def refresh_command(
    config_path: Optional[Path] = config_option(),
    limit: Optional[int] = typer.Option(
        None,
        "--limit",
        "-l",
        help="Maximum number of articles to process",
        min=1,
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="Search, scrape and rewrite without saving",
    ),
) -> None:
    """Rewrite stored articles that have no updated content yet."""
    config = load_cli_config(config_path)

    try:
        llm_provider = create_llm_provider(
            config.get_llm_config(), config.config.refresh.model_dump()
        )
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    searcher = build_searcher(config)
    if not searcher.api_key:
        console.print(
            f"[yellow]Warning: no search API key ({config.config.search.api_key_env}); "
            f"every article will be skipped.[/yellow]"
        )

    try:
        require_database(config)
        with get_connection(config.get_db_config()) as conn:
            job = RefreshJob(config.config.refresh, ArticleStore(), searcher, llm_provider)
            report = job.run_sync(conn, limit=limit, dry_run=dry_run)
        print_refresh_summary(report)
        console.print("[green]All articles processed![/green]")
    except typer.Exit:
        raise
    except KeyboardInterrupt:
        console.print("\n[yellow]Refresh interrupted by user[/yellow]")
        raise typer.Exit(1)
    except Exception as e:
        console.print(f"[red]Refresh failed: {e}[/red]")
        raise typer.Exit(1)
    finally:
        close_connection_pool()
