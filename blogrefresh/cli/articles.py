"""Read-only article commands."""

from pathlib import Path
from typing import Any, Callable, Optional

import pendulum
import typer
from rich.console import Console
from rich.markup import escape
from rich.markdown import Markdown
from rich.panel import Panel
from rich.table import Table

from ..db import ArticleStore, close_connection_pool, get_connection
from ..rendering import render_markdown, save_articles_page, strip_markdown
from .common import config_option, load_cli_config, require_database

console = Console()
articles_app = typer.Typer(help="Browse stored articles")


def _read(config_path: Optional[Path], query: Callable[[ArticleStore, Any], Any]) -> Any:
    config = load_cli_config(config_path)
    try:
        require_database(config)
        with get_connection(config.get_db_config()) as conn:
            return query(ArticleStore(), conn)
    finally:
        close_connection_pool()


@articles_app.command("list")
def articles_list(
    config_path: Optional[Path] = config_option(),
    updated_only: bool = typer.Option(
        False,
        "--updated-only",
        help="Only show articles that have been refreshed",
    ),
) -> None:
    """List all stored articles."""
    articles = _read(config_path, lambda store, conn: store.list_articles(conn))
    if updated_only:
        articles = [a for a in articles if a.is_refreshed]

    if not articles:
        console.print("[yellow]No articles found. Run 'blogrefresh discover' first.[/yellow]")
        return

    table = Table(title="Articles")
    table.add_column("ID", style="dim")
    table.add_column("Title", style="cyan")
    table.add_column("Updated", style="green")
    table.add_column("Refs", style="magenta")
    table.add_column("Added", style="yellow")
    table.add_column("Preview", style="dim")

    for article in articles:
        added = ""
        if article.created_at:
            added = pendulum.instance(article.created_at).diff_for_humans()
        table.add_row(
            str(article.id),
            article.title,
            "✓" if article.is_refreshed else "✗",
            str(len(article.references)),
            added,
            strip_markdown(article.original_content, length=80),
        )

    console.print(table)


@articles_app.command("show")
def articles_show(
    article_id: int = typer.Argument(..., help="Article ID"),
    config_path: Optional[Path] = config_option(),
    updated: bool = typer.Option(
        True,
        "--updated/--original",
        help="Show the updated version when one exists",
    ),
    as_html: bool = typer.Option(
        False,
        "--html",
        help="Print rendered HTML instead of formatted text",
    ),
) -> None:
    """Show one article, original or updated."""
    article = _read(config_path, lambda store, conn: store.get_article(conn, article_id))
    if article is None:
        console.print(f"[red]Article {article_id} not found.[/red]")
        raise typer.Exit(1)

    use_updated = updated and article.is_refreshed
    if updated and not article.is_refreshed:
        console.print("[yellow]No updated version yet, showing original.[/yellow]")
    content = article.updated_content if use_updated else article.original_content

    if as_html:
        console.print(render_markdown(content), markup=False, highlight=False, soft_wrap=True)
        return

    version = "Updated" if use_updated else "Original"
    console.print(Panel(f"[bold]{escape(article.title)}[/bold]\n{escape(article.source_url)}", subtitle=version))
    console.print(Markdown(content))


@articles_app.command("export")
def articles_export(
    output: Path = typer.Argument(..., help="HTML file to write"),
    config_path: Optional[Path] = config_option(),
    updated: bool = typer.Option(
        False,
        "--updated",
        help="Use updated content where available",
    ),
) -> None:
    """Export all articles as a single HTML page."""
    articles = _read(config_path, lambda store, conn: store.list_articles(conn))
    save_articles_page(articles, output, show_updated=updated)
    console.print(f"✅ Wrote {len(articles)} articles to {output}")
