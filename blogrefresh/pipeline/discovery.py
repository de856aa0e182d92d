"""Discovery job: store the oldest articles from the source blog."""

import asyncio
import time
from typing import Any, Optional

from rich.console import Console
from rich.table import Table

from ..config import SiteConfig
from ..db.articles import ArticleStore
from ..scraping import ARTICLE_PROFILE, ContentExtractor, ListingScraper, RateLimiter
from .models import DiscoveryReport, LinkOutcome, LinkStatus

console = Console()


class DiscoveryJob:
    """Find, scrape and persist new source articles."""

    def __init__(
        self,
        site: SiteConfig,
        store: ArticleStore,
        listing: Optional[ListingScraper] = None,
        extractor: Optional[ContentExtractor] = None,
        article_limiter: Optional[RateLimiter] = None,
    ) -> None:
        """Initialize discovery job."""
        self.site = site
        self.store = store
        self.listing = listing or ListingScraper(site)
        self.extractor = extractor or ContentExtractor(
            ARTICLE_PROFILE.model_copy(
                update={"max_chars": site.max_content_chars, "timeout": site.timeout}
            ),
            default_user_agent=site.user_agent,
        )
        self.article_limiter = article_limiter or RateLimiter(site.article_delay)

    async def run(self, conn: Any) -> DiscoveryReport:
        """Run discovery against an open store connection."""
        start_time = time.time()
        console.print("[bold]Scraping started...[/bold]")

        console.print("[dim]Finding last page of blogs...[/dim]")
        last_page = await self.listing.get_last_page_number()
        console.print(f"Last page found: {last_page}")

        links, pages_fetched = await self.listing.collect_oldest_articles(
            last_page, self.site.articles_to_collect
        )
        console.print(f"\nFound {len(links)} oldest articles to scrape\n")

        report = DiscoveryReport(last_page=last_page, pages_fetched=pages_fetched)

        for link in links:
            if self.store.exists_by_source_url(conn, link.url):
                console.print(f"[yellow]Already exists: {link.title}[/yellow]")
                report.outcomes.append(
                    LinkOutcome(title=link.title, url=link.url, status=LinkStatus.EXISTING)
                )
                continue

            await self.article_limiter.acquire()
            console.print(f"Scraping: {link.title}")
            content = await self.extractor.extract(link.url)

            if not content.text:
                console.print("[yellow]  No content found, skipping...[/yellow]")
                report.outcomes.append(
                    LinkOutcome(
                        title=link.title,
                        url=link.url,
                        status=LinkStatus.EMPTY,
                        error=content.error,
                    )
                )
                continue

            article_id = self.store.create_article(conn, link.title, content.text, link.url)
            console.print(f"[green]  ✓ Saved to database (id {article_id})[/green]")
            report.outcomes.append(
                LinkOutcome(
                    title=link.title,
                    url=link.url,
                    status=LinkStatus.SAVED,
                    article_id=article_id,
                    content_chars=len(content.text),
                )
            )

        report.duration = time.time() - start_time
        return report

    def run_sync(self, conn: Any) -> DiscoveryReport:
        """Synchronous wrapper for run."""
        return asyncio.run(self.run(conn))


def print_discovery_summary(report: DiscoveryReport) -> None:
    """Print summary of a discovery run."""
    table = Table(title="Discovery Summary")
    table.add_column("Title", style="cyan")
    table.add_column("Status", style="bold")
    table.add_column("Details", style="dim")

    styles = {
        LinkStatus.SAVED: "[green]saved[/green]",
        LinkStatus.EXISTING: "[yellow]exists[/yellow]",
        LinkStatus.EMPTY: "[red]empty[/red]",
    }
    for outcome in report.outcomes:
        if outcome.status == LinkStatus.SAVED:
            details = f"id {outcome.article_id}, {outcome.content_chars} chars"
        else:
            details = outcome.error or outcome.url
        table.add_row(outcome.title, styles[outcome.status], details)

    console.print("\n")
    console.print(table)
    console.print(
        f"  Pages fetched: {report.pages_fetched} (last page {report.last_page})\n"
        f"  Saved: [green]{report.count(LinkStatus.SAVED)}[/green]  "
        f"Existing: [yellow]{report.count(LinkStatus.EXISTING)}[/yellow]  "
        f"Empty: [red]{report.count(LinkStatus.EMPTY)}[/red]\n"
        f"  Duration: {report.duration:.1f}s"
    )
