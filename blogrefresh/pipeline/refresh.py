"""Refresh job: rewrite stored articles using web references."""

import asyncio
import time
from typing import Any, List, Optional

from rich.console import Console
from rich.table import Table

from ..config import RefreshConfig
from ..db.articles import ArticleStore
from ..generation import LLMProvider, append_references
from ..models import Article
from ..scraping import REFERENCE_PROFILE, ContentExtractor, RateLimiter, ReferenceSearcher
from ..scraping.models import ReferenceArticle
from .models import RecordOutcome, RefreshReport, RefreshState

console = Console()


class RefreshJob:
    """Drive each candidate record through search, scrape, rewrite and save."""

    def __init__(
        self,
        refresh: RefreshConfig,
        store: ArticleStore,
        searcher: ReferenceSearcher,
        llm_provider: LLMProvider,
        extractor: Optional[ContentExtractor] = None,
        reference_limiter: Optional[RateLimiter] = None,
        record_limiter: Optional[RateLimiter] = None,
    ) -> None:
        """Initialize refresh job."""
        self.refresh = refresh
        self.store = store
        self.searcher = searcher
        self.llm_provider = llm_provider
        self.extractor = extractor or ContentExtractor(
            REFERENCE_PROFILE.model_copy(
                update={
                    "max_chars": refresh.reference_max_chars,
                    "timeout": refresh.reference_timeout,
                }
            )
        )
        self.reference_limiter = reference_limiter or RateLimiter(refresh.reference_delay)
        self.record_limiter = record_limiter or RateLimiter(refresh.record_delay)

    async def scrape_references(self, links: List[str]) -> List[ReferenceArticle]:
        """Scrape reference pages one at a time, keeping those with text."""
        references = []
        for url in links:
            await self.reference_limiter.acquire()
            console.print(f"[dim]   Scraping: {url[:60]}...[/dim]")
            content = await self.extractor.extract(url)
            if content.text:
                references.append(ReferenceArticle(url=url, content=content.text))
                console.print(f"[green]   ✓ Got {len(content.text)} chars[/green]")
            else:
                console.print(f"[yellow]   ✗ Failed to scrape ({content.error})[/yellow]")
        return references

    async def process_record(
        self,
        conn: Any,
        article: Article,
        dry_run: bool = False,
    ) -> RecordOutcome:
        """Run one record to SAVED or SKIPPED."""
        outcome = RecordOutcome(article_id=article.id, title=article.title, dry_run=dry_run)

        if article.is_refreshed:
            outcome.skip("Already refreshed")
            return outcome

        # Pause after the previous saved record before any new outbound call
        await self.record_limiter.wait()

        outcome.advance(RefreshState.SEARCHING)
        console.print("1. Searching the web...")
        search = await self.searcher.search(article.title)
        if not search.links:
            console.print("[yellow]   No search results found, skipping...[/yellow]")
            outcome.skip(search.error or "No usable search results")
            return outcome

        for i, link in enumerate(search.links, start=1):
            console.print(f"   {i}. {link}")

        outcome.advance(RefreshState.SCRAPING_REFERENCES)
        console.print("2. Scraping reference articles...")
        references = await self.scrape_references(search.links)
        if not references:
            console.print("[yellow]   No reference content available, skipping...[/yellow]")
            outcome.skip("No reference content scraped")
            return outcome

        outcome.advance(RefreshState.REWRITING)
        console.print("3. Rewriting article...")
        result = await asyncio.to_thread(self.llm_provider.rewrite_article, article.original_content, references)
        if not result.content:
            console.print("[yellow]   LLM returned empty response, skipping...[/yellow]")
            outcome.skip(result.error or "Empty rewrite")
            return outcome

        reference_urls = [ref.url for ref in references]
        updated_content = append_references(result.content, reference_urls)
        outcome.references = reference_urls
        outcome.content_chars = len(result.content)
        console.print(f"[green]   ✓ Generated {len(result.content)} chars[/green]")

        if dry_run:
            outcome.skip("Dry run, not saved")
            return outcome

        console.print("4. Saving to database...")
        if not self.store.save_refresh(conn, article.id, updated_content, reference_urls):
            outcome.skip("Record was refreshed by another run")
            return outcome

        outcome.advance(RefreshState.SAVED)
        self.record_limiter.mark()
        console.print("[green]   ✓ Saved successfully![/green]")
        return outcome

    async def run(
        self,
        conn: Any,
        limit: Optional[int] = None,
        dry_run: bool = False,
    ) -> RefreshReport:
        """Process every refresh candidate in order."""
        start_time = time.time()
        candidates = self.store.find_refresh_candidates(conn, limit=limit)
        report = RefreshReport(candidates=len(candidates))

        if not candidates:
            console.print("[yellow]No articles to update. All articles already have updated content.[/yellow]")
            return report

        console.print(f"Found {len(candidates)} articles to update\n")

        for article in candidates:
            console.rule(f"Processing: {article.title}")
            outcome = await self.process_record(conn, article, dry_run=dry_run)
            report.outcomes.append(outcome)

        report.tokens_used = self.llm_provider.get_usage_stats().get("total_tokens", 0)
        report.duration = time.time() - start_time
        return report

    def run_sync(
        self,
        conn: Any,
        limit: Optional[int] = None,
        dry_run: bool = False,
    ) -> RefreshReport:
        """Synchronous wrapper for run."""
        return asyncio.run(self.run(conn, limit=limit, dry_run=dry_run))


def print_refresh_summary(report: RefreshReport) -> None:
    """Print summary of a refresh run."""
    if not report.outcomes:
        return

    table = Table(title="Refresh Summary")
    table.add_column("ID", style="dim")
    table.add_column("Title", style="cyan")
    table.add_column("State", style="bold")
    table.add_column("Details", style="dim")

    for outcome in report.outcomes:
        if outcome.state == RefreshState.SAVED:
            state = "[green]saved[/green]"
            details = f"{outcome.content_chars} chars, {len(outcome.references)} references"
        else:
            state = f"[yellow]skipped[/yellow] ({outcome.skipped_from.value})"
            details = outcome.reason or ""
        table.add_row(str(outcome.article_id), outcome.title, state, details)

    console.print("\n")
    console.print(table)
    console.print(
        f"  Candidates: {report.candidates}  "
        f"Saved: [green]{report.count(RefreshState.SAVED)}[/green]  "
        f"Skipped: [yellow]{report.count(RefreshState.SKIPPED)}[/yellow]\n"
        f"  Tokens used: {report.tokens_used}  Duration: {report.duration:.1f}s"
    )
