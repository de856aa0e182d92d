"""Listing page discovery and oldest-article selection."""

import re
from typing import AsyncIterable, AsyncIterator, Iterable, List, Optional, Sequence, Tuple
from urllib.parse import urljoin, urlparse

import httpx
from bs4 import BeautifulSoup
from rich.console import Console

from ..config import SiteConfig
from .models import ArticleLink
from .ratelimit import RateLimiter

console = Console()

EXCLUDED_PATH_PARTS = ("/tag/", "/category/")


def merge_unique_links(
    collected: Sequence[ArticleLink],
    page_links: Iterable[ArticleLink],
) -> Tuple[ArticleLink, ...]:
    """Append page links whose URL has not been collected yet."""
    seen = {link.url for link in collected}
    merged = list(collected)
    for link in page_links:
        if link.url not in seen:
            seen.add(link.url)
            merged.append(link)
    return tuple(merged)


async def select_oldest_articles(
    pages: AsyncIterable[Sequence[ArticleLink]],
    limit: int = 5,
) -> List[ArticleLink]:
    """
    Fold page results (oldest page first) into at most ``limit`` unique links.

    Pages are consumed lazily and iteration stops as soon as ``limit`` links
    have been collected, so no further page is fetched.
    """
    collected: Tuple[ArticleLink, ...] = ()
    async for page_links in pages:
        collected = merge_unique_links(collected, page_links)
        if len(collected) >= limit:
            break
    return list(collected[:limit])


class ListingScraper:
    """Read the paginated blog listing."""

    def __init__(
        self,
        site: SiteConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        page_limiter: Optional[RateLimiter] = None,
    ) -> None:
        """Initialize listing scraper."""
        self.site = site
        self.transport = transport
        self.page_limiter = page_limiter or RateLimiter(site.page_delay)

        parsed = urlparse(site.base_url)
        self._host = (parsed.hostname or "").lower()
        self._base_path = parsed.path or "/"
        self._page_pattern = re.compile(re.escape(self._base_path) + r"page/(\d+)")

    def page_url(self, page: int) -> str:
        """URL of a listing page; page 1 is the base URL."""
        if page <= 1:
            return self.site.base_url
        return f"{self.site.base_url}page/{page}/"

    async def _fetch_html(self, url: str) -> str:
        async with httpx.AsyncClient(
            timeout=self.site.timeout,
            follow_redirects=True,
            headers={"User-Agent": self.site.user_agent},
            transport=self.transport,
        ) as client:
            response = await client.get(url)
            response.raise_for_status()
            return response.text

    def parse_last_page(self, html: str) -> Optional[int]:
        """Highest page number referenced by pagination links, if any."""
        soup = BeautifulSoup(html, "html.parser")
        pages = []
        for anchor in soup.find_all("a", href=True):
            match = self._page_pattern.search(anchor["href"])
            if match:
                pages.append(int(match.group(1)))
        return max(pages) if pages else None

    async def get_last_page_number(self) -> int:
        """Find the last listing page, falling back to the configured default."""
        try:
            html = await self._fetch_html(self.site.base_url)
        except Exception as e:
            console.print(f"[red]Error finding last page: {e}[/red]")
            return self.site.default_last_page

        last_page = self.parse_last_page(html)
        if last_page is None:
            console.print(
                f"[yellow]No pagination links found, assuming {self.site.default_last_page} pages[/yellow]"
            )
            return self.site.default_last_page
        return max(1, last_page)

    def is_article_url(self, url: str) -> bool:
        """Same-site article link that isn't a tag or category page."""
        parsed = urlparse(url)
        host = (parsed.hostname or "").lower()
        if host.startswith("www."):
            host = host[4:]
        site_host = self._host[4:] if self._host.startswith("www.") else self._host

        if host != site_host:
            return False
        if not parsed.path.startswith(self._base_path) or parsed.path == self._base_path:
            return False
        if self._page_pattern.match(parsed.path):
            return False
        return not any(part in parsed.path for part in EXCLUDED_PATH_PARTS)

    def parse_article_links(self, html: str, page_url: str) -> List[ArticleLink]:
        """Article links found in h2 headings."""
        soup = BeautifulSoup(html, "html.parser")
        links = []
        for heading in soup.find_all("h2"):
            anchor = heading.find("a", href=True)
            if anchor is None:
                continue
            title = anchor.get_text(strip=True)
            url = urljoin(page_url, anchor["href"])
            if title and self.is_article_url(url):
                links.append(ArticleLink(title=title, url=url))
        return links

    async def get_articles_from_page(self, page_url: str) -> List[ArticleLink]:
        """Article links on one listing page; empty on fetch failure."""
        try:
            html = await self._fetch_html(page_url)
        except Exception as e:
            console.print(f"[red]Error fetching page {page_url}: {e}[/red]")
            return []
        return self.parse_article_links(html, page_url)

    async def collect_oldest_articles(
        self,
        last_page: int,
        limit: Optional[int] = None,
    ) -> Tuple[List[ArticleLink], int]:
        """
        Walk from the last page towards page 1 collecting unique links.

        Returns:
            Tuple of (selected links, pages fetched)
        """
        limit = limit or self.site.articles_to_collect
        fetched: List[int] = []
        pages = self.walk_pages(last_page, fetched)
        try:
            links = await select_oldest_articles(pages, limit)
        finally:
            await pages.aclose()
        return links, len(fetched)

    async def walk_pages(
        self,
        last_page: int,
        fetched: List[int],
    ) -> AsyncIterator[List[ArticleLink]]:
        """Yield each page's links from the last page down to page 1, rate limited."""
        for page in range(last_page, 0, -1):
            await self.page_limiter.acquire()
            console.print(f"[dim]Fetching articles from page {page}...[/dim]")
            page_links = await self.get_articles_from_page(self.page_url(page))
            fetched.append(page)
            yield page_links
