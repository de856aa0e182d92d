"""Web search for reference articles (Serper Google Search API)."""

from typing import Iterable, List, Optional
from urllib.parse import urlparse

import httpx
from rich.console import Console

from .models import SearchResult

console = Console()


def is_blocked(url: str, blocked_domains: Iterable[str]) -> bool:
    """Whether the URL's host is a blocked domain or one of its subdomains."""
    host = (urlparse(url).hostname or "").lower()
    if not host:
        return True
    for domain in blocked_domains:
        domain = domain.lower().lstrip(".")
        if host == domain or host.endswith("." + domain):
            return True
    return False


class ReferenceSearcher:
    """Find external pages covering the same topic as an article."""

    def __init__(
        self,
        api_key: Optional[str],
        endpoint: str = "https://google.serper.dev/search",
        num_results: int = 10,
        max_references: int = 2,
        query_suffix: str = " blog article",
        blocked_domains: Optional[List[str]] = None,
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """Initialize reference searcher."""
        self.api_key = api_key
        self.endpoint = endpoint
        self.num_results = num_results
        self.max_references = max_references
        self.query_suffix = query_suffix
        self.blocked_domains = list(blocked_domains or [])
        self.timeout = timeout
        self.transport = transport

    def filter_links(self, organic: List[dict]) -> List[str]:
        """First surviving result links in rank order."""
        links: List[str] = []
        for result in organic:
            url = result.get("link") if isinstance(result, dict) else None
            if not url or url in links or is_blocked(url, self.blocked_domains):
                continue
            links.append(url)
            if len(links) >= self.max_references:
                break
        return links

    async def search(self, query: str) -> SearchResult:
        """Search the web for a title. Never raises."""
        full_query = f"{query}{self.query_suffix}"

        if not self.api_key:
            return SearchResult(query=full_query, success=False, error="Search API key not configured")

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(
                    self.endpoint,
                    json={"q": full_query, "num": self.num_results},
                    headers={
                        "X-API-KEY": self.api_key,
                        "Content-Type": "application/json",
                    },
                )
                response.raise_for_status()
                payload = response.json()

        except httpx.HTTPStatusError as e:
            message = f"HTTP {e.response.status_code}"
            try:
                body = e.response.json()
            except ValueError:
                body = None
            if isinstance(body, dict) and isinstance(body.get("message"), str):
                message = body["message"] or message
            console.print(f"[red]   Search API error: {message}[/red]")
            return SearchResult(query=full_query, success=False, error=message)
        except httpx.TimeoutException:
            console.print("[red]   Search API error: request timed out[/red]")
            return SearchResult(query=full_query, success=False, error="Request timed out")
        except (httpx.HTTPError, ValueError) as e:
            console.print(f"[red]   Search API error: {e}[/red]")
            return SearchResult(query=full_query, success=False, error=str(e))

        organic = payload.get("organic") if isinstance(payload, dict) else None
        if not isinstance(organic, list):
            organic = []

        links = self.filter_links(organic)
        console.print(f"[dim]   Search found {len(organic)} results, using {len(links)}[/dim]")
        return SearchResult(query=full_query, links=links, total_results=len(organic))
