"""Page fetcher and selector-based text extractor."""

import re
from typing import List, Optional, Tuple

import httpx
from bs4 import BeautifulSoup
from pydantic import BaseModel, Field
from rich.console import Console

from .models import ExtractedContent

console = Console()

BROWSER_USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"

_WHITESPACE = re.compile(r"\s+")


class ExtractionProfile(BaseModel):
    """How to pull body text out of a page."""

    name: str = Field(..., description="Profile name used in log output")
    selectors: List[str] = Field(..., description="Content selectors in priority order")
    strip_selectors: List[str] = Field(default_factory=list, description="Elements removed before extraction")
    max_chars: int = Field(..., description="Cap on extracted text", ge=1)
    user_agent: Optional[str] = Field(None, description="User-Agent header override")
    timeout: float = Field(30.0, description="HTTP timeout in seconds", gt=0.0)


ARTICLE_PROFILE = ExtractionProfile(
    name="article",
    selectors=["article", ".entry-content", ".post-content", "body"],
    max_chars=10000,
)

REFERENCE_PROFILE = ExtractionProfile(
    name="reference",
    selectors=["article", ".post-content", ".entry-content", "main", "body"],
    strip_selectors=[
        "script",
        "style",
        "nav",
        "header",
        "footer",
        "aside",
        ".sidebar",
        ".comments",
        ".advertisement",
    ],
    max_chars=5000,
    user_agent=BROWSER_USER_AGENT,
    timeout=10.0,
)


def normalize_whitespace(text: str) -> str:
    """Collapse runs of whitespace to single spaces."""
    return _WHITESPACE.sub(" ", text).strip()


def _selected_text(soup: BeautifulSoup, selector: str) -> str:
    """Text of every element matching the selector, in document order."""
    return " ".join(element.get_text(" ") for element in soup.select(selector))


def select_content(html: str, profile: ExtractionProfile) -> Tuple[Optional[str], str]:
    """
    Run the profile's selector chain over a document.

    Returns:
        Tuple of (winning selector, normalized uncapped text); selector is
        None when nothing in the chain produced text.
    """
    soup = BeautifulSoup(html, "html.parser")

    if profile.strip_selectors:
        for element in soup.select(", ".join(profile.strip_selectors)):
            element.extract()

    for selector in profile.selectors:
        text = normalize_whitespace(_selected_text(soup, selector))
        if text:
            return selector, text

    # html.parser adds no implicit <body> to fragments
    if "body" in profile.selectors and soup.body is None:
        text = normalize_whitespace(soup.get_text(" "))
        if text:
            return "body", text

    return None, ""


def extract_text(html: str, profile: ExtractionProfile) -> str:
    """Extract capped body text from a document."""
    _, text = select_content(html, profile)
    return text[: profile.max_chars]


class ContentExtractor:
    """Fetch a page and extract its body text."""

    def __init__(
        self,
        profile: ExtractionProfile = ARTICLE_PROFILE,
        default_user_agent: str = "blogrefresh/1.0",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """Initialize content extractor."""
        self.profile = profile
        self.user_agent = profile.user_agent or default_user_agent
        self.transport = transport

    async def extract(self, url: str) -> ExtractedContent:
        """Fetch and extract a single page. Never raises."""
        try:
            headers = {
                "User-Agent": self.user_agent,
                "Accept": "text/html,application/xhtml+xml",
            }

            async with httpx.AsyncClient(
                timeout=self.profile.timeout,
                follow_redirects=True,
                headers=headers,
                transport=self.transport,
            ) as client:
                response = await client.get(url)
                response.raise_for_status()

            content_type = response.headers.get("content-type", "")
            if content_type and "html" not in content_type:
                return ExtractedContent.absent(url, f"Unsupported content type: {content_type}")

            selector, text = select_content(response.text, self.profile)
            if not text:
                return ExtractedContent.absent(url, "No content found")

            return ExtractedContent(
                url=url,
                text=text[: self.profile.max_chars],
                selector=selector,
            )

        except httpx.HTTPStatusError as e:
            error_msg = f"HTTP {e.response.status_code}"
            if e.response.status_code == 404:
                error_msg = "Page not found (404)"
            elif e.response.status_code == 403:
                error_msg = "Access forbidden (403)"
            elif e.response.status_code >= 500:
                error_msg = f"Server error ({e.response.status_code})"
            console.print(f"[red]Error scraping {url}: {error_msg}[/red]")
            return ExtractedContent.absent(url, error_msg)
        except httpx.TimeoutException:
            console.print(f"[red]Error scraping {url}: request timed out[/red]")
            return ExtractedContent.absent(url, "Request timed out")
        except Exception as e:
            console.print(f"[red]Error scraping {url}: {e}[/red]")
            return ExtractedContent.absent(url, f"Unexpected error: {e}")
