"""Shared fixtures: in-memory store, mock HTTP transports, zero-delay config."""

from typing import Callable, Dict, List, Optional, Union

import httpx
import pytest

from blogrefresh.config import RefreshConfig, SiteConfig
from blogrefresh.models import Article

BASE_URL = "https://beyondchats.com/blogs/"


class InMemoryArticleStore:
    """Stand-in for ArticleStore that ignores the connection argument."""

    def __init__(self) -> None:
        self.articles: Dict[int, Article] = {}
        self.saved_refreshes: List[int] = []
        self._next_id = 1

    def add(self, title: str, source_url: str, original_content: str = "Original text",
            updated_content: Optional[str] = None, references: Optional[List[str]] = None) -> Article:
        article_id = self.create_article(None, title, original_content, source_url)
        article = self.articles[article_id]
        article.updated_content = updated_content
        article.references = list(references or [])
        return article

    def exists_by_source_url(self, conn, source_url: str) -> bool:
        return any(a.source_url == source_url for a in self.articles.values())

    def create_article(self, conn, title: str, original_content: str, source_url: str) -> int:
        article_id = self._next_id
        self._next_id += 1
        self.articles[article_id] = Article(
            id=article_id,
            title=title,
            original_content=original_content,
            source_url=source_url,
        )
        return article_id

    def find_refresh_candidates(self, conn, limit: Optional[int] = None) -> List[Article]:
        candidates = [a for a in self.articles.values() if not a.updated_content]
        return candidates[:limit] if limit is not None else candidates

    def save_refresh(self, conn, article_id: int, updated_content: str, references: List[str]) -> bool:
        article = self.articles[article_id]
        if article.updated_content:
            return False
        article.updated_content = updated_content
        article.references = list(references)
        self.saved_refreshes.append(article_id)
        return True

    def list_articles(self, conn) -> List[Article]:
        return list(self.articles.values())

    def get_article(self, conn, article_id: int) -> Optional[Article]:
        return self.articles.get(article_id)


Route = Union[str, httpx.Response, Callable[[httpx.Request], httpx.Response]]


def make_transport(routes: Dict[str, Route], calls: Optional[List[str]] = None) -> httpx.MockTransport:
    """Serve HTML strings, prepared responses or handlers by exact URL; 404 otherwise."""

    def handler(request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        if calls is not None:
            calls.append(url)
        route = routes.get(url)
        if route is None:
            return httpx.Response(404, html="<html><body>Not found</body></html>")
        if isinstance(route, httpx.Response):
            return route
        if callable(route):
            return route(request)
        return httpx.Response(200, html=route)

    return httpx.MockTransport(handler)


def listing_html(links: List[tuple], last_page: Optional[int] = None) -> str:
    """Listing page with h2 article links and optional pagination."""
    headings = "".join(f'<h2><a href="{url}">{title}</a></h2>' for title, url in links)
    pagination = ""
    if last_page:
        pagination = "".join(
            f'<a class="page-numbers" href="{BASE_URL}page/{n}/">{n}</a>' for n in range(2, last_page + 1)
        )
    return f"<html><body><main>{headings}</main><nav>{pagination}</nav></body></html>"


def article_html(body: str) -> str:
    return f"<html><head><title>t</title></head><body><header>Site</header><article>{body}</article></body></html>"


@pytest.fixture
def store() -> InMemoryArticleStore:
    return InMemoryArticleStore()


@pytest.fixture
def site() -> SiteConfig:
    return SiteConfig(base_url=BASE_URL, page_delay=0, article_delay=0)


@pytest.fixture
def refresh_config() -> RefreshConfig:
    return RefreshConfig(reference_delay=0, record_delay=0)
