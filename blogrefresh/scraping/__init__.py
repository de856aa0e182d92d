"""Blog scraping, content extraction and reference search."""

from .extractor import (
    ARTICLE_PROFILE,
    REFERENCE_PROFILE,
    ContentExtractor,
    ExtractionProfile,
    extract_text,
    normalize_whitespace,
)
from .listing import ListingScraper, merge_unique_links, select_oldest_articles
from .models import ArticleLink, ExtractedContent, ReferenceArticle, SearchResult
from .ratelimit import RateLimiter
from .search import ReferenceSearcher, is_blocked

__all__ = [
    "ARTICLE_PROFILE",
    "REFERENCE_PROFILE",
    "ArticleLink",
    "ContentExtractor",
    "ExtractedContent",
    "ExtractionProfile",
    "ListingScraper",
    "RateLimiter",
    "ReferenceArticle",
    "ReferenceSearcher",
    "SearchResult",
    "extract_text",
    "is_blocked",
    "merge_unique_links",
    "normalize_whitespace",
    "select_oldest_articles",
]
