"""Data models for scraping and search."""

from typing import List, Optional

from pydantic import BaseModel, Field


class ArticleLink(BaseModel):
    """Article link found on a listing page."""

    title: str = Field(..., description="Link text")
    url: str = Field(..., description="Absolute article URL")


class ExtractedContent(BaseModel):
    """Text extracted from a page, or the reason there is none."""

    url: str = Field(..., description="Page URL")
    text: str = Field("", description="Whitespace-normalized, capped text")
    selector: Optional[str] = Field(None, description="Selector the text came from")
    success: bool = Field(True, description="Whether text was extracted")
    error: Optional[str] = Field(None, description="Error message if failed")

    @classmethod
    def absent(cls, url: str, error: str) -> "ExtractedContent":
        """Result for a page that yielded no text."""
        return cls(url=url, text="", success=False, error=error)


class SearchResult(BaseModel):
    """Outcome of a reference search."""

    query: str = Field(..., description="Query sent to the provider")
    links: List[str] = Field(default_factory=list, description="Surviving result URLs in rank order")
    total_results: int = Field(0, description="Organic results returned by the provider")
    success: bool = Field(True, description="Whether the provider call succeeded")
    error: Optional[str] = Field(None, description="Error message if failed")


class ReferenceArticle(BaseModel):
    """A scraped reference used as rewrite input."""

    url: str = Field(..., description="Reference URL")
    content: str = Field(..., description="Scraped reference text")
