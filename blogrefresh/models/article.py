"""Article model for scraped and refreshed blog posts."""

from typing import List, Optional

from pydantic import Field

from .base import DBModel


class Article(DBModel):
    """Article model."""

    title: str = Field(..., description="Title taken from the listing link text")
    original_content: str = Field(..., description="Plain text of the first scrape")
    updated_content: Optional[str] = Field(None, description="Rewritten text with references block")
    source_url: str = Field(..., description="URL of the source article (identity key)")
    references: List[str] = Field(default_factory=list, description="Reference URLs used for the rewrite")

    @property
    def is_refreshed(self) -> bool:
        """Whether the refresh job has already written updated content."""
        return bool(self.updated_content)
