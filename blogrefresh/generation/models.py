"""Data models for generation."""

from typing import Optional

from pydantic import BaseModel, Field


class RewriteResult(BaseModel):
    """Outcome of a rewrite request."""

    content: str = Field("", description="Rewritten article body, empty on failure")
    success: bool = Field(True, description="Whether the model returned usable text")
    error: Optional[str] = Field(None, description="Error message if failed")
    tokens_used: int = Field(0, description="Tokens reported for this request")
