"""Data models for blogrefresh."""

from .article import Article

__all__ = ["Article"]
