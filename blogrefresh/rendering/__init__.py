"""Read-path rendering."""

from .markdown import render_inline, render_markdown, strip_markdown
from .page import render_articles_page, save_articles_page

__all__ = [
    "render_articles_page",
    "render_inline",
    "render_markdown",
    "save_articles_page",
    "strip_markdown",
]
