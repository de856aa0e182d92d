"""Standalone HTML page listing stored articles."""

import html
from pathlib import Path
from typing import List

import pendulum

from ..models import Article
from .markdown import render_markdown, strip_markdown


PAGE_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>{title}</title>
</head>
<body>
<header>
<h1>{title}</h1>
<p>{subtitle}</p>
</header>
<main>
{body}
</main>
</body>
</html>
"""


def _article_section(article: Article, show_updated: bool) -> str:
    use_updated = show_updated and article.is_refreshed
    content = article.updated_content if use_updated else article.original_content
    version = "Updated" if use_updated else "Original"

    created = ""
    if article.created_at:
        created = pendulum.instance(article.created_at).format("MMM DD, YYYY")

    return (
        f'<article id="article-{article.id}">\n'
        f"<h2>{html.escape(article.title)}</h2>\n"
        f'<p><small>{version} version • {created} • '
        f'<a href="{html.escape(article.source_url)}">source</a></small></p>\n'
        f"<p><em>{html.escape(strip_markdown(content))}</em></p>\n"
        f'<div class="content">{render_markdown(content)}</div>\n'
        f"</article>"
    )


def render_articles_page(articles: List[Article], show_updated: bool = False) -> str:
    """Render every article as one HTML document."""
    if articles:
        body = "\n<hr>\n".join(_article_section(a, show_updated) for a in articles)
    else:
        body = "<p>No articles found. Run the discovery job first.</p>"

    refreshed = sum(1 for a in articles if a.is_refreshed)
    subtitle = (
        f"{len(articles)} articles, {refreshed} updated • "
        f"generated {pendulum.now().format('MMM DD, YYYY [at] HH:mm')}"
    )
    return PAGE_TEMPLATE.format(title="Blog Articles", subtitle=html.escape(subtitle), body=body)


def save_articles_page(articles: List[Article], output_path: Path, show_updated: bool = False) -> None:
    """Write the articles page to disk."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(render_articles_page(articles, show_updated), encoding="utf-8")
