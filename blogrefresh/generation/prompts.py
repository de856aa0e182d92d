"""Prompt construction for article rewrites."""

from typing import List, Sequence

from ..scraping.models import ReferenceArticle


REWRITE_INSTRUCTIONS = """INSTRUCTIONS:
1. Improve the formatting, structure, and readability of the original article
2. Add relevant insights from the reference articles
3. Keep the main topic and message intact
4. Make it more engaging and professional
5. Add clear headings and bullet points where appropriate
6. Keep the content length similar to the original
7. Write in a professional but conversational tone

Return ONLY the improved article content. Do not include any explanations or meta-commentary."""


def format_references(references: Sequence[ReferenceArticle]) -> str:
    """Label each reference with its URL and join them."""
    return "\n\n---\n\n".join(
        f"Reference {i} ({ref.url}):\n{ref.content}"
        for i, ref in enumerate(references, start=1)
    )


def build_rewrite_prompt(
    original_content: str,
    references: Sequence[ReferenceArticle],
    original_chars: int = 3000,
    reference_chars: int = 4000,
) -> str:
    """Build the single user message sent for a rewrite."""
    references_text = format_references(references)

    return f"""You are a professional content writer. Your task is to improve and update the following article based on the reference articles provided.

ORIGINAL ARTICLE:
{original_content[:original_chars]}

REFERENCE ARTICLES FROM TOP SEARCH RESULTS:
{references_text[:reference_chars]}

{REWRITE_INSTRUCTIONS}"""


def append_references(content: str, reference_urls: List[str]) -> str:
    """Append a numbered references block to rewritten content."""
    listing = "\n".join(f"{i}. {url}" for i, url in enumerate(reference_urls, start=1))
    return f"{content}\n\n---\n\n**References:**\n{listing}"
