"""Render the markdown subset produced by the rewrite model as HTML."""

import html
import re
from typing import List, Optional

HEADING = re.compile(r"^(#{1,3})\s+(.+?)\s*#*$")
RULE = re.compile(r"^-{3,}$")
BULLET = re.compile(r"^[-*•]\s+(.+)$")
NUMBERED = re.compile(r"^\d+[.)]\s+(.+)$")

BOLD = re.compile(r"\*\*(.+?)\*\*")
ITALIC = re.compile(r"(?<!\*)\*(?!\s)(.+?)(?<!\s)\*(?!\*)")
BARE_URL = re.compile(r"(https?://[^\s<]+[^\s<.,;:!?)])")

BLOCK_SEPARATOR = re.compile(r"\n\s*\n")


def render_inline(text: str) -> str:
    """Escape text and apply bold, italic and bare-URL links."""
    escaped = html.escape(text)
    escaped = BOLD.sub(r"<strong>\1</strong>", escaped)
    escaped = ITALIC.sub(r"<em>\1</em>", escaped)
    return BARE_URL.sub(r'<a href="\1">\1</a>', escaped)


def _render_block(block: str) -> List[str]:
    out: List[str] = []
    paragraph: List[str] = []
    items: List[str] = []
    list_tag: Optional[str] = None

    def flush_paragraph() -> None:
        if paragraph:
            out.append("<p>" + "<br>".join(render_inline(line) for line in paragraph) + "</p>")
            paragraph.clear()

    def flush_list() -> None:
        nonlocal list_tag
        if items:
            body = "".join(f"<li>{render_inline(item)}</li>" for item in items)
            out.append(f"<{list_tag}>{body}</{list_tag}>")
            items.clear()
        list_tag = None

    for raw_line in block.splitlines():
        line = raw_line.strip()
        if not line:
            continue

        heading = HEADING.match(line)
        if heading:
            flush_paragraph()
            flush_list()
            level = len(heading.group(1))
            out.append(f"<h{level}>{render_inline(heading.group(2))}</h{level}>")
            continue

        if RULE.match(line):
            flush_paragraph()
            flush_list()
            out.append("<hr>")
            continue

        bullet = BULLET.match(line)
        numbered = None if bullet else NUMBERED.match(line)
        if bullet or numbered:
            flush_paragraph()
            tag = "ul" if bullet else "ol"
            if list_tag != tag:
                flush_list()
                list_tag = tag
            items.append((bullet or numbered).group(1))
            continue

        flush_list()
        paragraph.append(line)

    flush_paragraph()
    flush_list()
    return out


def render_markdown(text: Optional[str]) -> str:
    """
    Convert headings (#, ##, ###), bullet and numbered lists, horizontal
    rules, **bold**, *italic* and paragraphs to HTML.

    Anything else is escaped and kept as paragraph text.
    """
    if not text:
        return ""

    rendered: List[str] = []
    for block in BLOCK_SEPARATOR.split(text.strip()):
        rendered.extend(_render_block(block))
    return "".join(rendered)


def strip_markdown(text: Optional[str], length: int = 250) -> str:
    """Plain-text preview with markdown markers removed."""
    if not text:
        return ""

    clean = BOLD.sub(r"\1", text)
    clean = ITALIC.sub(r"\1", clean)
    clean = re.sub(r"^#{1,3}\s+", "", clean, flags=re.MULTILINE)
    clean = re.sub(r"^[-*•]\s+", "", clean, flags=re.MULTILINE)
    clean = re.sub(r"^-{3,}$", "", clean, flags=re.MULTILINE)
    clean = re.sub(r"\s+", " ", clean).strip()

    if len(clean) > length:
        return clean[:length] + "..."
    return clean
