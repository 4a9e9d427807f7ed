"""
Plain-text helpers built on the render pipeline: meta descriptions,
search snippets and keyword highlighting.
"""

import logging
import re
from html import escape

from bs4 import BeautifulSoup

from .renderer import render_markdown

logger = logging.getLogger(__name__)

ELLIPSIS = "…"
DESCRIPTION_LIMIT = 160
HIGHLIGHT_CLASS = "search-hit"


def markdown_to_plain_text(content):
    """
    Render markdown and reduce it to whitespace-collapsed text.

    Falls back to the stripped source when Pandoc is unavailable or fails.
    """
    try:
        html = render_markdown(content)
    except (RuntimeError, OSError) as e:
        logger.warning(f"Markdown render failed, using raw text: {e}")
        return (content or "").strip()

    text = BeautifulSoup(html, "html.parser").get_text(" ")
    return " ".join(text.split())


def truncate_chars(text, limit):
    trimmed = (text or "").strip()
    if limit <= 0 or len(trimmed) <= limit:
        return trimmed
    return trimmed[:limit].strip() + ELLIPSIS


def build_description(summary, content, limit=DESCRIPTION_LIMIT):
    """Prefer the author's summary; otherwise describe the rendered body."""
    summary = (summary or "").strip()
    if summary:
        return truncate_chars(summary, limit)
    return truncate_chars(markdown_to_plain_text(content), limit)


def strip_leading_title(title, content):
    """
    Remove a first line that just repeats the title (``# Title``, ``**Title**``).

    Blank lines before and after it are dropped with it.
    """
    title = (title or "").strip()
    if not title:
        return content

    lines = content.split("\n")
    index = 0
    while index < len(lines) and not lines[index].strip():
        index += 1
    if index >= len(lines):
        return content

    first_line = lines[index].strip().lstrip("#").strip().strip("*")
    if first_line != title:
        return content

    index += 1
    while index < len(lines) and not lines[index].strip():
        index += 1
    return "\n".join(lines[index:])


def build_search_snippet(text, keyword, limit):
    """
    Cut ``limit`` characters of ``text`` centred on the first keyword hit.

    Ellipses mark the sides that were cut. Without a hit this is
    ``truncate_chars``.
    """
    trimmed = (text or "").strip()
    keyword = (keyword or "").strip()
    if not trimmed:
        return ""
    if not keyword:
        return truncate_chars(trimmed, limit)

    hit = trimmed.lower().find(keyword.lower())
    if hit < 0:
        return truncate_chars(trimmed, limit)

    total = len(trimmed)
    if limit <= 0 or limit > total:
        limit = total

    start = max(hit - limit // 2, 0)
    end = min(start + limit, total)
    if end - start < limit:
        start = max(end - limit, 0)

    snippet = trimmed[start:end].strip()
    if not snippet:
        return ""

    prefix = ELLIPSIS if start > 0 else ""
    suffix = ELLIPSIS if end < total else ""
    return prefix + snippet + suffix


def highlight_matches(text, keyword):
    """Escape ``text`` and wrap case-insensitive keyword hits in ``<mark>``."""
    text = text or ""
    keyword = (keyword or "").strip()
    if not keyword:
        return escape(text)

    # Match on the raw text so a keyword never lands inside an entity
    pattern = re.compile(re.escape(keyword), re.IGNORECASE)
    pieces = []
    position = 0
    for match in pattern.finditer(text):
        pieces.append(escape(text[position:match.start()]))
        pieces.append(f'<mark class="{HIGHLIGHT_CLASS}">{escape(match.group(0))}</mark>')
        position = match.end()
    pieces.append(escape(text[position:]))
    return "".join(pieces)
