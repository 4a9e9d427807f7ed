# content/templatetags/markdown_tags.py

import logging

from django import template
from django.utils.html import format_html
from django.utils.safestring import mark_safe

from content.markdown.renderer import render_markdown
from content.markdown.text import (
    highlight_matches,
    markdown_to_plain_text,
    truncate_chars,
)

logger = logging.getLogger(__name__)

register = template.Library()

RENDER_FAILED_MESSAGE = "内容暂时无法展示。"


@register.filter(name="markdown")
def markdown_filter(value):
    try:
        return mark_safe(render_markdown(value))
    except (RuntimeError, OSError):
        logger.exception("Markdown rendering failed")
        return format_html('<p class="render-error">{}</p>', RENDER_FAILED_MESSAGE)


@register.filter(name="markdown_plain")
def markdown_plain_filter(value, limit=0):
    """Plain text of rendered markdown, optionally truncated to ``limit`` characters"""
    return truncate_chars(markdown_to_plain_text(value), int(limit))


@register.filter(name="truncate_chars")
def truncate_chars_filter(value, limit):
    return truncate_chars(value, int(limit))


@register.filter(name="highlight")
def highlight_filter(value, keyword):
    """Escape text and mark search keyword hits"""
    return mark_safe(highlight_matches(value, keyword))
