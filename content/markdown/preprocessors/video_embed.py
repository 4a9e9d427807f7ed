"""
Preprocessor that replaces standalone video URLs with embed fragments.

Converts:
    https://www.youtube.com/watch?v=dQw4w9WgXcQ   → <div class="video-embed ..."><iframe ...></iframe></div>
    <https://www.bilibili.com/video/BV1x5411c7mD>  → <div class="video-embed ..."><iframe ...></iframe></div>

Leaves alone:
    - lines inside ``` or ~~~ fences and indented code
    - block quotes and list items
    - URLs surrounded by other text on the same line
"""

import enum
import logging
import re

from content.markdown.config import VIDEO_EMBED_DEFAULTS, get_video_embed_config
from content.markdown.embeds import build_video_embed_html, resolve_video_embed

logger = logging.getLogger(__name__)

STANDALONE_URL_PATTERN = re.compile(r"^\s*<?(\S+)>?\s*$")
ORDERED_LIST_PATTERN = re.compile(r"^\d+\.\s+")
UNORDERED_LIST_PREFIXES = ("- ", "* ", "+ ")


class Fence(enum.Enum):
    NONE = ""
    BACKTICK = "```"
    TILDE = "~~~"


def detect_fence(stripped: str) -> Fence:
    for fence in (Fence.BACKTICK, Fence.TILDE):
        if stripped.startswith(fence.value):
            return fence
    return Fence.NONE


def next_fence_state(state: Fence, stripped: str) -> Fence:
    """
    Advance the fence state for one line.

    A fence only closes on its own marker, so ~~~ inside a ``` block (or the
    other way round) stays literal text.
    """
    marker = detect_fence(stripped)
    if marker is Fence.NONE:
        return state
    if state is Fence.NONE:
        return marker
    if stripped.startswith(state.value):
        return Fence.NONE
    return state


def is_indented_code(line: str) -> bool:
    return line.startswith(("    ", "\t"))


def should_skip_line(stripped: str) -> bool:
    if not stripped:
        return True
    if stripped.startswith(">"):
        return True
    if stripped.startswith(UNORDERED_LIST_PREFIXES):
        return True
    return bool(ORDERED_LIST_PATTERN.match(stripped))


def extract_standalone_url(stripped: str) -> str | None:
    match = STANDALONE_URL_PATTERN.match(stripped)
    if not match:
        return None
    return match.group(1)


def iter_candidate_lines(lines):
    """
    Yield ``(index, url_text)`` for every line that holds only a URL.

    Single forward pass; the only state carried between lines is the open
    fence marker.
    """
    state = Fence.NONE
    for index, line in enumerate(lines):
        stripped = line.strip()
        if detect_fence(stripped) is not Fence.NONE:
            state = next_fence_state(state, stripped)
            continue
        if state is not Fence.NONE:
            continue
        if is_indented_code(line) or should_skip_line(stripped):
            continue

        url_text = extract_standalone_url(stripped)
        if url_text:
            yield index, url_text


def apply_video_embeds(
    markdown: str,
    *,
    max_document_chars: int = VIDEO_EMBED_DEFAULTS["MAX_DOCUMENT_CHARS"],
    max_url_length: int = VIDEO_EMBED_DEFAULTS["MAX_URL_LENGTH"],
    allow_douyin_short_links: bool = VIDEO_EMBED_DEFAULTS["DOUYIN_SHORT_LINKS"],
) -> str:
    """
    Replace standalone video URL lines with embed fragments.

    Args:
        markdown: Raw markdown text
        max_document_chars: Longer documents are returned unchanged
        max_url_length: Longer candidate URLs are left as plain text
        allow_douyin_short_links: Embed v.douyin.com links without an id

    Returns:
        Markdown with recognised lines replaced; every other line unchanged
        apart from the blank lines that keep each fragment a block of its own
    """
    if not markdown or not markdown.strip():
        return markdown

    if len(markdown) > max_document_chars:
        logger.warning(
            f"Skipping video embeds: document has {len(markdown)} characters "
            f"(limit {max_document_chars})"
        )
        return markdown

    lines = markdown.split("\n")
    fragments = {}

    for index, url_text in iter_candidate_lines(lines):
        if len(url_text) > max_url_length:
            continue

        embed = resolve_video_embed(
            url_text, allow_douyin_short_links=allow_douyin_short_links
        )
        if embed is None:
            continue

        fragments[index] = build_video_embed_html(embed)

    if not fragments:
        return markdown

    for index, fragment in fragments.items():
        lines[index] = isolate_block(lines, index, fragment, fragments)

    logger.debug(f"Injected {len(fragments)} video embed(s)")

    return "\n".join(lines)


def isolate_block(lines, index, fragment, fragments) -> str:
    """
    Return the replacement for ``lines[index]``.

    A blank line is added next to any neighbouring line that has text, so
    the fragment is always its own block and never ends up inside a
    paragraph. Two adjacent fragments share one blank line.
    """
    line_ending = "\r" if lines[index].endswith("\r") else ""
    blank = line_ending + "\n"

    before = ""
    if index > 0 and index - 1 not in fragments and lines[index - 1].strip():
        before = blank
    after = ""
    if index + 1 < len(lines) and lines[index + 1].strip():
        after = blank

    return before + fragment + after + line_ending


def video_embed_default(text: str, context: dict) -> str:
    """
    Default configuration for video_embed.

    Register this in PREPROCESSORS.
    """
    config = get_video_embed_config()
    if not config["ENABLED"]:
        return text

    return apply_video_embeds(
        text,
        max_document_chars=config["MAX_DOCUMENT_CHARS"],
        max_url_length=config["MAX_URL_LENGTH"],
        allow_douyin_short_links=config["DOUYIN_SHORT_LINKS"],
    )
