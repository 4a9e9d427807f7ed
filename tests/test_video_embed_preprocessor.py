"""
Tests for the line classifier that swaps standalone video URLs for embeds.
"""

import pytest

from content.markdown.embeds import build_video_embed_html, resolve_video_embed
from content.markdown.preprocessors import apply_preprocessors
from content.markdown.preprocessors.video_embed import (
    Fence,
    apply_video_embeds,
    iter_candidate_lines,
    next_fence_state,
    video_embed_default,
)

from .conftest import BILIBILI_URL, DOUYIN_BARE_MODAL_URL, YOUTUBE_URL


def _fragment(url):
    return build_video_embed_html(resolve_video_embed(url))


class TestStandaloneLines:

    @pytest.mark.parametrize("url", [YOUTUBE_URL, BILIBILI_URL, DOUYIN_BARE_MODAL_URL])
    def test_standalone_url_is_replaced(self, url):
        assert apply_video_embeds(url) == _fragment(url)

    def test_surrounding_text_is_byte_identical(self):
        markdown = f"# Trip\n\nSome words.\n\n  <{YOUTUBE_URL}>  \n\nMore words.\n"
        result = apply_video_embeds(markdown)

        assert result == f"# Trip\n\nSome words.\n\n{_fragment(YOUTUBE_URL)}\n\nMore words.\n"

    def test_inline_url_is_left_alone(self):
        markdown = f"观看链接：{YOUTUBE_URL}"
        assert apply_video_embeds(markdown) == markdown

    def test_unsupported_url_is_left_alone(self):
        markdown = "https://example.com/video/1"
        assert apply_video_embeds(markdown) == markdown

    def test_crlf_line_endings_preserved(self):
        markdown = f"intro\r\n\r\n{YOUTUBE_URL}\r\n\r\noutro"
        assert apply_video_embeds(markdown) == f"intro\r\n\r\n{_fragment(YOUTUBE_URL)}\r\n\r\noutro"

    def test_fragment_between_text_lines_becomes_its_own_block(self):
        markdown = f"intro text\n{YOUTUBE_URL}\nmore text"
        result = apply_video_embeds(markdown)

        assert result == f"intro text\n\n{_fragment(YOUTUBE_URL)}\n\nmore text"

    def test_crlf_blank_lines_use_crlf(self):
        markdown = f"intro\r\n{YOUTUBE_URL}\r\noutro"
        result = apply_video_embeds(markdown)

        assert result == f"intro\r\n\r\n{_fragment(YOUTUBE_URL)}\r\n\r\noutro"

    def test_adjacent_fragments_share_one_blank_line(self):
        markdown = f"{YOUTUBE_URL}\n{BILIBILI_URL}"
        result = apply_video_embeds(markdown)

        assert result == f"{_fragment(YOUTUBE_URL)}\n\n{_fragment(BILIBILI_URL)}"
        assert apply_video_embeds(result) == result

    @pytest.mark.parametrize("markdown", ["", "   \n  ", None])
    def test_empty_documents_unchanged(self, markdown):
        assert apply_video_embeds(markdown) == markdown

    def test_idempotent(self):
        markdown = f"{YOUTUBE_URL}\n\n{BILIBILI_URL}\n\n{DOUYIN_BARE_MODAL_URL}"
        once = apply_video_embeds(markdown)

        assert once.count("<iframe") == 3
        assert apply_video_embeds(once) == once


class TestSkippedLines:

    @pytest.mark.parametrize(
        "markdown",
        [
            f"    {YOUTUBE_URL}",
            f"\t{YOUTUBE_URL}",
            f"> {YOUTUBE_URL}",
            f"- {YOUTUBE_URL}",
            f"* {YOUTUBE_URL}",
            f"+ {YOUTUBE_URL}",
            f"1. {YOUTUBE_URL}",
            f"12. {YOUTUBE_URL}",
        ],
    )
    def test_code_quotes_and_lists(self, markdown):
        assert apply_video_embeds(markdown) == markdown

    @pytest.mark.parametrize("marker", ["```", "~~~", "```python"])
    def test_fenced_code_is_never_transformed(self, marker):
        markdown = f"{marker}\n{YOUTUBE_URL}\n{marker[:3]}"
        assert apply_video_embeds(markdown) == markdown

    def test_mismatched_marker_does_not_close_fence(self):
        markdown = f"~~~\n```\n{YOUTUBE_URL}\n~~~\n{BILIBILI_URL}"
        result = apply_video_embeds(markdown)

        assert YOUTUBE_URL + "\n" in result
        assert result.endswith(_fragment(BILIBILI_URL))
        assert result.count("<iframe") == 1

    def test_backtick_fence_ignores_tildes(self):
        markdown = f"```\n~~~\n{YOUTUBE_URL}\n~~~\n```\n{YOUTUBE_URL}"
        result = apply_video_embeds(markdown)

        assert result.count("<iframe") == 1
        assert result.startswith(f"```\n~~~\n{YOUTUBE_URL}\n~~~\n```\n")

    def test_unclosed_fence_swallows_rest(self):
        markdown = f"```\n{YOUTUBE_URL}\n\n{BILIBILI_URL}"
        assert apply_video_embeds(markdown) == markdown


class TestFenceState:

    def test_transitions(self):
        assert next_fence_state(Fence.NONE, "```js") is Fence.BACKTICK
        assert next_fence_state(Fence.BACKTICK, "~~~") is Fence.BACKTICK
        assert next_fence_state(Fence.BACKTICK, "```") is Fence.NONE
        assert next_fence_state(Fence.NONE, "~~~~") is Fence.TILDE
        assert next_fence_state(Fence.TILDE, "plain text") is Fence.TILDE

    def test_candidates(self):
        lines = ["intro", YOUTUBE_URL, "```", "https://youtu.be/x", "```", "<https://a.b/c>"]
        assert list(iter_candidate_lines(lines)) == [
            (0, "intro"),
            (1, YOUTUBE_URL),
            (5, "https://a.b/c>"),
        ]


class TestLimits:

    def test_oversized_document_is_returned_unchanged(self):
        assert apply_video_embeds(YOUTUBE_URL, max_document_chars=10) == YOUTUBE_URL

    def test_oversized_url_is_not_resolved(self):
        assert apply_video_embeds(YOUTUBE_URL, max_url_length=10) == YOUTUBE_URL

    def test_short_links_can_be_disabled(self):
        markdown = "https://v.douyin.com/iRNBho6u/"
        assert apply_video_embeds(markdown, allow_douyin_short_links=False) == markdown
        assert "<iframe" in apply_video_embeds(markdown)


class TestSettings:

    def test_default_preprocessor_uses_settings(self, settings):
        settings.CONTENT_VIDEO_EMBEDS = {"ENABLED": False}
        assert video_embed_default(YOUTUBE_URL, {}) == YOUTUBE_URL

    def test_partial_override_keeps_defaults(self, settings):
        settings.CONTENT_VIDEO_EMBEDS = {"MAX_URL_LENGTH": 10}
        assert video_embed_default(YOUTUBE_URL, {}) == YOUTUBE_URL

    def test_registered_in_pipeline(self):
        assert "<iframe" in apply_preprocessors(YOUTUBE_URL, {})
