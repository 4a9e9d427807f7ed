from django.conf import settings

VIDEO_EMBED_DEFAULTS = {
    "ENABLED": True,
    # Documents above this size skip embed injection entirely
    "MAX_DOCUMENT_CHARS": 1_000_000,
    # Candidate URLs above this length are never parsed
    "MAX_URL_LENGTH": 2048,
    # Embed v.douyin.com short links without resolving their redirect
    "DOUYIN_SHORT_LINKS": True,
}


def get_pandoc_config():
    """
    Configuration for pypandoc/Pandoc markdown rendering.

    Extensions approximate GitHub-flavoured Markdown with hard line breaks.
    ``native_divs`` and ``markdown_in_html_blocks`` are disabled so that raw
    HTML blocks, including injected video embeds, reach the HTML output
    verbatim instead of being re-parsed as Markdown or wrapped in paragraphs.
    """
    return {
        "extra_args": [
            "--from=markdown+autolink_bare_uris+strikeout+task_lists+pipe_tables+fenced_code_blocks+backtick_code_blocks+fenced_code_attributes+footnotes+raw_html+hard_line_breaks-native_divs-markdown_in_html_blocks-smart",
        ],
        "filters": [],
    }


def get_video_embed_config():
    """
    Video embed settings merged over ``VIDEO_EMBED_DEFAULTS``.

    Override any key through ``CONTENT_VIDEO_EMBEDS`` in Django settings.
    """
    overrides = getattr(settings, "CONTENT_VIDEO_EMBEDS", None) or {}
    return {**VIDEO_EMBED_DEFAULTS, **overrides}
