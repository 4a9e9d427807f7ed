# content/markdown/renderer.py

import pypandoc

from .config import get_pandoc_config
from .postprocessors import apply_postprocessors
from .preprocessors import apply_preprocessors


def convert_markdown(text):
    """Markdown → HTML with Pandoc alone, no pre/post processing."""
    pandoc_config = get_pandoc_config()

    return pypandoc.convert_text(
        text,
        to="html5",
        format="markdown",
        extra_args=pandoc_config["extra_args"],
        filters=pandoc_config.get("filters", []),
    )


def render_markdown(text, context=None):
    """
    Main rendering function with pre/post processing pipeline using pypandoc

    Args:
        text: Raw markdown text
        context: Optional dict for processors that need additional data

    Raises:
        RuntimeError, OSError: Pandoc failed or is not installed
    """
    context = {} if context is None else context

    # Pre-processing: Before markdown conversion
    text = apply_preprocessors(text or "", context)

    html = convert_markdown(text)

    # Post-processing: After markdown conversion
    html = apply_postprocessors(html, context)

    return html
