# content/markdown/embeds/fragment.py
"""
Render a ``VideoEmbed`` as the raw HTML block injected into Markdown.

The fragment is a single line so the Markdown engine sees one raw HTML
block, and so the line classifier never mistakes it for a bare URL on a
second pass:

<div class="video-embed is-loading" data-video-embed="true"
     data-video-platform="youtube" data-video-aspect="16:9"
     data-video-source="https://youtu.be/...">
  <iframe src="https://www.youtube.com/embed/..." title="..." loading="lazy"
          allow="..." allowfullscreen frameborder="0"
          referrerpolicy="strict-origin-when-cross-origin"></iframe>
</div>

Only Bilibili iframes carry ``sandbox``.
"""

from html import escape

from .platforms import IFRAME_ALLOW, VideoEmbed, get_platform_spec

CONTAINER_CLASS = "video-embed is-loading"

# Attribute names the fragment emits; the sanitizer allow-list is built from
# these.
CONTAINER_ATTRIBUTES = (
    "class",
    "data-video-embed",
    "data-video-platform",
    "data-video-aspect",
    "data-video-source",
)
IFRAME_ATTRIBUTES = (
    "src",
    "title",
    "loading",
    "allow",
    "allowfullscreen",
    "frameborder",
    "referrerpolicy",
    "sandbox",
)


def build_video_embed_html(embed: VideoEmbed) -> str:
    spec = get_platform_spec(embed.platform)
    sandbox = ""
    if spec.sandbox:
        sandbox = f' sandbox="{escape(spec.sandbox)}"'

    return (
        f'<div class="{CONTAINER_CLASS}" data-video-embed="true"'
        f' data-video-platform="{escape(spec.platform.value)}"'
        f' data-video-aspect="{escape(embed.aspect.value)}"'
        f' data-video-source="{escape(embed.source)}">'
        f'<iframe src="{escape(embed.embed_url)}" title="{escape(spec.title)}"'
        f' loading="lazy" allow="{escape(IFRAME_ALLOW)}" allowfullscreen'
        f' frameborder="0" referrerpolicy="strict-origin-when-cross-origin"'
        f"{sandbox}></iframe>"
        "</div>"
    )
