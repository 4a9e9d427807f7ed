"""
Video embeds for standalone YouTube, Bilibili and Douyin URLs.
"""

from .fragment import build_video_embed_html
from .platforms import (
    PLATFORMS,
    Aspect,
    Platform,
    VideoEmbed,
    video_embed_src_pattern,
)
from .resolver import resolve_video_embed

__all__ = [
    'PLATFORMS',
    'Aspect',
    'Platform',
    'VideoEmbed',
    'build_video_embed_html',
    'resolve_video_embed',
    'video_embed_src_pattern',
]
