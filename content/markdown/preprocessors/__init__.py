# content/markdown/preprocessors/__init__.py

from .video_embed import video_embed_default

PREPROCESSORS = [
    video_embed_default,  # Standalone video URLs → iframe embeds
    # Order matters - they run sequentially
]


def apply_preprocessors(text, context):
    """Apply all preprocessors in order"""
    for processor in PREPROCESSORS:
        text = processor(text, context)
    return text
