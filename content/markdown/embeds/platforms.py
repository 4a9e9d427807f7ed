# content/markdown/embeds/platforms.py
"""
Platform table shared by the embed builder and the sanitizer policy.

Every player URL the resolver produces starts with the first prefix of its
platform row, and the sanitizer's iframe ``src`` pattern is compiled from
the same rows. Adding a platform or a player host happens here and nowhere
else.
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from functools import lru_cache


class Platform(str, enum.Enum):
    YOUTUBE = "youtube"
    BILIBILI = "bilibili"
    DOUYIN = "douyin"


class Aspect(str, enum.Enum):
    LANDSCAPE = "16:9"
    PORTRAIT = "9:16"


@dataclass(frozen=True)
class VideoEmbed:
    """A recognised video URL, ready to be rendered as an iframe fragment."""

    platform: Platform
    source: str
    embed_url: str
    aspect: Aspect


@dataclass(frozen=True)
class PlatformSpec:
    platform: Platform
    title: str
    aspect: Aspect
    # First prefix is the one the resolver emits; the rest are accepted players.
    player_prefixes: tuple[str, ...]
    sandbox: str | None = None
    # Accepted only when the short-link pass-through is enabled.
    short_link_prefixes: tuple[str, ...] = ()

    @property
    def player_prefix(self) -> str:
        return self.player_prefixes[0]


DOUYIN_SHORT_LINK_HOST = "v.douyin.com"

PLATFORMS = {
    Platform.YOUTUBE: PlatformSpec(
        platform=Platform.YOUTUBE,
        title="YouTube 视频播放器",
        aspect=Aspect.LANDSCAPE,
        player_prefixes=(
            "https://www.youtube.com/embed/",
            "https://youtube.com/embed/",
            "https://www.youtube-nocookie.com/embed/",
            "https://youtube-nocookie.com/embed/",
        ),
    ),
    Platform.BILIBILI: PlatformSpec(
        platform=Platform.BILIBILI,
        title="B 站视频播放器",
        aspect=Aspect.LANDSCAPE,
        player_prefixes=("https://player.bilibili.com/player.html?",),
        # No allow-top-navigation: the player must not redirect the page.
        sandbox="allow-scripts allow-same-origin allow-presentation",
    ),
    Platform.DOUYIN: PlatformSpec(
        platform=Platform.DOUYIN,
        title="抖音视频播放器",
        aspect=Aspect.PORTRAIT,
        player_prefixes=(
            "https://www.iesdouyin.com/share/video/",
            "https://www.douyin.com/video/",
        ),
        short_link_prefixes=(f"https://{DOUYIN_SHORT_LINK_HOST}/",),
    ),
}

IFRAME_ALLOW = (
    "accelerometer; clipboard-write; encrypted-media; gyroscope; "
    "picture-in-picture; web-share"
)


def get_platform_spec(platform: Platform) -> PlatformSpec:
    return PLATFORMS[Platform(platform)]


def accepted_player_prefixes(allow_douyin_short_links: bool = True) -> tuple[str, ...]:
    """All player URL prefixes an iframe ``src`` may start with."""
    prefixes = []
    for spec in PLATFORMS.values():
        prefixes.extend(spec.player_prefixes)
        if allow_douyin_short_links:
            prefixes.extend(spec.short_link_prefixes)
    return tuple(prefixes)


@lru_cache(maxsize=2)
def video_embed_src_pattern(allow_douyin_short_links: bool = True) -> re.Pattern:
    """
    Anchored pattern matching exactly the accepted player URL prefixes.

    Compiled from ``PLATFORMS`` so the sanitizer can never accept a player
    the builder does not know about, nor reject one the builder emits.
    """
    alternatives = "|".join(
        re.escape(prefix)
        for prefix in accepted_player_prefixes(allow_douyin_short_links)
    )
    return re.compile(rf"^(?:{alternatives})")
