# content/markdown/embeds/resolver.py
"""
Resolve a bare video URL into a ``VideoEmbed``.

Supported forms:
    https://www.youtube.com/watch?v=ID&t=1m2s   → youtube.com/embed/ID?...&start=62
    https://youtu.be/ID                         → youtube.com/embed/ID?...
    https://www.bilibili.com/video/BV...?p=2    → player.bilibili.com/player.html?bvid=...&page=2
    douyin.com/modal_id=ID                      → www.iesdouyin.com/share/video/ID

Every function here is total: anything unrecognised yields ``None`` and the
caller keeps the original Markdown line.
"""

import logging
import re
from urllib.parse import parse_qs, urlencode, urlsplit, urlunsplit

from .platforms import (
    DOUYIN_SHORT_LINK_HOST,
    Platform,
    VideoEmbed,
    get_platform_spec,
)

logger = logging.getLogger(__name__)

# Bare hosts that get an https:// scheme prepended
KNOWN_BARE_PREFIXES = (
    "douyin.com/",
    "www.douyin.com/",
    "iesdouyin.com/",
    "www.iesdouyin.com/",
    "v.douyin.com/",
    "bilibili.com/",
    "www.bilibili.com/",
    "youtube.com/",
    "www.youtube.com/",
    "youtu.be/",
)

VIDEO_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,128}$")
YOUTUBE_TIME_PATTERN = re.compile(r"(?<!\d)(\d{1,9})([hms])", re.IGNORECASE)
MAX_NUMBER_DIGITS = 9
YOUTUBE_PATH_PREFIXES = ("shorts/", "embed/", "live/")
TIME_UNITS = {"h": 3600, "m": 60, "s": 1}


def is_host_or_subdomain(host: str, domain: str) -> bool:
    """True for ``domain`` itself or any ``*.domain``, never for ``notdomain``."""
    host = (host or "").strip().lower()
    domain = (domain or "").strip().lower()
    if not host or not domain:
        return False
    return host == domain or host.endswith("." + domain)


def normalize_video_url(raw: str) -> str:
    if not raw:
        return raw
    lower = raw.lower()
    if lower.startswith(("http://", "https://")):
        return raw
    if lower.startswith(KNOWN_BARE_PREFIXES):
        return "https://" + raw
    return raw


def _is_video_id(value: str) -> bool:
    return bool(value) and bool(VIDEO_ID_PATTERN.match(value))


def _query_value(query: dict, key: str) -> str:
    values = query.get(key)
    if not values:
        return ""
    return values[0]


def _path_segments(path: str) -> list[str]:
    return path.strip("/").split("/")


def parse_youtube_time(value: str) -> int:
    """
    Parse a YouTube timestamp into seconds.

    ``"90"`` is 90 seconds; otherwise every ``<n>h``/``<n>m``/``<n>s`` token
    is summed, so ``"1h2m3s"``, ``"2m"`` and ``"3s1m"`` all work. Numbers
    longer than nine digits are ignored.
    """
    value = (value or "").strip()
    if not value:
        return 0
    if value.isascii() and value.isdigit():
        return int(value) if len(value) <= MAX_NUMBER_DIGITS else 0

    total = 0
    for amount, unit in YOUTUBE_TIME_PATTERN.findall(value):
        total += int(amount) * TIME_UNITS[unit.lower()]
    return total


def parse_youtube_start(query: dict) -> int:
    start = _query_value(query, "start")
    if start:
        return parse_youtube_time(start)
    t = _query_value(query, "t")
    if t:
        return parse_youtube_time(t)
    return 0


def parse_youtube_embed(parts, source: str) -> VideoEmbed | None:
    host = (parts.hostname or "").lower()
    query = parse_qs(parts.query)

    if host == "youtu.be":
        video_id = _path_segments(parts.path)[0]
    elif is_host_or_subdomain(host, "youtube.com"):
        path = parts.path.strip("/")
        if path == "watch":
            video_id = _query_value(query, "v")
        else:
            video_id = ""
            for prefix in YOUTUBE_PATH_PREFIXES:
                if path.startswith(prefix):
                    video_id = path[len(prefix):].split("/")[0]
                    break
    else:
        return None

    if not _is_video_id(video_id):
        return None

    params = [("rel", "0"), ("modestbranding", "1"), ("playsinline", "1")]
    start = parse_youtube_start(query)
    if start > 0:
        params.append(("start", str(start)))

    spec = get_platform_spec(Platform.YOUTUBE)
    return VideoEmbed(
        platform=Platform.YOUTUBE,
        source=source,
        embed_url=f"{spec.player_prefix}{video_id}?{urlencode(params)}",
        aspect=spec.aspect,
    )


def _positive_int(value: str, default: int) -> int:
    value = (value or "").strip()
    if not (value.isascii() and value.isdigit()) or len(value) > MAX_NUMBER_DIGITS:
        return default
    number = int(value)
    return number if number >= 1 else default


def parse_bilibili_embed(parts, source: str) -> VideoEmbed | None:
    host = (parts.hostname or "").lower()
    if not is_host_or_subdomain(host, "bilibili.com"):
        return None

    segments = _path_segments(parts.path)
    if len(segments) != 2 or segments[0] != "video":
        return None

    raw_id = segments[1]
    if not _is_video_id(raw_id):
        return None

    lower_id = raw_id.lower()
    if lower_id.startswith("bv"):
        id_param = ("bvid", raw_id)
    elif lower_id.startswith("av") and lower_id[2:].isdigit():
        id_param = ("aid", lower_id[2:])
    elif raw_id.isdigit():
        id_param = ("aid", raw_id)
    else:
        return None

    page = _positive_int(_query_value(parse_qs(parts.query), "p"), 1)
    params = [
        id_param,
        ("page", str(page)),
        ("high_quality", "1"),
        ("danmaku", "0"),
        ("autoplay", "0"),  # always off, whatever the source URL asks for
    ]

    spec = get_platform_spec(Platform.BILIBILI)
    return VideoEmbed(
        platform=Platform.BILIBILI,
        source=source,
        embed_url=spec.player_prefix + urlencode(params),
        aspect=spec.aspect,
    )


def _douyin_video_id(parts) -> str:
    segments = _path_segments(parts.path)
    for index, segment in enumerate(segments):
        if segment == "video" and index + 1 < len(segments):
            return segments[index + 1]
        if segment.startswith("modal_id="):
            return segment[len("modal_id="):]
    return _query_value(parse_qs(parts.query), "modal_id")


def parse_douyin_embed(
    parts, source: str, allow_short_links: bool = True
) -> VideoEmbed | None:
    host = (parts.hostname or "").lower()
    if not (
        is_host_or_subdomain(host, "douyin.com")
        or is_host_or_subdomain(host, "iesdouyin.com")
    ):
        return None

    spec = get_platform_spec(Platform.DOUYIN)
    video_id = _douyin_video_id(parts)

    if video_id:
        if not _is_video_id(video_id):
            return None
        embed_url = spec.player_prefix + video_id
    elif host == DOUYIN_SHORT_LINK_HOST and allow_short_links:
        # Short links need a redirect hop to find the id; embed the link itself.
        code = _path_segments(parts.path)[0]
        if not _is_video_id(code):
            return None
        embed_url = urlunsplit(("https", DOUYIN_SHORT_LINK_HOST, f"/{code}/", "", ""))
    else:
        return None

    return VideoEmbed(
        platform=Platform.DOUYIN,
        source=source,
        embed_url=embed_url,
        aspect=spec.aspect,
    )


def resolve_video_embed(
    raw: str, *, allow_douyin_short_links: bool = True
) -> VideoEmbed | None:
    """
    Turn a candidate line's URL text into a ``VideoEmbed``.

    Args:
        raw: URL text, optionally wrapped in ``<…>`` and without a scheme
            for the known platform hosts
        allow_douyin_short_links: embed ``v.douyin.com`` short links as-is

    Returns:
        The embed descriptor, or None when the URL is not a supported video
    """
    value = (raw or "").strip()
    if value.startswith("<"):
        value = value[1:]
    if value.endswith(">"):
        value = value[:-1]
    value = normalize_video_url(value.strip())
    if not value:
        return None

    try:
        parts = urlsplit(value)
        host = parts.hostname
    except ValueError:
        return None

    if parts.scheme.lower() not in ("http", "https") or not host:
        return None

    embed = parse_youtube_embed(parts, value)
    if embed is None:
        embed = parse_bilibili_embed(parts, value)
    if embed is None:
        embed = parse_douyin_embed(
            parts, value, allow_short_links=allow_douyin_short_links
        )

    if embed is not None:
        logger.debug(f"Resolved {embed.platform.value} embed for {value!r}")
    return embed
