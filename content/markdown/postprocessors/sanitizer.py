# content/markdown/postprocessors/sanitizer.py

import logging
import re
from dataclasses import dataclass, field
from functools import lru_cache
from types import MappingProxyType
from typing import Mapping

import bleach
from bs4 import BeautifulSoup

from content.markdown.config import get_video_embed_config
from content.markdown.embeds import video_embed_src_pattern
from content.markdown.embeds.fragment import CONTAINER_ATTRIBUTES, IFRAME_ATTRIBUTES

logger = logging.getLogger(__name__)


def _freeze(mapping):
    return MappingProxyType(dict(mapping))


@dataclass(frozen=True)
class SanitizerPolicy:
    """
    Immutable allow-list handed to bleach.

    ``attribute_patterns`` restricts the value of a (tag, attribute) pair;
    ``required_attributes`` names the attribute an element cannot live
    without, so the element is dropped whole when that attribute is rejected.
    """

    tags: frozenset = frozenset()
    attributes: Mapping[str, frozenset] = field(default_factory=dict)
    attribute_patterns: Mapping[tuple, re.Pattern] = field(default_factory=dict)
    required_attributes: Mapping[str, str] = field(default_factory=dict)
    protocols: frozenset = frozenset()

    def extend(
        self,
        *,
        tags=(),
        attributes=None,
        attribute_patterns=None,
        required_attributes=None,
        protocols=(),
    ) -> "SanitizerPolicy":
        """Return a new policy with the given rules added on top of this one."""
        merged_attributes = dict(self.attributes)
        for tag, names in (attributes or {}).items():
            merged_attributes[tag] = frozenset(merged_attributes.get(tag, ())) | frozenset(names)

        return SanitizerPolicy(
            tags=self.tags | frozenset(tags),
            attributes=_freeze(merged_attributes),
            attribute_patterns=_freeze({**self.attribute_patterns, **(attribute_patterns or {})}),
            required_attributes=_freeze({**self.required_attributes, **(required_attributes or {})}),
            protocols=self.protocols | frozenset(protocols),
        )

    def allows_attribute(self, tag: str, name: str, value: str) -> bool:
        if name not in self.attributes.get(tag, ()):
            return False
        pattern = self.attribute_patterns.get((tag, name))
        if pattern is None:
            return True
        return bool(pattern.match(value or ""))


def build_baseline_policy() -> SanitizerPolicy:
    """
    User-generated-content baseline for ordinary Markdown output.

    Covers text, headings, lists, links, images, tables, code, footnotes and
    task lists. ``div`` is allowed without attributes; richer blocks come from
    extensions layered on with ``SanitizerPolicy.extend``.
    """
    tags = set(bleach.sanitizer.ALLOWED_TAGS).union(
        {
            # text
            "p",
            "br",
            "div",
            "span",
            "section",
            "mark",
            "ins",
            "del",
            "s",
            "strike",
            "sup",
            "sub",
            "small",
            "q",
            "cite",
            # headings
            "h1",
            "h2",
            "h3",
            "h4",
            "h5",
            "h6",
            # lists
            "ul",
            "ol",
            "li",
            "hr",
            "dl",
            "dt",
            "dd",
            # code
            "pre",
            "code",
            "kbd",
            "samp",
            "var",
            # tables
            "table",
            "thead",
            "tbody",
            "tfoot",
            "tr",
            "th",
            "td",
            "caption",
            "colgroup",
            "col",
            # media
            "img",
            "figure",
            "figcaption",
            # task lists
            "input",
            "label",
            "details",
            "summary",
        }
    )

    attributes = {
        "a": ["href", "title", "rel", "id", "class"],
        "img": ["src", "alt", "title", "width", "height", "loading"],
        "abbr": ["title"],
        "acronym": ["title"],
        "blockquote": ["cite"],
        "q": ["cite"],
        "h1": ["id"],
        "h2": ["id"],
        "h3": ["id"],
        "h4": ["id"],
        "h5": ["id"],
        "h6": ["id"],
        "li": ["id"],
        "section": ["id", "class"],
        "code": ["class"],
        "pre": ["class"],
        "span": ["class"],
        "ol": ["start", "type"],
        "th": ["colspan", "rowspan", "scope", "align"],
        "td": ["colspan", "rowspan", "align"],
        "input": ["type", "checked", "disabled"],
    }

    return SanitizerPolicy(
        tags=frozenset(tags),
        attributes=_freeze({tag: frozenset(names) for tag, names in attributes.items()}),
        protocols=frozenset({"http", "https", "mailto"}),
    )


def build_sanitizer_policy(*, allow_douyin_short_links: bool = True) -> SanitizerPolicy:
    """
    Baseline policy plus the rules that let video embed fragments through.

    The attribute lists and the iframe ``src`` pattern come from the embed
    builder and its platform table, so the two cannot drift apart.
    """
    return build_baseline_policy().extend(
        tags={"iframe"},
        attributes={
            "div": CONTAINER_ATTRIBUTES,
            "iframe": IFRAME_ATTRIBUTES,
        },
        attribute_patterns={
            ("iframe", "src"): video_embed_src_pattern(allow_douyin_short_links),
        },
        required_attributes={"iframe": "src"},
    )


@lru_cache(maxsize=1)
def get_sanitizer_policy() -> SanitizerPolicy:
    """Process-wide policy, built on first use (warmed in ``ContentConfig.ready``)."""
    config = get_video_embed_config()
    return build_sanitizer_policy(allow_douyin_short_links=config["DOUYIN_SHORT_LINKS"])


def _drop_orphaned_elements(html: str, policy: SanitizerPolicy) -> str:
    if not policy.required_attributes:
        return html

    soup = BeautifulSoup(html, "html.parser")
    dropped = 0
    for tag, required in policy.required_attributes.items():
        for element in soup.find_all(tag):
            value = element.get(required)
            if not value or not policy.allows_attribute(tag, required, value):
                element.decompose()
                dropped += 1

    if not dropped:
        return html

    logger.debug(f"Dropped {dropped} element(s) missing a permitted required attribute")
    return str(soup)


def sanitize_html(html, context, policy=None):
    """
    Sanitize HTML output using bleach.
    This is the FIRST post-processor and should run before any other HTML modifications.

    Disallowed tags are stripped, attributes are filtered through the policy,
    and elements whose required attribute did not survive (an iframe with a
    foreign ``src``) are removed together with their content.
    """
    if policy is None:
        policy = context.get("sanitizer_policy") or get_sanitizer_policy()

    sanitized = bleach.clean(
        html,
        tags=policy.tags,
        attributes=lambda tag, name, value: policy.allows_attribute(tag, name, value),
        protocols=policy.protocols,
        strip=True,
    )

    return _drop_orphaned_elements(sanitized, policy)
