"""
Shared fixtures for content rendering tests.
"""

import pytest
from bs4 import BeautifulSoup


YOUTUBE_URL = "https://www.youtube.com/watch?v=dQw4w9WgXcQ"
BILIBILI_URL = "https://www.bilibili.com/video/BV1x5411c7mD"
DOUYIN_URL = "https://www.iesdouyin.com/share/video/7234567890123456789"
DOUYIN_BARE_MODAL_URL = "douyin.com/modal_id=7602245594001771802"


@pytest.fixture
def pandoc():
    """Skip tests that need the pandoc binary when it is not installed."""
    pypandoc = pytest.importorskip("pypandoc")
    try:
        pypandoc.get_pandoc_version()
    except OSError:
        pytest.skip("pandoc binary not available")
    return pypandoc


@pytest.fixture
def parse_html():
    def _parse(html):
        return BeautifulSoup(html, "html.parser")

    return _parse


@pytest.fixture
def platform_urls():
    return {
        "youtube": YOUTUBE_URL,
        "bilibili": BILIBILI_URL,
        "douyin": DOUYIN_URL,
    }
