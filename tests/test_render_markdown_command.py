"""
Tests for the render_markdown management command.
"""

from io import StringIO

import pytest
from django.core.management import CommandError, call_command

from .conftest import BILIBILI_URL


@pytest.fixture
def markdown_file(tmp_path):
    path = tmp_path / "post.md"
    path.write_text(f"# Post\n\n{BILIBILI_URL}\n", encoding="utf-8")
    return path


class TestRenderMarkdownCommand:

    def test_embeds_only(self, markdown_file):
        out = StringIO()
        call_command("render_markdown", str(markdown_file), "--embeds-only", stdout=out)

        output = out.getvalue()
        assert output.startswith("# Post\n\n<div class=\"video-embed is-loading\"")
        assert "player.bilibili.com/player.html?bvid=BV1x5411c7mD" in output

    @pytest.mark.usefixtures("pandoc")
    def test_html(self, markdown_file):
        out = StringIO()
        call_command("render_markdown", str(markdown_file), stdout=out)

        assert "<iframe" in out.getvalue()
        assert "<h1" in out.getvalue()

    def test_conflicting_flags(self, markdown_file):
        with pytest.raises(CommandError):
            call_command("render_markdown", str(markdown_file), "--plain", "--embeds-only")

    def test_missing_file(self, tmp_path):
        with pytest.raises(CommandError, match="Cannot read"):
            call_command("render_markdown", str(tmp_path / "missing.md"))
