"""Tests for sourceMappingURL discovery and classification."""

import base64
import os

import pytest

from sourcemap_callsites.errors import MapParseError
from sourcemap_callsites.resolver import (
    ExternalMapUrl,
    InlineMapUrl,
    decode_inline_map,
    find_url_comment,
    is_inline_url,
    resolve_url,
)

SOURCE_DIR = os.path.abspath(os.path.join(os.sep, "project", "dist"))


class TestFindUrlComment:
    """Test the comment scanner."""

    def test_line_comment(self) -> None:
        """Find a ``//#`` comment."""
        src = "var a = 1;\n//# sourceMappingURL=app.js.map\n"
        assert find_url_comment(src) == "app.js.map"

    def test_block_comment(self) -> None:
        """Find a ``/*# ... */`` comment."""
        src = "body { color: red }\n/*# sourceMappingURL=style.css.map */\n"
        assert find_url_comment(src) == "style.css.map"

    def test_legacy_at_marker(self) -> None:
        """Accept the legacy ``//@`` marker."""
        src = "var a = 1;\n//@ sourceMappingURL=old.js.map"
        assert find_url_comment(src) == "old.js.map"

    def test_trailing_whitespace_is_tolerated(self) -> None:
        """Trailing spaces and tabs after the URL are ignored."""
        src = "var a = 1;\n//# sourceMappingURL=app.js.map \t\n"
        assert find_url_comment(src) == "app.js.map"

    def test_last_comment_wins(self) -> None:
        """Scanning starts at the end, so the last comment is used."""
        src = (
            "//# sourceMappingURL=first.js.map\n"
            "var a = 1;\n"
            "//# sourceMappingURL=second.js.map\n"
        )
        assert find_url_comment(src) == "second.js.map"

    def test_windows_line_endings(self) -> None:
        """CRLF line endings are handled."""
        src = "var a = 1;\r\n//# sourceMappingURL=app.js.map\r\n"
        assert find_url_comment(src) == "app.js.map"

    def test_comment_inside_code_is_ignored(self) -> None:
        """A comment that does not end its line is not a mapping comment."""
        src = 'var s = "//# sourceMappingURL=fake.js.map"; run(s);\n'
        assert find_url_comment(src) is None

    def test_no_comment(self) -> None:
        """Sources without a comment return None."""
        assert find_url_comment("var a = 1;\n") is None
        assert find_url_comment("") is None


class TestResolveUrl:
    """Test URL classification."""

    def test_relative_path_resolved_against_source_dir(self) -> None:
        """External URLs become absolute paths next to the source."""
        url = resolve_url("//# sourceMappingURL=maps/app.js.map", SOURCE_DIR)
        assert url == ExternalMapUrl(path=os.path.join(SOURCE_DIR, "maps", "app.js.map"))

    def test_parent_relative_path_is_normalized(self) -> None:
        """Parent references are collapsed."""
        url = resolve_url("//# sourceMappingURL=../maps/app.js.map", SOURCE_DIR)
        expected = os.path.abspath(os.path.join(SOURCE_DIR, os.pardir, "maps", "app.js.map"))
        assert url == ExternalMapUrl(path=expected)

    def test_inline_data_uri(self) -> None:
        """Data URIs become inline URLs carrying the base64 payload."""
        src = "//# sourceMappingURL=data:application/json;charset=utf-8;base64,eyJ9"
        assert resolve_url(src, SOURCE_DIR) == InlineMapUrl(payload="eyJ9")

    def test_no_comment_returns_none(self) -> None:
        """Sources without a comment resolve to None."""
        assert resolve_url("var a = 1;", SOURCE_DIR) is None


class TestInlineMaps:
    """Test inline data URI helpers."""

    def test_is_inline_url(self) -> None:
        """Only base64 JSON data URIs are inline."""
        assert is_inline_url("data:application/json;base64,eyJ9")
        assert is_inline_url("data:application/json;charset=utf-8;base64,eyJ9")
        assert not is_inline_url("app.js.map")
        assert not is_inline_url("data:text/plain;base64,eyJ9")

    def test_decode_inline_map(self) -> None:
        """Payloads decode to UTF-8 text."""
        payload = base64.b64encode(b'{"version": 3}').decode("ascii")
        assert decode_inline_map(payload, filename="/app.js") == '{"version": 3}'

    def test_decode_invalid_base64(self) -> None:
        """Truncated base64 raises MapParseError."""
        with pytest.raises(MapParseError) as e:
            decode_inline_map("eyJ", filename="/app.js")
        assert e.value.filename == "/app.js"
        assert e.value.map_url == "<inline>"
