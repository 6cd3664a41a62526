"""Find and classify the sourceMappingURL comment of a generated file."""

import base64
import binascii
import os
import re
from dataclasses import dataclass

from sourcemap_callsites.errors import MapParseError

INLINE_MAP_URL = "<inline>"
"""Label used for inline maps in errors and logs."""

_INLINE_SOURCEMAP_RE = re.compile(r"^data:application/json[^,]+base64,")
_SOURCEMAP_RE = re.compile(
    r"(?://[@#][ \t]+sourceMappingURL=([^\s'\"]+?)[ \t]*$)"
    r"|(?:/\*[@#][ \t]+sourceMappingURL=([^*]+?)[ \t]*\*/[ \t]*$)",
)
_LINE_SPLIT_RE = re.compile(r"\r?\n")


@dataclass(frozen=True)
class ExternalMapUrl:
    """Map stored in a separate file."""

    path: str
    """Absolute path of the map file."""


@dataclass(frozen=True)
class InlineMapUrl:
    """Map embedded in the source as a base64 data URI."""

    payload: str
    """Base64 text following the first comma of the data URI."""


SourceMapUrl = ExternalMapUrl | InlineMapUrl


def is_inline_url(url: str) -> bool:
    """Check whether a sourceMappingURL value is a base64 JSON data URI."""
    return _INLINE_SOURCEMAP_RE.match(url) is not None


def find_url_comment(source_text: str) -> str | None:
    """Return the raw URL of the last sourceMappingURL comment, if any."""
    lines = _LINE_SPLIT_RE.split(source_text)
    for line in reversed(lines):
        match = _SOURCEMAP_RE.search(line)
        if match:
            return match.group(1) or match.group(2)
    return None


def resolve_url(source_text: str, source_dir: str) -> SourceMapUrl | None:
    """Locate the source map referenced by a generated file.

    The comment convention puts the URL at the end of the file, so lines are
    scanned from the last one backward and the first match wins.

    Args:
        source_text: Contents of the generated file.
        source_dir: Directory of the generated file, used to resolve
            relative map paths.

    Returns:
        The classified URL, or None when the file has no mapping comment.

    """
    url = find_url_comment(source_text)
    if url is None:
        return None

    if is_inline_url(url):
        return InlineMapUrl(payload=url[url.index(",") + 1 :])

    return ExternalMapUrl(path=os.path.abspath(os.path.join(source_dir, url)))


def decode_inline_map(payload: str, *, filename: str) -> str:
    """Decode an inline map payload into JSON text.

    Args:
        payload: Base64 data taken from the data URI.
        filename: Generated file the payload came from.

    Returns:
        The decoded map text.

    Raises:
        MapParseError: If the payload is not valid base64 or UTF-8.

    """
    try:
        return base64.b64decode(payload).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as e:
        msg = f'Error decoding inline sourcemap for file "{filename}": {e}'
        raise MapParseError(msg, filename=filename, map_url=INLINE_MAP_URL) from e
