"""Load the source map consumer for a generated file.

Both variants follow the same steps: read the generated file, find its
sourceMappingURL, read or decode the map, parse it. A file without a mapping
comment yields None rather than an error.
"""

import asyncio
import os
from functools import partial

from sourcemap_callsites.consumer import SourceMapConsumer, parse_source_map
from sourcemap_callsites.errors import MapReadError, SourceReadError
from sourcemap_callsites.log import get_logger
from sourcemap_callsites.resolver import (
    INLINE_MAP_URL,
    ExternalMapUrl,
    InlineMapUrl,
    SourceMapUrl,
    decode_inline_map,
    resolve_url,
)

logger = get_logger(__name__)


def read_source(filename: str) -> str:
    """Read a generated source file.

    Raises:
        SourceReadError: If the file cannot be read as UTF-8 text.

    """
    try:
        with open(filename, encoding="utf-8") as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        logger.debug('Error reading source file "%s": %s', filename, e)
        msg = f'Error reading source file "{filename}": {e}'
        raise SourceReadError(msg, filename=filename) from e


def read_map(url: ExternalMapUrl, *, filename: str) -> str:
    """Read an external map file.

    Raises:
        MapReadError: If the map file is missing or unreadable.

    """
    try:
        with open(url.path, encoding="utf-8") as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        logger.debug(
            'Error reading sourcemap "%s", referenced from "%s": %s',
            url.path,
            filename,
            e,
        )
        msg = f'Error reading sourcemap "{url.path}" for file "{filename}": {e}'
        raise MapReadError(msg, filename=filename, map_path=url.path) from e


def _find_url(source_text: str, filename: str) -> SourceMapUrl | None:
    url = resolve_url(source_text, os.path.dirname(filename))
    if url is None:
        logger.debug('File "%s" does not contain a sourcemap URL, skipping', filename)
    elif isinstance(url, InlineMapUrl):
        logger.debug("File %s contains an inline sourcemap, attempting to decode", filename)
    else:
        logger.debug("File %s contains an external sourcemap, attempting to read it", filename)
    return url


def _map_label(url: SourceMapUrl) -> str:
    return url.path if isinstance(url, ExternalMapUrl) else INLINE_MAP_URL


def load_consumer(filename: str) -> SourceMapConsumer | None:
    """Load the consumer for a generated file, blocking on I/O.

    Args:
        filename: Absolute path of the generated file.

    Returns:
        The parsed consumer, or None if the file has no mapping comment.

    Raises:
        SourceReadError: The generated file cannot be read.
        MapReadError: The external map cannot be read.
        MapParseError: The map cannot be decoded or parsed.

    """
    url = _find_url(read_source(filename), filename)
    if url is None:
        return None

    if isinstance(url, InlineMapUrl):
        text = decode_inline_map(url.payload, filename=filename)
    else:
        text = read_map(url, filename=filename)

    return parse_source_map(text, filename=filename, map_url=_map_label(url))


async def load_consumer_async(filename: str) -> SourceMapConsumer | None:
    """Load the consumer for a generated file without blocking the loop.

    File reads and the parse run in the loop's default executor.

    Args:
        filename: Absolute path of the generated file.

    Returns:
        The parsed consumer, or None if the file has no mapping comment.

    Raises:
        SourceReadError: The generated file cannot be read.
        MapReadError: The external map cannot be read.
        MapParseError: The map cannot be decoded or parsed.

    """
    loop = asyncio.get_running_loop()

    source_text = await loop.run_in_executor(None, read_source, filename)
    url = _find_url(source_text, filename)
    if url is None:
        return None

    if isinstance(url, InlineMapUrl):
        text = decode_inline_map(url.payload, filename=filename)
    else:
        text = await loop.run_in_executor(
            None,
            partial(read_map, url, filename=filename),
        )

    return await loop.run_in_executor(
        None,
        partial(parse_source_map, text, filename=filename, map_url=_map_label(url)),
    )
