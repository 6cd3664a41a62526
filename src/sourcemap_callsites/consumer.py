"""Original-position lookups backed by the ``sourcemap`` library.

Source maps store 0-based lines and columns. Callsites report 1-based lines,
so lines are shifted on the way in and out. Columns are passed through
unchanged in both directions.
"""

from dataclasses import dataclass
from typing import Protocol

import sourcemap
from sourcemap.objects import SourceMapIndex

from sourcemap_callsites.errors import MapParseError
from sourcemap_callsites.log import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Position:
    """Original location for a generated position.

    Fields are None when the map does not cover the queried location.
    """

    source: str | None = None
    """Original source path as written in the map's ``sources`` list."""

    line: int | None = None
    """Line in the original source (1-indexed)."""

    column: int | None = None
    """Column in the original source (0-indexed)."""

    @classmethod
    def empty(cls) -> "Position":
        """Position for a location the map knows nothing about."""
        return cls()


class Consumer(Protocol):
    """Anything that answers original-position queries."""

    def original_position_for(self, line: int, column: int) -> Position:
        """Return the original position for a generated line and column."""
        ...


class SourceMapConsumer:
    """Consumer over a parsed source map index."""

    def __init__(self, index: SourceMapIndex) -> None:
        """Initialize the consumer.

        Args:
            index: Parsed map from ``sourcemap.loads``.

        """
        self._index = index

    def original_position_for(self, line: int, column: int) -> Position:
        """Find the original position for a generated location.

        Args:
            line: Generated line (1-indexed).
            column: Generated column.

        Returns:
            The closest mapped position at or before the column on that line,
            or an empty position if the line has no mappings.

        """
        if line < 1 or column < 0:
            return Position.empty()

        try:
            token = self._index.lookup(line=line - 1, column=column)
        except (IndexError, KeyError):
            logger.debug("No mapping for generated position %d:%d", line, column)
            return Position.empty()

        return Position(
            source=token.src or None,
            line=token.src_line + 1 if token.src_line is not None else None,
            column=token.src_col,
        )


def parse_source_map(text: str, *, filename: str, map_url: str) -> SourceMapConsumer:
    """Parse source map JSON into a consumer.

    Args:
        text: Source map JSON.
        filename: Generated file the map belongs to.
        map_url: Map path or inline label, for error reporting.

    Returns:
        A consumer for the map.

    Raises:
        MapParseError: If the text is not JSON or not a usable source map.

    """
    try:
        index = sourcemap.loads(text)
    except (
        ValueError,
        KeyError,
        TypeError,
        AttributeError,
        IndexError,
        RecursionError,
    ) as e:
        logger.debug(
            'Error parsing sourcemap "%s", referenced from "%s": %s',
            map_url,
            filename,
            e,
        )
        msg = f'Error parsing sourcemap for file "{filename}":\n{e}'
        raise MapParseError(msg, filename=filename, map_url=map_url) from e

    return SourceMapConsumer(index)
