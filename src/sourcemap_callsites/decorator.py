"""Wrap callsites with lazily resolved original positions.

The wrapped callsite is never modified. A DecoratedCallSite keeps reporting
the generated location through the CallSite accessors, and exposes the
original location through its ``source_map`` view when one is attached.
"""

import os
from functools import cached_property

from sourcemap_callsites.callsite import CallSite
from sourcemap_callsites.consumer import Consumer, Position


class SourceMapView:
    """Original location of one callsite, looked up on first access."""

    def __init__(self, callsite: CallSite, consumer: Consumer, filename: str) -> None:
        """Initialize the view.

        Args:
            callsite: The generated callsite.
            consumer: Consumer for the generated file's map.
            filename: Absolute path of the generated file.

        """
        self._callsite = callsite
        self._consumer = consumer
        self._filename = filename

    @cached_property
    def position(self) -> Position:
        """Original position for the callsite, computed at most once."""
        line = self._callsite.line_number()
        column = self._callsite.column_number()
        if line is None or column is None:
            return Position.empty()
        return self._consumer.original_position_for(line, column)

    @property
    def generated_file_name(self) -> str:
        return self._filename

    def file_name(self) -> str | None:
        """Return the original source path, resolved next to the generated file."""
        source = self.position.source
        if not source:
            return self._callsite.file_name()
        source_dir = os.path.dirname(self._filename)
        return os.path.abspath(os.path.join(source_dir, source))

    def line_number(self) -> int | None:
        line = self.position.line
        return line if line is not None else self._callsite.line_number()

    def column_number(self) -> int | None:
        column = self.position.column
        return column if column is not None else self._callsite.column_number()


class DecoratedCallSite:
    """A callsite with an optional source map view attached."""

    def __init__(self, original: CallSite, source_map: SourceMapView | None = None) -> None:
        """Initialize the decorated callsite.

        Args:
            original: The callsite as captured.
            source_map: View onto the original location, or None when the
                generated file has no usable map.

        """
        self.original = original
        self.source_map = source_map

    @property
    def has_source_map(self) -> bool:
        return self.source_map is not None

    def file_name(self) -> str | None:
        return self.original.file_name()

    def line_number(self) -> int | None:
        return self.original.line_number()

    def column_number(self) -> int | None:
        return self.original.column_number()

    def is_native(self) -> bool:
        return self.original.is_native()

    def mapped_file_name(self) -> str | None:
        """Return the original file name, or the generated one if unmapped."""
        if self.source_map is None:
            return self.original.file_name()
        return self.source_map.file_name()

    def mapped_line_number(self) -> int | None:
        """Return the original line, or the generated one if unmapped."""
        if self.source_map is None:
            return self.original.line_number()
        return self.source_map.line_number()

    def mapped_column_number(self) -> int | None:
        """Return the original column, or the generated one if unmapped."""
        if self.source_map is None:
            return self.original.column_number()
        return self.source_map.column_number()

    def __repr__(self) -> str:
        return (
            f"DecoratedCallSite({self.mapped_file_name()}:"
            f"{self.mapped_line_number()}:{self.mapped_column_number()}, "
            f"mapped={self.has_source_map})"
        )


def decorate(
    callsite: CallSite,
    consumer: Consumer | None,
    filename: str,
) -> DecoratedCallSite:
    """Attach a source map view to a callsite.

    Args:
        callsite: The callsite to decorate.
        consumer: Consumer for the generated file, or None if there is none.
        filename: Absolute path of the generated file.

    Returns:
        The decorated callsite. No lookup happens until a mapped accessor
        is first used.

    """
    if consumer is None:
        return DecoratedCallSite(callsite)
    return DecoratedCallSite(callsite, SourceMapView(callsite, consumer, filename))
