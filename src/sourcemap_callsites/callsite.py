"""Callsite protocol and the filter deciding which callsites to map.

Callsites come from whatever extracted the stack. This package only reads
them through the four accessors of CallSite.
"""

import os
from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@runtime_checkable
class CallSite(Protocol):
    """One entry of a captured call stack."""

    def file_name(self) -> str | None:
        """Return the generated file the frame executed in."""
        ...

    def line_number(self) -> int | None:
        """Return the 1-based line in the generated file."""
        ...

    def column_number(self) -> int | None:
        """Return the column in the generated file."""
        ...

    def is_native(self) -> bool:
        """Return True for frames executing runtime-internal code."""
        ...


@dataclass(frozen=True)
class StaticCallSite:
    """A callsite with fixed values, for callers that already parsed a trace."""

    file: str | None
    line: int | None = None
    column: int | None = None
    native: bool = False

    def file_name(self) -> str | None:
        return self.file

    def line_number(self) -> int | None:
        return self.line

    def column_number(self) -> int | None:
        return self.column

    def is_native(self) -> bool:
        return self.native


def is_skippable(callsite: CallSite) -> bool:
    """Check whether a callsite is runtime or synthetic code.

    Project code lives in files named by an absolute path or a relative path
    starting with a dot. Anything else (``internal/…``, ``<string>``, empty
    names) is left alone.

    Args:
        callsite: The callsite to classify.

    Returns:
        True if the callsite must pass through without decoration.

    """
    if callsite.is_native():
        return True

    filename = callsite.file_name() or ""
    return not os.path.isabs(filename) and not filename.startswith(".")
