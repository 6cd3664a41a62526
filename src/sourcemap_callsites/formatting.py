"""Render decorated callsites for display."""

from collections.abc import Iterable
from io import StringIO

from sourcemap_callsites.callsite import CallSite
from sourcemap_callsites.decorator import DecoratedCallSite


def format_callsite(callsite: CallSite) -> str:
    """Format a callsite as ``file:line:column``.

    Decorated callsites with a source map show their original location.
    """
    if isinstance(callsite, DecoratedCallSite):
        parts = (
            callsite.mapped_file_name(),
            callsite.mapped_line_number(),
            callsite.mapped_column_number(),
        )
    else:
        parts = (callsite.file_name(), callsite.line_number(), callsite.column_number())

    filename, line, column = parts
    text = filename or "<unknown>"
    if line is not None:
        text += f":{line}"
        if column is not None:
            text += f":{column}"
    return text


def format_stack(callsites: Iterable[CallSite]) -> str:
    """Format a stack, one ``at`` line per callsite.

    Mapped callsites get a second line naming the generated location they
    were translated from.

    Args:
        callsites: Callsites in stack order, usually from a mapper.

    Returns:
        The formatted stack, newline terminated.

    """
    output = StringIO()
    for callsite in callsites:
        if callsite.is_native():
            output.write("    at native\n")
            continue

        output.write(f"    at {format_callsite(callsite)}\n")
        if isinstance(callsite, DecoratedCallSite) and callsite.has_source_map:
            output.write(f"        (generated: {format_callsite(callsite.original)})\n")
    return output.getvalue()
