"""Map stack callsites in generated code back to their original sources.

Find the ``sourceMappingURL`` comment of each generated file, load the
referenced (or inline) source map once per file, and decorate callsites with
the original file, line and column.
"""

from sourcemap_callsites.cache import CacheEntry, ConsumerCache, EntryState
from sourcemap_callsites.callsite import CallSite, StaticCallSite, is_skippable
from sourcemap_callsites.config import ErrorPolicy, MapperConfig, load_config
from sourcemap_callsites.consumer import (
    Consumer,
    Position,
    SourceMapConsumer,
    parse_source_map,
)
from sourcemap_callsites.decorator import DecoratedCallSite, SourceMapView, decorate
from sourcemap_callsites.errors import (
    MapParseError,
    MapReadError,
    SourceMapError,
    SourceReadError,
)
from sourcemap_callsites.formatting import format_callsite, format_stack
from sourcemap_callsites.loader import load_consumer, load_consumer_async
from sourcemap_callsites.log import enable_debug_logging
from sourcemap_callsites.mapper import (
    CallSiteMapper,
    map_callsites,
    map_callsites_async,
)
from sourcemap_callsites.resolver import (
    ExternalMapUrl,
    InlineMapUrl,
    SourceMapUrl,
    resolve_url,
)

__all__ = [
    "CacheEntry",
    "CallSite",
    "CallSiteMapper",
    "Consumer",
    "ConsumerCache",
    "DecoratedCallSite",
    "EntryState",
    "ErrorPolicy",
    "ExternalMapUrl",
    "InlineMapUrl",
    "MapParseError",
    "MapReadError",
    "MapperConfig",
    "Position",
    "SourceMapConsumer",
    "SourceMapError",
    "SourceMapUrl",
    "SourceMapView",
    "SourceReadError",
    "StaticCallSite",
    "decorate",
    "enable_debug_logging",
    "format_callsite",
    "format_stack",
    "is_skippable",
    "load_config",
    "load_consumer",
    "load_consumer_async",
    "map_callsites",
    "map_callsites_async",
    "parse_source_map",
    "resolve_url",
]
