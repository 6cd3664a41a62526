"""Map whole stacks of callsites to their original locations.

A CallSiteMapper owns (or is handed) a ConsumerCache and applies the
configured error policy while decorating each callsite. Results always come
back in input order.
"""

import asyncio
import os
from collections.abc import Iterable
from types import TracebackType

from sourcemap_callsites.cache import CacheEntry, ConsumerCache, EntryState
from sourcemap_callsites.callsite import CallSite, is_skippable
from sourcemap_callsites.config import ErrorPolicy, MapperConfig
from sourcemap_callsites.decorator import DecoratedCallSite, decorate
from sourcemap_callsites.log import get_logger

logger = get_logger(__name__)


class CallSiteMapper:
    """Decorate callsites using a consumer cache.

    The mapper is cheap to create. Keep one around for as long as cached
    maps stay valid, and close it (or leave its ``with`` block) to drop the
    cache it created.
    """

    def __init__(
        self,
        config: MapperConfig | None = None,
        *,
        cache: ConsumerCache | None = None,
    ) -> None:
        """Initialize the mapper.

        Args:
            config: Mapper settings. Defaults to MapperConfig().
            cache: Cache to share with other mappers. When omitted, the
                mapper creates and owns one sized by ``config.cache_size``.

        """
        self.config = config if config is not None else MapperConfig()
        self._owns_cache = cache is None
        self.cache = cache if cache is not None else ConsumerCache(self.config.cache_size)

    def map_sync(self, callsites: Iterable[CallSite]) -> list[DecoratedCallSite]:
        """Decorate callsites one after another, blocking on file I/O.

        Args:
            callsites: Callsites in stack order.

        Returns:
            Decorated callsites in the same order.

        Raises:
            SourceMapError: Under the strict policy, the first load failure.

        """
        return [self._map_one_sync(callsite) for callsite in callsites]

    async def map_async(self, callsites: Iterable[CallSite]) -> list[DecoratedCallSite]:
        """Decorate callsites concurrently.

        At most ``config.concurrency`` callsites wait on the cache at once.
        Skippable callsites do not take a slot.

        Args:
            callsites: Callsites in stack order.

        Returns:
            Decorated callsites in the same order, whatever order their maps
            finished loading in.

        Raises:
            SourceMapError: Under the strict policy, the first load failure.
                The remaining callsites are cancelled.

        """
        semaphore = asyncio.Semaphore(self.config.concurrency)
        tasks = [
            asyncio.create_task(self._map_one_async(callsite, semaphore))
            for callsite in callsites
        ]
        try:
            return list(await asyncio.gather(*tasks))
        except Exception:
            for task in tasks:
                task.cancel()
            raise

    def _map_one_sync(self, callsite: CallSite) -> DecoratedCallSite:
        if is_skippable(callsite):
            return DecoratedCallSite(callsite)

        filename = _cache_key(callsite)
        return self._apply(callsite, self.cache.get_sync(filename), filename)

    async def _map_one_async(
        self,
        callsite: CallSite,
        semaphore: asyncio.Semaphore,
    ) -> DecoratedCallSite:
        if is_skippable(callsite):
            return DecoratedCallSite(callsite)

        filename = _cache_key(callsite)
        async with semaphore:
            entry = await self.cache.get_async(filename)
        return self._apply(callsite, entry, filename)

    def _apply(
        self,
        callsite: CallSite,
        entry: CacheEntry,
        filename: str,
    ) -> DecoratedCallSite:
        if entry.state is EntryState.FAILED and entry.error is not None:
            if self.config.policy is ErrorPolicy.STRICT:
                # The cached error is shared; drop frames from earlier raises.
                raise entry.error.with_traceback(None)
            logger.debug("Using generated location for %s: %s", filename, entry.error)
            return DecoratedCallSite(callsite)

        return decorate(callsite, entry.consumer, filename)

    def close(self) -> None:
        """Drop cached consumers if this mapper created the cache."""
        if self._owns_cache:
            self.cache.clear()

    def __enter__(self) -> "CallSiteMapper":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()


def _cache_key(callsite: CallSite) -> str:
    return os.path.abspath(callsite.file_name() or "")


def map_callsites(
    callsites: Iterable[CallSite],
    *,
    config: MapperConfig | None = None,
    cache: ConsumerCache | None = None,
) -> list[DecoratedCallSite]:
    """Decorate callsites synchronously with a one-off mapper.

    Pass ``cache`` to reuse loaded maps across calls.
    """
    with CallSiteMapper(config, cache=cache) as mapper:
        return mapper.map_sync(callsites)


async def map_callsites_async(
    callsites: Iterable[CallSite],
    *,
    config: MapperConfig | None = None,
    cache: ConsumerCache | None = None,
) -> list[DecoratedCallSite]:
    """Decorate callsites concurrently with a one-off mapper.

    Pass ``cache`` to reuse loaded maps across calls.
    """
    with CallSiteMapper(config, cache=cache) as mapper:
        return await mapper.map_async(callsites)
