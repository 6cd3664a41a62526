"""Per-file cache of source map consumers.

Keep one entry per generated filename with LRU eviction. The synchronous path
loads inline; the asynchronous path runs a single load task per filename and
lets every concurrent caller await it.
"""

import asyncio
from collections import OrderedDict
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum

from sourcemap_callsites.config import DEFAULT_CACHE_SIZE
from sourcemap_callsites.consumer import Consumer
from sourcemap_callsites.errors import SourceMapError
from sourcemap_callsites.loader import load_consumer, load_consumer_async
from sourcemap_callsites.log import get_logger

logger = get_logger(__name__)

Loader = Callable[[str], Consumer | None]
AsyncLoader = Callable[[str], Awaitable[Consumer | None]]


class EntryState(str, Enum):
    """Load state of a cached filename."""

    PENDING = "pending"
    """A load is in flight."""

    LOADED = "loaded"
    """The map was parsed into a consumer."""

    NO_MAP = "no_map"
    """The file has no sourceMappingURL comment."""

    FAILED = "failed"
    """Reading or parsing failed. Not retried until evicted."""


@dataclass(frozen=True)
class CacheEntry:
    """Cached outcome of loading one generated file's source map."""

    state: EntryState
    consumer: Consumer | None = None
    error: SourceMapError | None = None

    @classmethod
    def pending(cls) -> "CacheEntry":
        return cls(EntryState.PENDING)

    @classmethod
    def loaded(cls, consumer: Consumer) -> "CacheEntry":
        return cls(EntryState.LOADED, consumer=consumer)

    @classmethod
    def no_map(cls) -> "CacheEntry":
        return cls(EntryState.NO_MAP)

    @classmethod
    def failed(cls, error: SourceMapError) -> "CacheEntry":
        return cls(EntryState.FAILED, error=error)

    @property
    def is_terminal(self) -> bool:
        return self.state is not EntryState.PENDING


class ConsumerCache:
    """LRU cache of consumers keyed by absolute generated filename.

    Only completed entries count toward ``max_size``; a load that is still
    in flight is never evicted.
    """

    def __init__(
        self,
        max_size: int = DEFAULT_CACHE_SIZE,
        *,
        loader: Loader = load_consumer,
        async_loader: AsyncLoader = load_consumer_async,
    ) -> None:
        """Initialize the consumer cache.

        Args:
            max_size: Maximum number of completed entries to keep.
            loader: Blocking load function used by get_sync.
            async_loader: Coroutine function used by get_async.

        """
        if max_size <= 0:
            msg = f"max_size must be positive, got {max_size}"
            raise ValueError(msg)

        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()
        self._inflight: dict[str, asyncio.Task[CacheEntry]] = {}
        self._max_size = max_size
        self._loader = loader
        self._async_loader = async_loader
        logger.debug("Created ConsumerCache with max_size=%d", max_size)

    def get_sync(self, filename: str) -> CacheEntry:
        """Get the entry for a file, loading it inline on a miss.

        Args:
            filename: Absolute path of the generated file.

        Returns:
            A terminal entry.

        """
        entry = self._hit(filename)
        if entry is not None:
            return entry

        if filename in self._inflight:
            # Blocking callers cannot await the task; the first stored result wins.
            logger.debug(
                "Loading %s synchronously while an async load is in flight",
                filename,
            )
        else:
            logger.debug("Cache miss for %s, loading synchronously", filename)
        try:
            consumer = self._loader(filename)
        except SourceMapError as e:
            entry = self._failed(filename, e)
        else:
            entry = self._completed(consumer)
        return self._store(filename, entry)

    async def get_async(self, filename: str) -> CacheEntry:
        """Get the entry for a file, sharing one load among concurrent callers.

        A caller that is cancelled while waiting does not cancel the load;
        the remaining waiters still receive its result.

        Args:
            filename: Absolute path of the generated file.

        Returns:
            A terminal entry.

        """
        entry = self._hit(filename)
        if entry is not None:
            return entry

        task = self._inflight.get(filename)
        if task is None:
            logger.debug("Cache miss for %s, starting load", filename)
            task = asyncio.create_task(self._load_async(filename))
            self._inflight[filename] = task
        else:
            logger.debug("Joining in-flight load for %s", filename)

        return await asyncio.shield(task)

    async def _load_async(self, filename: str) -> CacheEntry:
        try:
            try:
                consumer = await self._async_loader(filename)
            except SourceMapError as e:
                entry = self._failed(filename, e)
            else:
                entry = self._completed(consumer)

            # A synchronous load may have finished while this one was running.
            existing = self._entries.get(filename)
            if existing is not None:
                return existing
            return self._store(filename, entry)
        finally:
            if self._inflight.get(filename) is asyncio.current_task():
                del self._inflight[filename]

    def _hit(self, filename: str) -> CacheEntry | None:
        entry = self._entries.get(filename)
        if entry is None:
            return None
        self._entries.move_to_end(filename)
        logger.debug("Cache hit for %s (%s)", filename, entry.state.value)
        return entry

    def _completed(self, consumer: Consumer | None) -> CacheEntry:
        if consumer is None:
            return CacheEntry.no_map()
        return CacheEntry.loaded(consumer)

    def _failed(self, filename: str, error: SourceMapError) -> CacheEntry:
        logger.warning("Failed to load source map for %s: %s", filename, error)
        return CacheEntry.failed(error)

    def _store(self, filename: str, entry: CacheEntry) -> CacheEntry:
        if filename in self._entries:
            self._entries.move_to_end(filename)
        else:
            # Evict least recently used entries if at capacity
            while len(self._entries) >= self._max_size:
                evicted_key, _ = self._entries.popitem(last=False)
                logger.debug("Evicted cache entry %s", evicted_key)
        self._entries[filename] = entry
        return entry

    def peek(self, filename: str) -> CacheEntry | None:
        """Get the current entry without loading or updating recency.

        Args:
            filename: Absolute path of the generated file.

        Returns:
            The completed entry, a pending entry for an in-flight load,
            or None if the file was never requested or has been evicted.

        """
        entry = self._entries.get(filename)
        if entry is not None:
            return entry
        if filename in self._inflight:
            return CacheEntry.pending()
        return None

    def invalidate(self, filename: str) -> bool:
        """Drop the completed entry for a file so the next request reloads it.

        Args:
            filename: Absolute path of the generated file.

        Returns:
            True if an entry was found and removed, False otherwise.

        """
        if filename in self._entries:
            del self._entries[filename]
            logger.debug("Invalidated cache entry %s", filename)
            return True
        return False

    def clear(self) -> None:
        """Drop all completed entries. In-flight loads still finish."""
        count = len(self._entries)
        self._entries.clear()
        logger.debug("Cleared %d cache entries", count)

    def __len__(self) -> int:
        """Get the number of completed entries.

        Returns:
            Number of entries currently cached.

        """
        return len(self._entries)

    def __contains__(self, filename: object) -> bool:
        return filename in self._entries

    @property
    def max_size(self) -> int:
        """Get the maximum cache size.

        Returns:
            Maximum number of completed entries allowed.

        """
        return self._max_size
