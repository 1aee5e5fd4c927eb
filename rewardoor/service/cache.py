"""Bounded LRU cache and in-flight request coalescing."""

import asyncio
import logging
import threading
from collections import OrderedDict
from typing import Awaitable, Callable, Generic, Hashable, Optional, TypeVar

from .. import metrics

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")

DEFAULT_CACHE_SIZE = 100


class LRUCache(Generic[K, V]):
    """Fixed-capacity cache that evicts the least recently used entry.

    Safe for concurrent use; all operations take an internal lock.
    """

    def __init__(self, capacity: int = DEFAULT_CACHE_SIZE, name: str = "cache"):
        if capacity <= 0:
            raise ValueError(f"Cache capacity must be positive, got {capacity}")
        self.capacity = capacity
        self.name = name
        self._entries: OrderedDict[K, V] = OrderedDict()
        self._lock = threading.Lock()

    def get(self, key: K) -> Optional[V]:
        """Return the cached value and mark it most recently used."""
        with self._lock:
            if key not in self._entries:
                metrics.record_cache_miss(self.name)
                return None
            self._entries.move_to_end(key)
            metrics.record_cache_hit(self.name)
            return self._entries[key]

    def add(self, key: K, value: V) -> bool:
        """Insert a value, evicting the oldest entry when full.

        An existing entry is left untouched and only refreshed.

        Returns:
            True if an entry was evicted
        """
        with self._lock:
            if key in self._entries:
                self._entries.move_to_end(key)
                return False
            self._entries[key] = value
            evicted = False
            if len(self._entries) > self.capacity:
                oldest_key, _ = self._entries.popitem(last=False)
                logger.debug(f"{self.name}: evicted {oldest_key}")
                evicted = True
            metrics.update_cache_size(self.name, len(self._entries))
            return evicted

    def __contains__(self, key: K) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def keys(self) -> list[K]:
        """Keys from least to most recently used."""
        with self._lock:
            return list(self._entries)


class _Flight:
    __slots__ = ("task", "waiters")

    def __init__(self, task: asyncio.Task):
        self.task = task
        self.waiters = 0


class InFlight(Generic[K, V]):
    """Share one running fetch between concurrent callers asking for the same key.

    The fetch is cancelled only when every caller waiting on it has been
    cancelled. Results and exceptions are delivered to all waiters; nothing
    is remembered after the fetch completes.
    """

    def __init__(self):
        self._flights: dict[K, _Flight] = {}

    def __len__(self) -> int:
        return len(self._flights)

    async def run(self, key: K, fetch: Callable[[], Awaitable[V]]) -> V:
        flight = self._flights.get(key)
        if flight is None:
            flight = _Flight(asyncio.create_task(fetch()))
            self._flights[key] = flight
            flight.task.add_done_callback(lambda _t, k=key, f=flight: self._finish(k, f))
        else:
            logger.debug(f"Joining in-flight fetch for {key}")

        flight.waiters += 1
        try:
            return await asyncio.shield(flight.task)
        except asyncio.CancelledError:
            if flight.waiters == 1 and not flight.task.done():
                self._forget(key, flight)
                flight.task.cancel()
            raise
        finally:
            flight.waiters -= 1

    def _forget(self, key: K, flight: _Flight) -> None:
        if self._flights.get(key) is flight:
            del self._flights[key]

    def _finish(self, key: K, flight: _Flight) -> None:
        self._forget(key, flight)
        # Mark a failure as retrieved even if every waiter is gone
        if not flight.task.cancelled():
            flight.task.exception()
