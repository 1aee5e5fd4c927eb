"""Tests for the LRU cache and in-flight coalescing."""

import asyncio

import pytest

from rewardoor.service.cache import LRUCache, InFlight


class TestLRUCache:

    def test_get_missing_returns_none(self):
        cache = LRUCache(3)
        assert cache.get(1) is None
        assert 1 not in cache

    def test_add_and_get(self):
        cache = LRUCache(3)
        cache.add(1, "a")
        assert cache.get(1) == "a"
        assert len(cache) == 1

    def test_evicts_least_recently_used(self):
        cache = LRUCache(3)
        for key in (1, 2, 3):
            cache.add(key, str(key))

        # Touch 1 so 2 becomes the oldest
        cache.get(1)
        evicted = cache.add(4, "4")

        assert evicted
        assert 2 not in cache
        assert cache.keys() == [3, 1, 4]

    def test_capacity_is_never_exceeded(self):
        cache = LRUCache(100)
        for key in range(150):
            cache.add(key, key)
        assert len(cache) == 100
        assert cache.get(49) is None
        assert cache.get(50) == 50

    def test_existing_entry_is_not_overwritten(self):
        cache = LRUCache(2)
        cache.add(1, "first")
        cache.add(1, "second")
        assert cache.get(1) == "first"

    def test_rejects_non_positive_capacity(self):
        with pytest.raises(ValueError):
            LRUCache(0)


class TestInFlight:

    @pytest.mark.asyncio
    async def test_concurrent_callers_share_one_fetch(self):
        flights = InFlight()
        gate = asyncio.Event()
        calls = 0

        async def fetch():
            nonlocal calls
            calls += 1
            await gate.wait()
            return "value"

        tasks = [asyncio.create_task(flights.run(7, fetch)) for _ in range(5)]
        await asyncio.sleep(0)
        assert len(flights) == 1

        gate.set()
        results = await asyncio.gather(*tasks)

        assert results == ["value"] * 5
        assert calls == 1
        await asyncio.sleep(0)
        assert len(flights) == 0

    @pytest.mark.asyncio
    async def test_failure_reaches_every_waiter_and_is_forgotten(self):
        flights = InFlight()
        gate = asyncio.Event()

        async def fetch():
            await gate.wait()
            raise RuntimeError("boom")

        tasks = [asyncio.create_task(flights.run(1, fetch)) for _ in range(3)]
        await asyncio.sleep(0)
        gate.set()
        results = await asyncio.gather(*tasks, return_exceptions=True)

        assert all(isinstance(r, RuntimeError) for r in results)
        await asyncio.sleep(0)
        assert len(flights) == 0

        async def retry():
            return "ok"

        assert await flights.run(1, retry) == "ok"

    @pytest.mark.asyncio
    async def test_cancelling_one_waiter_keeps_shared_fetch(self):
        flights = InFlight()
        gate = asyncio.Event()

        async def fetch():
            await gate.wait()
            return "value"

        first = asyncio.create_task(flights.run(1, fetch))
        second = asyncio.create_task(flights.run(1, fetch))
        await asyncio.sleep(0)

        first.cancel()
        with pytest.raises(asyncio.CancelledError):
            await first

        gate.set()
        assert await second == "value"

    @pytest.mark.asyncio
    async def test_cancelling_last_waiter_cancels_fetch(self):
        flights = InFlight()
        started = asyncio.Event()
        cancelled = asyncio.Event()

        async def fetch():
            started.set()
            try:
                await asyncio.Event().wait()
            except asyncio.CancelledError:
                cancelled.set()
                raise

        waiter = asyncio.create_task(flights.run(1, fetch))
        await started.wait()

        waiter.cancel()
        with pytest.raises(asyncio.CancelledError):
            await waiter

        await asyncio.wait_for(cancelled.wait(), timeout=1)
        assert len(flights) == 0
