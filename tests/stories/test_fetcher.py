"""Tests for the bounded, order-preserving fan-out."""

import asyncio
import time

import pytest

from hn_stories.core.errors import UpstreamError
from hn_stories.stories.fetcher import BoundedFetcher
from hn_stories.stories.item_cache import ItemCache
from tests.fakes import FakeSource


def _fetcher(source, **kwargs):
    return BoundedFetcher(ItemCache(source), **kwargs)


@pytest.mark.asyncio
async def test_empty_input_makes_no_calls():
    source = FakeSource(ids=[])
    assert await _fetcher(source).fetch_many([]) == []
    assert sum(source.item_calls.values()) == 0


@pytest.mark.asyncio
async def test_preserves_input_order_despite_completion_order():
    source = FakeSource(ids=range(1, 11))
    real_get_item = source.get_item

    async def reversed_latency(item_id):
        # later ids finish first
        await asyncio.sleep((11 - item_id) * 0.005)
        return await real_get_item(item_id)

    source.get_item = reversed_latency
    stories = await _fetcher(source).fetch_many([5, 1, 9, 3, 7])

    assert [s.id for s in stories] == [5, 1, 9, 3, 7]


@pytest.mark.asyncio
async def test_drops_absent_items():
    source = FakeSource(ids=[1, 2, 3, 4, 5], absent=[3])
    stories = await _fetcher(source).fetch_many([1, 2, 3, 4, 5])
    assert [s.id for s in stories] == [1, 2, 4, 5]


@pytest.mark.asyncio
async def test_concurrency_is_capped_at_ten():
    source = FakeSource(ids=range(1, 21), delay=0.1)
    fetcher = _fetcher(source)

    start = time.perf_counter()
    stories = await fetcher.fetch_many(list(range(1, 21)))
    elapsed = time.perf_counter() - start

    assert len(stories) == 20
    assert source.max_in_flight == 10
    # two waves of ~100ms, neither sequential (~2s) nor unbounded (~100ms)
    assert 0.18 <= elapsed < 0.6


@pytest.mark.asyncio
async def test_limiter_is_shared_across_concurrent_batches():
    source = FakeSource(ids=range(1, 31), delay=0.05)
    fetcher = _fetcher(source, max_concurrency=4)

    await asyncio.gather(
        fetcher.fetch_many(list(range(1, 11))),
        fetcher.fetch_many(list(range(11, 21))),
        fetcher.fetch_many(list(range(21, 31))),
    )

    assert source.max_in_flight == 4


@pytest.mark.asyncio
async def test_single_failure_fails_batch_and_releases_permits():
    source = FakeSource(ids=range(1, 21), fail_ids=[3], delay=5)
    limiter = asyncio.Semaphore(10)
    fetcher = _fetcher(source, limiter=limiter)

    start = time.perf_counter()
    with pytest.raises(UpstreamError):
        await fetcher.fetch_many(list(range(1, 21)))

    assert time.perf_counter() - start < 1
    assert limiter._value == 10
    assert source.in_flight == 0


@pytest.mark.asyncio
async def test_cancellation_aborts_outstanding_and_queued_tasks():
    source = FakeSource(ids=range(1, 21), delay=5)
    limiter = asyncio.Semaphore(10)
    fetcher = _fetcher(source, limiter=limiter)

    task = asyncio.create_task(fetcher.fetch_many(list(range(1, 21))))
    await asyncio.sleep(0.05)
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task
    assert limiter._value == 10
    assert source.in_flight == 0
    # queued ids never reached the source
    assert sum(source.item_calls.values()) == 10
