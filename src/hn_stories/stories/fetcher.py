"""Concurrency-bounded fan-out over the item cache."""
import asyncio
import logging
from typing import List, Optional, Sequence

from hn_stories.core.schemas import Story
from hn_stories.stories.item_cache import ItemCache

logger = logging.getLogger(__name__)

MAX_CONCURRENT_FETCHES = 10


class BoundedFetcher:
    """Resolves IDs to stories with at most `max_concurrency` lookups in flight.

    One instance (and therefore one limiter) is meant to be shared by every
    request in the process, so concurrent pages compete for the same budget.
    """

    def __init__(
        self,
        item_cache: ItemCache,
        max_concurrency: int = MAX_CONCURRENT_FETCHES,
        limiter: Optional[asyncio.Semaphore] = None,
    ) -> None:
        self._item_cache = item_cache
        self._limiter = limiter if limiter is not None else asyncio.Semaphore(max_concurrency)

    async def _fetch_one(self, item_id: int) -> Optional[Story]:
        async with self._limiter:
            return await self._item_cache.get_item(item_id)

    async def fetch_many(self, ids: Sequence[int]) -> List[Story]:
        """Fetch every ID and return the resolved stories in input order.

        Absent IDs are dropped. The first failure (or cancellation) cancels
        the rest of the batch and propagates unchanged.
        """
        if not ids:
            return []

        results: List[Optional[Story]] = [None] * len(ids)

        async def run(index: int, item_id: int) -> None:
            results[index] = await self._fetch_one(item_id)

        tasks = [asyncio.ensure_future(run(i, item_id)) for i, item_id in enumerate(ids)]
        try:
            await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            # let cancelled siblings unwind and release their permits
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        stories = [story for story in results if story is not None]
        logger.debug("Fetched %d valid stories out of %d ids", len(stories), len(ids))
        return stories
