"""Single-entry cache for the newest-IDs list."""
import logging
import random
import time
from typing import Callable, List, Optional

from hn_stories.core.cache import SimpleCache
from hn_stories.core.metrics import metrics
from hn_stories.stories.source import ItemSource

logger = logging.getLogger(__name__)

NEWEST_IDS_KEY = "hn:newstories:ids"
ID_LIST_TTL_RANGE = (60, 120)  # seconds, inclusive


class IdCache:
    """Caches the ordered ID list with a jittered TTL.

    Concurrent misses may each call the source and overwrite the entry;
    the list call is idempotent so the last writer wins.
    """

    def __init__(
        self,
        source: ItemSource,
        rng: Optional[random.Random] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._source = source
        self._rng = rng or random.Random()
        self._cache: SimpleCache[List[int]] = SimpleCache(clock=clock)

    def _ttl(self) -> int:
        return self._rng.randint(*ID_LIST_TTL_RANGE)

    async def get_newest_ids(self) -> List[int]:
        cached = self._cache.get(NEWEST_IDS_KEY)
        if cached is not None:
            metrics.record_cache(hit=True)
            logger.debug("Cache hit for key: %s", NEWEST_IDS_KEY)
            return cached

        metrics.record_cache(hit=False)
        logger.debug("Cache miss for key: %s, fetching from source", NEWEST_IDS_KEY)
        ids = list(await self._source.list_newest_ids())
        ttl = self._ttl()
        self._cache.set(NEWEST_IDS_KEY, ids, ttl)
        logger.debug("Cached %d ids with TTL %ss", len(ids), ttl)
        return ids
