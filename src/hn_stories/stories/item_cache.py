"""Per-ID cache of resolved stories, including cached absences."""
import logging
import random
import time
from dataclasses import dataclass
from typing import Callable, Optional, Union

from hn_stories.core.cache import SimpleCache
from hn_stories.core.metrics import metrics
from hn_stories.core.schemas import Story
from hn_stories.stories.source import ItemSource

logger = logging.getLogger(__name__)

TOMBSTONE_TTL_SECONDS = 60
STORY_TTL_MINUTES_RANGE = (5, 10)  # inclusive


@dataclass(frozen=True)
class Resolved:
    story: Story


class _Tombstone:
    """The ID resolved to nothing (deleted, dead, wrong type or not found)."""

    _instance: Optional["_Tombstone"] = None

    def __new__(cls) -> "_Tombstone":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "TOMBSTONE"


TOMBSTONE = _Tombstone()

CachedStory = Union[Resolved, _Tombstone]


def item_key(item_id: int) -> str:
    return f"hn:item:{item_id}"


class ItemCache:
    def __init__(
        self,
        source: ItemSource,
        rng: Optional[random.Random] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._source = source
        self._rng = rng or random.Random()
        self._cache: SimpleCache[CachedStory] = SimpleCache(clock=clock)

    def _ttl(self, entry: CachedStory) -> int:
        if entry is TOMBSTONE:
            return TOMBSTONE_TTL_SECONDS
        return self._rng.randint(*STORY_TTL_MINUTES_RANGE) * 60

    def peek(self, item_id: int) -> Optional[CachedStory]:
        """Cached entry for an ID without touching the source; None on a miss."""
        return self._cache.get(item_key(item_id))

    async def get_item(self, item_id: int) -> Optional[Story]:
        key = item_key(item_id)
        entry = self._cache.get(key)
        if entry is not None:
            metrics.record_cache(hit=True)
            logger.debug("Cache hit for key: %s", key)
        else:
            metrics.record_cache(hit=False)
            logger.debug("Cache miss for key: %s, fetching from source", key)
            story = await self._source.get_item(item_id)
            if story is None:
                logger.debug("Story %s resolved to nothing (deleted/dead/404)", item_id)
                entry = TOMBSTONE
            else:
                entry = Resolved(story)
            ttl = self._ttl(entry)
            self._cache.set(key, entry, ttl)
            logger.debug("Cached %s with TTL %ss (tombstone: %s)", key, ttl, entry is TOMBSTONE)

        if isinstance(entry, Resolved):
            return entry.story
        return None
