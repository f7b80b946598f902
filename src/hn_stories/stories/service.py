"""
Aggregation orchestrator: validate, pick a pagination strategy, compose the page.
"""

import logging
import random
from typing import List, Optional

from hn_stories.core.errors import ValidationError
from hn_stories.core.schemas import PagedResult
from hn_stories.stories.fetcher import MAX_CONCURRENT_FETCHES, BoundedFetcher
from hn_stories.stories.id_cache import IdCache
from hn_stories.stories.item_cache import ItemCache
from hn_stories.stories.source import ItemSource

logger = logging.getLogger(__name__)

SEARCH_WINDOW_SIZE = 500
MAX_LIMIT = 100


def validate_paging(offset: int, limit: int) -> None:
    if offset < 0:
        raise ValidationError("offset", offset, "Offset must be >= 0")
    if limit < 1 or limit > MAX_LIMIT:
        raise ValidationError("limit", limit, f"Limit must be between 1 and {MAX_LIMIT}")


class StoriesService:
    """Stateless between calls; all state lives in the injected caches."""

    def __init__(
        self,
        id_cache: IdCache,
        fetcher: BoundedFetcher,
        search_window: int = SEARCH_WINDOW_SIZE,
    ) -> None:
        self._id_cache = id_cache
        self._fetcher = fetcher
        self._search_window = search_window

    async def get_newest(
        self, offset: int, limit: int, search: Optional[str] = None
    ) -> PagedResult:
        """Return one page of the newest stories, optionally filtered by title.

        Args:
            offset: Items to skip; must be >= 0.
            limit: Page size, 1..100.
            search: Case-insensitive title substring. Blank means no search.

        Raises:
            ValidationError: bad offset/limit, before any upstream call.
            UpstreamError: the item source failed; no partial page.
        """
        validate_paging(offset, limit)

        all_ids = await self._id_cache.get_newest_ids()
        term = search.strip() if search else ""
        if not term:
            return await self._page_without_search(all_ids, offset, limit)
        return await self._page_with_search(all_ids, offset, limit, term)

    async def _page_without_search(
        self, all_ids: List[int], offset: int, limit: int
    ) -> PagedResult:
        page_ids = all_ids[offset:offset + limit]
        logger.debug(
            "Fetching %d stories for page (offset=%d, limit=%d)", len(page_ids), offset, limit
        )
        items = await self._fetcher.fetch_many(page_ids)
        return PagedResult(total=len(all_ids), items=items)

    async def _page_with_search(
        self, all_ids: List[int], offset: int, limit: int, term: str
    ) -> PagedResult:
        window_ids = all_ids[:min(self._search_window, len(all_ids))]
        logger.debug("Searching in first %d stories for term: %r", len(window_ids), term)

        window_items = await self._fetcher.fetch_many(window_ids)
        needle = term.casefold()
        matches = [
            story for story in window_items
            if story.title is not None and needle in story.title.casefold()
        ]
        logger.debug(
            "Found %d stories matching %r out of %d fetched",
            len(matches), term, len(window_items),
        )
        return PagedResult(total=len(matches), items=matches[offset:offset + limit])


def build_stories_service(
    source: ItemSource,
    *,
    max_concurrency: int = MAX_CONCURRENT_FETCHES,
    search_window: int = SEARCH_WINDOW_SIZE,
    rng: Optional[random.Random] = None,
) -> StoriesService:
    """Wire caches and the shared fetcher around one item source.

    Call once per process; the returned service owns the caches and limiter.
    """
    fetcher = BoundedFetcher(ItemCache(source, rng=rng), max_concurrency=max_concurrency)
    return StoriesService(IdCache(source, rng=rng), fetcher, search_window=search_window)
