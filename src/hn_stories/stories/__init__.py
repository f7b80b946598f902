"""Aggregation core: caches, bounded fan-out and pagination."""

from hn_stories.stories.fetcher import BoundedFetcher
from hn_stories.stories.id_cache import IdCache
from hn_stories.stories.item_cache import TOMBSTONE, ItemCache, Resolved
from hn_stories.stories.service import StoriesService, build_stories_service
from hn_stories.stories.source import ItemSource

__all__ = [
    "BoundedFetcher",
    "IdCache",
    "ItemCache",
    "ItemSource",
    "Resolved",
    "StoriesService",
    "TOMBSTONE",
    "build_stories_service",
]
