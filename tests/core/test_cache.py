"""Tests for the in-memory TTL cache."""

from hn_stories.core.cache import SimpleCache
from tests.fakes import FakeClock


def test_cache_get_empty():
    """Test getting from empty cache."""
    cache = SimpleCache()
    assert cache.get("key") is None


def test_cache_set_and_get():
    """Test setting and getting values."""
    cache = SimpleCache()
    cache.set("key", "value", ttl_seconds=60)
    assert cache.get("key") == "value"


def test_cache_ttl_expiration():
    """Entries are gone once the clock reaches their expiry."""
    clock = FakeClock()
    cache = SimpleCache(clock=clock)
    cache.set("key", "value", ttl_seconds=60)
    clock.advance(59.9)
    assert cache.get("key") == "value"
    clock.advance(0.1)
    assert cache.get("key") is None
    assert len(cache) == 0


def test_cache_overwrite():
    """Test overwriting cache entries."""
    cache = SimpleCache()
    cache.set("key", "value1", ttl_seconds=60)
    cache.set("key", "value2", ttl_seconds=60)
    assert cache.get("key") == "value2"


def test_cache_overwrite_resets_expiry():
    clock = FakeClock()
    cache = SimpleCache(clock=clock)
    cache.set("key", "old", ttl_seconds=10)
    clock.advance(9)
    cache.set("key", "new", ttl_seconds=10)
    clock.advance(9)
    assert cache.get("key") == "new"


def test_cache_int_keys_and_clear():
    cache = SimpleCache()
    cache.set(1, "a", ttl_seconds=60)
    cache.set(2, "b", ttl_seconds=60)
    assert cache.get(1) == "a"
    cache.clear()
    assert cache.get(2) is None
