"""
Process-local in-memory TTL cache.
Why: the upstream is rate limited; every lookup goes through here first.
"""

import time
from typing import Callable, Dict, Generic, Hashable, Optional, Tuple, TypeVar

V = TypeVar("V")

_Entry = Tuple[V, float]  # (value, expires_at)


class SimpleCache(Generic[V]):
    """Key/value store with a per-entry absolute expiry.

    Expired entries are dropped lazily on the next read. The clock is
    injectable so tests can move time without sleeping.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._data: Dict[Hashable, _Entry] = {}
        self._clock = clock

    def get(self, key: Hashable) -> Optional[V]:
        entry = self._data.get(key)
        if not entry:
            return None
        value, expires_at = entry
        if self._clock() >= expires_at:
            self._data.pop(key, None)
            return None
        return value

    def set(self, key: Hashable, value: V, ttl_seconds: float) -> None:
        self._data[key] = (value, self._clock() + ttl_seconds)

    def clear(self) -> None:
        self._data.clear()

    def __len__(self) -> int:
        return len(self._data)
