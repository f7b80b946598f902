"""
In-memory metrics for the /metrics endpoint (rough p50/p95).
Why: quick visibility into cache efficiency and upstream pressure without Prometheus.
"""

from collections import deque
from typing import Deque, Dict, List

_MAX_LATENCY_SAMPLES = 1000


def _percentile(values: List[int], p: float) -> int:
    if not values:
        return 0
    idx = max(0, min(len(values) - 1, int(len(values) * p)))
    return sorted(values)[idx]


class _Metrics:
    def __init__(self) -> None:
        self.total_requests = 0
        self.total_errors = 0
        self.upstream_calls = 0
        self.upstream_errors = 0
        self.cache_hits = 0
        self.cache_misses = 0
        self._latencies: Deque[int] = deque(maxlen=_MAX_LATENCY_SAMPLES)

    def increment_requests(self) -> None:
        self.total_requests += 1

    def increment_errors(self) -> None:
        self.total_errors += 1

    def record_upstream_call(self, ok: bool = True) -> None:
        self.upstream_calls += 1
        if not ok:
            self.upstream_errors += 1

    def record_cache(self, hit: bool) -> None:
        if hit:
            self.cache_hits += 1
        else:
            self.cache_misses += 1

    def record_latency(self, ms: int) -> None:
        self._latencies.append(ms)

    def snapshot(self) -> Dict[str, int]:
        lat = list(self._latencies)
        return {
            "total_requests": self.total_requests,
            "total_errors": self.total_errors,
            "upstream_calls": self.upstream_calls,
            "upstream_errors": self.upstream_errors,
            "cache_hits": self.cache_hits,
            "cache_misses": self.cache_misses,
            "p50_ms": _percentile(lat, 0.50),
            "p95_ms": _percentile(lat, 0.95),
        }


metrics = _Metrics()
