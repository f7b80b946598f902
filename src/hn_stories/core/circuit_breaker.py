"""
Tiny circuit breaker for the upstream item source.
Why: fail fast under repeated errors; recover after cooldown.
"""

import time
from enum import Enum
from typing import Callable


class CircuitState(Enum):
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


class CircuitBreaker:
    def __init__(
        self,
        failure_threshold: int = 5,
        recovery_timeout: float = 30,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.state = CircuitState.CLOSED
        self.failure_count = 0
        self.failure_threshold = failure_threshold
        self.recovery_timeout = recovery_timeout
        self._clock = clock
        self._opened_at: float = 0.0

    def allow(self) -> bool:
        if self.state is CircuitState.CLOSED:
            return True
        if (
            self.state is CircuitState.OPEN
            and (self._clock() - self._opened_at) >= self.recovery_timeout
        ):
            self.state = CircuitState.HALF_OPEN
            return True
        return self.state is CircuitState.HALF_OPEN

    def record_success(self) -> None:
        self.state = CircuitState.CLOSED
        self.failure_count = 0

    def record_failure(self) -> None:
        self.failure_count += 1
        # a failed probe while half-open re-opens immediately
        if (
            self.state is CircuitState.HALF_OPEN
            or self.failure_count >= self.failure_threshold
        ):
            self.state = CircuitState.OPEN
            self._opened_at = self._clock()
