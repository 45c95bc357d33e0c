"""Process-local rate limiter.

Best effort only: counters live in this process, so several concurrent
Lambda instances each enforce the limit separately and a cold start resets
every window.
"""

import math
import threading
import time
from collections.abc import Callable

from core.repositories.rate_limiter import RateLimitDecision, RateLimiter
from core.utils.constants import RATE_LIMIT_WINDOW_SECONDS


class InMemoryRateLimiter(RateLimiter):
    def __init__(
        self,
        *,
        limit: int,
        window_seconds: int = RATE_LIMIT_WINDOW_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.limit = limit
        self._window = window_seconds
        self._clock = clock
        self._windows: dict[str, tuple[int, float]] = {}
        self._lock = threading.Lock()

    def check_and_increment(self, client_key: str) -> RateLimitDecision:
        now = self._clock()

        with self._lock:
            count, reset_at = self._windows.get(client_key, (0, 0.0))
            if reset_at < now:
                count, reset_at = 0, now + self._window

            if count >= self.limit:
                return RateLimitDecision(
                    allowed=False,
                    retry_after=max(math.ceil(reset_at - now), 1),
                )

            self._windows[client_key] = (count + 1, reset_at)

        return RateLimitDecision(allowed=True)

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()
