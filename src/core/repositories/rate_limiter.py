"""Abstract contract for per-client upload rate limiting."""

from abc import ABC, abstractmethod

from pydantic import BaseModel, StrictBool


class RateLimitDecision(BaseModel):
    allowed: StrictBool
    retry_after: int | None = None


class RateLimiter(ABC):
    """Bounds upload attempts per client within a window."""

    @abstractmethod
    def check_and_increment(self, client_key: str) -> RateLimitDecision:
        """Count one attempt for ``client_key`` unless its window is full.

        Denied attempts are not counted. ``retry_after`` is the number of
        seconds until the window resets.
        """
