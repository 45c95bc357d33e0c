"""Abstract contract for the processed-image response cache."""

from abc import ABC, abstractmethod

from core.models.image import CachedImage


class ResponseCacheRepository(ABC):
    """Stores processed image responses keyed by a derived cache key.

    Entries expire after their TTL. There is no explicit invalidation.
    """

    @abstractmethod
    def get(self, cache_key: str) -> CachedImage | None:
        """Return a live entry, or None on miss or expiry."""

    @abstractmethod
    def put(self, cache_key: str, image: CachedImage, *, ttl: int) -> None:
        """Store an entry for ``ttl`` seconds."""
