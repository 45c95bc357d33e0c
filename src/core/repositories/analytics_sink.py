"""Abstract contract for the analytics sink."""

from abc import ABC, abstractmethod
from typing import Any


class AnalyticsSink(ABC):
    """Accepts arbitrary analytics blobs.

    Every blob carries at least ``type`` and ``timestamp``. Implementations
    may raise; callers go through ``core.utils.analytics`` which never lets
    a sink failure reach the request path.
    """

    @abstractmethod
    def write(self, blob: dict[str, Any]) -> None:
        """Record one analytics data point."""
