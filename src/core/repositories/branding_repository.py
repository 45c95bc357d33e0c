"""Abstract contract for branding asset lookup."""

from abc import ABC, abstractmethod


class BrandingAssetRepository(ABC):
    """Key-value lookup of logo images by asset name."""

    @abstractmethod
    def get_asset(self, name: str) -> bytes | None:
        """Return the asset bytes, or None when no such asset exists."""
