"""Abstract contract for the image transform capability."""

from __future__ import annotations

from abc import ABC, abstractmethod

from core.models.image import OverlayPlacement, TransformResult


class ImagePipeline(ABC):
    """An immutable chain of image operations.

    Every operation returns a new pipeline; earlier pipelines stay usable.
    """

    @abstractmethod
    def transform(
        self,
        *,
        width: int | None = None,
        height: int | None = None,
        quality: int | None = None,
    ) -> ImagePipeline:
        """Resize and/or set quality. An unset dimension keeps aspect ratio."""

    @abstractmethod
    def draw(self, overlay: ImagePipeline, placement: OverlayPlacement) -> ImagePipeline:
        """Composite another image on top of this one."""

    @abstractmethod
    def output(self, *, format: str | None = None, quality: int | None = None) -> TransformResult:
        """Encode the image. Failures are reported through ``ok``/``status``."""


class ImageTransformService(ABC):
    """Entry point of the transform capability."""

    @abstractmethod
    def input(self, data: bytes) -> ImagePipeline:
        """Start a pipeline from encoded image bytes.

        Raises:
            ProcessingError: If the bytes cannot be decoded
        """
