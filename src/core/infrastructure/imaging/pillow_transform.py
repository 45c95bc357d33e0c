"""
Image transform capability implemented with Pillow.

Pipelines are immutable: every operation returns a new pipeline wrapping a
new image, so a failed step never corrupts an earlier state.
"""

from __future__ import annotations

import io
from http import HTTPStatus

from aws_lambda_powertools import Logger
from PIL import Image, ImageOps, UnidentifiedImageError

from core.imaging.options import calculate_responsive_dimensions
from core.models.errors import ProcessingError
from core.models.image import OverlayPlacement, TransformResult
from core.repositories.image_transform import ImagePipeline, ImageTransformService

logger = Logger(utc=True)

PIL_FORMATS = {"jpeg": "JPEG", "png": "PNG", "webp": "WEBP"}
CONTENT_TYPES = {"jpeg": "image/jpeg", "png": "image/png", "webp": "image/webp"}
SOURCE_FORMATS = {"JPEG": "jpeg", "PNG": "png", "WEBP": "webp"}


def _resized_size(
    original: tuple[int, int],
    width: int | None,
    height: int | None,
) -> tuple[int, int]:
    """Target size; one unset dimension keeps the aspect ratio, both fit inside the box."""
    orig_w, orig_h = original

    if width and height:
        scale = min(width / orig_w, height / orig_h)
        return max(1, int(orig_w * scale)), max(1, int(orig_h * scale))

    if width:
        size = calculate_responsive_dimensions(orig_w, orig_h, width)
        return size.width, max(1, size.height)

    if height:
        size = calculate_responsive_dimensions(orig_h, orig_w, height)
        return max(1, size.height), size.width

    return original


def _with_opacity(image: Image.Image, opacity: float) -> Image.Image:
    rgba = image.convert("RGBA")
    if opacity >= 1:
        return rgba

    alpha = rgba.getchannel("A").point(lambda value: int(value * opacity))
    rgba.putalpha(alpha)
    return rgba


def _flatten(image: Image.Image) -> Image.Image:
    """Drop transparency onto a white background for formats without alpha."""
    if image.mode in ("RGBA", "LA", "P"):
        rgba = image.convert("RGBA")
        background = Image.new("RGB", rgba.size, (255, 255, 255))
        background.paste(rgba, mask=rgba.getchannel("A"))
        return background

    if image.mode != "RGB":
        return image.convert("RGB")

    return image


class PillowImagePipeline(ImagePipeline):
    def __init__(
        self,
        image: Image.Image,
        *,
        source_format: str | None = None,
        quality: int | None = None,
    ) -> None:
        self._image = image
        self._source_format = source_format
        self._quality = quality

    @property
    def image(self) -> Image.Image:
        return self._image

    def _derive(self, image: Image.Image, quality: int | None = None) -> PillowImagePipeline:
        return PillowImagePipeline(
            image,
            source_format=self._source_format,
            quality=quality if quality is not None else self._quality,
        )

    def transform(
        self,
        *,
        width: int | None = None,
        height: int | None = None,
        quality: int | None = None,
    ) -> PillowImagePipeline:
        target = _resized_size(self._image.size, width, height)

        if target == self._image.size:
            return self._derive(self._image.copy(), quality)

        resized = self._image.resize(target, Image.Resampling.LANCZOS)
        return self._derive(resized, quality)

    def draw(self, overlay: ImagePipeline, placement: OverlayPlacement) -> PillowImagePipeline:
        if not isinstance(overlay, PillowImagePipeline):
            raise TypeError("Overlay must come from the same transform service")

        logo = overlay.image
        if placement.fit == "contain":
            logo = ImageOps.contain(logo, (placement.width, placement.height))
        else:
            logo = logo.resize((placement.width, placement.height))

        logo = _with_opacity(logo, placement.opacity)

        base = self._image.convert("RGBA")
        base_w, base_h = base.size

        if placement.left is not None:
            x = placement.left
        else:
            x = base_w - logo.width - (placement.right or 0)

        if placement.top is not None:
            y = placement.top
        else:
            y = base_h - logo.height - (placement.bottom or 0)

        layer = Image.new("RGBA", base.size, (0, 0, 0, 0))
        layer.paste(logo, (x, y))

        return self._derive(Image.alpha_composite(base, layer))

    def output(self, *, format: str | None = None, quality: int | None = None) -> TransformResult:
        output_format = format or SOURCE_FORMATS.get(self._source_format or "", "jpeg")
        pil_format = PIL_FORMATS.get(output_format)

        if pil_format is None:
            return TransformResult(
                ok=False,
                status=HTTPStatus.UNSUPPORTED_MEDIA_TYPE.value,
                error=f"Unsupported output format '{output_format}'",
            )

        effective_quality = quality if quality is not None else self._quality
        image = self._image
        save_kwargs: dict[str, object] = {}

        if output_format == "jpeg":
            image = _flatten(image)
        elif image.mode not in ("RGB", "RGBA"):
            image = image.convert("RGBA")

        if effective_quality is not None and output_format in ("jpeg", "webp"):
            save_kwargs["quality"] = effective_quality
        if output_format == "png":
            save_kwargs["optimize"] = True

        buffer = io.BytesIO()
        try:
            image.save(buffer, format=pil_format, **save_kwargs)
        except (OSError, ValueError) as exc:
            logger.exception("Image encoding failed", extra={"format": output_format})
            return TransformResult(
                ok=False,
                status=HTTPStatus.INTERNAL_SERVER_ERROR.value,
                error=str(exc),
            )

        return TransformResult(
            ok=True,
            status=HTTPStatus.OK.value,
            content_type=CONTENT_TYPES[output_format],
            body=buffer.getvalue(),
        )


class PillowTransformService(ImageTransformService):
    """Decodes images with Pillow and hands out pipelines."""

    def input(self, data: bytes) -> PillowImagePipeline:
        try:
            image = Image.open(io.BytesIO(data))
            image.load()
        except (UnidentifiedImageError, OSError) as exc:
            raise ProcessingError(message="Unable to decode image") from exc

        source_format = image.format
        # Respect camera orientation before any geometry is applied
        image = ImageOps.exif_transpose(image)

        return PillowImagePipeline(image, source_format=source_format)
