from __future__ import annotations

import io

import pytest
from PIL import Image

from core.imaging.processing import (
    apply_watermarks,
    generate_responsive_urls,
    generate_thumbnail_url,
    optimize_for_web,
    process_image,
)
from core.infrastructure.imaging.pillow_transform import PillowTransformService
from core.models.errors import CapabilityUnavailableError, ProcessingError
from core.models.image import OverlayPlacement, ProcessingOptions, TransformResult
from core.repositories.branding_repository import BrandingAssetRepository
from core.repositories.image_transform import ImagePipeline, ImageTransformService


class RecordingPipeline(ImagePipeline):
    """Fake pipeline recording every operation applied to it."""

    def __init__(self, ops: tuple[str, ...] = (), fail_on: str | None = None) -> None:
        self.ops = ops
        self.fail_on = fail_on

    def _next(self, op: str) -> RecordingPipeline:
        if self.fail_on and op.startswith(self.fail_on):
            raise RuntimeError(f"{op} failed")
        return RecordingPipeline((*self.ops, op), self.fail_on)

    def transform(self, *, width=None, height=None, quality=None) -> RecordingPipeline:
        return self._next(f"transform:{width}x{height}@{quality}")

    def draw(self, overlay: ImagePipeline, placement: OverlayPlacement) -> RecordingPipeline:
        side = "top-left" if placement.top is not None else "bottom-right"
        return self._next(f"draw:{side}")

    def output(self, *, format=None, quality=None) -> TransformResult:
        body = "|".join((*self.ops, f"output:{format}@{quality}")).encode()
        return TransformResult(ok=True, status=200, content_type=f"image/{format}", body=body)


class RecordingTransformer(ImageTransformService):
    def __init__(self, fail_on: str | None = None) -> None:
        self.fail_on = fail_on

    def input(self, data: bytes) -> RecordingPipeline:
        return RecordingPipeline(fail_on=self.fail_on)


class DictBranding(BrandingAssetRepository):
    def __init__(self, assets: dict[str, bytes]) -> None:
        self.assets = assets

    def get_asset(self, name: str) -> bytes | None:
        return self.assets.get(name)


BOTH_LOGOS = DictBranding({"bbff-logo.png": b"logo", "hmb-logo.png": b"logo"})


def ops_of(result: TransformResult) -> list[str]:
    return result.body.decode().split("|")


class TestProcessImage:
    def test_without_transformer_raises(self) -> None:
        with pytest.raises(CapabilityUnavailableError):
            process_image(b"data", ProcessingOptions(), None)

    def test_capability_unavailable_is_a_processing_error(self) -> None:
        assert issubclass(CapabilityUnavailableError, ProcessingError)

    def test_resize_watermark_encode(self) -> None:
        options = ProcessingOptions(width=800, quality=85, format="webp")

        result = process_image(b"data", options, RecordingTransformer(), BOTH_LOGOS)

        assert ops_of(result) == [
            "transform:800xNone@85",
            "draw:top-left",
            "draw:bottom-right",
            "output:webp@85",
        ]

    def test_no_resize_without_dimensions(self) -> None:
        options = ProcessingOptions(format="jpeg", watermark=False)

        result = process_image(b"data", options, RecordingTransformer(), BOTH_LOGOS)

        assert ops_of(result) == ["output:jpeg@90"]

    def test_watermark_skipped_without_branding_store(self) -> None:
        options = ProcessingOptions(format="jpeg")

        result = process_image(b"data", options, RecordingTransformer(), None)

        assert ops_of(result) == ["output:jpeg@90"]

    def test_missing_logo_is_skipped(self) -> None:
        branding = DictBranding({"hmb-logo.png": b"logo"})

        result = process_image(b"data", ProcessingOptions(format="png"), RecordingTransformer(), branding)

        assert ops_of(result) == ["draw:bottom-right", "output:png@90"]

    def test_watermark_failure_keeps_partial_pipeline(self) -> None:
        transformer = RecordingTransformer(fail_on="draw:bottom-right")

        result = process_image(b"data", ProcessingOptions(format="jpeg"), transformer, BOTH_LOGOS)

        assert ops_of(result) == ["draw:top-left", "output:jpeg@90"]

    def test_transform_failure_raises_processing_error(self) -> None:
        transformer = RecordingTransformer(fail_on="transform")

        with pytest.raises(ProcessingError) as exc_info:
            process_image(b"data", ProcessingOptions(width=10), transformer)

        assert exc_info.value.message == "Image processing failed"

    def test_undecodable_image_with_pillow(self) -> None:
        with pytest.raises(ProcessingError):
            process_image(b"not an image", ProcessingOptions(width=10), PillowTransformService())

    def test_with_pillow(self, make_image, logo_bytes) -> None:
        source = make_image(400, 300, "JPEG")
        branding = DictBranding({"bbff-logo.png": logo_bytes, "hmb-logo.png": logo_bytes})
        options = ProcessingOptions(width=200, format="png")

        result = process_image(source, options, PillowTransformService(), branding)

        assert result.ok
        assert result.content_type == "image/png"
        with Image.open(io.BytesIO(result.body)) as image:
            assert image.size == (200, 150)
            assert image.format == "PNG"


class TestApplyWatermarks:
    def test_logo_blends_at_eighty_percent(self, make_image) -> None:
        transformer = PillowTransformService()
        base = transformer.input(make_image(400, 400, "PNG", (255, 255, 255)))
        branding = DictBranding({"bbff-logo.png": make_image(100, 100, "PNG", (0, 0, 0, 255))})

        result = apply_watermarks(base, transformer, branding).output(format="png")

        with Image.open(io.BytesIO(result.body)) as image:
            red, _, _ = image.convert("RGB").getpixel((50, 50))
            corner = image.convert("RGB").getpixel((300, 300))

        # white under black at 0.8 leaves a fifth of the background
        assert 45 <= red <= 58
        assert corner == (255, 255, 255)


class TestResponsiveUrls:
    def test_thumbnail_url(self) -> None:
        assert generate_thumbnail_url("evt/a.jpg") == (
            "/cdn-cgi/image/width=300,quality=85/api/images/evt/a.jpg"
        )

    def test_tiers(self) -> None:
        urls = generate_responsive_urls("evt/a.jpg")

        assert set(urls) == {"thumbnail", "small", "medium", "large", "original"}
        assert urls["thumbnail"] == generate_thumbnail_url("evt/a.jpg", 150, 80)
        assert urls["medium"] == generate_thumbnail_url("evt/a.jpg", 800, 90)
        assert urls["large"] == generate_thumbnail_url("evt/a.jpg", 1200, 95)
        assert urls["original"] == "/api/images/evt/a.jpg"


class QualitySizedPipeline(RecordingPipeline):
    """Output size in KB equals the requested quality."""

    def __init__(self, quality: int | None = None) -> None:
        super().__init__()
        self.quality = quality

    def transform(self, *, width=None, height=None, quality=None) -> QualitySizedPipeline:
        return QualitySizedPipeline(quality)

    def output(self, *, format=None, quality=None) -> TransformResult:
        size = (self.quality or 0) * 1024
        return TransformResult(ok=True, status=200, content_type="image/jpeg", body=b"x" * size)


class QualitySizedTransformer(ImageTransformService):
    def __init__(self) -> None:
        self.calls = 0

    def input(self, data: bytes) -> QualitySizedPipeline:
        self.calls += 1
        return QualitySizedPipeline()


class TestOptimizeForWeb:
    def test_requires_transformer(self) -> None:
        with pytest.raises(CapabilityUnavailableError):
            optimize_for_web(b"data")

    def test_first_attempt_within_budget(self) -> None:
        transformer = QualitySizedTransformer()

        result = optimize_for_web(b"data", target_size_kb=500, transformer=transformer)

        assert result.content_length == 95 * 1024
        assert transformer.calls == 1

    def test_steps_quality_down(self) -> None:
        transformer = QualitySizedTransformer()

        result = optimize_for_web(b"data", target_size_kb=60, transformer=transformer)

        # 95, 85, 75, 65, 55
        assert result.content_length == 55 * 1024
        assert transformer.calls == 5

    def test_stops_at_quality_floor(self) -> None:
        transformer = QualitySizedTransformer()

        result = optimize_for_web(b"data", target_size_kb=1, transformer=transformer)

        # 95 ... 25, then 20
        assert result.content_length == 20 * 1024
        assert transformer.calls == 9

    def test_with_pillow_returns_jpeg(self, png_bytes) -> None:
        result = optimize_for_web(png_bytes, transformer=PillowTransformService())

        assert result.ok
        assert result.content_type == "image/jpeg"
