"""
Image processing built on the transform capability.

Covers resize/format/quality processing, the two-logo watermark, responsive
URL generation and the quality back-off used to hit a target file size.
"""

from aws_lambda_powertools import Logger

from core.models.errors import CapabilityUnavailableError, PhotoServiceError, ProcessingError
from core.models.image import (
    BOTTOM_RIGHT_WATERMARK,
    TOP_LEFT_WATERMARK,
    OverlayPlacement,
    ProcessingOptions,
    TransformResult,
)
from core.repositories.branding_repository import BrandingAssetRepository
from core.repositories.image_transform import ImagePipeline, ImageTransformService
from core.utils.constants import (
    BBFF_LOGO_ASSET,
    HMB_LOGO_ASSET,
    IMAGES_API_PATH,
    OPTIMIZE_DEFAULT_TARGET_KB,
    OPTIMIZE_MIN_QUALITY,
    OPTIMIZE_QUALITY_STEP,
    OPTIMIZE_START_QUALITY,
    TRANSFORM_URL_PREFIX,
)

logger = Logger(utc=True)

WATERMARK_LAYOUT: tuple[tuple[str, OverlayPlacement], ...] = (
    (BBFF_LOGO_ASSET, TOP_LEFT_WATERMARK),
    (HMB_LOGO_ASSET, BOTTOM_RIGHT_WATERMARK),
)

RESPONSIVE_TIERS: tuple[tuple[str, int, int], ...] = (
    ("thumbnail", 150, 80),
    ("small", 400, 85),
    ("medium", 800, 90),
    ("large", 1200, 95),
)


def process_image(
    source: bytes,
    options: ProcessingOptions,
    transformer: ImageTransformService | None,
    branding: BrandingAssetRepository | None = None,
) -> TransformResult:
    """Resize, watermark and encode an image.

    The returned result must be checked: ``ok`` is False when encoding failed.

    Raises:
        CapabilityUnavailableError: If no transform capability is configured
        ProcessingError: If the transform capability fails
    """
    if transformer is None:
        raise CapabilityUnavailableError()

    try:
        pipeline = transformer.input(source)

        if options.width or options.height:
            pipeline = pipeline.transform(
                width=options.width,
                height=options.height,
                quality=options.quality,
            )

        if options.watermark:
            if branding is None:
                logger.info("Watermark skipped: no branding asset store configured")
            else:
                pipeline = apply_watermarks(pipeline, transformer, branding)

        return pipeline.output(format=options.format, quality=options.quality)

    except PhotoServiceError:
        raise
    except Exception as exc:
        logger.exception("Image processing failed", extra={"options": options.model_dump()})
        raise ProcessingError(message="Image processing failed") from exc


def apply_watermarks(
    pipeline: ImagePipeline,
    transformer: ImageTransformService,
    branding: BrandingAssetRepository,
) -> ImagePipeline:
    """Composite both event logos; never raises.

    A missing logo is skipped. If any step fails, the pipeline as it stood
    before the failing step is returned.
    """
    current = pipeline

    try:
        for asset_name, placement in WATERMARK_LAYOUT:
            logo = branding.get_asset(asset_name)
            if logo is None:
                logger.warning("Watermark asset missing, skipped", extra={"asset": asset_name})
                continue

            current = current.draw(transformer.input(logo), placement)

    except Exception:
        logger.exception("Watermarking failed, serving without remaining watermarks")

    return current


def generate_thumbnail_url(key: str, width: int = 300, quality: int = 85) -> str:
    return f"{TRANSFORM_URL_PREFIX}/width={width},quality={quality}{IMAGES_API_PATH}/{key}"


def generate_responsive_urls(key: str) -> dict[str, str]:
    """URLs for every responsive tier plus the untransformed original."""
    urls = {
        name: generate_thumbnail_url(key, width, quality)
        for name, width, quality in RESPONSIVE_TIERS
    }
    urls["original"] = f"{IMAGES_API_PATH}/{key}"
    return urls


def optimize_for_web(
    data: bytes,
    target_size_kb: int = OPTIMIZE_DEFAULT_TARGET_KB,
    transformer: ImageTransformService | None = None,
) -> TransformResult:
    """Re-encode as JPEG, lowering quality until the result fits the target size.

    Qualities tried: 95, 85, ... 25, then 20. The floor result is returned
    even when it is still over the target.
    """
    if transformer is None:
        raise CapabilityUnavailableError()

    def encode(quality: int) -> TransformResult:
        return transformer.input(data).transform(quality=quality).output(format="jpeg")

    quality = OPTIMIZE_START_QUALITY
    result = encode(quality)

    while result.content_length / 1024 > target_size_kb and quality > OPTIMIZE_MIN_QUALITY:
        quality = max(quality - OPTIMIZE_QUALITY_STEP, OPTIMIZE_MIN_QUALITY)
        result = encode(quality)

    logger.debug(
        "Optimized image for web",
        extra={"quality": quality, "size": result.content_length, "target_kb": target_size_kb},
    )
    return result
