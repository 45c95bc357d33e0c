"""Pure helpers for image processing options, cache keys and sizing."""

import math
import re
from typing import NamedTuple

from core.models.image import ProcessingOptions
from core.utils.constants import (
    ALLOWED_OUTPUT_FORMATS,
    MAX_DIMENSION,
    MAX_QUALITY,
    MIN_DIMENSION,
    MIN_QUALITY,
)

_CACHE_KEY_UNSAFE = re.compile(r"[^\w.-]")


class ResponsiveSize(NamedTuple):
    width: int
    height: int


def validate_processing_options(options: ProcessingOptions) -> list[str]:
    """Return one message per out-of-bounds option; empty when valid."""
    errors: list[str] = []

    if options.width is not None and not MIN_DIMENSION <= options.width <= MAX_DIMENSION:
        errors.append(f"Width must be between {MIN_DIMENSION} and {MAX_DIMENSION} pixels")

    if options.height is not None and not MIN_DIMENSION <= options.height <= MAX_DIMENSION:
        errors.append(f"Height must be between {MIN_DIMENSION} and {MAX_DIMENSION} pixels")

    if options.quality is not None and not MIN_QUALITY <= options.quality <= MAX_QUALITY:
        errors.append(f"Quality must be between {MIN_QUALITY} and {MAX_QUALITY}")

    if options.format and options.format not in ALLOWED_OUTPUT_FORMATS:
        errors.append("Format must be jpeg, png, or webp")

    return errors


def create_cache_key(resolved_key: str, options: ProcessingOptions) -> str:
    """Deterministic cache identity for a storage key plus processing options."""
    parts = [
        _CACHE_KEY_UNSAFE.sub("_", resolved_key),
        options.width or "auto",
        options.height or "auto",
        options.quality or "auto",
        options.format or "auto",
        "wm" if options.watermark else "no-wm",
    ]
    return "_".join(str(part) for part in parts)


def get_optimal_format(accept_header: str | None) -> str:
    """webp when the client advertises it, jpeg otherwise."""
    if accept_header and "image/webp" in accept_header:
        return "webp"
    return "jpeg"


def calculate_responsive_dimensions(
    original_width: int,
    original_height: int,
    target_width: int,
) -> ResponsiveSize:
    # Floor, not round: 1080x1920 at 400 wide is 400x711
    height = math.floor(target_width * original_height / original_width)
    return ResponsiveSize(width=target_width, height=height)


def resolve_storage_key(key: str, event_prefix: str) -> str:
    """Prefix ``key`` with the event prefix unless it already carries it."""
    if key.startswith(f"{event_prefix}/"):
        return key
    return f"{event_prefix}/{key}"
