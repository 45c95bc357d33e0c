"""Image processing models."""

import json

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt

from core.utils.constants import (
    DEFAULT_QUALITY,
    WATERMARK_INSET,
    WATERMARK_OPACITY,
    WATERMARK_SIZE,
)


class ProcessingOptions(BaseModel):
    """Per-request processing options parsed from the query string.

    Bounds are not enforced here; see
    ``core.imaging.options.validate_processing_options``.
    """

    model_config = ConfigDict(frozen=True)

    width: StrictInt | None = None
    height: StrictInt | None = None
    quality: StrictInt | None = DEFAULT_QUALITY
    format: str | None = None
    watermark: StrictBool = True

    def to_header(self) -> str:
        """Serialized copy for the X-Processing-Options header."""
        return json.dumps(self.model_dump(exclude_none=True), separators=(",", ":"))


class OverlayPlacement(BaseModel):
    """Where and how an overlay is drawn onto an image."""

    model_config = ConfigDict(frozen=True)

    top: int | None = None
    left: int | None = None
    bottom: int | None = None
    right: int | None = None
    width: int = WATERMARK_SIZE
    height: int = WATERMARK_SIZE
    opacity: float = Field(default=WATERMARK_OPACITY, ge=0, le=1)
    fit: str = "contain"


TOP_LEFT_WATERMARK = OverlayPlacement(top=WATERMARK_INSET, left=WATERMARK_INSET)
BOTTOM_RIGHT_WATERMARK = OverlayPlacement(bottom=WATERMARK_INSET, right=WATERMARK_INSET)


class TransformResult(BaseModel):
    """Outcome of an image transform; callers must check ``ok``."""

    ok: StrictBool
    status: StrictInt
    content_type: str | None = None
    body: bytes = b""
    error: str | None = None

    @property
    def content_length(self) -> int:
        return len(self.body)


class CachedImage(BaseModel):
    """A processed image response stored in the response cache."""

    body: bytes
    content_type: str
    headers: dict[str, str] = Field(default_factory=dict)
