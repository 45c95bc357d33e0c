from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.models.image import ProcessingOptions
from core.utils.constants import DEFAULT_QUALITY


class ServeImageRequest(BaseModel):
    """Validation model for image processing query parameters.

    Only the types are checked here; bounds are checked against the
    resulting ``ProcessingOptions`` so every violated field is reported.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    w: int | None = Field(default=None, description="Target width in pixels")
    h: int | None = Field(default=None, description="Target height in pixels")
    q: int | None = Field(default=None, description="Output quality, 1-100")
    watermark: str | None = Field(default=None, description="'false' disables watermarks")

    @field_validator("w", "h", "q", mode="before")
    @classmethod
    def blank_is_unset(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    def to_options(self, output_format: str) -> ProcessingOptions:
        return ProcessingOptions(
            width=self.w,
            height=self.h,
            quality=self.q if self.q is not None else DEFAULT_QUALITY,
            format=output_format,
            watermark=(self.watermark or "").lower() != "false",
        )
