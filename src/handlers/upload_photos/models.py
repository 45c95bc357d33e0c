"""
Pydantic models for photo upload requests.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from core.models.photo import UploadedFile
from core.utils.constants import (
    HEADER_ACCESS_ASSERTION,
    HEADER_CLIENT_IP,
    HEADER_UPLOAD_TOKEN,
)
from core.utils.request import get_header


class UploadCredentials(BaseModel):
    """Caller identity used for rate limiting and authentication."""

    model_config = ConfigDict(frozen=True)

    client_key: str = Field(..., description="Rate-limit key, normally the client IP")
    upload_token: str | None = None
    access_assertion: str | None = None

    @classmethod
    def from_event(cls, event: dict[str, Any]) -> "UploadCredentials":
        source_ip = ((event.get("requestContext") or {}).get("identity") or {}).get("sourceIp")

        return cls(
            client_key=get_header(event, HEADER_CLIENT_IP) or source_ip or "unknown",
            upload_token=get_header(event, HEADER_UPLOAD_TOKEN),
            access_assertion=get_header(event, HEADER_ACCESS_ASSERTION),
        )


class UploadForm(BaseModel):
    """Files extracted from a multipart upload body, in form order."""

    model_config = ConfigDict(frozen=True)

    files: list[UploadedFile] = Field(default_factory=list)
