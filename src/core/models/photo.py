"""Shared photo metadata and upload models."""

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt, StrictStr
from pydantic.alias_generators import to_camel

from core.utils.constants import ALLOWED_MIME_TYPES, MAX_FILE_SIZE, MAX_FILES_PER_UPLOAD


class ApiModel(BaseModel):
    """Base for models serialized to the camelCase JSON API."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_api(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class Dimensions(ApiModel):
    width: StrictInt = Field(..., gt=0)
    height: StrictInt = Field(..., gt=0)


class PhotoMetadata(ApiModel):
    """Photo metadata returned by the gallery API."""

    key: StrictStr = Field(..., description="Storage key, always under the event prefix")
    filename: StrictStr = Field(..., description="Sanitized original file name")
    size: StrictInt = Field(..., description="Object size in bytes")
    content_type: StrictStr = Field(..., description="MIME type of the photo")
    uploaded_at: StrictStr = Field(..., description="ISO-8601 upload timestamp (UTC)")
    dimensions: Dimensions | None = Field(None, description="Client-reported dimensions")


class UploadFailure(ApiModel):
    filename: StrictStr
    error: StrictStr


class UploadConstraints(BaseModel):
    """Limits applied to every uploaded file."""

    model_config = ConfigDict(frozen=True)

    max_file_size: int = MAX_FILE_SIZE
    allowed_types: tuple[str, ...] = ALLOWED_MIME_TYPES
    max_files: int = MAX_FILES_PER_UPLOAD


DEFAULT_CONSTRAINTS = UploadConstraints()


class UploadedFile(BaseModel):
    """A single file part received from a multipart upload."""

    model_config = ConfigDict(frozen=True)

    filename: str
    content_type: str
    data: bytes
    dimensions: Dimensions | None = None

    @property
    def size(self) -> int:
        return len(self.data)


class FileValidationResult(BaseModel):
    file: UploadedFile
    valid: StrictBool
    error: str | None = None


class ListPhotosResponse(ApiModel):
    photos: list[PhotoMetadata]
    has_more: StrictBool
    cursor: StrictStr | None = None
    total: StrictInt


class UploadPhotosResponse(ApiModel):
    success: StrictBool
    photos: list[PhotoMetadata] | None = None
    errors: list[UploadFailure] | None = None
