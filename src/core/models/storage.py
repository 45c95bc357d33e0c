"""Object store records returned by storage repositories."""

from datetime import datetime

from pydantic import BaseModel, Field, StrictBool, StrictInt, StrictStr


class StoredPhotoInfo(BaseModel):
    """Object metadata without the body."""

    key: StrictStr
    size: StrictInt
    content_type: StrictStr | None = None
    last_modified: datetime
    metadata: dict[str, str] = Field(default_factory=dict)


class StoredPhoto(StoredPhotoInfo):
    body: bytes


class PhotoPage(BaseModel):
    """One page of a prefix listing."""

    objects: list[StoredPhotoInfo]
    truncated: StrictBool = False
    cursor: StrictStr | None = None
