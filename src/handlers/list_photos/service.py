"""
Business logic for the event photo gallery listing.
"""

import json
from datetime import datetime, timezone
from urllib.parse import unquote

from aws_lambda_powertools import Logger
from pydantic import ValidationError

from core.infrastructure.adapters.s3_adapter import S3Adapter
from core.infrastructure.aws.s3_photo_storage import S3PhotoStorage
from core.models.errors import InternalError, StorageError, StorageOperationError
from core.models.photo import Dimensions, ListPhotosResponse, PhotoMetadata
from core.models.storage import StoredPhotoInfo
from core.repositories.storage_repository import PhotoStorageRepository
from core.utils.config import Settings
from core.utils.constants import (
    DEFAULT_IMAGE_CONTENT_TYPE,
    META_DIMENSIONS,
    META_ORIGINAL_NAME,
    META_UPLOADED_AT,
    SORT_NAME,
    SORT_OLDEST,
    SORT_SIZE,
)
from core.utils.file_validation import sanitize_filename
from core.utils.time import to_utc_iso

logger = Logger(utc=True)


def _uploaded_at(photo: PhotoMetadata) -> datetime:
    value = datetime.fromisoformat(photo.uploaded_at)
    # Naive timestamps are UTC; mixing them with aware ones cannot be compared
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def sort_photos(photos: list[PhotoMetadata], sort: str) -> list[PhotoMetadata]:
    """Order one page of photos; unknown orders fall back to newest first."""
    if sort == SORT_OLDEST:
        return sorted(photos, key=_uploaded_at)
    if sort == SORT_NAME:
        return sorted(photos, key=lambda photo: photo.filename.casefold())
    if sort == SORT_SIZE:
        return sorted(photos, key=lambda photo: photo.size, reverse=True)
    return sorted(photos, key=_uploaded_at, reverse=True)


def to_photo_metadata(info: StoredPhotoInfo) -> PhotoMetadata:
    """Map a stored object to the gallery record.

    Objects written without upload metadata fall back to the last key
    segment and the object's modification time.
    """
    original_name = info.metadata.get(META_ORIGINAL_NAME)
    filename = (
        sanitize_filename(unquote(original_name))
        if original_name
        else info.key.rsplit("/", 1)[-1]
    )

    uploaded_at = info.metadata.get(META_UPLOADED_AT)
    if uploaded_at:
        try:
            datetime.fromisoformat(uploaded_at)
        except ValueError:
            logger.debug("Ignoring malformed upload time", extra={"key": info.key})
            uploaded_at = None

    dimensions = None
    if raw_dimensions := info.metadata.get(META_DIMENSIONS):
        try:
            dimensions = Dimensions.model_validate(json.loads(raw_dimensions))
        except (ValueError, ValidationError):
            logger.debug("Ignoring malformed dimensions", extra={"key": info.key})

    return PhotoMetadata(
        key=info.key,
        filename=filename,
        size=info.size,
        content_type=info.content_type or DEFAULT_IMAGE_CONTENT_TYPE,
        uploaded_at=uploaded_at or to_utc_iso(info.last_modified),
        dimensions=dimensions,
    )


class ListService:
    """Application service responsible for listing the event's photos.

    This service coordinates:
    - Listing one page of objects under the event prefix
    - Mapping stored objects to gallery records
    - Sorting the page in memory
    """

    def __init__(
        self,
        settings: Settings,
        *,
        storage: PhotoStorageRepository | None = None,
    ) -> None:
        self.settings = settings
        self.storage = storage

        if self.storage is None and settings.storage_configured:
            self.storage = S3PhotoStorage(S3Adapter(settings.photos_bucket_name))

    def ensure_storage(self) -> PhotoStorageRepository:
        if self.storage is None:
            logger.error("Photo storage is not configured")
            raise StorageError()
        return self.storage

    def list_photos(
        self,
        *,
        limit: int,
        cursor: str | None,
        sort: str,
    ) -> ListPhotosResponse:
        """List one page of photos.

        Sorting applies within the returned page only; pagination order
        comes from the object store.

        Raises:
            StorageError: If no photo storage is configured
            InternalError: If the listing fails
        """
        storage = self.ensure_storage()

        prefix = f"{self.settings.event_prefix}/"

        try:
            page = storage.list_photos(prefix=prefix, limit=limit, cursor=cursor)
        except StorageOperationError as exc:
            logger.exception("Photo listing failed", extra={"prefix": prefix})
            raise InternalError(message="Failed to list photos") from exc

        photos = sort_photos([to_photo_metadata(info) for info in page.objects], sort)

        logger.info(
            "Photos listed successfully",
            extra={"prefix": prefix, "count": len(photos), "sort": sort},
        )

        return ListPhotosResponse(
            photos=photos,
            has_more=page.truncated,
            cursor=page.cursor,
            total=len(photos),
        )
