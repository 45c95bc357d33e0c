"""
Business logic for serving processed event photos.

The service resolves storage keys, consults the processed-image cache,
fetches originals and runs them through the processing pipeline.
"""

from aws_lambda_powertools import Logger

from core.imaging.options import resolve_storage_key, validate_processing_options
from core.imaging.processing import process_image
from core.infrastructure.adapters.s3_adapter import S3Adapter
from core.infrastructure.aws.dynamodb_branding_assets import DynamoDBBrandingAssets
from core.infrastructure.aws.s3_photo_storage import S3PhotoStorage
from core.infrastructure.aws.s3_response_cache import S3ResponseCache
from core.infrastructure.imaging.pillow_transform import PillowTransformService
from core.models.errors import (
    InternalError,
    PhotoNotFoundError,
    ProcessingError,
    StorageError,
    StorageOperationError,
    ValidationFailedError,
)
from core.models.image import CachedImage, ProcessingOptions, TransformResult
from core.models.storage import StoredPhotoInfo
from core.repositories.branding_repository import BrandingAssetRepository
from core.repositories.cache_repository import ResponseCacheRepository
from core.repositories.image_transform import ImageTransformService
from core.repositories.storage_repository import PhotoStorageRepository
from core.utils.config import Settings

logger = Logger(utc=True)


class ServeService:
    """Application service responsible for image delivery.

    This service orchestrates:
    - Storage key resolution under the event prefix
    - Processing option validation
    - Cache lookups and writes
    - Original retrieval and processing
    """

    def __init__(
        self,
        settings: Settings,
        *,
        storage: PhotoStorageRepository | None = None,
        cache: ResponseCacheRepository | None = None,
        transformer: ImageTransformService | None = None,
        branding: BrandingAssetRepository | None = None,
    ) -> None:
        self.settings = settings
        self.storage = storage
        self.cache = cache
        self.transformer = transformer
        self.branding = branding

        if settings.storage_configured:
            adapter = S3Adapter(settings.photos_bucket_name)
            self.storage = self.storage or S3PhotoStorage(adapter)
            self.cache = self.cache or S3ResponseCache(adapter)

        if self.transformer is None and settings.transform_enabled:
            self.transformer = PillowTransformService()

        if self.branding is None and settings.branding_assets_table_name:
            self.branding = DynamoDBBrandingAssets.for_table(settings.branding_assets_table_name)

    def ensure_storage(self) -> PhotoStorageRepository:
        if self.storage is None:
            logger.error("Photo storage is not configured")
            raise StorageError()
        return self.storage

    def resolve_key(self, requested_key: str | None) -> str:
        if not requested_key:
            raise PhotoNotFoundError()
        return resolve_storage_key(requested_key, self.settings.event_prefix)

    @staticmethod
    def validate_options(options: ProcessingOptions) -> None:
        """
        Raises:
            ValidationFailedError: Listing every out-of-bounds option
        """
        errors = validate_processing_options(options)
        if errors:
            raise ValidationFailedError(message="; ".join(errors), details={"errors": errors})

    def get_cached(self, cache_key: str) -> CachedImage | None:
        """Look up a processed image; a failing cache counts as a miss."""
        if self.cache is None:
            return None

        try:
            return self.cache.get(cache_key)
        except Exception:
            logger.exception("Cache lookup failed", extra={"cache_key": cache_key})
            return None

    def store_cached(self, cache_key: str, image: CachedImage) -> None:
        if self.cache is None:
            return
        self.cache.put(cache_key, image, ttl=self.settings.cache_ttl)

    def render(
        self,
        resolved_key: str,
        requested_key: str,
        options: ProcessingOptions,
    ) -> TransformResult:
        """Fetch the original and process it.

        Raises:
            PhotoNotFoundError: If the original does not exist
            ProcessingError: If processing fails or reports a failed result
            InternalError: If the original cannot be read
        """
        storage = self.ensure_storage()

        try:
            original = storage.get_photo(key=resolved_key)
        except StorageOperationError as exc:
            raise InternalError(message="Failed to serve image") from exc

        if original is None:
            raise PhotoNotFoundError.for_filename(requested_key)

        try:
            result = process_image(original.body, options, self.transformer, self.branding)
        except ProcessingError as exc:
            logger.error(
                "Image processing failed",
                extra={"key": resolved_key, "reason": exc.message},
            )
            raise ProcessingError(details={"key": resolved_key}) from exc

        if not result.ok:
            logger.error(
                "Image processing returned a failed result",
                extra={"key": resolved_key, "status": result.status, "reason": result.error},
            )
            raise ProcessingError(details={"key": resolved_key})

        logger.info(
            "Image processed",
            extra={"key": resolved_key, "size": result.content_length},
        )
        return result

    def describe(self, resolved_key: str, requested_key: str) -> StoredPhotoInfo:
        """Metadata-only probe used by HEAD requests.

        Raises:
            PhotoNotFoundError: If the object does not exist
            InternalError: If the probe fails
        """
        storage = self.ensure_storage()

        try:
            info = storage.head_photo(key=resolved_key)
        except StorageOperationError as exc:
            raise InternalError(message="Failed to get image metadata") from exc

        if info is None:
            raise PhotoNotFoundError.for_filename(requested_key)

        return info
