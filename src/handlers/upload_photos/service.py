"""Business logic for photo upload operations.

This module coordinates rate limiting, authentication, multipart parsing,
batch validation and concurrent storage writes for event photo uploads.
"""

import json
import math
from concurrent.futures import ThreadPoolExecutor
from email.message import Message
from urllib.parse import quote

from aws_lambda_powertools import Logger
from pydantic import ValidationError
from requests_toolbelt.multipart.decoder import (
    ImproperBodyPartContentException,
    MultipartDecoder,
    NonMultipartContentTypeException,
)

from core.infrastructure.adapters.dynamodb_adapter import DynamoDBAdapter
from core.infrastructure.adapters.s3_adapter import S3Adapter
from core.infrastructure.aws.dynamodb_rate_limiter import DynamoDBRateLimiter
from core.infrastructure.aws.s3_photo_storage import S3PhotoStorage
from core.infrastructure.memory.in_memory_rate_limiter import InMemoryRateLimiter
from core.models.errors import (
    RateLimitedError,
    StorageError,
    UnauthorizedError,
    UploadFailedError,
    ValidationFailedError,
)
from core.models.photo import (
    Dimensions,
    PhotoMetadata,
    UploadConstraints,
    UploadedFile,
    UploadFailure,
    UploadPhotosResponse,
)
from core.repositories.rate_limiter import RateLimiter
from core.repositories.storage_repository import PhotoStorageRepository
from core.utils.config import Settings
from core.utils.constants import (
    DIMENSIONS_FORM_FIELD,
    META_DIMENSIONS,
    META_ORIGINAL_NAME,
    META_SIZE,
    META_UPLOADED_AT,
    UPLOAD_FORM_FIELD,
)
from core.utils.file_validation import (
    generate_unique_filename,
    sanitize_filename,
    validate_files,
)
from core.utils.time import utc_now_iso

from .models import UploadCredentials, UploadForm

logger = Logger(utc=True)

DEFAULT_PART_CONTENT_TYPE = "application/octet-stream"

# Best-effort fallback when no shared counter table is configured
_memory_limiter: InMemoryRateLimiter | None = None


def get_rate_limiter(settings: Settings) -> RateLimiter:
    """Shared DynamoDB counter when configured, else the process-local map."""
    global _memory_limiter

    if settings.upload_rate_limit_table_name:
        return DynamoDBRateLimiter(
            DynamoDBAdapter(settings.upload_rate_limit_table_name),
            limit=settings.upload_rate_limit,
        )

    if _memory_limiter is None or _memory_limiter.limit != settings.upload_rate_limit:
        _memory_limiter = InMemoryRateLimiter(limit=settings.upload_rate_limit)

    return _memory_limiter


def reset_rate_limits() -> None:
    """Forget every in-memory counter."""
    if _memory_limiter is not None:
        _memory_limiter.reset()


def _parse_disposition(value: str) -> tuple[str | None, str | None]:
    """Return ``(field name, file name)`` from a Content-Disposition value."""
    message = Message()
    message["Content-Disposition"] = value

    name = message.get_param("name", header="content-disposition")
    if isinstance(name, tuple):
        name = name[2]

    return name, message.get_filename()


def _parse_dimensions(raw: str) -> Dimensions | None:
    try:
        return Dimensions.model_validate(json.loads(raw))
    except (ValueError, ValidationError):
        logger.debug("Ignoring malformed dimensions field", extra={"value": raw[:100]})
        return None


class UploadService:
    """Application service responsible for photo uploads.

    This service orchestrates:
    - Per-client rate limiting
    - Upload authentication
    - Multipart decoding and all-or-nothing batch validation
    - Concurrent per-file writes to storage
    """

    def __init__(
        self,
        settings: Settings,
        *,
        storage: PhotoStorageRepository | None = None,
        rate_limiter: RateLimiter | None = None,
    ) -> None:
        self.settings = settings
        self.storage = storage
        self.rate_limiter = rate_limiter or get_rate_limiter(settings)
        self.constraints = UploadConstraints(max_file_size=settings.max_upload_size)

        if self.storage is None and settings.storage_configured:
            self.storage = S3PhotoStorage(S3Adapter(settings.photos_bucket_name))

    def ensure_storage(self) -> PhotoStorageRepository:
        if self.storage is None:
            logger.error("Photo storage is not configured")
            raise StorageError()
        return self.storage

    def check_rate_limit(self, client_key: str) -> None:
        """Count this attempt against the client's window.

        Raises:
            RateLimitedError: If the window is already full
        """
        decision = self.rate_limiter.check_and_increment(client_key)

        if decision.allowed:
            return

        retry_after = decision.retry_after or 1
        logger.warning(
            "Upload rate limit exceeded",
            extra={"client_key": client_key, "retry_after": retry_after},
        )
        raise RateLimitedError(
            message=(
                f"Upload rate limit exceeded. Try again in {math.ceil(retry_after / 60)} minutes."
            ),
            retry_after=retry_after,
        )

    def authenticate(self, credentials: UploadCredentials) -> None:
        """Check upload credentials.

        Production only requires the access assertion header to be present;
        its signature is verified by the access gateway in front of the API.
        Every other environment requires the configured upload token.

        Raises:
            UnauthorizedError: If the credentials are missing or wrong
        """
        if self.settings.is_production:
            if not credentials.access_assertion:
                raise UnauthorizedError(message="Authentication required")
            return

        if credentials.upload_token != self.settings.upload_token:
            raise UnauthorizedError(message="Invalid upload token")

    @staticmethod
    def parse_form(body: bytes, content_type: str | None) -> UploadForm:
        """Decode a multipart body into uploaded files.

        ``dimensions`` fields are matched to ``photos`` fields by position.
        Parts without a file name are ignored.

        Raises:
            ValidationFailedError: If the body is not valid multipart form data
        """
        if not content_type or "boundary=" not in content_type.lower():
            raise ValidationFailedError(
                message="Request must be multipart/form-data",
                details={"field": UPLOAD_FORM_FIELD},
            )

        try:
            # latin-1 keeps header bytes intact; names are decoded per part below
            parts = MultipartDecoder(body, content_type, encoding="latin-1").parts
        except (NonMultipartContentTypeException, ImproperBodyPartContentException) as exc:
            logger.warning("Malformed multipart body", extra={"error": str(exc)})
            raise ValidationFailedError(
                message="Malformed multipart form data",
                details={"field": UPLOAD_FORM_FIELD},
            ) from exc

        photos: list[UploadedFile] = []
        dimensions: list[Dimensions | None] = []

        for part in parts:
            disposition = part.headers.get(b"Content-Disposition", b"").decode(
                "utf-8", errors="replace"
            )
            field_name, filename = _parse_disposition(disposition)

            if field_name == DIMENSIONS_FORM_FIELD:
                raw = part.content.decode("utf-8", errors="replace")
                dimensions.append(_parse_dimensions(raw))
                continue

            if field_name != UPLOAD_FORM_FIELD:
                continue

            if not filename:
                logger.debug("Skipping photos field without a file name")
                continue

            content_type_header = part.headers.get(b"Content-Type")
            photos.append(
                UploadedFile(
                    filename=filename,
                    content_type=(
                        content_type_header.decode("latin-1").split(";")[0].strip().lower()
                        if content_type_header
                        else DEFAULT_PART_CONTENT_TYPE
                    ),
                    data=part.content,
                )
            )

        files = [
            file.model_copy(update={"dimensions": dimensions[index]})
            if index < len(dimensions)
            else file
            for index, file in enumerate(photos)
        ]

        return UploadForm(files=files)

    def validate(self, files: list[UploadedFile]) -> None:
        """Reject the whole batch if any file is invalid.

        Raises:
            ValidationFailedError: Naming every failing file and its reason
        """
        if not files:
            raise ValidationFailedError(
                message="No files provided",
                details={"field": UPLOAD_FORM_FIELD},
            )

        invalid = [result for result in validate_files(files, self.constraints) if not result.valid]

        if invalid:
            logger.warning(
                "Upload batch rejected",
                extra={"invalid_files": [result.file.filename for result in invalid]},
            )
            raise ValidationFailedError(
                message="Invalid files: "
                + ", ".join(f"{result.file.filename}: {result.error}" for result in invalid),
                details={"field": UPLOAD_FORM_FIELD},
            )

    def upload_photos(self, files: list[UploadedFile]) -> UploadPhotosResponse:
        """Store every file concurrently; failures are reported per file."""
        storage = self.ensure_storage()

        photos: list[PhotoMetadata] = []
        failures: list[UploadFailure] = []

        workers = max(1, min(len(files), self.constraints.max_files))

        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [executor.submit(self._store, storage, file) for file in files]

            for file, future in zip(files, futures):
                try:
                    photos.append(future.result())
                except UploadFailedError as exc:
                    logger.error(
                        "Upload failed",
                        extra={"upload_filename": file.filename, "error": exc.message},
                    )
                    failures.append(
                        UploadFailure(
                            filename=file.filename,
                            error=f"Failed to upload {file.filename}: {exc.message}",
                        )
                    )
                except Exception as exc:
                    logger.exception("Upload failed", extra={"upload_filename": file.filename})
                    failures.append(
                        UploadFailure(
                            filename=file.filename,
                            error=f"Failed to upload {file.filename}: {exc}",
                        )
                    )

        logger.info(
            "Upload batch processed",
            extra={"stored": len(photos), "failed": len(failures)},
        )

        return UploadPhotosResponse(
            success=not failures,
            photos=photos or None,
            errors=failures or None,
        )

    def _store(self, storage: PhotoStorageRepository, file: UploadedFile) -> PhotoMetadata:
        filename = sanitize_filename(file.filename)
        key = f"{self.settings.event_prefix}/{generate_unique_filename(filename)}"
        uploaded_at = utc_now_iso()

        metadata = {
            META_ORIGINAL_NAME: quote(file.filename),
            META_UPLOADED_AT: uploaded_at,
            META_SIZE: str(file.size),
        }
        if file.dimensions:
            metadata[META_DIMENSIONS] = json.dumps(file.dimensions.model_dump(), separators=(",", ":"))

        storage.put_photo(
            key=key,
            data=file.data,
            content_type=file.content_type,
            metadata=metadata,
        )

        return PhotoMetadata(
            key=key,
            filename=filename,
            size=file.size,
            content_type=file.content_type,
            uploaded_at=uploaded_at,
            dimensions=file.dimensions,
        )
