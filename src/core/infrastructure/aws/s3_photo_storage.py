"""S3-backed implementation of PhotoStorageRepository."""

from collections.abc import Mapping
from concurrent.futures import ThreadPoolExecutor
from typing import Any

from aws_lambda_powertools import Logger
from botocore.exceptions import ClientError

from core.infrastructure.adapters.s3_adapter import S3Adapter
from core.models.errors import StorageOperationError, UploadFailedError
from core.models.storage import PhotoPage, StoredPhoto, StoredPhotoInfo
from core.repositories.storage_repository import PhotoStorageRepository
from core.utils.constants import STORED_OBJECT_CACHE_CONTROL

logger = Logger(utc=True)

NOT_FOUND_CODES = frozenset({"NoSuchKey", "404", "NotFound"})
HEAD_WORKERS = 8


def _is_not_found(exc: ClientError) -> bool:
    return exc.response.get("Error", {}).get("Code") in NOT_FOUND_CODES


class S3PhotoStorage(PhotoStorageRepository):
    """Photo storage implementation backed by Amazon S3."""

    def __init__(self, adapter: S3Adapter | None = None) -> None:
        """Create storage using the provided S3 adapter."""
        self._s3 = adapter or S3Adapter()

    def put_photo(
        self,
        *,
        key: str,
        data: bytes,
        content_type: str,
        metadata: dict[str, str],
    ) -> None:
        """Upload photo bytes to S3 with long-lived cache headers."""
        logger.debug(
            "Uploading photo",
            extra={"key": key, "size": len(data), "content_type": content_type},
        )

        try:
            self._s3.put_object(
                key=key,
                body=data,
                content_type=content_type,
                metadata=metadata,
                cache_control=STORED_OBJECT_CACHE_CONTROL,
            )
            logger.info("Photo uploaded successfully", extra={"key": key})

        except ClientError as exc:
            logger.error("S3 upload failed", extra={"key": key})
            raise UploadFailedError(
                message=exc.response.get("Error", {}).get("Message") or "Unable to store photo",
                details={"key": key},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error uploading photo")
            raise UploadFailedError(
                message="Unable to store photo",
                details={"key": key},
            ) from exc

    def get_photo(self, *, key: str) -> StoredPhoto | None:
        logger.debug("Downloading photo", extra={"key": key})

        try:
            response = self._s3.get_object(key=key)
            body = response["Body"].read()
        except ClientError as exc:
            if _is_not_found(exc):
                logger.info("Photo not found", extra={"key": key})
                return None

            logger.error("S3 download failed", extra={"key": key})
            raise StorageOperationError(
                message="Unable to read photo at this time",
                details={"key": key},
            ) from exc

        return StoredPhoto(body=body, **self._to_info(key, response).model_dump())

    def head_photo(self, *, key: str) -> StoredPhotoInfo | None:
        try:
            response = self._s3.head_object(key=key)
        except ClientError as exc:
            if _is_not_found(exc):
                return None

            logger.error("S3 head failed", extra={"key": key})
            raise StorageOperationError(
                message="Unable to read photo metadata at this time",
                details={"key": key},
            ) from exc

        return self._to_info(key, response)

    def list_photos(
        self,
        *,
        prefix: str,
        limit: int,
        cursor: str | None = None,
    ) -> PhotoPage:
        """List one page under ``prefix``, enriched with per-object metadata.

        ListObjectsV2 does not return content types or custom metadata, so
        every listed object is probed with HEAD concurrently.
        """
        try:
            response = self._s3.list_objects(
                prefix=prefix,
                max_keys=limit,
                continuation_token=cursor,
            )
        except ClientError as exc:
            logger.error("S3 listing failed", extra={"prefix": prefix})
            raise StorageOperationError(
                message="Unable to list photos at this time",
                details={"prefix": prefix},
            ) from exc

        contents: list[Mapping[str, Any]] = list(response.get("Contents") or [])

        if contents:
            with ThreadPoolExecutor(max_workers=min(HEAD_WORKERS, len(contents))) as executor:
                heads = list(executor.map(self._head_listed, contents))
        else:
            heads = []

        objects = [info for info in heads if info is not None]
        truncated = bool(response.get("IsTruncated"))

        logger.debug(
            "Listed photos",
            extra={"prefix": prefix, "count": len(objects), "truncated": truncated},
        )

        return PhotoPage(
            objects=objects,
            truncated=truncated,
            cursor=response.get("NextContinuationToken") if truncated else None,
        )

    def _head_listed(self, entry: Mapping[str, Any]) -> StoredPhotoInfo | None:
        key = entry["Key"]

        try:
            head = self._s3.head_object(key=key)
        except ClientError as exc:
            # Deleted between LIST and HEAD
            if _is_not_found(exc):
                return None
            raise StorageOperationError(
                message="Unable to list photos at this time",
                details={"key": key},
            ) from exc

        info = self._to_info(key, head)
        return info.model_copy(update={"size": int(entry.get("Size", info.size))})

    @staticmethod
    def _to_info(key: str, response: Mapping[str, Any]) -> StoredPhotoInfo:
        return StoredPhotoInfo(
            key=key,
            size=int(response.get("ContentLength", 0)),
            content_type=response.get("ContentType"),
            last_modified=response["LastModified"],
            metadata=dict(response.get("Metadata") or {}),
        )
