"""S3-backed implementation of ResponseCacheRepository.

Entries live under a dedicated prefix in the photos bucket. Expiry is stored
as object metadata and checked on read; a bucket lifecycle rule on the
prefix is expected to reclaim space.
"""

import json
import time

from aws_lambda_powertools import Logger
from botocore.exceptions import ClientError

from core.infrastructure.adapters.s3_adapter import S3Adapter
from core.models.image import CachedImage
from core.repositories.cache_repository import ResponseCacheRepository
from core.utils.constants import RESPONSE_CACHE_PREFIX

logger = Logger(utc=True)

META_EXPIRES_AT = "expires-at"
META_HEADERS = "cached-headers"


class S3ResponseCache(ResponseCacheRepository):
    """Processed image cache stored as S3 objects."""

    def __init__(
        self,
        adapter: S3Adapter | None = None,
        *,
        prefix: str = RESPONSE_CACHE_PREFIX,
    ) -> None:
        self._s3 = adapter or S3Adapter()
        self._prefix = prefix.rstrip("/")

    def _object_key(self, cache_key: str) -> str:
        return f"{self._prefix}/{cache_key}"

    def get(self, cache_key: str) -> CachedImage | None:
        key = self._object_key(cache_key)

        try:
            response = self._s3.get_object(key=key)
        except ClientError as exc:
            if exc.response.get("Error", {}).get("Code") in ("NoSuchKey", "404"):
                return None
            raise

        metadata = response.get("Metadata") or {}
        expires_at = float(metadata.get(META_EXPIRES_AT, "0"))

        if expires_at <= time.time():
            logger.debug("Cache entry expired", extra={"cache_key": cache_key})
            return None

        return CachedImage(
            body=response["Body"].read(),
            content_type=response.get("ContentType", "application/octet-stream"),
            headers=json.loads(metadata.get(META_HEADERS, "{}")),
        )

    def put(self, cache_key: str, image: CachedImage, *, ttl: int) -> None:
        self._s3.put_object(
            key=self._object_key(cache_key),
            body=image.body,
            content_type=image.content_type,
            metadata={
                META_EXPIRES_AT: str(int(time.time()) + ttl),
                META_HEADERS: json.dumps(image.headers, separators=(",", ":")),
            },
            cache_control=f"public, max-age={ttl}",
        )
        logger.debug("Cached processed image", extra={"cache_key": cache_key, "ttl": ttl})
