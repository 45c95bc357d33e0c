"""Thin adapter for interacting with Amazon S3."""

from collections.abc import Mapping
import os
from typing import Any, Protocol

import boto3

from core.utils.config import validate_environment
from core.utils.constants import (
    ENV_AWS_ENDPOINT_URL,
    ENV_AWS_REGION,
    ENV_PHOTOS_BUCKET_NAME,
)


class _Boto3S3Client(Protocol):
    """Internal typing for boto3 S3 client (AWS-facing only)."""

    def put_object(self, **kwargs: Any) -> Any: ...

    def get_object(
        self,
        *,
        Bucket: str,
        Key: str,
    ) -> Mapping[str, Any]: ...

    def head_object(
        self,
        *,
        Bucket: str,
        Key: str,
    ) -> Mapping[str, Any]: ...

    def list_objects_v2(self, **kwargs: Any) -> Mapping[str, Any]: ...


class S3Adapter:
    """Low-level S3 operations (mechanical, no error handling).

    This adapter:
    - Wraps boto3 S3 client
    - Does NOT handle errors (lets them bubble up)
    - Domain implementations catch and translate errors
    """

    def __init__(self, bucket_name: str | None = None) -> None:
        """Create S3 client for the given bucket, or the one from the environment."""
        if bucket_name is None:
            validate_environment(os.environ, (ENV_PHOTOS_BUCKET_NAME,))
            bucket_name = os.environ[ENV_PHOTOS_BUCKET_NAME]

        self._bucket = bucket_name
        self._client: _Boto3S3Client = boto3.client(
            "s3",
            endpoint_url=os.getenv(ENV_AWS_ENDPOINT_URL),
            region_name=os.getenv(ENV_AWS_REGION),
        )

    @property
    def bucket(self) -> str:
        return self._bucket

    def put_object(
        self,
        *,
        key: str,
        body: bytes,
        content_type: str,
        metadata: dict[str, str],
        cache_control: str | None = None,
    ) -> None:
        """Store object in S3.
        Raises boto3 exceptions - caught by domain implementation.
        """
        kwargs: dict[str, Any] = {
            "Bucket": self._bucket,
            "Key": key,
            "Body": body,
            "ContentType": content_type,
            "Metadata": metadata,
        }

        if cache_control:
            kwargs["CacheControl"] = cache_control

        self._client.put_object(**kwargs)

    def get_object(self, *, key: str) -> Mapping[str, Any]:
        """Fetch object from S3.
        Raises boto3 exceptions - caught by domain implementation.
        """
        return self._client.get_object(
            Bucket=self._bucket,
            Key=key,
        )

    def head_object(self, *, key: str) -> Mapping[str, Any]:
        """Fetch object metadata from S3.
        Raises boto3 exceptions - caught by domain implementation.
        """
        return self._client.head_object(
            Bucket=self._bucket,
            Key=key,
        )

    def list_objects(
        self,
        *,
        prefix: str,
        max_keys: int,
        continuation_token: str | None = None,
    ) -> Mapping[str, Any]:
        """List one page of objects under a prefix.
        Raises boto3 exceptions - caught by domain implementation.
        """
        kwargs: dict[str, Any] = {
            "Bucket": self._bucket,
            "Prefix": prefix,
            "MaxKeys": max_keys,
        }

        if continuation_token:
            kwargs["ContinuationToken"] = continuation_token

        return self._client.list_objects_v2(**kwargs)
