"""
Pytest configuration and fixtures for event photo service tests.
Provides AWS mocking, S3 and DynamoDB fixtures and generated images.
"""

import io
import os
from collections.abc import Callable
from types import SimpleNamespace
from typing import Any

os.environ.setdefault("AWS_REGION", "us-east-1")
os.environ.setdefault("AWS_DEFAULT_REGION", "us-east-1")
os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")
os.environ.setdefault("POWERTOOLS_TRACE_DISABLED", "true")
os.environ.setdefault("POWERTOOLS_METRICS_NAMESPACE", "EventPhotosTest")
os.environ.setdefault("POWERTOOLS_SERVICE_NAME", "event-photos-test")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("EVENT_PREFIX", "25thAnniversary")
os.environ.setdefault("PHOTOS_BUCKET_NAME", "event-photos-test")
os.environ.setdefault("BRANDING_ASSETS_TABLE_NAME", "branding-assets-test")
os.environ.setdefault("UPLOAD_TOKEN", "dev-upload-token")
os.environ.pop("AWS_ENDPOINT_URL", None)
os.environ.pop("UPLOAD_RATE_LIMIT_TABLE_NAME", None)
os.environ.pop("ANALYTICS_NAMESPACE", None)

import boto3  # noqa: E402
import pytest  # noqa: E402
from moto import mock_aws  # noqa: E402
from PIL import Image  # noqa: E402

from core.utils.background import background_tasks  # noqa: E402
from handlers.upload_photos.service import reset_rate_limits  # noqa: E402

EVENT_PREFIX = os.environ["EVENT_PREFIX"]
BUCKET_NAME = os.environ["PHOTOS_BUCKET_NAME"]
BRANDING_TABLE_NAME = os.environ["BRANDING_ASSETS_TABLE_NAME"]
RATE_LIMIT_TABLE_NAME = "upload-rate-limits-test"


@pytest.fixture(autouse=True)
def clean_rate_limits():
    reset_rate_limits()
    yield
    reset_rate_limits()


@pytest.fixture(scope="function")
def aws_mock():
    """moto context; background work is drained before the mock is torn down."""
    with mock_aws():
        yield
        background_tasks.drain(timeout=10)


@pytest.fixture(scope="function")
def s3_client(aws_mock):
    return boto3.client("s3", region_name=os.getenv("AWS_REGION"))


@pytest.fixture(scope="function")
def s3_bucket(s3_client):
    """Create the photos bucket; moto discards it on context exit."""
    s3_client.create_bucket(Bucket=BUCKET_NAME)
    return s3_client


@pytest.fixture(scope="function")
def dynamodb_resource(aws_mock):
    return boto3.resource("dynamodb", region_name=os.getenv("AWS_REGION"))


@pytest.fixture(scope="function")
def branding_table(dynamodb_resource):
    table = dynamodb_resource.create_table(
        TableName=BRANDING_TABLE_NAME,
        BillingMode="PAY_PER_REQUEST",
        KeySchema=[{"AttributeName": "asset_name", "KeyType": "HASH"}],
        AttributeDefinitions=[{"AttributeName": "asset_name", "AttributeType": "S"}],
    )
    table.wait_until_exists()
    return table


@pytest.fixture(scope="function")
def rate_limit_table(dynamodb_resource):
    table = dynamodb_resource.create_table(
        TableName=RATE_LIMIT_TABLE_NAME,
        BillingMode="PAY_PER_REQUEST",
        KeySchema=[{"AttributeName": "client_key", "KeyType": "HASH"}],
        AttributeDefinitions=[{"AttributeName": "client_key", "AttributeType": "S"}],
    )
    table.wait_until_exists()
    return table


@pytest.fixture
def make_image() -> Callable[..., bytes]:
    """
    Factory for encoded test images.

    Usage:
        data = make_image(640, 480, "JPEG")
    """

    def _make(
        width: int = 64,
        height: int = 48,
        fmt: str = "JPEG",
        color: tuple[int, ...] = (200, 30, 30),
    ) -> bytes:
        mode = "RGBA" if len(color) == 4 else "RGB"
        buffer = io.BytesIO()
        Image.new(mode, (width, height), color).save(buffer, format=fmt)
        return buffer.getvalue()

    return _make


@pytest.fixture
def jpeg_bytes(make_image) -> bytes:
    return make_image(64, 48, "JPEG")


@pytest.fixture
def png_bytes(make_image) -> bytes:
    return make_image(64, 48, "PNG")


@pytest.fixture
def logo_bytes(make_image) -> bytes:
    return make_image(40, 40, "PNG", (0, 0, 255, 255))


@pytest.fixture
def s3_put_photo(s3_bucket) -> Callable[..., str]:
    """
    Helper to store a photo directly in the bucket.

    Usage:
        key = s3_put_photo("a.jpg", data, metadata={"original-name": "a.jpg"})
    """

    def _put(
        name: str,
        body: bytes,
        content_type: str = "image/jpeg",
        metadata: dict[str, str] | None = None,
    ) -> str:
        key = f"{EVENT_PREFIX}/{name}"
        s3_bucket.put_object(
            Bucket=BUCKET_NAME,
            Key=key,
            Body=body,
            ContentType=content_type,
            Metadata=metadata or {},
        )
        return key

    return _put


@pytest.fixture
def s3_keys(s3_bucket) -> Callable[[str], list[str]]:
    def _keys(prefix: str = "") -> list[str]:
        response: dict[str, Any] = s3_bucket.list_objects_v2(Bucket=BUCKET_NAME, Prefix=prefix)
        return [obj["Key"] for obj in response.get("Contents", [])]

    return _keys


@pytest.fixture
def lambda_context():
    return SimpleNamespace(
        aws_request_id="test-request-id",
        function_name="test-function",
        memory_limit_in_mb=256,
        invoked_function_arn="arn:aws:lambda:us-east-1:000000000000:function:test",
        log_group_name="/aws/lambda/test-function",
        log_stream_name="2024/01/01/[$LATEST]test",
    )
