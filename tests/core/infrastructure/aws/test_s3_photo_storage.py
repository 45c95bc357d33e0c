import os
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

from core.infrastructure.adapters.s3_adapter import S3Adapter
from core.infrastructure.aws.s3_photo_storage import S3PhotoStorage
from core.models.errors import StorageOperationError, UploadFailedError

EVENT_PREFIX = os.environ["EVENT_PREFIX"]


def client_error(code: str, operation: str = "GetObject") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": f"{code} happened"}}, operation)


@pytest.fixture
def storage(s3_bucket) -> S3PhotoStorage:
    return S3PhotoStorage()


class TestPutPhoto:
    def test_stores_object_with_metadata(self, storage, s3_bucket):
        key = f"{EVENT_PREFIX}/photo.jpg"

        storage.put_photo(
            key=key,
            data=b"jpeg-bytes",
            content_type="image/jpeg",
            metadata={"original-name": "photo.jpg"},
        )

        obj = s3_bucket.get_object(Bucket=os.environ["PHOTOS_BUCKET_NAME"], Key=key)
        assert obj["Body"].read() == b"jpeg-bytes"
        assert obj["Metadata"] == {"original-name": "photo.jpg"}
        assert obj["CacheControl"] == "public, max-age=31536000"

    def test_client_error_becomes_upload_failed(self):
        adapter = MagicMock(spec=S3Adapter)
        adapter.put_object.side_effect = client_error("AccessDenied", "PutObject")

        with pytest.raises(UploadFailedError) as exc_info:
            S3PhotoStorage(adapter).put_photo(
                key="evt/a.jpg", data=b"x", content_type="image/jpeg", metadata={}
            )

        assert exc_info.value.message == "AccessDenied happened"
        assert exc_info.value.details == {"key": "evt/a.jpg"}


class TestGetPhoto:
    def test_returns_body_and_info(self, storage, s3_put_photo):
        key = s3_put_photo("a.jpg", b"abc", metadata={"size": "3"})

        photo = storage.get_photo(key=key)

        assert photo is not None
        assert photo.body == b"abc"
        assert photo.key == key
        assert photo.size == 3
        assert photo.content_type == "image/jpeg"
        assert photo.metadata == {"size": "3"}

    def test_missing_returns_none(self, storage):
        assert storage.get_photo(key=f"{EVENT_PREFIX}/missing.jpg") is None

    def test_other_errors_raise(self):
        adapter = MagicMock(spec=S3Adapter)
        adapter.get_object.side_effect = client_error("AccessDenied")

        with pytest.raises(StorageOperationError):
            S3PhotoStorage(adapter).get_photo(key="evt/a.jpg")


class TestHeadPhoto:
    def test_returns_info(self, storage, s3_put_photo):
        key = s3_put_photo("b.png", b"12345", content_type="image/png")

        info = storage.head_photo(key=key)

        assert info is not None
        assert info.size == 5
        assert info.content_type == "image/png"
        assert info.last_modified is not None

    def test_missing_returns_none(self, storage):
        assert storage.head_photo(key=f"{EVENT_PREFIX}/missing.jpg") is None


class TestListPhotos:
    def test_lists_with_metadata(self, storage, s3_put_photo):
        s3_put_photo("a.jpg", b"a", metadata={"original-name": "a.jpg"})
        s3_put_photo("b.jpg", b"bb", metadata={"original-name": "b.jpg"})

        page = storage.list_photos(prefix=f"{EVENT_PREFIX}/", limit=10)

        assert page.truncated is False
        assert page.cursor is None
        by_key = {info.key: info for info in page.objects}
        assert by_key[f"{EVENT_PREFIX}/b.jpg"].size == 2
        assert by_key[f"{EVENT_PREFIX}/a.jpg"].metadata == {"original-name": "a.jpg"}

    def test_only_lists_under_prefix(self, storage, s3_put_photo, s3_bucket):
        s3_put_photo("a.jpg", b"a")
        s3_bucket.put_object(Bucket=os.environ["PHOTOS_BUCKET_NAME"], Key="other/x.jpg", Body=b"x")

        page = storage.list_photos(prefix=f"{EVENT_PREFIX}/", limit=10)

        assert [info.key for info in page.objects] == [f"{EVENT_PREFIX}/a.jpg"]

    def test_pagination_cursor(self, storage, s3_put_photo):
        for index in range(3):
            s3_put_photo(f"p{index}.jpg", b"x")

        first = storage.list_photos(prefix=f"{EVENT_PREFIX}/", limit=2)
        second = storage.list_photos(prefix=f"{EVENT_PREFIX}/", limit=2, cursor=first.cursor)

        assert first.truncated is True
        assert first.cursor
        assert len(first.objects) == 2
        assert len(second.objects) == 1

    def test_empty_prefix(self, storage):
        page = storage.list_photos(prefix=f"{EVENT_PREFIX}/", limit=10)
        assert page.objects == []

    def test_object_deleted_between_list_and_head_is_skipped(self):
        adapter = MagicMock(spec=S3Adapter)
        adapter.list_objects.return_value = {"Contents": [{"Key": "evt/gone.jpg", "Size": 1}]}
        adapter.head_object.side_effect = client_error("404", "HeadObject")

        page = S3PhotoStorage(adapter).list_photos(prefix="evt/", limit=10)

        assert page.objects == []

    def test_list_failure_raises(self):
        adapter = MagicMock(spec=S3Adapter)
        adapter.list_objects.side_effect = client_error("AccessDenied", "ListObjectsV2")

        with pytest.raises(StorageOperationError):
            S3PhotoStorage(adapter).list_photos(prefix="evt/", limit=10)
