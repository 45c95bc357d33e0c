"""Abstract contract for photo object storage."""

from abc import ABC, abstractmethod

from core.models.storage import PhotoPage, StoredPhoto, StoredPhotoInfo


class PhotoStorageRepository(ABC):
    """Contract for storing and retrieving photo objects.

    Implementations could be S3, GCS, local disk, etc.
    Handlers depend on this interface, not the implementation.
    """

    @abstractmethod
    def put_photo(
        self,
        *,
        key: str,
        data: bytes,
        content_type: str,
        metadata: dict[str, str],
    ) -> None:
        """Store a photo under ``key``.

        Args:
            key: Full storage key, including the event prefix
            data: Binary image content
            content_type: MIME type (e.g., 'image/jpeg')
            metadata: Custom metadata (original name, upload time, size)

        Raises:
            UploadFailedError: If the write fails
        """

    @abstractmethod
    def get_photo(self, *, key: str) -> StoredPhoto | None:
        """Fetch a photo with its body, or None when it does not exist.

        Raises:
            StorageOperationError: If the read fails
        """

    @abstractmethod
    def head_photo(self, *, key: str) -> StoredPhotoInfo | None:
        """Fetch photo metadata only, or None when it does not exist.

        Raises:
            StorageOperationError: If the probe fails
        """

    @abstractmethod
    def list_photos(
        self,
        *,
        prefix: str,
        limit: int,
        cursor: str | None = None,
    ) -> PhotoPage:
        """List photos under a prefix, one page at a time.

        Args:
            prefix: Key prefix, including the trailing slash
            limit: Maximum objects to return
            cursor: Opaque token from a previous page

        Raises:
            StorageOperationError: If the listing fails
        """
