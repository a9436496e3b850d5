"""Abstract interface for recording object storage."""

from abc import ABC, abstractmethod

from call_recordings.domain.models import StoredObject


class StorageClient(ABC):
    """Abstract base class for object storage backends."""

    @property
    @abstractmethod
    def bucket_name(self) -> str:
        """Name of the bucket recordings are written to."""

    @abstractmethod
    async def upload(
        self, object_name: str, data: bytes, content_type: str
    ) -> StoredObject:
        """
        Uploads a byte buffer to storage.

        Args:
            object_name: The destination path/name in storage.
            data: The full object contents.
            content_type: MIME type of the object.

        Returns:
            StoredObject with the stored path and size.

        Raises:
            StorageUploadError: If the upload fails.
        """

    @abstractmethod
    async def download(self, object_name: str) -> bytes:
        """
        Downloads an object from storage.

        Raises:
            StorageDownloadError: If the download fails.
        """

    @abstractmethod
    async def signed_url(self, object_name: str, ttl_seconds: int) -> str:
        """
        Creates a time-limited URL for reading an object.

        Raises:
            StorageDownloadError: If the URL cannot be created.
        """

    @abstractmethod
    async def ensure_bucket_exists(self) -> None:
        """Ensures the recordings bucket exists, creating it if necessary."""
