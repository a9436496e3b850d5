"""Recording storage backed by a single MinIO bucket."""

import asyncio
import io
from datetime import timedelta

from minio import Minio

from call_recordings.domain.models import StoredObject
from call_recordings.exceptions import StorageDownloadError, StorageUploadError
from call_recordings.logging import setup_logging

from .interfaces import StorageClient

logger = setup_logging()


class MinioStorageClient(StorageClient):
    """
    Handles recording storage using MinIO.

    The MinIO SDK is blocking, so each call is awaited on a thread to keep
    the event loop free while bytes move.
    """

    def __init__(self, client: Minio, bucket_name: str):
        self._client = client
        self._bucket_name = bucket_name

    @property
    def bucket_name(self) -> str:
        return self._bucket_name

    async def upload(
        self, object_name: str, data: bytes, content_type: str
    ) -> StoredObject:
        try:
            await asyncio.to_thread(
                self._client.put_object,
                bucket_name=self._bucket_name,
                object_name=object_name,
                data=io.BytesIO(data),
                length=len(data),
                content_type=content_type,
            )
        except Exception as e:
            logger.exception(
                "MinIO upload failed",
                extra={"bucket_name": self._bucket_name, "object_name": object_name},
            )
            raise StorageUploadError(object_name, e) from e

        logger.info(
            "File uploaded to MinIO",
            extra={
                "bucket_name": self._bucket_name,
                "object_name": object_name,
                "size": len(data),
            },
        )
        return StoredObject(path=object_name, size=len(data))

    async def download(self, object_name: str) -> bytes:
        try:
            data = await asyncio.to_thread(self._read_object, object_name)
        except Exception as e:
            logger.exception(
                "MinIO download failed",
                extra={"bucket_name": self._bucket_name, "object_name": object_name},
            )
            raise StorageDownloadError(object_name, e) from e

        logger.info(
            "File downloaded from MinIO",
            extra={"bucket_name": self._bucket_name, "object_name": object_name},
        )
        return data

    async def signed_url(self, object_name: str, ttl_seconds: int) -> str:
        try:
            return await asyncio.to_thread(
                self._client.presigned_get_object,
                self._bucket_name,
                object_name,
                expires=timedelta(seconds=ttl_seconds),
            )
        except Exception as e:
            logger.exception(
                "MinIO presign failed",
                extra={"bucket_name": self._bucket_name, "object_name": object_name},
            )
            raise StorageDownloadError(object_name, e) from e

    async def ensure_bucket_exists(self) -> None:
        exists = await asyncio.to_thread(self._client.bucket_exists, self._bucket_name)
        if not exists:
            await asyncio.to_thread(self._client.make_bucket, self._bucket_name)
            logger.info("Bucket created", extra={"bucket_name": self._bucket_name})
        else:
            logger.info("Bucket already exists", extra={"bucket_name": self._bucket_name})

    def _read_object(self, object_name: str) -> bytes:
        response = self._client.get_object(self._bucket_name, object_name)
        try:
            return response.data
        finally:
            response.close()
            response.release_conn()
