"""Download of provider recordings into durable storage."""

from call_recordings.config import TwilioConfig
from call_recordings.domain import (
    StoredRecording,
    TranscriptionJob,
    recording_file_name,
    recording_object_path,
)
from call_recordings.infrastructure.interfaces import MediaFetcher, StorageClient
from call_recordings.logging import setup_logging
from call_recordings.repositories import RecordingRepository

from .transcription_queue import TranscriptionQueue

logger = setup_logging()

AUDIO_CONTENT_TYPE = "audio/wav"


def normalize_media_url(source_url: str) -> str:
    """Requests the uncompressed WAV rendition unless an encoding is given."""
    if source_url.endswith(".wav") or source_url.endswith(".mp3"):
        return source_url
    return f"{source_url}.wav"


class DownloadOrchestrator:
    """Fetches recording audio, stores it and queues its transcription."""

    def __init__(
        self,
        fetcher: MediaFetcher,
        storage: StorageClient,
        repository: RecordingRepository,
        transcription_queue: TranscriptionQueue,
    ):
        self._fetcher = fetcher
        self._storage = storage
        self._repository = repository
        self._transcription_queue = transcription_queue

    async def download_and_persist(
        self,
        recording_id: str,
        source_url: str,
        credentials: TwilioConfig,
        owner_id: str | None = None,
    ) -> StoredRecording:
        """
        Downloads a recording and stores it under the owner's namespace.

        Once the recording is stored and its metadata updated, transcription
        is queued in the background; its outcome never affects this result.
        No retries are made here.

        Args:
            recording_id: Provider recording identifier.
            source_url: Provider media location.
            credentials: Account credentials that created the recording.
            owner_id: Owning account, or None for the shared namespace.

        Returns:
            StoredRecording describing the stored object.

        Raises:
            DownloadError: If the provider fetch fails.
            StorageUploadError: If the upload fails; the record stays pending.
            MetadataWriteError: If the storage location cannot be recorded.
        """
        media_url = normalize_media_url(source_url)
        logger.info(
            "Downloading recording",
            extra={"recording_id": recording_id, "media_url": media_url},
        )

        audio = await self._fetcher.fetch(recording_id, media_url, credentials)

        file_name = recording_file_name(recording_id)
        stored_object = await self._storage.upload(
            recording_object_path(owner_id, file_name), audio, AUDIO_CONTENT_TYPE
        )
        stored = StoredRecording(
            storage_path=stored_object.path,
            file_name=file_name,
            file_size_bytes=stored_object.size,
            bucket=self._storage.bucket_name,
        )

        await self._repository.mark_downloaded(recording_id, stored)
        logger.info(
            "Recording stored",
            extra={
                "recording_id": recording_id,
                "storage_path": stored.storage_path,
                "size": stored.file_size_bytes,
            },
        )

        self._transcription_queue.submit(
            TranscriptionJob(
                recording_id=recording_id,
                audio=audio,
                file_name=file_name,
                owner_id=owner_id,
            )
        )
        return stored
