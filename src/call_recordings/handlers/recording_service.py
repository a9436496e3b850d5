"""Manual transcription operations exposed to the HTTP layer."""

from call_recordings.db_models import Recording
from call_recordings.domain import (
    BatchResult,
    TranscriptionResult,
    TranscriptionSnapshot,
    TranscriptionStatus,
    file_name_from_path,
)
from call_recordings.exceptions import RecordingNotInStorageError
from call_recordings.infrastructure.interfaces import StorageClient
from call_recordings.logging import setup_logging
from call_recordings.repositories import RecordingRepository

from .batch_coordinator import BatchCoordinator
from .transcription_orchestrator import TranscriptionOrchestrator

logger = setup_logging()


class RecordingService:
    """Entry point for re-transcription, status lookups and batch runs."""

    def __init__(
        self,
        repository: RecordingRepository,
        storage: StorageClient,
        orchestrator: TranscriptionOrchestrator,
        batch_coordinator: BatchCoordinator,
        signed_url_ttl_seconds: int = 3600,
    ):
        self._repository = repository
        self._storage = storage
        self._orchestrator = orchestrator
        self._batch_coordinator = batch_coordinator
        self._signed_url_ttl_seconds = signed_url_ttl_seconds

    @property
    def signed_url_ttl_seconds(self) -> int:
        return self._signed_url_ttl_seconds

    async def transcribe(self, recording_id: str, force: bool = False) -> TranscriptionResult:
        """
        Re-runs transcription unless the recording is already transcribed.

        Raises:
            RecordingNotFoundError: If the recording does not exist.
            RecordingNotInStorageError: If no audio has been stored yet.
            StorageDownloadError: If the stored audio cannot be read.
        """
        recording = await self._repository.get_or_raise(recording_id)

        if (
            not force
            and recording.transcription_status == TranscriptionStatus.COMPLETED
            and recording.transcription_text
        ):
            logger.info(
                "Recording already transcribed", extra={"recording_id": recording_id}
            )
            return TranscriptionResult(
                success=True,
                text=recording.transcription_text,
                language=recording.transcription_language,
                duration_seconds=recording.transcription_duration,
                method=recording.transcription_method,
                already_transcribed=True,
            )

        if not recording.storage_path:
            raise RecordingNotInStorageError(recording_id)

        logger.info(
            "Manual transcription requested",
            extra={"recording_id": recording_id, "force": force},
        )
        audio = await self._storage.download(recording.storage_path)
        return await self._orchestrator.transcribe(
            recording_id,
            audio,
            file_name_from_path(recording.storage_path),
            recording.owner_id,
        )

    async def get_transcription(self, recording_id: str) -> TranscriptionSnapshot:
        """
        Raises:
            RecordingNotFoundError: If the recording does not exist.
        """
        recording = await self._repository.get_or_raise(recording_id)
        return TranscriptionSnapshot(
            recording_id=recording.recording_id,
            text=recording.transcription_text,
            status=recording.transcription_status,
            language=recording.transcription_language,
            duration_seconds=recording.transcription_duration,
            method=recording.transcription_method,
            transcribed_at=recording.transcribed_at,
            error=recording.transcription_error,
            segments=recording.transcription_segments,
            words=recording.transcription_words,
        )

    async def transcribe_batch(self, limit: int = 5, force: bool = False) -> BatchResult:
        return await self._batch_coordinator.process_batch(limit, force)

    async def list_recordings(
        self, limit: int = 50, owner_id: str | None = None
    ) -> list[Recording]:
        return await self._repository.list_recent(limit, owner_id=owner_id)

    async def get_download_url(self, recording_id: str) -> str:
        """
        Raises:
            RecordingNotFoundError: If the recording does not exist.
            RecordingNotInStorageError: If no audio has been stored yet.
        """
        recording = await self._repository.get_or_raise(recording_id)
        if not recording.storage_path:
            raise RecordingNotInStorageError(recording_id)
        return await self._storage.signed_url(
            recording.storage_path, self._signed_url_ttl_seconds
        )
