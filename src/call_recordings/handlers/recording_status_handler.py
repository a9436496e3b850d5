"""Handler for telephony recording status callbacks."""

from call_recordings.config import TwilioConfig
from call_recordings.domain import DownloadStatus, RecordingStatusEvent
from call_recordings.infrastructure.interfaces import StorageClient
from call_recordings.logging import setup_logging
from call_recordings.repositories import RecordingRepository

from .download_orchestrator import DownloadOrchestrator

logger = setup_logging()


class RecordingStatusHandler:
    """Registers completed recordings and pulls their audio into storage."""

    def __init__(
        self,
        repository: RecordingRepository,
        storage: StorageClient,
        downloader: DownloadOrchestrator,
        credentials: TwilioConfig,
    ):
        self._repository = repository
        self._storage = storage
        self._downloader = downloader
        self._credentials = credentials

    async def handle(self, event: RecordingStatusEvent) -> None:
        """
        Processes one status callback.

        Errors are logged and swallowed: the provider only needs an
        acknowledgment, and a stuck recording stays pending for a retry.
        A repeated callback for an already stored recording is ignored;
        one still pending is downloaded again.
        """
        logger.info(
            "Recording status received",
            extra={
                "recording_id": event.recording_id,
                "call_id": event.call_id,
                "status": event.status,
            },
        )
        if not event.is_completed:
            return

        try:
            owner_id = await self._repository.find_call_owner(event.call_id)
            if owner_id is None:
                logger.info(
                    "No owner found for call", extra={"call_id": event.call_id}
                )

            recording = await self._repository.create(
                event, owner_id, self._storage.bucket_name
            )
            if recording.download_status == DownloadStatus.COMPLETED:
                logger.info(
                    "Recording already stored, ignoring repeated callback",
                    extra={
                        "recording_id": event.recording_id,
                        "storage_path": recording.storage_path,
                    },
                )
                return

            if not self._credentials.is_configured:
                logger.warning(
                    "Twilio credentials not configured, skipping download",
                    extra={"recording_id": event.recording_id},
                )
                return

            stored = await self._downloader.download_and_persist(
                event.recording_id, event.source_url, self._credentials, owner_id
            )
            logger.info(
                "Recording processed",
                extra={
                    "recording_id": event.recording_id,
                    "storage_path": stored.storage_path,
                },
            )
        except Exception:
            logger.exception(
                "Error processing recording", extra={"recording_id": event.recording_id}
            )
