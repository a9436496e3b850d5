"""Sequential batch transcription over stored recordings."""

from call_recordings.domain import (
    BatchItemResult,
    BatchResult,
    file_name_from_path,
)
from call_recordings.infrastructure.interfaces import StorageClient
from call_recordings.logging import setup_logging
from call_recordings.repositories import RecordingRepository

from .rate_limiter import FixedIntervalGate
from .transcription_orchestrator import TranscriptionOrchestrator

logger = setup_logging()


class BatchCoordinator:
    """Transcribes stored recordings one at a time, paced by a gate."""

    def __init__(
        self,
        repository: RecordingRepository,
        storage: StorageClient,
        orchestrator: TranscriptionOrchestrator,
        gate: FixedIntervalGate,
    ):
        self._repository = repository
        self._storage = storage
        self._orchestrator = orchestrator
        self._gate = gate

    async def process_batch(self, limit: int = 5, force: bool = False) -> BatchResult:
        """
        Selects candidate recordings and transcribes them sequentially.

        Args:
            limit: Maximum number of recordings to process.
            force: Include recordings that already have transcription text.

        Returns:
            BatchResult with one entry per selected recording. A failing
            recording is recorded and the batch moves on.
        """
        recordings = await self._repository.list_for_transcription(
            limit, include_transcribed=force
        )
        logger.info(
            "Starting batch transcription",
            extra={"limit": limit, "force": force, "selected": len(recordings)},
        )

        results = []
        for recording in recordings:
            await self._gate.wait()
            results.append(
                await self._process_one(
                    recording.recording_id, recording.storage_path, recording.owner_id
                )
            )

        successful = sum(1 for r in results if r.success)
        batch = BatchResult(
            processed=len(results),
            successful=successful,
            failed=len(results) - successful,
            results=results,
        )
        logger.info(
            "Batch transcription finished",
            extra={"processed": batch.processed, "successful": batch.successful},
        )
        return batch

    async def _process_one(
        self, recording_id: str, storage_path: str, owner_id: str | None
    ) -> BatchItemResult:
        try:
            audio = await self._storage.download(storage_path)
            result = await self._orchestrator.transcribe(
                recording_id, audio, file_name_from_path(storage_path), owner_id
            )
        except Exception as e:
            logger.exception(
                "Batch item failed", extra={"recording_id": recording_id}
            )
            return BatchItemResult(recording_id=recording_id, success=False, error=str(e))

        return BatchItemResult(
            recording_id=recording_id,
            success=result.success,
            text_length=len(result.text),
            error=result.error,
        )
