"""Bounded background queue for fire-and-forget transcriptions."""

import asyncio

from call_recordings.domain.models import TranscriptionJob
from call_recordings.logging import setup_logging

from .transcription_orchestrator import TranscriptionOrchestrator

logger = setup_logging()


class TranscriptionQueue:
    """
    Runs transcription jobs on a fixed number of worker tasks.

    Submitting never waits. When the queue is full the job is dropped and
    the recording keeps its empty transcription, so a later batch run
    picks it up.
    """

    def __init__(
        self,
        orchestrator: TranscriptionOrchestrator,
        maxsize: int = 100,
        workers: int = 1,
    ):
        self._orchestrator = orchestrator
        self._queue: asyncio.Queue[TranscriptionJob] = asyncio.Queue(maxsize=maxsize)
        self._worker_count = workers
        self._workers: list[asyncio.Task] = []

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    def start(self) -> None:
        """Spawns the worker tasks on the running event loop."""
        if self._workers:
            return
        self._workers = [
            asyncio.create_task(self._work(), name=f"transcription-worker-{i}")
            for i in range(self._worker_count)
        ]
        logger.info("Transcription workers started", extra={"workers": self._worker_count})

    def submit(self, job: TranscriptionJob) -> bool:
        try:
            self._queue.put_nowait(job)
        except asyncio.QueueFull:
            logger.warning(
                "Transcription queue full, leaving recording for batch processing",
                extra={"recording_id": job.recording_id, "pending": self.pending},
            )
            return False

        logger.info(
            "Transcription queued",
            extra={"recording_id": job.recording_id, "pending": self.pending},
        )
        return True

    async def join(self) -> None:
        """Waits until every submitted job has been processed."""
        await self._queue.join()

    async def stop(self) -> None:
        """Cancels the workers; jobs still queued are abandoned."""
        for worker in self._workers:
            worker.cancel()
        await asyncio.gather(*self._workers, return_exceptions=True)
        self._workers = []
        logger.info("Transcription workers stopped", extra={"abandoned": self.pending})

    async def _work(self) -> None:
        while True:
            job = await self._queue.get()
            try:
                result = await self._orchestrator.transcribe(
                    job.recording_id, job.audio, job.file_name, job.owner_id
                )
                if result.success:
                    logger.info(
                        "Auto-transcription completed",
                        extra={"recording_id": job.recording_id},
                    )
                else:
                    logger.warning(
                        "Auto-transcription failed",
                        extra={"recording_id": job.recording_id, "error": result.error},
                    )
            except Exception:
                logger.exception(
                    "Auto-transcription error", extra={"recording_id": job.recording_id}
                )
            finally:
                self._queue.task_done()
