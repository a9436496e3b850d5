"""Repository for recording lifecycle persistence."""

from typing import Any, List

from sqlmodel import col, select

from call_recordings.db_models import CallOwner, Recording, utcnow
from call_recordings.domain.models import (
    EMPTY_TRANSCRIPTION_ERROR,
    DownloadStatus,
    RecordingStatusEvent,
    StoredRecording,
    TranscriptionResult,
    TranscriptionStatus,
)
from call_recordings.exceptions import MetadataWriteError, RecordingNotFoundError
from call_recordings.logging import setup_logging

logger = setup_logging()


class RecordingRepository:
    """
    Handles database operations for call recordings.

    Every method opens its own session, so each lifecycle write is one
    independent commit of all its fields. Concurrent writers to the same
    recording resolve as last-write-wins.
    """

    def __init__(self, session_factory):
        """
        Initializes the repository.

        Args:
            session_factory: Callable returning an async SQLModel session context manager.
        """
        self._session_factory = session_factory

    async def create(
        self, event: RecordingStatusEvent, owner_id: str | None, bucket: str
    ) -> Recording:
        """
        Inserts a pending recording for a completed-recording event.

        An existing row for the same recording is returned unchanged.

        Raises:
            MetadataWriteError: If the insert fails.
        """
        try:
            async with self._session_factory() as db_session:
                existing = await db_session.get(Recording, event.recording_id)
                if existing:
                    logger.info(
                        "Recording already registered",
                        extra={"recording_id": event.recording_id},
                    )
                    return existing

                recording = Recording(
                    recording_id=event.recording_id,
                    call_id=event.call_id,
                    owner_id=owner_id,
                    source_url=event.source_url or "",
                    duration_seconds=event.duration_seconds,
                    channels=event.channel_count,
                    source=event.source,
                    storage_bucket=bucket,
                )
                db_session.add(recording)
                await db_session.commit()
                await db_session.refresh(recording)
        except Exception as e:
            logger.exception(
                "Failed to save recording metadata",
                extra={"recording_id": event.recording_id},
            )
            raise MetadataWriteError(event.recording_id, "save recording", e) from e

        logger.info(
            "Recording metadata saved",
            extra={"recording_id": recording.recording_id, "owner_id": owner_id},
        )
        return recording

    async def get(self, recording_id: str) -> Recording | None:
        async with self._session_factory() as db_session:
            return await db_session.get(Recording, recording_id)

    async def get_or_raise(self, recording_id: str) -> Recording:
        """
        Raises:
            RecordingNotFoundError: If the recording does not exist.
        """
        recording = await self.get(recording_id)
        if recording is None:
            raise RecordingNotFoundError(recording_id)
        return recording

    async def list_recent(
        self, limit: int = 50, owner_id: str | None = None
    ) -> List[Recording]:
        """Newest recordings first, optionally only those of one owner."""
        statement = select(Recording)
        if owner_id is not None:
            statement = statement.where(Recording.owner_id == owner_id)
        statement = statement.order_by(col(Recording.created_at).desc()).limit(limit)
        async with self._session_factory() as db_session:
            return list((await db_session.exec(statement)).all())

    async def list_for_transcription(
        self, limit: int, include_transcribed: bool = False
    ) -> List[Recording]:
        """
        Selects stored recordings, newest first.

        Without ``include_transcribed`` only recordings that have no
        transcription text yet are returned.
        """
        statement = select(Recording).where(
            Recording.download_status == DownloadStatus.COMPLETED,
            col(Recording.storage_path).is_not(None),
        )
        if not include_transcribed:
            statement = statement.where(col(Recording.transcription_text).is_(None))
        statement = statement.order_by(col(Recording.created_at).desc()).limit(limit)

        async with self._session_factory() as db_session:
            return list((await db_session.exec(statement)).all())

    async def mark_downloaded(
        self, recording_id: str, stored: StoredRecording
    ) -> Recording:
        """Records the storage location; completed is never set without a path."""
        return await self._update(
            recording_id,
            "record storage location",
            storage_bucket=stored.bucket,
            storage_path=stored.storage_path,
            file_size_bytes=stored.file_size_bytes,
            download_status=DownloadStatus.COMPLETED,
        )

    async def mark_transcription_processing(self, recording_id: str) -> Recording:
        return await self._update(
            recording_id,
            "mark transcription processing",
            transcription_status=TranscriptionStatus.PROCESSING,
        )

    async def save_transcription(
        self, recording_id: str, result: TranscriptionResult
    ) -> Recording:
        """
        Writes the terminal transcription state in a single commit.

        Completed requires non-empty text; anything else is stored as failed
        with an error message.
        """
        completed = result.success and bool(result.text.strip())
        fields: dict[str, Any] = {
            "transcription_status": (
                TranscriptionStatus.COMPLETED if completed else TranscriptionStatus.FAILED
            ),
            "transcription_text": result.text or None,
            "transcription_language": result.language,
            "transcription_duration": result.duration_seconds,
            "transcription_method": result.method,
            "transcription_error": (
                None if completed else (result.error or EMPTY_TRANSCRIPTION_ERROR)
            ),
            "transcription_segments": result.segments,
            "transcription_words": result.words,
            "transcribed_at": utcnow(),
        }
        return await self._update(recording_id, "save transcription", **fields)

    async def register_call_owner(self, call_id: str, owner_id: str) -> None:
        try:
            async with self._session_factory() as db_session:
                await db_session.merge(CallOwner(call_id=call_id, owner_id=owner_id))
                await db_session.commit()
        except Exception as e:
            logger.exception("Failed to register call owner", extra={"call_id": call_id})
            raise MetadataWriteError(call_id, "register call owner", e) from e

    async def find_call_owner(self, call_id: str) -> str | None:
        async with self._session_factory() as db_session:
            owner = await db_session.get(CallOwner, call_id)
            return owner.owner_id if owner else None

    async def _update(self, recording_id: str, operation: str, **fields) -> Recording:
        try:
            async with self._session_factory() as db_session:
                recording = await db_session.get(Recording, recording_id)
                if recording is None:
                    raise RecordingNotFoundError(recording_id)

                for name, value in fields.items():
                    setattr(recording, name, value)
                recording.updated_at = utcnow()

                db_session.add(recording)
                await db_session.commit()
                await db_session.refresh(recording)
                return recording
        except Exception as e:
            logger.exception(
                "Recording metadata write failed",
                extra={"recording_id": recording_id, "operation": operation},
            )
            raise MetadataWriteError(recording_id, operation, e) from e
