"""Multi-language transcription strategy and lifecycle bookkeeping."""

from collections.abc import Sequence

from call_recordings.domain.models import (
    EMPTY_TRANSCRIPTION_ERROR,
    ProviderTranscription,
    TranscriptionMethod,
    TranscriptionOptions,
    TranscriptionResult,
)
from call_recordings.exceptions import MetadataWriteError
from call_recordings.infrastructure.interfaces import TranscriptionService
from call_recordings.logging import setup_logging
from call_recordings.repositories import RecordingRepository

logger = setup_logging()


class TranscriptionOrchestrator:
    """Drives auto-detect, then a language sweep, then the fallback record."""

    def __init__(
        self,
        transcription_service: TranscriptionService,
        repository: RecordingRepository,
        candidate_languages: Sequence[str] = ("et", "en", "ru"),
        response_format: str = "json",
        temperature: float = 0.0,
    ):
        self._transcription_service = transcription_service
        self._repository = repository
        self._candidate_languages = tuple(candidate_languages)
        self._response_format = response_format
        self._temperature = temperature

    async def transcribe(
        self,
        recording_id: str,
        audio_data: bytes,
        file_name: str,
        owner_id: str | None = None,
    ) -> TranscriptionResult:
        """
        Transcribes a recording and records the terminal state.

        The order is: provider auto-detect, then each candidate language,
        stopping at the first attempt that yields text. When none does,
        the auto-detect attempt is kept as the ``fallback`` outcome.

        Args:
            recording_id: Provider recording identifier.
            audio_data: Raw audio bytes.
            file_name: Stored file name, used for the upload content type.
            owner_id: Account the recording belongs to, for log context.

        Returns:
            TranscriptionResult; failures are reported, never raised.
        """
        logger.info(
            "Starting transcription",
            extra={
                "recording_id": recording_id,
                "owner_id": owner_id,
                "size": len(audio_data),
            },
        )

        try:
            await self._repository.mark_transcription_processing(recording_id)
        except MetadataWriteError:
            logger.warning(
                "Could not mark transcription as processing",
                extra={"recording_id": recording_id},
            )

        try:
            result = await self._run_strategy(recording_id, audio_data, file_name)
        except Exception as e:
            logger.exception(
                "Transcription strategy failed", extra={"recording_id": recording_id}
            )
            result = TranscriptionResult(
                success=False,
                method=TranscriptionMethod.ERROR,
                error=str(e) or e.__class__.__name__,
            )

        await self._persist(recording_id, result)

        if result.success:
            logger.info(
                "Transcription completed",
                extra={
                    "recording_id": recording_id,
                    "method": result.method.value if result.method else None,
                    "language": result.language,
                    "text_length": len(result.text),
                },
            )
        else:
            logger.warning(
                "Transcription failed",
                extra={"recording_id": recording_id, "error": result.error},
            )
        return result

    async def _run_strategy(
        self, recording_id: str, audio_data: bytes, file_name: str
    ) -> TranscriptionResult:
        auto = await self._attempt(recording_id, audio_data, file_name, None)
        if auto.has_text:
            return self._to_result(auto, TranscriptionMethod.AUTO)

        for language in self._candidate_languages:
            logger.info(
                "Retrying transcription with language hint",
                extra={"recording_id": recording_id, "language": language},
            )
            attempt = await self._attempt(recording_id, audio_data, file_name, language)
            if attempt.has_text:
                return self._to_result(
                    attempt, TranscriptionMethod.MANUAL, matched_language=language
                )

        return TranscriptionResult(
            success=False,
            text=auto.text,
            language=auto.language,
            duration_seconds=auto.duration_seconds,
            method=TranscriptionMethod.FALLBACK,
            error=auto.error or EMPTY_TRANSCRIPTION_ERROR,
        )

    async def _attempt(
        self,
        recording_id: str,
        audio_data: bytes,
        file_name: str,
        language: str | None,
    ) -> ProviderTranscription:
        options = TranscriptionOptions(
            language=language,
            response_format=self._response_format,
            temperature=self._temperature,
        )
        try:
            return await self._transcription_service.transcribe(
                audio_data, file_name, options
            )
        except Exception as e:
            logger.exception(
                "Transcription attempt raised",
                extra={"recording_id": recording_id, "language": language or "auto"},
            )
            return ProviderTranscription(
                success=False, error=str(e) or e.__class__.__name__
            )

    @staticmethod
    def _to_result(
        attempt: ProviderTranscription,
        method: TranscriptionMethod,
        matched_language: str | None = None,
    ) -> TranscriptionResult:
        return TranscriptionResult(
            success=True,
            text=attempt.text,
            language=attempt.language or matched_language,
            duration_seconds=attempt.duration_seconds,
            method=method,
            matched_language=matched_language,
            segments=attempt.segments,
            words=attempt.words,
        )

    async def _persist(self, recording_id: str, result: TranscriptionResult) -> None:
        try:
            await self._repository.save_transcription(recording_id, result)
        except MetadataWriteError:
            logger.error(
                "Transcription result not persisted",
                extra={"recording_id": recording_id, "success": result.success},
            )
