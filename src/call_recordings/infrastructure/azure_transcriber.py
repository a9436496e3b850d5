"""Azure OpenAI implementation of the TranscriptionService interface."""

import asyncio
import os

import httpx
from pydantic import ValidationError

from call_recordings.domain.models import (
    ProviderResponse,
    ProviderTranscription,
    TranscriptionOptions,
)
from call_recordings.exceptions import TranscriptionProviderError
from call_recordings.logging import setup_logging

from .interfaces import TranscriptionService

logger = setup_logging()

CONTENT_TYPES = {
    ".wav": "audio/wav",
    ".mp3": "audio/mpeg",
    ".mp4": "audio/mp4",
    ".m4a": "audio/m4a",
    ".flac": "audio/flac",
    ".webm": "audio/webm",
    ".ogg": "audio/ogg",
}
DEFAULT_CONTENT_TYPE = "audio/wav"


def content_type_for(file_name: str) -> str:
    """Maps an audio file extension to its MIME type, defaulting to WAV."""
    extension = os.path.splitext(file_name)[1].lower()
    return CONTENT_TYPES.get(extension, DEFAULT_CONTENT_TYPE)


class AzureOpenAITranscriber(TranscriptionService):
    """Handles audio transcription using the Azure OpenAI transcription endpoint."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        endpoint: str,
        api_key: str,
        model: str,
        timeout_seconds: float = 60.0,
    ):
        self._client = client
        self._endpoint = endpoint
        self._api_key = api_key
        self._model = model
        self._timeout_seconds = timeout_seconds

    async def transcribe(
        self,
        audio_data: bytes,
        file_name: str,
        options: TranscriptionOptions,
    ) -> ProviderTranscription:
        """
        Sends one transcription request and normalizes the response.

        Errors never escape: a failed request comes back as a result with
        ``success=False``, the error message and the HTTP status when known.
        """
        logger.info(
            "Starting transcription request",
            extra={
                "file_name": file_name,
                "size": len(audio_data),
                "language": options.language or "auto",
            },
        )
        try:
            payload = await self._post(audio_data, file_name, options)
        except TranscriptionProviderError as e:
            logger.warning(
                "Transcription request failed",
                extra={
                    "file_name": file_name,
                    "language": options.language or "auto",
                    "status_code": e.status_code,
                    "error": str(e),
                },
            )
            return ProviderTranscription(
                success=False, error=str(e), status_code=e.status_code
            )

        logger.info(
            "Transcription request completed",
            extra={"file_name": file_name, "text_length": len(payload.text)},
        )
        return ProviderTranscription(
            success=True,
            text=payload.text,
            language=payload.language,
            duration_seconds=payload.duration,
            segments=payload.segments,
            words=payload.words,
        )

    async def _post(
        self, audio_data: bytes, file_name: str, options: TranscriptionOptions
    ) -> ProviderResponse:
        files = {"file": (file_name, audio_data, content_type_for(file_name))}
        data = {"model": self._model}
        if options.language:
            data["language"] = options.language
        if options.prompt:
            data["prompt"] = options.prompt
        if options.response_format:
            data["response_format"] = options.response_format
        if options.temperature is not None:
            data["temperature"] = str(options.temperature)

        # httpx timeouts are per phase; wait_for bounds the whole exchange.
        try:
            response = await asyncio.wait_for(
                self._client.post(
                    self._endpoint,
                    files=files,
                    data=data,
                    headers={"Authorization": f"Bearer {self._api_key}"},
                    timeout=self._timeout_seconds,
                ),
                timeout=self._timeout_seconds,
            )
        except (httpx.TimeoutException, TimeoutError) as e:
            raise TranscriptionProviderError(
                f"Transcription request timed out after {self._timeout_seconds:g}s",
                cause=e,
            ) from e
        except httpx.HTTPError as e:
            raise TranscriptionProviderError(
                f"Transcription request failed: {e}", cause=e
            ) from e

        if not response.is_success:
            raise TranscriptionProviderError(
                f"HTTP {response.status_code}: {response.text}",
                status_code=response.status_code,
            )

        if options.response_format == "text":
            return ProviderResponse(text=response.text)

        try:
            return ProviderResponse.model_validate_json(response.content)
        except ValidationError as e:
            raise TranscriptionProviderError(
                "Malformed transcription response",
                status_code=response.status_code,
                cause=e,
            ) from e
