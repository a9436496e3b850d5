"""Abstract interface for speech-to-text operations."""

from abc import ABC, abstractmethod

from call_recordings.domain.models import ProviderTranscription, TranscriptionOptions


class TranscriptionService(ABC):
    """Abstract base class for audio transcription backends."""

    @abstractmethod
    async def transcribe(
        self,
        audio_data: bytes,
        file_name: str,
        options: TranscriptionOptions,
    ) -> ProviderTranscription:
        """
        Transcribes audio data with the given decoding options.

        Implementations report failures in the returned result
        (``success=False`` with ``error`` set) instead of raising.

        Args:
            audio_data: Raw audio file bytes.
            file_name: File name used to derive the audio content type.
            options: Language hint, prompt, response format and temperature.

        Returns:
            ProviderTranscription with the normalized provider response.
        """
