"""Domain models for the call recording pipeline."""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

EMPTY_TRANSCRIPTION_ERROR = "Transcription failed or returned empty result"


class DownloadStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


class TranscriptionStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class TranscriptionMethod(str, Enum):
    AUTO = "auto"
    MANUAL = "manual"
    FALLBACK = "fallback"
    ERROR = "error"


class RecordingStatusEvent(BaseModel, frozen=True):
    """Recording status callback delivered by the telephony provider."""

    recording_id: str = Field(alias="RecordingSid")
    call_id: str = Field(alias="CallSid")
    source_url: str | None = Field(default=None, alias="RecordingUrl")
    status: str = Field(alias="RecordingStatus")
    account_id: str | None = Field(default=None, alias="AccountSid")
    duration_seconds: int | None = Field(default=None, alias="RecordingDuration")
    channel_count: int = Field(default=1, alias="RecordingChannels")
    source: str = Field(default="DialVerb", alias="RecordingSource")

    @property
    def is_completed(self) -> bool:
        return self.status == "completed" and bool(self.source_url)


class StoredObject(BaseModel, frozen=True):
    """Location and size of an object written to storage."""

    path: str
    size: int


class StoredRecording(BaseModel, frozen=True):
    """Result of downloading a recording and persisting it to storage."""

    storage_path: str
    file_name: str
    file_size_bytes: int
    bucket: str


class TranscriptionOptions(BaseModel, frozen=True):
    """Decoding parameters for a single transcription attempt."""

    language: str | None = None
    prompt: str | None = None
    response_format: str | None = "json"
    temperature: float | None = 0.0


class ProviderResponse(BaseModel):
    """JSON body returned by the speech-to-text provider."""

    text: str = ""
    duration: float | None = None
    language: str | None = None
    segments: list[dict[str, Any]] | None = None
    words: list[dict[str, Any]] | None = None


class ProviderTranscription(BaseModel, frozen=True):
    """Normalized outcome of one call to the transcription provider."""

    success: bool
    text: str = ""
    language: str | None = None
    duration_seconds: float | None = None
    segments: list[dict[str, Any]] | None = None
    words: list[dict[str, Any]] | None = None
    error: str | None = None
    status_code: int | None = None

    @property
    def has_text(self) -> bool:
        return self.success and bool(self.text.strip())


class TranscriptionResult(BaseModel, frozen=True):
    """Outcome of the multi-language transcription strategy for a recording."""

    success: bool
    text: str = ""
    language: str | None = None
    duration_seconds: float | None = None
    method: TranscriptionMethod | None = None
    matched_language: str | None = None
    segments: list[dict[str, Any]] | None = None
    words: list[dict[str, Any]] | None = None
    error: str | None = None
    already_transcribed: bool = False


class TranscriptionJob(BaseModel, frozen=True):
    """Work item handed to the background transcription queue."""

    recording_id: str
    audio: bytes
    file_name: str
    owner_id: str | None = None


class BatchItemResult(BaseModel, frozen=True):
    """Per-recording outcome of a batch run."""

    recording_id: str
    success: bool
    text_length: int = 0
    error: str | None = None


class BatchResult(BaseModel, frozen=True):
    """Summary of a batch transcription run."""

    processed: int
    successful: int
    failed: int
    results: list[BatchItemResult]

    @property
    def message(self) -> str:
        if not self.processed:
            return "No recordings need transcription"
        return (
            f"Batch transcription completed: {self.successful}/{self.processed} successful"
        )


class TranscriptionSnapshot(BaseModel, frozen=True):
    """Current transcription lifecycle state of a recording."""

    recording_id: str
    text: str | None = None
    status: TranscriptionStatus = TranscriptionStatus.PENDING
    language: str | None = None
    duration_seconds: float | None = None
    method: TranscriptionMethod | None = None
    transcribed_at: datetime | None = None
    error: str | None = None
    segments: list[dict[str, Any]] | None = None
    words: list[dict[str, Any]] | None = None
