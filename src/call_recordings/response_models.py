from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from call_recordings.domain import (
    BatchItemResult,
    DownloadStatus,
    TranscriptionMethod,
    TranscriptionStatus,
)


class TranscribeRequest(BaseModel):
    force: bool = False


class BatchRequest(BaseModel):
    limit: int = Field(default=5, ge=1)
    force: bool = False


class TranscriptionPayload(BaseModel):
    text: str
    language: str | None = None
    duration: float | None = None
    method: TranscriptionMethod | None = None
    status: TranscriptionStatus = TranscriptionStatus.COMPLETED


class TranscribeResponse(BaseModel):
    """Outcome of a manual transcription request."""

    success: bool
    message: str
    transcription: TranscriptionPayload | None = None
    error: str | None = None


class TranscriptionDetail(BaseModel):
    text: str | None = None
    status: TranscriptionStatus
    language: str | None = None
    duration: float | None = None
    method: TranscriptionMethod | None = None
    transcribed_at: datetime | None = None
    error: str | None = None
    segments: list[dict[str, Any]] | None = None
    words: list[dict[str, Any]] | None = None


class TranscriptionResponse(BaseModel):
    success: bool = True
    recording_id: str
    transcription: TranscriptionDetail


class BatchResponse(BaseModel):
    """Summary of a batch transcription run."""

    success: bool = True
    message: str
    processed: int
    successful: int
    failed: int
    results: list[BatchItemResult]


class RecordingSummary(BaseModel):
    recording_id: str
    call_id: str
    owner_id: str | None = None
    duration_seconds: int | None = None
    storage_path: str | None = None
    file_size_bytes: int | None = None
    download_status: DownloadStatus
    transcription_status: TranscriptionStatus
    created_at: datetime


class DownloadUrlResponse(BaseModel):
    recording_id: str
    url: str
    expires_in: int
