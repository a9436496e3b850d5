from datetime import datetime, timezone
from typing import Any, List, Optional

from sqlalchemy import Column
from sqlalchemy.types import JSON
from sqlmodel import Field, SQLModel

from call_recordings.domain.models import (
    DownloadStatus,
    TranscriptionMethod,
    TranscriptionStatus,
)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CallOwner(SQLModel, table=True):
    """
    Maps a call to the account that placed it.

    This service only reads the table. Rows are written by the dialer when
    it places a call, directly or through
    ``RecordingRepository.register_call_owner``. Recordings of calls without
    a row are stored under the ``system`` namespace.
    """

    __tablename__ = "call_owners"

    call_id: str = Field(primary_key=True, max_length=64)
    owner_id: str = Field(max_length=255)


class Recording(SQLModel, table=True):
    __tablename__ = "recordings"

    recording_id: str = Field(primary_key=True, max_length=64)
    call_id: str = Field(index=True, max_length=64)
    owner_id: Optional[str] = Field(default=None, index=True, max_length=255)
    source_url: str
    duration_seconds: Optional[int] = None
    channels: int = 1
    source: str = "DialVerb"

    storage_bucket: Optional[str] = None
    storage_path: Optional[str] = None
    file_size_bytes: Optional[int] = None
    download_status: DownloadStatus = Field(default=DownloadStatus.PENDING)

    transcription_status: TranscriptionStatus = Field(
        default=TranscriptionStatus.PENDING
    )
    transcription_text: Optional[str] = None
    transcription_language: Optional[str] = None
    transcription_duration: Optional[float] = None
    transcription_method: Optional[TranscriptionMethod] = None
    transcription_error: Optional[str] = None
    transcription_segments: Optional[List[dict[str, Any]]] = Field(
        default=None, sa_column=Column(JSON, nullable=True)
    )
    transcription_words: Optional[List[dict[str, Any]]] = Field(
        default=None, sa_column=Column(JSON, nullable=True)
    )

    created_at: datetime = Field(default_factory=utcnow, index=True)
    updated_at: datetime = Field(default_factory=utcnow)
    transcribed_at: Optional[datetime] = None
