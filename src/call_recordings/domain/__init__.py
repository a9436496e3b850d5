"""Domain layer exports."""

from .models import (
    BatchItemResult,
    BatchResult,
    DownloadStatus,
    ProviderResponse,
    ProviderTranscription,
    RecordingStatusEvent,
    StoredObject,
    StoredRecording,
    TranscriptionJob,
    TranscriptionMethod,
    TranscriptionOptions,
    TranscriptionResult,
    TranscriptionSnapshot,
    TranscriptionStatus,
)
from .storage_paths import (
    file_name_from_path,
    recording_file_name,
    recording_object_path,
)

__all__ = [
    "BatchItemResult",
    "BatchResult",
    "DownloadStatus",
    "ProviderResponse",
    "ProviderTranscription",
    "RecordingStatusEvent",
    "StoredObject",
    "StoredRecording",
    "TranscriptionJob",
    "TranscriptionMethod",
    "TranscriptionOptions",
    "TranscriptionResult",
    "TranscriptionSnapshot",
    "TranscriptionStatus",
    "file_name_from_path",
    "recording_file_name",
    "recording_object_path",
]
