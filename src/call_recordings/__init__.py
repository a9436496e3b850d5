from call_recordings.config import AppConfig, load_config
from call_recordings.exceptions import (
    DownloadError,
    MetadataWriteError,
    RecordingNotFoundError,
    RecordingNotInStorageError,
    StorageDownloadError,
    StorageError,
    StorageUploadError,
    TranscriptionProviderError,
)
from call_recordings.logging import setup_logging

__all__ = [
    "AppConfig",
    "DownloadError",
    "MetadataWriteError",
    "RecordingNotFoundError",
    "RecordingNotInStorageError",
    "StorageDownloadError",
    "StorageError",
    "StorageUploadError",
    "TranscriptionProviderError",
    "load_config",
    "setup_logging",
]
