"""Infrastructure interface exports."""

from .media_fetcher import MediaFetcher
from .storage import StorageClient
from .transcription_service import TranscriptionService

__all__ = ["MediaFetcher", "StorageClient", "TranscriptionService"]
