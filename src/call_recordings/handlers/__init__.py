"""Pipeline handlers."""

from .batch_coordinator import BatchCoordinator
from .download_orchestrator import DownloadOrchestrator, normalize_media_url
from .rate_limiter import FixedIntervalGate
from .recording_service import RecordingService
from .recording_status_handler import RecordingStatusHandler
from .transcription_orchestrator import TranscriptionOrchestrator
from .transcription_queue import TranscriptionQueue

__all__ = [
    "BatchCoordinator",
    "DownloadOrchestrator",
    "FixedIntervalGate",
    "RecordingService",
    "RecordingStatusHandler",
    "TranscriptionOrchestrator",
    "TranscriptionQueue",
    "normalize_media_url",
]
