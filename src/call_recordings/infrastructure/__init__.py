"""Infrastructure layer exports."""

from .azure_transcriber import AzureOpenAITranscriber, content_type_for
from .minio_storage import MinioStorageClient
from .twilio_media import TwilioMediaFetcher

__all__ = [
    "AzureOpenAITranscriber",
    "MinioStorageClient",
    "TwilioMediaFetcher",
    "content_type_for",
]
