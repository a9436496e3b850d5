"""Abstract interface for fetching recording media from the telephony provider."""

from abc import ABC, abstractmethod

from call_recordings.config import TwilioConfig


class MediaFetcher(ABC):
    """Abstract base class for provider media downloads."""

    @abstractmethod
    async def fetch(
        self, recording_id: str, media_url: str, credentials: TwilioConfig
    ) -> bytes:
        """
        Downloads the full media body into memory.

        Raises:
            DownloadError: On a non-200 response or a transport failure.
        """
