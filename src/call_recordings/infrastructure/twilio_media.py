"""Twilio implementation of the MediaFetcher interface."""

import httpx

from call_recordings.config import TwilioConfig
from call_recordings.exceptions import DownloadError
from call_recordings.logging import setup_logging

from .interfaces import MediaFetcher

logger = setup_logging()

USER_AGENT = "Cold-Call-App/1.0"


class TwilioMediaFetcher(MediaFetcher):
    """Downloads recording media from Twilio with account Basic auth."""

    def __init__(self, client: httpx.AsyncClient):
        self._client = client

    async def fetch(
        self, recording_id: str, media_url: str, credentials: TwilioConfig
    ) -> bytes:
        """
        Streams the media body into memory.

        There is no size cap; a recording is bounded by the call duration.
        """
        try:
            async with self._client.stream(
                "GET",
                media_url,
                auth=(credentials.account_sid, credentials.auth_token),
                headers={"User-Agent": USER_AGENT},
            ) as response:
                if response.status_code != 200:
                    logger.error(
                        "Recording media request rejected",
                        extra={
                            "recording_id": recording_id,
                            "status_code": response.status_code,
                        },
                    )
                    raise DownloadError(recording_id, status_code=response.status_code)

                chunks = []
                async for chunk in response.aiter_bytes():
                    chunks.append(chunk)
        except DownloadError:
            raise
        except httpx.HTTPError as e:
            logger.exception(
                "Recording media download failed",
                extra={"recording_id": recording_id},
            )
            raise DownloadError(recording_id, cause=e) from e

        audio = b"".join(chunks)
        logger.info(
            "Recording media downloaded",
            extra={"recording_id": recording_id, "size": len(audio)},
        )
        return audio
