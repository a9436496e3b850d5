"""Dependency wiring for the recording pipeline."""

import httpx
from fastapi import Depends, Request
from minio import Minio
from sqlalchemy.ext.asyncio import AsyncEngine

from call_recordings.config import AppConfig
from call_recordings.database import get_engine, get_session_factory, init_db
from call_recordings.handlers import (
    BatchCoordinator,
    DownloadOrchestrator,
    FixedIntervalGate,
    RecordingService,
    RecordingStatusHandler,
    TranscriptionOrchestrator,
    TranscriptionQueue,
)
from call_recordings.infrastructure import (
    AzureOpenAITranscriber,
    MinioStorageClient,
    TwilioMediaFetcher,
)
from call_recordings.infrastructure.interfaces import (
    MediaFetcher,
    StorageClient,
    TranscriptionService,
)
from call_recordings.logging import setup_logging
from call_recordings.repositories import RecordingRepository

logger = setup_logging()


class Container:
    """Holds one configured instance of every pipeline component."""

    def __init__(
        self,
        config: AppConfig,
        storage: StorageClient,
        transcription_service: TranscriptionService,
        fetcher: MediaFetcher,
        session_factory,
        engine: AsyncEngine | None = None,
        http_clients: tuple[httpx.AsyncClient, ...] = (),
    ):
        self.config = config
        self.storage = storage
        self._engine = engine
        self._http_clients = http_clients

        pipeline = config.pipeline
        self.repository = RecordingRepository(session_factory)
        self.orchestrator = TranscriptionOrchestrator(
            transcription_service,
            self.repository,
            candidate_languages=pipeline.candidate_languages,
        )
        self.transcription_queue = TranscriptionQueue(
            self.orchestrator, maxsize=pipeline.queue_size, workers=pipeline.workers
        )
        self.downloader = DownloadOrchestrator(
            fetcher, storage, self.repository, self.transcription_queue
        )
        self.batch_coordinator = BatchCoordinator(
            self.repository,
            storage,
            self.orchestrator,
            FixedIntervalGate(pipeline.batch_pacing_seconds),
        )
        self.recording_service = RecordingService(
            self.repository,
            storage,
            self.orchestrator,
            self.batch_coordinator,
            signed_url_ttl_seconds=pipeline.signed_url_ttl_seconds,
        )
        self.status_handler = RecordingStatusHandler(
            self.repository, storage, self.downloader, config.twilio
        )

    async def startup(self) -> None:
        if self._engine is not None:
            await init_db(self._engine)
        await self.storage.ensure_bucket_exists()
        self.transcription_queue.start()
        logger.info("Recording pipeline started")

    async def shutdown(self) -> None:
        await self.transcription_queue.stop()
        for client in self._http_clients:
            await client.aclose()
        if self._engine is not None:
            await self._engine.dispose()
        logger.info("Recording pipeline stopped")


def build_container(config: AppConfig) -> Container:
    """Creates the production clients from configuration."""
    minio_client = Minio(
        endpoint=config.minio.endpoint,
        access_key=config.minio.user,
        secret_key=config.minio.password,
        secure=config.minio.secure,
    )
    storage = MinioStorageClient(minio_client, config.minio.bucket_name)

    media_client = httpx.AsyncClient(follow_redirects=True)
    transcription_client = httpx.AsyncClient(
        timeout=config.transcription.timeout_seconds
    )
    transcriber = AzureOpenAITranscriber(
        transcription_client,
        endpoint=config.transcription.endpoint,
        api_key=config.transcription.api_key,
        model=config.transcription.model,
        timeout_seconds=config.transcription.timeout_seconds,
    )

    engine = get_engine(config.database.url)
    return Container(
        config=config,
        storage=storage,
        transcription_service=transcriber,
        fetcher=TwilioMediaFetcher(media_client),
        session_factory=get_session_factory(engine),
        engine=engine,
        http_clients=(media_client, transcription_client),
    )


def get_container(request: Request) -> Container:
    """Returns the container attached to the running application."""
    return request.app.state.container


def get_recording_service(
    container: Container = Depends(get_container),
) -> RecordingService:
    return container.recording_service


def get_status_handler(
    container: Container = Depends(get_container),
) -> RecordingStatusHandler:
    return container.status_handler
