import asyncio

from conftest import FakeFetcher, FakeStorage, ScriptedTranscriber, make_event, text_result

from call_recordings.database import get_engine, get_session_factory
from call_recordings.dependencies import Container
from call_recordings.domain import (
    DownloadStatus,
    TranscriptionMethod,
    TranscriptionStatus,
)


def build(app_config, db_url, transcriber, fetcher=None, config=None):
    engine = get_engine(db_url)
    storage = FakeStorage()
    container = Container(
        config=config or app_config,
        storage=storage,
        transcription_service=transcriber,
        fetcher=fetcher or FakeFetcher(),
        session_factory=get_session_factory(engine),
        engine=engine,
    )
    return container, storage


def test_completed_callback_is_downloaded_and_transcribed(app_config, db_url):
    transcriber = ScriptedTranscriber({None: text_result("hello world", "en")})
    container, storage = build(app_config, db_url, transcriber)

    async def scenario():
        await container.startup()
        try:
            await container.repository.register_call_owner("CA1", "owner1")
            await container.status_handler.handle(make_event("RE123", "CA1"))
            await container.transcription_queue.join()
            return await container.repository.get("RE123")
        finally:
            await container.shutdown()

    record = asyncio.run(scenario())

    assert record.owner_id == "owner1"
    assert record.storage_path.startswith("owner1/recording_RE123_")
    assert record.storage_path.endswith(".wav")
    assert record.storage_path in storage.objects
    assert record.download_status == DownloadStatus.COMPLETED
    assert record.transcription_status == TranscriptionStatus.COMPLETED
    assert record.transcription_text == "hello world"
    assert record.transcription_method == TranscriptionMethod.AUTO
    assert record.transcribed_at is not None


def test_non_completed_status_is_ignored(app_config, db_url):
    transcriber = ScriptedTranscriber()
    fetcher = FakeFetcher()
    container, _ = build(app_config, db_url, transcriber, fetcher=fetcher)

    async def scenario():
        await container.startup()
        try:
            await container.status_handler.handle(make_event(status="in-progress"))
            return await container.repository.get("RE123")
        finally:
            await container.shutdown()

    assert asyncio.run(scenario()) is None
    assert fetcher.calls == []


def test_failed_download_keeps_pending_record(app_config, db_url):
    transcriber = ScriptedTranscriber()
    container, storage = build(
        app_config, db_url, transcriber, fetcher=FakeFetcher(status_code=404)
    )

    async def scenario():
        await container.startup()
        try:
            await container.status_handler.handle(make_event())
            return await container.repository.get("RE123")
        finally:
            await container.shutdown()

    record = asyncio.run(scenario())

    assert record.download_status == DownloadStatus.PENDING
    assert record.owner_id is None
    assert storage.objects == {}
    assert transcriber.calls == []


def test_missing_credentials_skip_download(app_config, db_url):
    config = app_config.model_copy(
        update={"twilio": app_config.twilio.model_copy(update={"auth_token": ""})}
    )
    fetcher = FakeFetcher()
    container, _ = build(
        app_config, db_url, ScriptedTranscriber(), fetcher=fetcher, config=config
    )

    async def scenario():
        await container.startup()
        try:
            await container.status_handler.handle(make_event())
            return await container.repository.get("RE123")
        finally:
            await container.shutdown()

    record = asyncio.run(scenario())

    assert record.download_status == DownloadStatus.PENDING
    assert fetcher.calls == []


def test_repeated_callback_does_not_download_again(app_config, db_url):
    transcriber = ScriptedTranscriber({None: text_result("hello world", "en")})
    fetcher = FakeFetcher()
    container, storage = build(app_config, db_url, transcriber, fetcher=fetcher)

    async def scenario():
        await container.startup()
        try:
            await container.status_handler.handle(make_event("RE123", "CA1"))
            await container.transcription_queue.join()
            first = await container.repository.get("RE123")
            await container.status_handler.handle(make_event("RE123", "CA1"))
            await container.transcription_queue.join()
            return first, await container.repository.get("RE123")
        finally:
            await container.shutdown()

    first, second = asyncio.run(scenario())

    assert len(fetcher.calls) == 1
    assert list(storage.objects) == [first.storage_path]
    assert second.storage_path == first.storage_path
    assert transcriber.calls == [None]


def test_repeated_callback_retries_pending_download(app_config, db_url):
    fetcher = FakeFetcher(status_code=503)
    container, storage = build(app_config, db_url, ScriptedTranscriber(), fetcher=fetcher)

    async def scenario():
        await container.startup()
        try:
            await container.status_handler.handle(make_event())
            fetcher.status_code = None
            await container.status_handler.handle(make_event())
            await container.transcription_queue.join()
            return await container.repository.get("RE123")
        finally:
            await container.shutdown()

    record = asyncio.run(scenario())

    assert len(fetcher.calls) == 2
    assert record.download_status == DownloadStatus.COMPLETED
    assert record.storage_path in storage.objects
