import asyncio

import pytest
from conftest import FakeFetcher, FakeStorage, ScriptedTranscriber, make_event

from call_recordings.config import TwilioConfig
from call_recordings.domain import DownloadStatus
from call_recordings.exceptions import DownloadError, StorageUploadError
from call_recordings.handlers import (
    DownloadOrchestrator,
    TranscriptionOrchestrator,
    TranscriptionQueue,
)
from call_recordings.handlers.download_orchestrator import normalize_media_url

CREDENTIALS = TwilioConfig(account_sid="AC123", auth_token="token")


@pytest.mark.parametrize(
    "url,expected",
    [
        ("https://api.twilio.test/Recordings/RE1", "https://api.twilio.test/Recordings/RE1.wav"),
        ("https://api.twilio.test/Recordings/RE1.wav", "https://api.twilio.test/Recordings/RE1.wav"),
        ("https://api.twilio.test/Recordings/RE1.mp3", "https://api.twilio.test/Recordings/RE1.mp3"),
    ],
)
def test_normalize_media_url(url, expected):
    assert normalize_media_url(url) == expected


def run_download(repository_context, fetcher, storage, owner_id="owner1"):
    transcriber = ScriptedTranscriber()

    async def scenario():
        async with repository_context() as repository:
            await repository.create(make_event(), owner_id, storage.bucket_name)
            queue = TranscriptionQueue(
                TranscriptionOrchestrator(transcriber, repository)
            )
            downloader = DownloadOrchestrator(fetcher, storage, repository, queue)
            try:
                stored = await downloader.download_and_persist(
                    "RE123",
                    "https://api.twilio.test/Recordings/RE123",
                    CREDENTIALS,
                    owner_id,
                )
                error = None
            except Exception as e:
                stored, error = None, e
            return stored, error, queue.pending, await repository.get("RE123")

    stored, error, pending, record = asyncio.run(scenario())
    return stored, error, pending, record, transcriber


def test_download_stores_under_owner_and_queues_transcription(repository_context):
    fetcher = FakeFetcher(audio=b"RIFFdata")
    storage = FakeStorage()

    stored, error, pending, record, _ = run_download(repository_context, fetcher, storage)

    assert error is None
    assert fetcher.calls == [
        ("RE123", "https://api.twilio.test/Recordings/RE123.wav", "AC123")
    ]
    assert stored.storage_path.startswith("owner1/recording_RE123_")
    assert stored.storage_path.endswith(".wav")
    assert stored.file_size_bytes == 8
    assert storage.objects[stored.storage_path] == (b"RIFFdata", "audio/wav")
    assert record.download_status == DownloadStatus.COMPLETED
    assert record.storage_path == stored.storage_path
    assert record.file_size_bytes == 8
    assert pending == 1


def test_download_without_owner_uses_system_namespace(repository_context):
    stored, _, _, _, _ = run_download(
        repository_context, FakeFetcher(), FakeStorage(), owner_id=None
    )

    assert stored.storage_path.startswith("system/recording_RE123_")


def test_provider_rejection_leaves_record_pending(repository_context):
    storage = FakeStorage()

    stored, error, pending, record, transcriber = run_download(
        repository_context, FakeFetcher(status_code=403), storage
    )

    assert stored is None
    assert isinstance(error, DownloadError)
    assert error.status_code == 403
    assert storage.objects == {}
    assert record.download_status == DownloadStatus.PENDING
    assert record.storage_path is None
    assert pending == 0
    assert transcriber.calls == []


def test_storage_failure_leaves_record_pending(repository_context):
    storage = FakeStorage()
    storage.fail_upload = True

    _, error, pending, record, _ = run_download(repository_context, FakeFetcher(), storage)

    assert isinstance(error, StorageUploadError)
    assert record.download_status == DownloadStatus.PENDING
    assert pending == 0
