import asyncio
from contextlib import asynccontextmanager

import pytest

from call_recordings.config import (
    AppConfig,
    DatabaseConfig,
    MinioConfig,
    PipelineConfig,
    TranscriptionConfig,
    TwilioConfig,
)
from call_recordings.database import get_engine, get_session_factory, init_db
from call_recordings.domain import (
    ProviderTranscription,
    RecordingStatusEvent,
    StoredObject,
)
from call_recordings.exceptions import (
    DownloadError,
    StorageDownloadError,
    StorageUploadError,
)
from call_recordings.infrastructure.interfaces import (
    MediaFetcher,
    StorageClient,
    TranscriptionService,
)
from call_recordings.repositories import RecordingRepository


class FakeStorage(StorageClient):
    def __init__(self, bucket_name="recordings"):
        self._bucket_name = bucket_name
        self.objects = {}
        self.fail_upload = False

    @property
    def bucket_name(self):
        return self._bucket_name

    async def upload(self, object_name, data, content_type):
        if self.fail_upload:
            raise StorageUploadError(object_name, Exception("bucket unavailable"))
        self.objects[object_name] = (data, content_type)
        return StoredObject(path=object_name, size=len(data))

    async def download(self, object_name):
        if object_name not in self.objects:
            raise StorageDownloadError(object_name, Exception("no such key"))
        return self.objects[object_name][0]

    async def signed_url(self, object_name, ttl_seconds):
        return f"https://storage.test/{self._bucket_name}/{object_name}?expires={ttl_seconds}"

    async def ensure_bucket_exists(self):
        pass


class FakeFetcher(MediaFetcher):
    def __init__(self, audio=b"RIFF....WAVEfmt ", status_code=None):
        self.audio = audio
        self.status_code = status_code
        self.calls = []

    async def fetch(self, recording_id, media_url, credentials):
        self.calls.append((recording_id, media_url, credentials.account_sid))
        if self.status_code is not None:
            raise DownloadError(recording_id, status_code=self.status_code)
        return self.audio


class ScriptedTranscriber(TranscriptionService):
    """
    Returns a scripted outcome per language hint (None is auto-detect).

    Outcomes may be a ProviderTranscription or an exception to raise.
    Unscripted languages return an empty successful response.
    """

    def __init__(self, outcomes=None):
        self.outcomes = outcomes or {}
        self.calls = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def transcribe(self, audio_data, file_name, options):
        self.calls.append(options.language)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(0)
            outcome = self.outcomes.get(
                options.language, ProviderTranscription(success=True, text="")
            )
            if isinstance(outcome, Exception):
                raise outcome
            return outcome
        finally:
            self.in_flight -= 1


def text_result(text, language=None):
    return ProviderTranscription(success=True, text=text, language=language)


@pytest.fixture
def app_config():
    return AppConfig(
        minio=MinioConfig(endpoint="minio:9000", user="minio", password="secret"),
        database=DatabaseConfig(
            host="localhost", port="5432", user="u", password="p", database="test"
        ),
        twilio=TwilioConfig(account_sid="AC123", auth_token="token"),
        transcription=TranscriptionConfig(
            endpoint="https://azure.test/transcriptions", api_key="key"
        ),
        pipeline=PipelineConfig(batch_pacing_seconds=0.0),
    )


@pytest.fixture
def db_url(tmp_path):
    return f"sqlite+aiosqlite:///{tmp_path / 'recordings.db'}"


@pytest.fixture
def repository_context(db_url):
    """Async context manager yielding a repository over a fresh SQLite file."""

    @asynccontextmanager
    async def _context():
        engine = get_engine(db_url)
        await init_db(engine)
        try:
            yield RecordingRepository(get_session_factory(engine))
        finally:
            await engine.dispose()

    return _context


def make_event(recording_id="RE123", call_id="CA1", status="completed", **extra):
    data = {
        "RecordingSid": recording_id,
        "CallSid": call_id,
        "RecordingUrl": f"https://api.twilio.test/Recordings/{recording_id}",
        "RecordingStatus": status,
    }
    data.update(extra)
    return RecordingStatusEvent.model_validate(data)
