import asyncio

import pytest
from conftest import FakeStorage, ScriptedTranscriber, make_event, text_result

from call_recordings.domain import (
    StoredRecording,
    TranscriptionMethod,
    TranscriptionResult,
    TranscriptionStatus,
)
from call_recordings.exceptions import RecordingNotFoundError, RecordingNotInStorageError
from call_recordings.handlers import (
    BatchCoordinator,
    FixedIntervalGate,
    RecordingService,
    TranscriptionOrchestrator,
)

STORED = StoredRecording(
    storage_path="owner1/recording_RE123_1.wav",
    file_name="recording_RE123_1.wav",
    file_size_bytes=4,
    bucket="recordings",
)


def run_service(repository_context, transcriber, action, stored=True, transcribed=None):
    storage = FakeStorage()

    async def scenario():
        async with repository_context() as repository:
            await repository.create(make_event(), "owner1", storage.bucket_name)
            if stored:
                await storage.upload(STORED.storage_path, b"RIFF", "audio/wav")
                await repository.mark_downloaded("RE123", STORED)
            if transcribed:
                await repository.save_transcription("RE123", transcribed)
            orchestrator = TranscriptionOrchestrator(transcriber, repository)
            service = RecordingService(
                repository,
                storage,
                orchestrator,
                BatchCoordinator(repository, storage, orchestrator, FixedIntervalGate(0.0)),
                signed_url_ttl_seconds=600,
            )
            return await action(service)

    return asyncio.run(scenario())


def test_already_transcribed_short_circuits(repository_context):
    transcriber = ScriptedTranscriber({None: text_result("new text")})
    previous = TranscriptionResult(
        success=True, text="old text", language="en", method=TranscriptionMethod.AUTO
    )

    result = run_service(
        repository_context,
        transcriber,
        lambda service: service.transcribe("RE123"),
        transcribed=previous,
    )

    assert result.already_transcribed
    assert result.text == "old text"
    assert transcriber.calls == []


def test_force_retranscribes(repository_context):
    transcriber = ScriptedTranscriber({None: text_result("new text")})
    previous = TranscriptionResult(
        success=True, text="old text", method=TranscriptionMethod.AUTO
    )

    async def action(service):
        result = await service.transcribe("RE123", force=True)
        return result, await service.get_transcription("RE123")

    result, snapshot = run_service(
        repository_context, transcriber, action, transcribed=previous
    )

    assert not result.already_transcribed
    assert result.text == "new text"
    assert transcriber.calls == [None]
    assert snapshot.text == "new text"
    assert snapshot.status == TranscriptionStatus.COMPLETED


def test_unknown_recording_raises(repository_context):
    with pytest.raises(RecordingNotFoundError):
        run_service(
            repository_context,
            ScriptedTranscriber(),
            lambda service: service.transcribe("RE404"),
        )


def test_recording_without_audio_raises(repository_context):
    transcriber = ScriptedTranscriber()

    with pytest.raises(RecordingNotInStorageError):
        run_service(
            repository_context,
            transcriber,
            lambda service: service.transcribe("RE123"),
            stored=False,
        )
    assert transcriber.calls == []


def test_download_url_uses_configured_ttl(repository_context):
    url = run_service(
        repository_context,
        ScriptedTranscriber(),
        lambda service: service.get_download_url("RE123"),
    )

    assert url == "https://storage.test/recordings/owner1/recording_RE123_1.wav?expires=600"


def test_download_url_requires_stored_audio(repository_context):
    with pytest.raises(RecordingNotInStorageError):
        run_service(
            repository_context,
            ScriptedTranscriber(),
            lambda service: service.get_download_url("RE123"),
            stored=False,
        )
