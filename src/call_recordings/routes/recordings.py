"""Recording callback and transcription endpoints."""

from typing import Annotated, List

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response
from pydantic import ValidationError

from call_recordings.dependencies import get_recording_service, get_status_handler
from call_recordings.domain import RecordingStatusEvent
from call_recordings.exceptions import (
    RecordingNotFoundError,
    RecordingNotInStorageError,
)
from call_recordings.handlers import RecordingService, RecordingStatusHandler
from call_recordings.logging import setup_logging
from call_recordings.response_models import (
    BatchRequest,
    BatchResponse,
    DownloadUrlResponse,
    RecordingSummary,
    TranscribeRequest,
    TranscribeResponse,
    TranscriptionDetail,
    TranscriptionPayload,
    TranscriptionResponse,
)

logger = setup_logging()

router = APIRouter(prefix="/api", tags=["recordings"])

ServiceDep = Annotated[RecordingService, Depends(get_recording_service)]
StatusHandlerDep = Annotated[RecordingStatusHandler, Depends(get_status_handler)]

EMPTY_TWIML = "<Response></Response>"


@router.api_route("/recording-status", methods=["GET", "POST"])
async def recording_status(request: Request, handler: StatusHandlerDep):
    """
    Receives Twilio recording status callbacks.

    Always acknowledges with empty TwiML; Twilio only looks at the status code.
    """
    if request.method == "GET":
        data = dict(request.query_params)
    else:
        data = dict(await request.form())

    try:
        event = RecordingStatusEvent.model_validate(data)
    except ValidationError as e:
        logger.warning("Invalid recording status callback", extra={"error": str(e)})
    else:
        await handler.handle(event)

    return Response(content=EMPTY_TWIML, media_type="text/xml")


@router.post("/recording/{recording_id}/transcribe", response_model=TranscribeResponse)
async def transcribe_recording(
    recording_id: str,
    service: ServiceDep,
    body: TranscribeRequest | None = None,
):
    """Transcribes a stored recording, unless it already is and force is off."""
    force = body.force if body else False
    try:
        result = await service.transcribe(recording_id, force=force)
    except RecordingNotFoundError:
        raise HTTPException(status_code=404, detail="Recording not found")
    except RecordingNotInStorageError:
        raise HTTPException(
            status_code=400, detail="Recording file not available in storage"
        )
    except Exception as e:
        logger.exception(
            "Error in manual transcription", extra={"recording_id": recording_id}
        )
        raise HTTPException(
            status_code=500, detail=f"Failed to transcribe recording: {e}"
        )

    if result.already_transcribed:
        message = "Recording already transcribed"
    elif result.success:
        message = "Transcription completed"
    else:
        message = "Transcription failed"

    return TranscribeResponse(
        success=result.success,
        message=message,
        transcription=(
            TranscriptionPayload(
                text=result.text,
                language=result.language,
                duration=result.duration_seconds,
                method=result.method,
            )
            if result.success
            else None
        ),
        error=result.error,
    )


@router.get(
    "/recording/{recording_id}/transcription", response_model=TranscriptionResponse
)
async def get_transcription(recording_id: str, service: ServiceDep):
    """Returns the current transcription state of a recording."""
    try:
        snapshot = await service.get_transcription(recording_id)
    except RecordingNotFoundError:
        raise HTTPException(status_code=404, detail="Recording not found")

    return TranscriptionResponse(
        recording_id=recording_id,
        transcription=TranscriptionDetail(
            text=snapshot.text,
            status=snapshot.status,
            language=snapshot.language,
            duration=snapshot.duration_seconds,
            method=snapshot.method,
            transcribed_at=snapshot.transcribed_at,
            error=snapshot.error,
            segments=snapshot.segments,
            words=snapshot.words,
        ),
    )


@router.post("/recordings/transcribe-batch", response_model=BatchResponse)
async def transcribe_batch(service: ServiceDep, body: BatchRequest | None = None):
    """Transcribes pending recordings one after another."""
    body = body or BatchRequest()
    try:
        batch = await service.transcribe_batch(limit=body.limit, force=body.force)
    except Exception as e:
        logger.exception("Error in batch transcription")
        raise HTTPException(
            status_code=500, detail=f"Failed to process batch transcription: {e}"
        )

    return BatchResponse(
        message=batch.message,
        processed=batch.processed,
        successful=batch.successful,
        failed=batch.failed,
        results=batch.results,
    )


@router.get("/recordings", response_model=List[RecordingSummary])
async def list_recordings(
    service: ServiceDep,
    limit: int = Query(default=50, ge=1, le=500),
    owner_id: str | None = Query(default=None),
):
    """Returns the most recent recordings, optionally for a single owner."""
    recordings = await service.list_recordings(limit, owner_id=owner_id)
    return [RecordingSummary.model_validate(r, from_attributes=True) for r in recordings]


@router.get("/recording/{recording_id}/download", response_model=DownloadUrlResponse)
async def get_download_url(recording_id: str, service: ServiceDep):
    """Returns a time-limited URL for the stored recording audio."""
    try:
        url = await service.get_download_url(recording_id)
    except RecordingNotFoundError:
        raise HTTPException(status_code=404, detail="Recording not found")
    except RecordingNotInStorageError:
        raise HTTPException(
            status_code=400, detail="Recording file not available in storage"
        )
    except Exception as e:
        logger.error(f"Error creating download URL for {recording_id}: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")

    return DownloadUrlResponse(
        recording_id=recording_id,
        url=url,
        expires_in=service.signed_url_ttl_seconds,
    )
