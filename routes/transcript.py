# User value: This file serves the finished transcript and stores the user's edits.
# routes/transcript.py
from fastapi import APIRouter, Depends

from schemas.requests import TranscriptUpdateRequest
from services.errors import InvalidJobIdError, MalformedMetadataError, StorageUnavailableError
from services.gcs import get_output_container
from services.transcripts import find_transcript_name, load_transcript, save_paragraphs
from utils.http_errors import api_error, invalid_job_id, storage_unavailable
from utils.stage_logging import log_stage

router = APIRouter()


def _transcript_not_found():
    return api_error(404, "RESOURCE_NOT_FOUND", "Transcript not found")


def _transcript_unreadable():
    return api_error(409, "STATE_CONFLICT", "Transcript is still being written, retry shortly")


@router.get("/transcript/{job_id}")
def get_transcript(job_id: str, outputs=Depends(get_output_container)):
    try:
        name = find_transcript_name(outputs, job_id)
        if not name:
            raise _transcript_not_found()
        return load_transcript(outputs, name)
    except InvalidJobIdError as exc:
        raise invalid_job_id(str(exc)) from exc
    except MalformedMetadataError as exc:
        raise _transcript_unreadable() from exc
    except StorageUnavailableError as exc:
        raise storage_unavailable() from exc


@router.put("/transcript/{job_id}")
# User value: persists the user's corrections so reopening a job shows the edited text.
def put_transcript(
    job_id: str,
    payload: TranscriptUpdateRequest,
    outputs=Depends(get_output_container),
):
    log_stage(job_id=job_id, stage="TRANSCRIPT_SAVE", event="STARTED", paragraphs=len(payload.paragraphs))
    try:
        name = find_transcript_name(outputs, job_id)
        if not name:
            raise _transcript_not_found()
        save_paragraphs(outputs, name, payload.paragraphs)
    except InvalidJobIdError as exc:
        raise invalid_job_id(str(exc)) from exc
    except MalformedMetadataError as exc:
        log_stage(job_id=job_id, stage="TRANSCRIPT_SAVE", event="FAILED", error=str(exc))
        raise _transcript_unreadable() from exc
    except StorageUnavailableError as exc:
        log_stage(job_id=job_id, stage="TRANSCRIPT_SAVE", event="FAILED", error=str(exc))
        raise storage_unavailable() from exc

    log_stage(job_id=job_id, stage="TRANSCRIPT_SAVE", event="COMPLETED", blob_name=name)
    return {"status": "saved"}
