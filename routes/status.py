# User value: This file lets the UI poll whether a recording is still processing or ready to open.
# routes/status.py
import logging

from fastapi import APIRouter, Depends, Header
from redis.exceptions import RedisError

from services.errors import InvalidJobIdError, StorageUnavailableError
from services.gcs import get_input_container, get_output_container
from services.job_history import get_job_history_repository
from services.status_resolver import resolve_job_status
from utils.http_errors import invalid_job_id, storage_unavailable
from utils.metrics import incr
from utils.stage_logging import log_stage

router = APIRouter()
logger = logging.getLogger("api.status")


@router.get("/status/{job_id}")
# User value: loads latest transcription state so users see current status.
def get_status(
    job_id: str,
    user_id: str | None = Header(default=None, alias="X-User-Id"),
    inputs=Depends(get_input_container),
    outputs=Depends(get_output_container),
    history=Depends(get_job_history_repository),
):
    log_stage(job_id=job_id, stage="STATUS_READ", event="STARTED", user=user_id)

    try:
        result = resolve_job_status(job_id, inputs=inputs, outputs=outputs)
    except InvalidJobIdError as exc:
        log_stage(job_id=job_id, stage="STATUS_READ", event="FAILED", user=user_id, error=str(exc))
        raise invalid_job_id(str(exc)) from exc
    except StorageUnavailableError as exc:
        log_stage(job_id=job_id, stage="STATUS_READ", event="FAILED", user=user_id, error=str(exc))
        incr("api_status_storage_errors_total")
        raise storage_unavailable() from exc

    if user_id:
        # history is a convenience; a Redis hiccup must not hide the status
        try:
            history.apply_status(user_id, result)
        except RedisError as exc:
            logger.warning("job_history_update_failed job_id=%s user=%s error=%s", result.jobId, user_id, exc)

    incr("api_status_reads_total", status=result.status)
    log_stage(
        job_id=result.jobId,
        stage="STATUS_READ",
        event="COMPLETED",
        user=user_id,
        status=result.status,
        audio_duration=result.audioDuration,
        processing_time=result.processingTime,
    )
    return result.to_payload()
