# User value: This file gives the browser a direct upload URL and queues the recording once it lands.
# routes/upload.py
import logging
from datetime import datetime, timedelta, timezone

from fastapi import APIRouter, Depends, Header
from redis.exceptions import RedisError

from config import QUEUE_NAME, UPLOAD_URL_TTL_MIN
from schemas.requests import UploadCompleteRequest, UploadUrlRequest
from schemas.responses import UploadCompleteResponse, UploadUrlResponse
from services.errors import InvalidJobIdError, StorageUnavailableError
from services.gcs import get_input_container, get_output_container
from services.job_history import get_job_history_repository
from services.job_ids import input_blob_name, is_supported_extension, new_job_id, upload_extension
from services.queue import build_job_message, publish_job
from services.status_resolver import normalize_job_id
from utils.http_errors import api_error, invalid_job_id, storage_unavailable
from utils.metrics import incr
from utils.stage_logging import log_stage

router = APIRouter()
logger = logging.getLogger("api.upload")


@router.post("/get-upload-url")
def get_upload_url(
    payload: UploadUrlRequest,
    inputs=Depends(get_input_container),
) -> UploadUrlResponse:
    filename = (payload.filename or "").strip()
    if not filename:
        incr("api_upload_url_failed_total", reason="missing_filename")
        raise api_error(400, "INVALID_REQUEST", "filename is required")

    ext = upload_extension(filename)
    if not is_supported_extension(ext):
        incr("api_upload_url_failed_total", reason="unsupported_extension")
        raise api_error(400, "UNSUPPORTED_AUDIO_FORMAT", f"Unsupported audio format: .{ext}")

    now = datetime.now(timezone.utc)
    job_id = new_job_id(now)
    blob_name = input_blob_name(job_id, filename)

    log_stage(
        job_id=job_id,
        stage="UPLOAD_URL",
        event="STARTED",
        filename=filename,
        blob_name=blob_name,
        container=inputs.name,
    )
    try:
        upload_url = inputs.signed_upload_url(
            blob_name,
            content_type=payload.contentType,
            expires_minutes=UPLOAD_URL_TTL_MIN,
        )
    except StorageUnavailableError as exc:
        log_stage(job_id=job_id, stage="UPLOAD_URL", event="FAILED", error=str(exc))
        raise storage_unavailable() from exc

    expires_on = now + timedelta(minutes=UPLOAD_URL_TTL_MIN)
    log_stage(job_id=job_id, stage="UPLOAD_URL", event="COMPLETED", blob_name=blob_name)
    incr("api_upload_urls_issued_total")

    return UploadUrlResponse(
        uploadUrl=upload_url,
        jobId=job_id,
        blobName=blob_name,
        containerName=inputs.name,
        expiresOn=expires_on.isoformat().replace("+00:00", "Z"),
    )


@router.post("/upload-complete")
def upload_complete(
    payload: UploadCompleteRequest,
    user_id: str | None = Header(default=None, alias="X-User-Id"),
    inputs=Depends(get_input_container),
    outputs=Depends(get_output_container),
    history=Depends(get_job_history_repository),
) -> UploadCompleteResponse:
    blob_name = (payload.blobName or "").strip()
    try:
        job_id = normalize_job_id(payload.jobId)
    except InvalidJobIdError as exc:
        raise invalid_job_id("jobId is required") from exc
    if not blob_name:
        raise api_error(400, "INVALID_REQUEST", "blobName is required")
    if not blob_name.startswith(job_id):
        raise api_error(400, "INVALID_REQUEST", "blobName does not belong to jobId")

    log_stage(job_id=job_id, stage="UPLOAD_COMPLETE", event="STARTED", user=user_id, blob_name=blob_name)

    try:
        uploaded = inputs.exists(blob_name)
    except StorageUnavailableError as exc:
        log_stage(job_id=job_id, stage="UPLOAD_COMPLETE", event="FAILED", user=user_id, error=str(exc))
        raise storage_unavailable() from exc
    if not uploaded:
        log_stage(job_id=job_id, stage="UPLOAD_COMPLETE", event="FAILED", user=user_id, error="Uploaded audio not found")
        raise api_error(404, "RESOURCE_NOT_FOUND", "Uploaded audio not found")

    message = build_job_message(
        job_id=job_id,
        blob_name=blob_name,
        input_container=inputs.name,
        output_container=outputs.name,
        original_name=payload.originalName,
        interpreter_mode=payload.interpreterMode,
        english_only=payload.englishOnly,
    )

    log_stage(job_id=job_id, stage="QUEUE_ENQUEUE", event="STARTED", user=user_id, queue=QUEUE_NAME)
    try:
        published = publish_job(job_id, message)
    except RedisError as exc:
        log_stage(
            job_id=job_id,
            stage="QUEUE_ENQUEUE",
            event="FAILED",
            user=user_id,
            queue=QUEUE_NAME,
            error=f"{exc.__class__.__name__}: {exc}",
        )
        raise api_error(500, "QUEUE_UNAVAILABLE", "Queue push failed") from exc

    log_stage(
        job_id=job_id,
        stage="QUEUE_ENQUEUE",
        event="COMPLETED",
        user=user_id,
        queue=QUEUE_NAME,
        transcribe_option=message["transcribe_option"],
        message=None if published else "duplicate_enqueue_skipped",
    )

    if published:
        incr("api_jobs_submitted_total", transcribe_option=message["transcribe_option"])
    else:
        incr("api_jobs_idempotent_reused_total")

    if user_id and published:
        try:
            history.record_upload(user_id, job_id, payload.originalName or blob_name)
        except RedisError as exc:
            logger.warning("job_history_record_failed job_id=%s user=%s error=%s", job_id, user_id, exc)

    return UploadCompleteResponse(jobId=job_id, queue=QUEUE_NAME, reused=not published)
