# User value: This file keeps each user's recent jobs so they can return to earlier transcripts.
# routes/jobs.py
from fastapi import APIRouter, Depends, Header
from redis.exceptions import RedisError

from schemas.requests import JobHistoryEntry, JobHistoryUpdateRequest
from services.job_history import get_job_history_repository
from utils.http_errors import api_error
from utils.stage_logging import log_stage

router = APIRouter()


def _require_user(user_id: str | None) -> str:
    value = (user_id or "").strip()
    if not value:
        raise api_error(400, "INVALID_REQUEST", "X-User-Id header is required")
    return value


def _history_unavailable():
    return api_error(500, "HISTORY_UNAVAILABLE", "Job history temporarily unavailable")


def _payload(entries: list[JobHistoryEntry]) -> dict:
    return {"jobs": [entry.model_dump(exclude_none=True) for entry in entries]}


@router.get("/jobs")
# User value: lists recent uploads newest first.
def list_jobs(
    user_id: str | None = Header(default=None, alias="X-User-Id"),
    history=Depends(get_job_history_repository),
):
    user = _require_user(user_id)
    try:
        entries = history.load(user)
    except RedisError as exc:
        raise _history_unavailable() from exc
    log_stage(job_id="jobs-list", stage="JOBS_LIST", event="COMPLETED", user=user, count=len(entries))
    return _payload(entries)


@router.put("/jobs")
def replace_jobs(
    payload: JobHistoryUpdateRequest,
    user_id: str | None = Header(default=None, alias="X-User-Id"),
    history=Depends(get_job_history_repository),
):
    user = _require_user(user_id)
    try:
        kept = history.save(user, payload.jobs)
    except RedisError as exc:
        raise _history_unavailable() from exc
    return _payload(kept)


@router.post("/jobs")
def add_job(
    entry: JobHistoryEntry,
    user_id: str | None = Header(default=None, alias="X-User-Id"),
    history=Depends(get_job_history_repository),
):
    user = _require_user(user_id)
    try:
        existing = [item for item in history.load(user) if item.jobId != entry.jobId]
        kept = history.save(user, [entry, *existing])
    except RedisError as exc:
        raise _history_unavailable() from exc
    return _payload(kept)
