import json
import logging
from datetime import datetime, timezone
from typing import Any

from utils.request_id import get_request_id

logger = logging.getLogger("api.stage")


def _norm(value: Any) -> Any:
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    return str(value)


def log_stage(
    *,
    job_id: str,
    stage: str,
    event: str,
    user: str | None = None,
    status: str | None = None,
    error: str | None = None,
    **extra: Any,
) -> None:
    """
    One structured line per step of a job's request, e.g.
    ``stage=STATUS_READ event=COMPLETED status=processing``.
    """
    payload = {
        "ts": datetime.now(timezone.utc).isoformat(),
        "job_id": job_id,
        "stage": stage,
        "event": event.upper(),
    }

    request_id = get_request_id()
    if request_id:
        payload["request_id"] = request_id
    if user:
        payload["user"] = user
    if status:
        payload["status"] = status
    if error:
        payload["error"] = error

    for key, value in extra.items():
        norm = _norm(value)
        if norm is not None:
            payload[key] = norm

    msg = json.dumps(payload, ensure_ascii=False)
    if error or payload["event"] == "FAILED":
        logger.error("stage_event %s", msg)
    else:
        logger.info("stage_event %s", msg)
