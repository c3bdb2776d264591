import os
from datetime import datetime, timezone

from fastapi import APIRouter
from redis.exceptions import RedisError

from services.queue import r
from utils.http_errors import api_error

router = APIRouter(tags=["health"])


@router.get("/health")
def health():
    try:
        r.ping()
    except RedisError as exc:
        raise api_error(503, "QUEUE_UNAVAILABLE", "Redis not reachable") from exc
    return {
        "status": "OK",
        "redis": "connected"
    }


@router.get("/version")
def version():
    return {
        "ok": True,
        "sha": os.getenv("GIT_COMMIT_SHA") or None,
        "message": "version endpoint is live",
        "time": datetime.now(timezone.utc).isoformat(),
    }
