# User value: This file hands each uploaded recording to the transcription worker exactly once.
import json
import logging
from datetime import datetime, timezone

import redis

from config import ENQUEUE_GUARD_TTL_SEC, QUEUE_NAME, REDIS_URL
from schemas.job_contract import TRANSCRIBE_OPTION_BOTH_SEPARATE, TRANSCRIBE_OPTION_ENGLISH_ONLY

logger = logging.getLogger("api.queue")

# 🔑 SINGLE CLIENT INSTANCE
r = redis.Redis.from_url(
    REDIS_URL,
    decode_responses=True,
    socket_keepalive=True,
    socket_connect_timeout=2,
    retry_on_timeout=True,
)


def enqueue_guard_key(job_id: str) -> str:
    return f"job_enqueue_once:{job_id}"


def build_job_message(
    *,
    job_id: str,
    blob_name: str,
    input_container: str,
    output_container: str,
    original_name: str | None = None,
    interpreter_mode: bool = False,
    english_only: bool = False,
    now: datetime | None = None,
) -> dict:
    event_time = (now or datetime.now(timezone.utc)).isoformat()
    return {
        "blob_name": blob_name,
        # worker resolves the blob from blob_name + container
        "blob_url": "",
        "container": input_container,
        "output_container": output_container,
        "job_id": job_id,
        "original_name": original_name or blob_name,
        "interpreter_present": bool(interpreter_mode),
        "transcribe_option": TRANSCRIBE_OPTION_ENGLISH_ONLY if english_only else TRANSCRIBE_OPTION_BOTH_SEPARATE,
        "event_time": event_time,
    }


def publish_job(job_id: str, message: dict, *, client=None, queue_name: str = QUEUE_NAME) -> bool:
    """
    Push ``message`` onto the worker queue unless this job was already pushed.

    Returns False when the enqueue guard says the job is already queued.
    """
    client = client or r

    # 1️⃣ Claim the job
    claimed = client.set(enqueue_guard_key(job_id), "1", nx=True, ex=ENQUEUE_GUARD_TTL_SEC)
    if not claimed:
        logger.info("queue_publish_skipped job_id=%s queue=%s reason=duplicate", job_id, queue_name)
        return False

    # 2️⃣ Push job to queue
    try:
        client.rpush(queue_name, json.dumps(message))
    except Exception:
        # release the claim so the client can retry
        client.delete(enqueue_guard_key(job_id))
        raise
    return True
