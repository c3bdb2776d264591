# User value: This file remembers each user's recent uploads so they can reopen past transcripts.
import json
import logging
from datetime import datetime, timezone
from typing import List, Optional

import redis
from pydantic import ValidationError

from config import JOB_HISTORY_LIMIT, REDIS_URL
from schemas.requests import JobHistoryEntry
from schemas.responses import JobStatusResponse
from utils.status_machine import merge_status

logger = logging.getLogger("api.job_history")

_r = None


def _get_redis():
    global _r
    if _r is None:
        _r = redis.Redis.from_url(REDIS_URL, decode_responses=True)
    return _r


def history_key(user_id: str) -> str:
    return f"job_history:{user_id}"


class JobHistoryRepository:
    """
    Per-user list of recent jobs, newest first.

    Stored as one JSON document per user; writes replace the whole list.
    """

    def __init__(self, client=None, *, limit: int = JOB_HISTORY_LIMIT):
        self._client = client
        self.limit = max(1, int(limit))

    @property
    def client(self):
        return self._client if self._client is not None else _get_redis()

    def load(self, user_id: str) -> List[JobHistoryEntry]:
        raw = self.client.get(history_key(user_id))
        if not raw:
            return []
        try:
            items = json.loads(raw)
            if not isinstance(items, list):
                raise ValueError("history is not a list")
        except ValueError as exc:
            # same as a browser dropping an unreadable saved list
            logger.warning("job_history_unreadable user=%s error=%s: %s", user_id, exc.__class__.__name__, exc)
            return []

        entries = []
        for item in items:
            try:
                entries.append(JobHistoryEntry.model_validate(item))
            except ValidationError as exc:
                logger.warning("job_history_entry_skipped user=%s error=%s", user_id, exc)
        return entries

    def save(self, user_id: str, entries: List[JobHistoryEntry]) -> List[JobHistoryEntry]:
        kept = list(entries)[: self.limit]
        payload = json.dumps([entry.model_dump(exclude_none=True) for entry in kept])
        self.client.set(history_key(user_id), payload)
        return kept

    def record_upload(
        self,
        user_id: str,
        job_id: str,
        original_name: Optional[str] = None,
        *,
        now: Optional[datetime] = None,
    ) -> List[JobHistoryEntry]:
        entry = JobHistoryEntry(
            jobId=job_id,
            originalName=original_name,
            status="queued",
            createdAt=(now or datetime.now(timezone.utc)).isoformat(),
        )
        existing = [item for item in self.load(user_id) if item.jobId != job_id]
        return self.save(user_id, [entry, *existing])

    def apply_status(self, user_id: str, status: JobStatusResponse) -> Optional[JobHistoryEntry]:
        """Merge a status observation into the user's entry for that job, if any."""
        entries = self.load(user_id)
        for idx, entry in enumerate(entries):
            if entry.jobId != status.jobId:
                continue

            merged = merge_status(entry.status, status.status, context=f"history:{user_id}")
            update = {"status": merged or entry.status}
            if merged == status.status:
                if status.audioDuration is not None:
                    update["audioDuration"] = status.audioDuration
                if status.processingTime is not None:
                    update["processingTime"] = status.processingTime

            try:
                updated = JobHistoryEntry.model_validate({**entry.model_dump(), **update})
            except ValidationError as exc:
                logger.warning("job_history_metadata_rejected user=%s job_id=%s error=%s", user_id, entry.jobId, exc)
                updated = entry.model_copy(update={"status": update["status"]})
            if updated != entry:
                entries[idx] = updated
                self.save(user_id, entries)
            return updated
        return None


def get_job_history_repository() -> JobHistoryRepository:
    return JobHistoryRepository()
