# User value: This file keeps a user's job list from flipping a finished job back to "processing".
import logging
from typing import Optional

from schemas.job_contract import (
    JOB_STATUS_COMPLETED,
    JOB_STATUS_FAILED,
    JOB_STATUS_NOT_FOUND,
    JOB_STATUS_PROCESSING,
    JOB_STATUSES,
    TERMINAL_STATUSES,
)

logger = logging.getLogger("api.status_machine")

# "queued" is what the upload flow records before the first poll.
_ALIASES = {
    "queued": JOB_STATUS_PROCESSING,
}

_ALLOWED = {
    None: set(JOB_STATUSES),
    JOB_STATUS_NOT_FOUND: set(JOB_STATUSES),
    JOB_STATUS_PROCESSING: {
        JOB_STATUS_PROCESSING,
        JOB_STATUS_COMPLETED,
        JOB_STATUS_FAILED,
    },
    JOB_STATUS_COMPLETED: {JOB_STATUS_COMPLETED},
    JOB_STATUS_FAILED: {JOB_STATUS_FAILED},
}


def _norm(status: Optional[str]) -> Optional[str]:
    if status is None:
        return None
    s = str(status).strip().lower()
    s = _ALIASES.get(s, s)
    return s or None


def is_terminal(status: Optional[str]) -> bool:
    return _norm(status) in TERMINAL_STATUSES


def is_allowed_transition(current: Optional[str], target: Optional[str]) -> bool:
    target_n = _norm(target)
    if not target_n:
        return True
    current_n = _norm(current)
    allowed = _ALLOWED.get(current_n, _ALLOWED[None])
    return target_n in allowed


def merge_status(current: Optional[str], observed: Optional[str], *, context: str = "") -> Optional[str]:
    """
    Status to keep when ``observed`` is reported for a job last seen as ``current``.

    Terminal statuses never change and ``not_found`` never overwrites a known
    status (storage listings can lag behind the upload).
    """
    current_n = _norm(current)
    observed_n = _norm(observed)

    if not observed_n:
        return current_n
    if observed_n == JOB_STATUS_NOT_FOUND and current_n:
        return current_n
    if not is_allowed_transition(current_n, observed_n):
        logger.warning(
            "status_transition_blocked context=%s current=%s target=%s",
            context,
            current_n,
            observed_n,
        )
        return current_n
    return observed_n
