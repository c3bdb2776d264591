# User value: This file publishes the status vocabulary so the UI and worker agree on names.
from fastapi import APIRouter

from schemas.job_contract import (
    AUDIO_EXTENSIONS,
    COMPLETION_MARKER_SUFFIX,
    CONTRACT_VERSION,
    FAILURE_MARKER_SUFFIX,
    JOB_STATUSES,
    QUEUE_MESSAGE_FIELDS,
    STATUS_FIELDS,
    TERMINAL_STATUSES,
    TRANSCRIBE_OPTIONS,
)

router = APIRouter()


@router.get("/contract/job-status")
# User value: keeps job/status fields consistent across upload, polling and editor views.
def job_status_contract():
    return {
        "contract_version": CONTRACT_VERSION,
        "job_statuses": list(JOB_STATUSES),
        "terminal_statuses": list(TERMINAL_STATUSES),
        "status_fields": list(STATUS_FIELDS),
        "completion_marker_suffix": COMPLETION_MARKER_SUFFIX,
        "failure_marker_suffix": FAILURE_MARKER_SUFFIX,
        "audio_extensions": list(AUDIO_EXTENSIONS),
        "transcribe_options": list(TRANSCRIBE_OPTIONS),
        "queue_message_fields": list(QUEUE_MESSAGE_FIELDS),
    }
