# User value: This file tells users whether their recording is queued, done, or failed, using only what is in storage.
"""
Job status derived from object-store contents.

There is no job table. A job is ``completed`` once the worker has written its
completion marker to the outputs container, ``failed`` once it has written a
failure marker instead, ``processing`` while only the uploaded audio exists in
the inputs container, and ``not_found`` otherwise.

Outputs are probed before inputs. This is only correct because input objects
are never deleted after completion; if they were, a finished job would still
resolve correctly but a job whose input was removed before completion would
regress from ``processing`` to ``not_found``.
"""
import json
import logging
import math
import re
from typing import Iterable, Optional, Protocol

from schemas.job_contract import (
    AUDIO_EXTENSIONS,
    COMPLETION_MARKER_SUFFIX,
    FAILURE_MARKER_SUFFIX,
    JOB_STATUS_COMPLETED,
    JOB_STATUS_FAILED,
    JOB_STATUS_NOT_FOUND,
    JOB_STATUS_PROCESSING,
)
from schemas.responses import JobStatusResponse
from services.errors import InvalidJobIdError, MalformedMetadataError

logger = logging.getLogger("api.status_resolver")

_EXTENSION_RE = re.compile(r"\.(%s)$" % "|".join(AUDIO_EXTENSIONS), re.IGNORECASE)


class Container(Protocol):
    def list_names(self, prefix: str) -> list[str]: ...

    def read_bytes(self, name: str) -> bytes: ...

    def exists(self, name: str) -> bool: ...


def normalize_job_id(raw: Optional[str]) -> str:
    """Accept either ``abc123`` or ``abc123.mp3`` and return ``abc123``."""
    value = str(raw or "").strip()
    value = _EXTENSION_RE.sub("", value)
    if not value:
        raise InvalidJobIdError("Job ID required")
    return value


def first_with_suffix(names: Iterable[str], suffix: str) -> Optional[str]:
    matches = sorted(name for name in names if name.endswith(suffix))
    return matches[0] if matches else None


def _load_json_object(container: Container, name: str) -> dict:
    raw = container.read_bytes(name)
    try:
        data = json.loads(raw)
    except (TypeError, ValueError) as exc:
        raise MalformedMetadataError(f"{name} is not valid JSON") from exc
    if not isinstance(data, dict):
        raise MalformedMetadataError(f"{name} is not a JSON object")
    return data


def _number(value):
    # seconds: finite and non-negative, anything else is treated as unknown
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value) or value < 0:
        return None
    return value


def read_completion_metadata(container: Container, name: str) -> dict:
    """
    Best-effort (duration, processing_time) from a completion marker.

    The marker may be mid-write while the worker uploads it; any read or parse
    problem yields empty metadata rather than an error.
    """
    try:
        data = _load_json_object(container, name)
    except Exception as exc:
        logger.warning("completion_marker_unreadable name=%s error=%s: %s", name, exc.__class__.__name__, exc)
        return {}

    meta = {}
    duration = _number(data.get("duration"))
    if duration is not None:
        meta["audioDuration"] = duration
    processing_time = _number(data.get("processing_time"))
    if processing_time is not None:
        meta["processingTime"] = processing_time
    return meta


def read_failure_reason(container: Container, name: str) -> Optional[str]:
    try:
        data = _load_json_object(container, name)
    except Exception as exc:
        logger.warning("failure_marker_unreadable name=%s error=%s: %s", name, exc.__class__.__name__, exc)
        return None

    reason = str(data.get("error") or data.get("error_message") or data.get("error_code") or "").strip()
    return reason or None


def resolve_job_status(job_id: Optional[str], *, inputs: Container, outputs: Container) -> JobStatusResponse:
    """
    Derive the current status of ``job_id`` from the two containers.

    Raises InvalidJobIdError for a blank id. Listing failures propagate
    unchanged (StorageUnavailableError from the GCS adapter); nothing is
    retried here.
    """
    base = normalize_job_id(job_id)

    output_names = outputs.list_names(base)

    marker = first_with_suffix(output_names, COMPLETION_MARKER_SUFFIX)
    if marker:
        meta = read_completion_metadata(outputs, marker)
        return JobStatusResponse(jobId=base, status=JOB_STATUS_COMPLETED, **meta)

    failure = first_with_suffix(output_names, FAILURE_MARKER_SUFFIX)
    if failure:
        return JobStatusResponse(
            jobId=base,
            status=JOB_STATUS_FAILED,
            error=read_failure_reason(outputs, failure),
        )

    if inputs.list_names(base):
        return JobStatusResponse(jobId=base, status=JOB_STATUS_PROCESSING)

    return JobStatusResponse(jobId=base, status=JOB_STATUS_NOT_FOUND)
