# User value: This file loads and saves the transcript users read and correct in the editor.
import json
import logging
from datetime import datetime, timezone
from typing import List, Optional

from schemas.job_contract import AUDIO_EXTENSIONS, COMPLETION_MARKER_SUFFIX
from schemas.responses import Paragraph
from services.errors import MalformedMetadataError
from services.status_resolver import Container, first_with_suffix, normalize_job_id

logger = logging.getLogger("api.transcripts")


def find_transcript_name(outputs: Container, job_id: str) -> Optional[str]:
    return first_with_suffix(outputs.list_names(normalize_job_id(job_id)), COMPLETION_MARKER_SUFFIX)


def find_audio_name(inputs: Container, job_id: str) -> Optional[str]:
    base = normalize_job_id(job_id)
    suffixes = tuple(f".{ext}" for ext in AUDIO_EXTENSIONS)
    matches = sorted(name for name in inputs.list_names(base) if name.lower().endswith(suffixes))
    return matches[0] if matches else None


def load_transcript(outputs: Container, name: str) -> dict:
    raw = outputs.read_bytes(name)
    try:
        data = json.loads(raw)
    except (TypeError, ValueError) as exc:
        raise MalformedMetadataError(f"{name} is not valid JSON") from exc
    if not isinstance(data, dict):
        raise MalformedMetadataError(f"{name} is not a JSON object")
    return data


def save_paragraphs(
    outputs,
    name: str,
    paragraphs: List[Paragraph],
    *,
    now: Optional[datetime] = None,
) -> dict:
    """
    Replace the transcript's paragraphs, keeping every other field the worker wrote.
    """
    data = load_transcript(outputs, name)
    data["paragraphs"] = [p.model_dump() for p in paragraphs]
    data["last_edited"] = (now or datetime.now(timezone.utc)).isoformat()
    outputs.write_json(name, data)
    logger.info("transcript_saved name=%s paragraphs=%s", name, len(paragraphs))
    return data
