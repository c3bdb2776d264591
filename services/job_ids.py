# User value: This file names each upload so it can be found again in storage by its job id.
import os
import random
import re
import string
from datetime import datetime, timezone

from schemas.job_contract import AUDIO_EXTENSIONS, DEFAULT_AUDIO_EXTENSION

_SUFFIX_ALPHABET = string.ascii_lowercase + string.digits
_SUFFIX_LEN = 8

_rng = random.SystemRandom()


def new_job_id(now: datetime | None = None, suffix: str | None = None) -> str:
    """Return ``YYYYMMDD_HHMMSS_xxxxxxxx`` in UTC, e.g. ``20260208_222853_ab12cd34``."""
    now = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
    if suffix is None:
        suffix = "".join(_rng.choice(_SUFFIX_ALPHABET) for _ in range(_SUFFIX_LEN))
    return f"{now:%Y%m%d}_{now:%H%M%S}_{suffix}"


def upload_extension(filename: str | None) -> str:
    base = os.path.basename(str(filename or ""))
    parts = base.split(".")
    if len(parts) < 2:
        return DEFAULT_AUDIO_EXTENSION
    ext = re.sub(r"[^a-z0-9]", "", parts[-1].lower())
    return ext or DEFAULT_AUDIO_EXTENSION


def input_blob_name(job_id: str, filename: str | None) -> str:
    return f"{job_id}.{upload_extension(filename)}"


def is_supported_extension(ext: str) -> bool:
    # names outside this list are invisible to status and playback lookups
    return ext in AUDIO_EXTENSIONS
