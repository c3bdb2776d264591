# User value: This file streams the original recording so playback can follow the transcript.
from fastapi import APIRouter, Depends
from fastapi.responses import RedirectResponse

from config import AUDIO_URL_TTL_MIN
from services.errors import InvalidJobIdError, StorageUnavailableError
from services.gcs import get_input_container
from services.transcripts import find_audio_name
from utils.http_errors import api_error, invalid_job_id, storage_unavailable

router = APIRouter()


@router.get("/audio/{job_id}")
def get_audio(job_id: str, inputs=Depends(get_input_container)):
    try:
        name = find_audio_name(inputs, job_id)
        if not name:
            raise api_error(404, "RESOURCE_NOT_FOUND", "Audio not found")
        url = inputs.signed_download_url(name, expires_minutes=AUDIO_URL_TTL_MIN)
    except InvalidJobIdError as exc:
        raise invalid_job_id(str(exc)) from exc
    except StorageUnavailableError as exc:
        raise storage_unavailable() from exc

    return RedirectResponse(url=url, status_code=302)
