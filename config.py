import os
from dotenv import load_dotenv

load_dotenv()

REDIS_URL = os.environ.get("REDIS_URL", "redis://localhost:6379/0")
QUEUE_NAME = os.environ.get("QUEUE_NAME", "audio-jobs")
ENQUEUE_GUARD_TTL_SEC = int(os.environ.get("ENQUEUE_GUARD_TTL_SEC", str(24 * 3600)))

GCS_INPUT_BUCKET = os.environ.get("GCS_INPUT_BUCKET", "audio-input")
GCS_OUTPUT_BUCKET = os.environ.get("GCS_OUTPUT_BUCKET", "transcripts")

UPLOAD_URL_TTL_MIN = int(os.environ.get("UPLOAD_URL_TTL_MIN", "60"))
AUDIO_URL_TTL_MIN = int(os.environ.get("AUDIO_URL_TTL_MIN", "60"))
JOB_HISTORY_LIMIT = int(os.environ.get("JOB_HISTORY_LIMIT", "20"))
