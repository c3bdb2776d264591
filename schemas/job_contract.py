# User value: This file keeps job status names and storage naming rules identical across API and worker.
CONTRACT_VERSION = "2026-10-19-status-v1"

JOB_STATUS_NOT_FOUND = "not_found"
JOB_STATUS_PROCESSING = "processing"
JOB_STATUS_COMPLETED = "completed"
JOB_STATUS_FAILED = "failed"

JOB_STATUSES = (
    JOB_STATUS_NOT_FOUND,
    JOB_STATUS_PROCESSING,
    JOB_STATUS_COMPLETED,
    JOB_STATUS_FAILED,
)

TERMINAL_STATUSES = (
    JOB_STATUS_COMPLETED,
    JOB_STATUS_FAILED,
)

# Output object written by the worker when a transcript is ready.
COMPLETION_MARKER_SUFFIX = ".paragraphs.json"
# Output object written by the worker when it gives up on a job.
FAILURE_MARKER_SUFFIX = ".error.json"

AUDIO_EXTENSIONS = ("mp3", "wav", "m4a", "mp4", "aac", "flac", "ogg", "webm", "opus", "wma")
DEFAULT_AUDIO_EXTENSION = "mp3"

TRANSCRIBE_OPTION_ENGLISH_ONLY = "english_only"
TRANSCRIBE_OPTION_BOTH_SEPARATE = "both_separate"

TRANSCRIBE_OPTIONS = (
    TRANSCRIBE_OPTION_ENGLISH_ONLY,
    TRANSCRIBE_OPTION_BOTH_SEPARATE,
)

QUEUE_MESSAGE_FIELDS = (
    "blob_name",
    "blob_url",
    "container",
    "output_container",
    "job_id",
    "original_name",
    "interpreter_present",
    "transcribe_option",
    "event_time",
)

STATUS_FIELDS = (
    "jobId",
    "status",
    "audioDuration",
    "processingTime",
    "error",
)
