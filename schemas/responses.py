# User value: This file defines the shapes users see for status, uploads and transcripts.
from pydantic import BaseModel, Field
from typing import List, Optional, Union


class Segment(BaseModel):
    # User value: one timed piece of text so playback can highlight the word being spoken.
    ts: str = ""
    start: float = Field(..., ge=0)
    end: float = Field(..., ge=0)
    text: str = ""


class Paragraph(BaseModel):
    segments: List[Segment] = Field(default_factory=list)
    end_ts: str = ""


class JobStatusResponse(BaseModel):
    # User value: shares the derived job state so the UI knows when to stop polling.
    jobId: str
    status: str
    audioDuration: Optional[Union[int, float]] = None
    processingTime: Optional[Union[int, float]] = None
    error: Optional[str] = None

    def to_payload(self) -> dict:
        # Unknown metadata is omitted rather than sent as null.
        return self.model_dump(exclude_none=True)


class UploadUrlResponse(BaseModel):
    uploadUrl: str
    jobId: str
    blobName: str
    containerName: str
    expiresOn: str


class UploadCompleteResponse(BaseModel):
    status: str = "queued"
    jobId: str
    queue: str
    reused: bool = False
