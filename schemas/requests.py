# User value: This file validates what the upload UI sends so bad requests fail early with clear messages.
from pydantic import BaseModel, Field
from typing import List, Optional

from schemas.responses import Paragraph


class UploadUrlRequest(BaseModel):
    filename: str = ""
    contentType: Optional[str] = None
    interpreterMode: bool = False
    englishOnly: bool = False


class UploadCompleteRequest(BaseModel):
    jobId: str = ""
    blobName: str = ""
    interpreterMode: bool = False
    englishOnly: bool = False
    originalName: Optional[str] = None


class TranscriptUpdateRequest(BaseModel):
    # User value: carries the user's edited paragraphs back to the stored transcript.
    paragraphs: List[Paragraph] = Field(default_factory=list)


class JobHistoryEntry(BaseModel):
    jobId: str = Field(..., min_length=1)
    originalName: Optional[str] = None
    status: str = "processing"
    createdAt: Optional[str] = None
    audioDuration: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False)
    processingTime: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False)


class JobHistoryUpdateRequest(BaseModel):
    jobs: List[JobHistoryEntry] = Field(default_factory=list)
