"""Simulated upload schemas."""

from datetime import datetime

from pydantic import BaseModel, Field

from dropzone.records.types import RecordId


class UploadFile(BaseModel):
    """Client-side description of a dropped file."""
    name: str = Field(min_length=1)
    size: int = Field(default=0, ge=0)
    type: str = ""
    last_modified: datetime | None = None
    url: str | None = None
    thumbnail_url: str | None = None


class UploadRequest(BaseModel):
    files: list[UploadFile] = Field(min_length=1)


class UploadEntryOut(BaseModel):
    id: str
    name: str
    state: str
    progress: float
    folder_id: RecordId | None = None
    file_id: RecordId | None = None
    error: str | None = None
