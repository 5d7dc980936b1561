"""File schemas — stored record, allow-listed writes, batch requests."""

from datetime import datetime

from pydantic import BaseModel, Field, computed_field, field_validator

from dropzone.records.types import RecordId
from dropzone.schemas.common import IdBatch, RecordFields, RecordOut, check_tags
from dropzone.utils.formatting import file_icon, format_file_size


class FileRecord(RecordOut):
    """File as stored in the ``file1`` table."""
    size: int = 0
    mime_type: str | None = Field(default=None, alias="type")
    upload_date: datetime | None = None
    last_modified: datetime | None = None
    url: str | None = None
    thumbnail_url: str | None = None
    folder_id: RecordId | None = None
    upload_progress: int | None = None  # transient, never persisted

    @computed_field
    @property
    def size_label(self) -> str:
        return format_file_size(self.size)

    @computed_field
    @property
    def icon(self) -> str:
        return file_icon(self.mime_type)


class FileCreate(RecordFields):
    """Client-settable file fields."""
    size: int | None = Field(default=None, ge=0)
    mime_type: str | None = Field(default=None, alias="type")
    upload_date: datetime | None = None
    last_modified: datetime | None = None
    url: str | None = None
    thumbnail_url: str | None = None
    folder_id: RecordId | None = None


class FileUpdate(FileCreate):
    """Same allow-list as creation; the id travels separately."""


class FileMoveRequest(IdBatch):
    folder_id: RecordId | None = None


class FileDeleteRequest(IdBatch):
    pass


class FileTagsRequest(BaseModel):
    tags: list[str]

    @field_validator("tags")
    @classmethod
    def _check_tags(cls, value: list[str]) -> list[str]:
        return check_tags(value)
