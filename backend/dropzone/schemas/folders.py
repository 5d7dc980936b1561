"""Folder schemas."""

from datetime import datetime

from pydantic import Field

from dropzone.records.types import RecordId
from dropzone.schemas.common import RecordFields, RecordOut


class FolderRecord(RecordOut):
    """Folder as stored in the ``folder1`` table."""
    file_count: int = 0
    created_date: datetime | None = None
    parent_id: RecordId | None = None


class FolderCreate(RecordFields):
    """Client-settable folder fields."""
    file_count: int | None = Field(default=None, ge=0)
    created_date: datetime | None = None
    parent_id: RecordId | None = None


class FolderUpdate(FolderCreate):
    """Same allow-list as creation; the id travels separately."""
