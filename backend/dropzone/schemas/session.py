"""Drive session schemas — view state, navigation, snapshot."""

from datetime import datetime

from pydantic import BaseModel

from dropzone.records.types import RecordId
from dropzone.schemas.files import FileRecord
from dropzone.schemas.folders import FolderRecord
from dropzone.schemas.uploads import UploadEntryOut


class OpenFolderRequest(BaseModel):
    folder_id: RecordId | None = None


class ViewUpdate(BaseModel):
    search_query: str | None = None
    sort_by: str | None = None
    view_mode: str | None = None


class NewFolderRequest(BaseModel):
    name: str


class Notification(BaseModel):
    level: str  # success, info, error
    message: str
    created_at: datetime


class SessionSnapshot(BaseModel):
    current_folder: FolderRecord | None = None
    breadcrumb: list[FolderRecord]
    search_query: str
    sort_by: str
    view_mode: str
    file_count: int
    folder_count: int
    files: list[FileRecord]
    folders: list[FolderRecord]
    selected: list[RecordId]
    uploads: list[UploadEntryOut]
