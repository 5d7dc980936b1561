"""Drive session — navigation, view state, selection and uploads for one user."""

from __future__ import annotations

import logging
from collections import deque
from datetime import datetime, timezone
from typing import Any, Iterable

from dropzone.exceptions import ValidationError
from dropzone.records import RecordId
from dropzone.schemas.files import FileRecord
from dropzone.schemas.folders import FolderRecord
from dropzone.schemas.session import Notification, SessionSnapshot
from dropzone.schemas.uploads import UploadFile
from dropzone.services.browse import SORT_KEYS, VIEW_MODES, filter_and_sort_files, name_sort_key
from dropzone.services.file_service import FileService
from dropzone.services.folder_service import FolderService
from dropzone.services.upload_pipeline import UploadEntry, UploadPipeline

logger = logging.getLogger(__name__)


class DriveSession:
    """In-memory state container mirroring what the services return.

    Owns the upload pipeline: completed uploads are persisted through the
    file service and appended to ``files``.
    """

    def __init__(
        self,
        file_service: FileService,
        folder_service: FolderService,
        *,
        feed_size: int = 50,
        **pipeline_options: Any,
    ):
        self._files = file_service
        self._folders = folder_service
        self.files: list[FileRecord] = []
        self.folders: list[FolderRecord] = []
        self.breadcrumb: list[FolderRecord] = []
        self.current_folder: RecordId | None = None
        self.search_query = ""
        self.sort_by = "name"
        self.view_mode = "grid"
        self.selected: set[RecordId] = set()
        self.notifications: deque[Notification] = deque(maxlen=feed_size)

        self.pipeline = UploadPipeline(
            on_complete=self._persist_upload,
            notify=self.notify,
            **pipeline_options,
        )
        self.pipeline.add_listener(self._on_uploaded)

    def notify(self, level: str, message: str) -> None:
        self.notifications.append(Notification(
            level=level,
            message=message,
            created_at=datetime.now(timezone.utc),
        ))
        logger.info("[%s] %s", level, message)

    # -- navigation ------------------------------------------------------

    async def load(self) -> None:
        """Reload files, subfolders and breadcrumb for the current folder."""
        self.folders = await self._folders.list(self.current_folder)
        self.files = await self._files.list(self.current_folder)
        if self.current_folder is None:
            self.breadcrumb = []
        else:
            self.breadcrumb = await self._folders.path(self.current_folder)

    async def open_folder(self, folder_id: RecordId | None) -> None:
        if folder_id is not None and await self._folders.get_by_id(folder_id) is None:
            raise ValidationError(f"Folder {folder_id} does not exist")
        self.current_folder = folder_id
        self.selected = set()
        await self.load()

    def set_view(
        self,
        search_query: str | None = None,
        sort_by: str | None = None,
        view_mode: str | None = None,
    ) -> None:
        if sort_by is not None and sort_by not in SORT_KEYS:
            raise ValidationError(f"sort_by must be one of {SORT_KEYS}, got {sort_by!r}")
        if view_mode is not None and view_mode not in VIEW_MODES:
            raise ValidationError(f"view_mode must be one of {VIEW_MODES}, got {view_mode!r}")
        if search_query is not None:
            self.search_query = search_query
        if sort_by is not None:
            self.sort_by = sort_by
        if view_mode is not None:
            self.view_mode = view_mode

    @property
    def current_folder_info(self) -> FolderRecord | None:
        return self.breadcrumb[-1] if self.breadcrumb else None

    def visible_files(self) -> list[FileRecord]:
        return filter_and_sort_files(
            self.files, self.current_folder, self.search_query, self.sort_by
        )

    def visible_folders(self) -> list[FolderRecord]:
        children = [f for f in self.folders if f.parent_id == self.current_folder]
        return sorted(children, key=lambda f: name_sort_key(f.name))

    # -- selection & mutations -------------------------------------------

    def toggle_selection(self, file_id: RecordId) -> bool:
        """Flip selection of one loaded file; returns whether it is now selected."""
        if file_id in self.selected:
            self.selected.discard(file_id)
            return False
        if not any(f.id == file_id for f in self.files):
            logger.debug("Ignoring selection of file %s, not in the current folder", file_id)
            return False
        self.selected.add(file_id)
        return True

    async def delete_selected(self) -> int:
        """Delete every selected file in one batch; returns the count."""
        if not self.selected:
            return 0
        ids = sorted(self.selected)
        try:
            await self._files.delete(ids)
        except Exception as e:
            self.notify("error", f"Failed to delete {len(ids)} file(s): {e}")
            raise
        self.files = [f for f in self.files if f.id not in self.selected]
        self.selected = set()
        self.notify("success", f"{len(ids)} file(s) deleted successfully!")
        return len(ids)

    async def create_folder(self, name: str) -> FolderRecord:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Folder name is required")
        try:
            folder = await self._folders.create({"Name": name, "parent_id": self.current_folder})
        except Exception as e:
            self.notify("error", f'Failed to create folder "{name}": {e}')
            raise
        self.folders.append(folder)
        self.notify("success", f'Folder "{name}" created successfully!')
        return folder

    # -- uploads ---------------------------------------------------------

    def upload(self, files: Iterable[UploadFile]) -> list[UploadEntry]:
        """Start simulated uploads into the current folder."""
        return self.pipeline.start(files, self.current_folder)

    async def _persist_upload(self, entry: UploadEntry) -> FileRecord:
        return await self._files.create(entry.to_file_fields())

    def _on_uploaded(self, record: FileRecord) -> None:
        self.files.append(record)

    def snapshot(self) -> SessionSnapshot:
        files = self.visible_files()
        folders = self.visible_folders()
        return SessionSnapshot(
            current_folder=self.current_folder_info,
            breadcrumb=self.breadcrumb,
            search_query=self.search_query,
            sort_by=self.sort_by,
            view_mode=self.view_mode,
            file_count=len(files),
            folder_count=len(folders),
            files=files,
            folders=folders,
            selected=sorted(self.selected),
            uploads=[e.to_out() for e in self.pipeline.entries()],
        )
