"""File service — file1 table, folder reference checks, file_count reconciliation."""

from __future__ import annotations

import logging
from typing import Iterable, Union

from dropzone.exceptions import BackendError, ValidationError
from dropzone.records import FetchParams, FilterOperator, Record, RecordId, WhereCondition
from dropzone.schemas.common import RecordFields
from dropzone.schemas.files import FileCreate, FileRecord, FileUpdate
from dropzone.services.entity_service import EntityService, FieldsInput, utcnow
from dropzone.services.folder_service import FolderService

logger = logging.getLogger(__name__)

FILE_TABLE = "file1"

FILE_FIELDS = (
    "Name", "Tags", "Owner", "CreatedOn", "CreatedBy", "ModifiedOn", "ModifiedBy",
    "size", "type", "upload_date", "last_modified", "url", "thumbnail_url",
    "is_public", "folder_id",
)


class FileService(EntityService[FileRecord]):
    """CRUD for files.

    With a ``folder_service`` wired in, writes check that the target folder
    exists and every create/move/delete reconciles the affected folders'
    cached ``file_count``.
    """

    table = FILE_TABLE
    label = "file"
    all_fields = FILE_FIELDS
    parent_field = "folder_id"
    record_model = FileRecord
    create_model = FileCreate
    update_model = FileUpdate

    def __init__(self, client, folder_service: FolderService | None = None):
        super().__init__(client)
        self._folders = folder_service

    def _apply_defaults(self, record: Record) -> None:
        now = utcnow()
        if not record.get("upload_date"):
            record["upload_date"] = now
        if not record.get("last_modified"):
            record["last_modified"] = now
        if record.get("is_public") is None:
            record["is_public"] = False
        if not record.get("size"):
            record["size"] = 0

    async def _validate_write(self, data: RecordFields, record_id: RecordId | None = None) -> None:
        folder_id = getattr(data, "folder_id", None)
        if self._folders is None or folder_id is None:
            return
        if await self._folders.get_by_id(folder_id) is None:
            raise ValidationError(f"Folder {folder_id} does not exist")

    async def _folder_ids_of(self, ids: list[RecordId]) -> set[RecordId]:
        """Folders currently holding the given files."""
        params = FetchParams(
            fields=["folder_id"],
            where=[WhereCondition(
                field_name="Id",
                operator=FilterOperator.EXACT_MATCH,
                values=ids,
            )],
        )
        response = await self._client.fetch_records(self.table, params)
        if not response.success:
            raise BackendError(response.message or "Failed to look up file folders")
        return {r["folder_id"] for r in response.data or [] if r.get("folder_id") is not None}

    async def _sync_counts(self, folder_ids: Iterable[RecordId | None]) -> None:
        if self._folders is None:
            return
        # Best effort, the file write has already succeeded
        for folder_id in sorted({f for f in folder_ids if f is not None}):
            try:
                await self._folders.sync_file_count(folder_id)
            except Exception as e:
                logger.warning("file_count sync for folder %s failed: %s", folder_id, e)

    async def create(self, fields: FieldsInput) -> FileRecord:
        created = await super().create(fields)
        await self._sync_counts([created.folder_id])
        return created

    async def update(self, record_id: RecordId, fields: FieldsInput) -> FileRecord:
        data = self._parse(self.update_model, fields)
        moving = self._folders is not None and "folder_id" in data.model_fields_set
        previous = await self._folder_ids_of([record_id]) if moving else set()
        updated = await super().update(record_id, data)
        if moving:
            await self._sync_counts(previous | {updated.folder_id})
        return updated

    async def delete(self, ids: Union[RecordId, Iterable[RecordId]]) -> bool:
        record_ids = self._normalize_ids(ids)
        affected = set()
        if self._folders is not None and record_ids:
            affected = await self._folder_ids_of(record_ids)
        deleted = await super().delete(record_ids)
        await self._sync_counts(affected)
        return deleted

    async def move(self, ids: Iterable[RecordId], folder_id: RecordId | None) -> list[FileRecord]:
        """Move a batch of files into ``folder_id`` (root when None)."""
        try:
            record_ids = self._normalize_ids(ids)
            if not record_ids:
                raise ValidationError("No file ids given")
            await self._validate_write(FileUpdate(folder_id=folder_id))
            previous = await self._folder_ids_of(record_ids) if self._folders is not None else set()

            records = [{"Id": rid, "folder_id": folder_id} for rid in record_ids]
            response = await self._client.update_record(self.table, records)
            if not response.success:
                raise BackendError(response.message or "Failed to move files")
            failed = [r.message for r in response.results if not r.success]
            if failed or len(response.results) != len(record_ids):
                raise BackendError(f"Failed to move files: {failed}")
            moved = [self._to_model(r.data) for r in response.results]
            logger.info("Moved %d file(s) to folder %s", len(moved), folder_id)
        except Exception as e:
            logger.error("Error moving files to folder %s: %s", folder_id, e)
            raise

        await self._sync_counts(previous | {folder_id})
        return moved

    async def set_tags(self, record_id: RecordId, tags: list[str]) -> FileRecord:
        """Replace the tag set of one file."""
        return await self.update(record_id, {"Tags": tags})
