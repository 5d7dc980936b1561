"""Folder service — folder1 table, parent chain checks, cached file counts."""

from __future__ import annotations

import logging

from dropzone.exceptions import BackendError, ValidationError
from dropzone.records import FetchParams, FilterOperator, Record, RecordId, WhereCondition
from dropzone.schemas.common import RecordFields
from dropzone.schemas.folders import FolderCreate, FolderRecord, FolderUpdate
from dropzone.services.entity_service import EntityService, utcnow

logger = logging.getLogger(__name__)

FOLDER_TABLE = "folder1"
FILE_TABLE = "file1"

FOLDER_FIELDS = (
    "Name", "Tags", "Owner", "CreatedOn", "CreatedBy", "ModifiedOn", "ModifiedBy",
    "file_count", "created_date", "is_public", "parent_id",
)


class FolderService(EntityService[FolderRecord]):
    """CRUD for folders.

    Writes reject unknown parents and parent cycles. Deletes are rejected
    while a folder still holds files or subfolders.
    """

    table = FOLDER_TABLE
    label = "folder"
    all_fields = FOLDER_FIELDS
    parent_field = "parent_id"
    record_model = FolderRecord
    create_model = FolderCreate
    update_model = FolderUpdate

    def _apply_defaults(self, record: Record) -> None:
        if not record.get("created_date"):
            record["created_date"] = utcnow()
        if record.get("is_public") is None:
            record["is_public"] = False
        if not record.get("file_count"):
            record["file_count"] = 0

    async def _validate_write(self, data: RecordFields, record_id: RecordId | None = None) -> None:
        parent_id = getattr(data, "parent_id", None)
        if "parent_id" not in data.model_fields_set or parent_id is None:
            return
        if record_id is not None and parent_id == record_id:
            raise ValidationError(f"Folder {record_id} cannot be its own parent")
        chain = await self.path(parent_id)
        if not chain:
            raise ValidationError(f"Parent folder {parent_id} does not exist")
        if record_id is not None and any(f.id == record_id for f in chain):
            raise ValidationError(
                f"Moving folder {record_id} under {parent_id} would create a cycle"
            )

    async def _before_delete(self, ids: list[RecordId]) -> None:
        for folder_id in ids:
            if await self.list(folder_id):
                raise ValidationError(f"Folder {folder_id} still contains subfolders")
            if await self.count_files(folder_id):
                raise ValidationError(f"Folder {folder_id} still contains files")

    async def path(self, folder_id: RecordId) -> list[FolderRecord]:
        """Breadcrumb from the root down to ``folder_id`` (empty if unknown)."""
        chain: list[FolderRecord] = []
        seen: set[RecordId] = set()
        current: RecordId | None = folder_id
        while current is not None:
            if current in seen:
                raise ValidationError(f"Folder {folder_id} has a cyclic parent chain")
            seen.add(current)
            folder = await self.get_by_id(current)
            if folder is None:
                if current != folder_id:
                    logger.warning("Folder %s points at missing parent %s", folder_id, current)
                break
            chain.append(folder)
            current = folder.parent_id
        chain.reverse()
        return chain

    async def count_files(self, folder_id: RecordId) -> int:
        """Derived file count, queried from the file table."""
        try:
            params = FetchParams(
                fields=["folder_id"],
                where=[WhereCondition(
                    field_name="folder_id",
                    operator=FilterOperator.EXACT_MATCH,
                    values=[folder_id],
                )],
            )
            response = await self._client.fetch_records(FILE_TABLE, params)
            if not response.success:
                raise BackendError(response.message or "Failed to count files")
            return len(response.data or [])
        except Exception as e:
            logger.error("Error counting files in folder %s: %s", folder_id, e)
            raise

    async def sync_file_count(self, folder_id: RecordId) -> FolderRecord:
        """Overwrite the cached ``file_count`` with the derived count."""
        count = await self.count_files(folder_id)
        folder = await self.update(folder_id, {"file_count": count})
        logger.debug("Folder %s file_count -> %d", folder_id, count)
        return folder
