"""File routes — CRUD, batch delete, move and tagging."""

from fastapi import APIRouter, Depends, HTTPException

from dropzone.records import RecordId
from dropzone.schemas.files import (
    FileCreate,
    FileDeleteRequest,
    FileMoveRequest,
    FileRecord,
    FileTagsRequest,
    FileUpdate,
)
from dropzone.services import get_file_service
from dropzone.services.file_service import FileService

router = APIRouter()


async def _require_file(file_id: RecordId, files: FileService) -> FileRecord:
    record = await files.get_by_id(file_id)
    if record is None:
        raise HTTPException(404, f"File {file_id} not found")
    return record


@router.get("", response_model=list[FileRecord])
async def list_files(
    folder_id: RecordId | None = None,
    search: str = "",
    files: FileService = Depends(get_file_service),
):
    """Files in a folder (root when ``folder_id`` is omitted), by name."""
    return await files.list(folder_id, search)


@router.get("/{file_id}", response_model=FileRecord)
async def get_file(file_id: RecordId, files: FileService = Depends(get_file_service)):
    return await _require_file(file_id, files)


@router.post("", response_model=FileRecord, status_code=201)
async def create_file(body: FileCreate, files: FileService = Depends(get_file_service)):
    return await files.create(body)


@router.patch("/{file_id}", response_model=FileRecord)
async def update_file(
    file_id: RecordId,
    body: FileUpdate,
    files: FileService = Depends(get_file_service),
):
    await _require_file(file_id, files)
    return await files.update(file_id, body)


@router.put("/{file_id}/tags", response_model=FileRecord)
async def set_file_tags(
    file_id: RecordId,
    body: FileTagsRequest,
    files: FileService = Depends(get_file_service),
):
    await _require_file(file_id, files)
    return await files.set_tags(file_id, body.tags)


@router.delete("/{file_id}")
async def delete_file(file_id: RecordId, files: FileService = Depends(get_file_service)):
    return {"deleted": await files.delete(file_id), "count": 1}


@router.post("/delete")
async def delete_files(body: FileDeleteRequest, files: FileService = Depends(get_file_service)):
    """Batch delete with a single store call."""
    return {"deleted": await files.delete(body.ids), "count": len(body.ids)}


@router.post("/move", response_model=list[FileRecord])
async def move_files(body: FileMoveRequest, files: FileService = Depends(get_file_service)):
    return await files.move(body.ids, body.folder_id)
