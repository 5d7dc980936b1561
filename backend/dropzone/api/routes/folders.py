"""Folder routes — CRUD, breadcrumb path and file count reconciliation."""

from fastapi import APIRouter, Depends, HTTPException

from dropzone.records import RecordId
from dropzone.schemas.folders import FolderCreate, FolderRecord, FolderUpdate
from dropzone.services import get_folder_service
from dropzone.services.folder_service import FolderService

router = APIRouter()


async def _require_folder(folder_id: RecordId, folders: FolderService) -> FolderRecord:
    folder = await folders.get_by_id(folder_id)
    if folder is None:
        raise HTTPException(404, f"Folder {folder_id} not found")
    return folder


@router.get("", response_model=list[FolderRecord])
async def list_folders(
    parent_id: RecordId | None = None,
    search: str = "",
    folders: FolderService = Depends(get_folder_service),
):
    """Subfolders of ``parent_id`` (root when omitted), by name."""
    return await folders.list(parent_id, search)


@router.get("/{folder_id}", response_model=FolderRecord)
async def get_folder(folder_id: RecordId, folders: FolderService = Depends(get_folder_service)):
    return await _require_folder(folder_id, folders)


@router.get("/{folder_id}/path", response_model=list[FolderRecord])
async def folder_path(folder_id: RecordId, folders: FolderService = Depends(get_folder_service)):
    """Breadcrumb from the root down to this folder."""
    await _require_folder(folder_id, folders)
    return await folders.path(folder_id)


@router.post("", response_model=FolderRecord, status_code=201)
async def create_folder(body: FolderCreate, folders: FolderService = Depends(get_folder_service)):
    return await folders.create(body)


@router.patch("/{folder_id}", response_model=FolderRecord)
async def update_folder(
    folder_id: RecordId,
    body: FolderUpdate,
    folders: FolderService = Depends(get_folder_service),
):
    await _require_folder(folder_id, folders)
    return await folders.update(folder_id, body)


@router.delete("/{folder_id}")
async def delete_folder(folder_id: RecordId, folders: FolderService = Depends(get_folder_service)):
    """Delete an empty folder; non-empty folders are rejected with 422."""
    await _require_folder(folder_id, folders)
    return {"deleted": await folders.delete(folder_id)}


@router.post("/{folder_id}/sync-count", response_model=FolderRecord)
async def sync_folder_count(
    folder_id: RecordId,
    folders: FolderService = Depends(get_folder_service),
):
    await _require_folder(folder_id, folders)
    return await folders.sync_file_count(folder_id)
