"""Drive session routes — navigation, view state, selection."""

from fastapi import APIRouter, Depends

from dropzone.records import RecordId
from dropzone.schemas.folders import FolderRecord
from dropzone.schemas.session import (
    NewFolderRequest,
    Notification,
    OpenFolderRequest,
    SessionSnapshot,
    ViewUpdate,
)
from dropzone.services import get_session
from dropzone.services.session import DriveSession

router = APIRouter()


@router.get("", response_model=SessionSnapshot)
async def session_snapshot(session: DriveSession = Depends(get_session)):
    return session.snapshot()


@router.post("/open", response_model=SessionSnapshot)
async def open_folder(body: OpenFolderRequest, session: DriveSession = Depends(get_session)):
    """Navigate to a folder (``null`` for the root)."""
    await session.open_folder(body.folder_id)
    return session.snapshot()


@router.put("/view", response_model=SessionSnapshot)
async def update_view(body: ViewUpdate, session: DriveSession = Depends(get_session)):
    session.set_view(body.search_query, body.sort_by, body.view_mode)
    return session.snapshot()


@router.post("/selection/{file_id}")
async def toggle_selection(file_id: RecordId, session: DriveSession = Depends(get_session)):
    return {"file_id": file_id, "selected": session.toggle_selection(file_id)}


@router.post("/delete-selected")
async def delete_selected(session: DriveSession = Depends(get_session)):
    return {"deleted": await session.delete_selected()}


@router.post("/folders", response_model=FolderRecord, status_code=201)
async def create_folder(body: NewFolderRequest, session: DriveSession = Depends(get_session)):
    """Create a folder inside the current folder."""
    return await session.create_folder(body.name)


@router.get("/notifications", response_model=list[Notification])
async def notifications(session: DriveSession = Depends(get_session)):
    return list(session.notifications)
