"""Simulated upload routes."""

from fastapi import APIRouter, Depends

from dropzone.schemas.uploads import UploadEntryOut, UploadRequest
from dropzone.services import get_session
from dropzone.services.session import DriveSession

router = APIRouter()


@router.post("", response_model=list[UploadEntryOut], status_code=202)
async def start_uploads(body: UploadRequest, session: DriveSession = Depends(get_session)):
    """Queue uploads into the session's current folder."""
    return [entry.to_out() for entry in session.upload(body.files)]


@router.get("")
async def upload_status(session: DriveSession = Depends(get_session)):
    """Progress map plus per-upload state."""
    return {
        "progress": session.pipeline.progress,
        "uploads": [entry.to_out() for entry in session.pipeline.entries()],
    }
