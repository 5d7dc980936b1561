"""Health check."""

from fastapi import APIRouter

from dropzone import __version__
from dropzone.config import settings
from dropzone.schemas.system import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Lightweight connectivity check."""
    return HealthResponse(version=__version__, record_backend=settings.record_backend)


@router.get("/ping")
async def ping():
    """Ultra-lightweight ping."""
    return {"status": "ok"}
