"""API route registration."""

from fastapi import APIRouter

from dropzone.api.routes import files, folders, health, session, uploads

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(files.router, prefix="/files", tags=["files"])
api_router.include_router(folders.router, prefix="/folders", tags=["folders"])
api_router.include_router(uploads.router, prefix="/uploads", tags=["uploads"])
api_router.include_router(session.router, prefix="/session", tags=["session"])
