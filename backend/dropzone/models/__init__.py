"""SQLAlchemy ORM models for the local record store."""

from dropzone.models.base import Base
from dropzone.models.file import File
from dropzone.models.folder import Folder

TABLES = {
    File.__tablename__: File,
    Folder.__tablename__: Folder,
}

__all__ = [
    "Base",
    "File",
    "Folder",
    "TABLES",
]
