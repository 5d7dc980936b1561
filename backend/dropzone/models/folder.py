"""Folder record table."""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Integer
from sqlalchemy.orm import Mapped, mapped_column

from dropzone.models.base import Base, RecordMixin


class Folder(RecordMixin, Base):
    __tablename__ = "folder1"

    file_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    created_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    parent_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, index=True)

    def __repr__(self) -> str:
        return f"<Folder(id={self.id}, name='{self.name}', parent_id={self.parent_id})>"
