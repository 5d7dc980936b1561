"""Declarative base and the columns shared by every record table."""

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class RecordMixin:
    """Identity, display name, tags and audit columns.

    Column names follow the record store's field names (``Id``, ``Name``,
    ``CreatedOn`` ...), attribute names stay snake_case.
    """

    id: Mapped[int] = mapped_column("Id", Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column("Name", String(255), nullable=False, index=True)
    tags: Mapped[Optional[str]] = mapped_column("Tags", Text, nullable=True)
    owner: Mapped[Optional[str]] = mapped_column("Owner", String(100), nullable=True)
    created_on: Mapped[Optional[datetime]] = mapped_column("CreatedOn", DateTime, nullable=True)
    created_by: Mapped[Optional[str]] = mapped_column("CreatedBy", String(100), nullable=True)
    modified_on: Mapped[Optional[datetime]] = mapped_column("ModifiedOn", DateTime, nullable=True)
    modified_by: Mapped[Optional[str]] = mapped_column("ModifiedBy", String(100), nullable=True)
    is_public: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
