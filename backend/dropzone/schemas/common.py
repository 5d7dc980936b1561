"""Fields shared by file and folder schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from dropzone.records.types import Record, RecordId


def split_tags(value: Any) -> list[str]:
    """Stored tags are a comma separated string; accept either form."""
    if value is None:
        return []
    if isinstance(value, str):
        return [t.strip() for t in value.split(",") if t.strip()]
    return check_tags([str(t) for t in value])


def check_tags(tags: list[str]) -> list[str]:
    """Strip tags and drop blanks. A comma inside a tag cannot be stored."""
    for tag in tags:
        if "," in tag:
            raise ValueError(f"Tag {tag!r} must not contain a comma")
    return [t.strip() for t in tags if t.strip()]


class RecordOut(BaseModel):
    """Identity, tags and audit fields common to every stored record."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: RecordId = Field(alias="Id")
    name: str = Field(alias="Name")
    tags: list[str] = Field(default_factory=list, alias="Tags")
    owner: str | None = Field(default=None, alias="Owner")
    created_on: datetime | None = Field(default=None, alias="CreatedOn")
    created_by: str | None = Field(default=None, alias="CreatedBy")
    modified_on: datetime | None = Field(default=None, alias="ModifiedOn")
    modified_by: str | None = Field(default=None, alias="ModifiedBy")
    is_public: bool = False

    @field_validator("tags", mode="before")
    @classmethod
    def _split_tags(cls, value: Any) -> list[str]:
        return split_tags(value)


class RecordFields(BaseModel):
    """Base for allow-listed write models.

    Unknown keys are dropped, so an edited read model can be passed back
    as-is. Only fields the caller actually set are forwarded.
    """
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str | None = Field(default=None, alias="Name")
    tags: list[str] | None = Field(default=None, alias="Tags")
    owner: str | None = Field(default=None, alias="Owner")
    is_public: bool | None = None

    @field_validator("tags", mode="before")
    @classmethod
    def _split_tags(cls, value: Any) -> list[str] | None:
        return None if value is None else split_tags(value)

    def to_record(self) -> Record:
        """Outgoing record keyed by store field names."""
        record = self.model_dump(by_alias=True, exclude_unset=True)
        if record.get("Tags") is not None:
            record["Tags"] = ",".join(record["Tags"])
        return record


class IdBatch(BaseModel):
    ids: list[RecordId] = Field(min_length=1)
