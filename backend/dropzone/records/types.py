"""Parameter and response shapes exchanged with a record store."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

RecordId = int
Record = dict[str, Any]


class FilterOperator(str, Enum):
    EXACT_MATCH = "ExactMatch"
    DOES_NOT_HAVE_VALUE = "DoesNotHaveValue"
    CONTAINS = "Contains"


class SortType(str, Enum):
    ASC = "ASC"
    DESC = "DESC"


class WhereCondition(BaseModel):
    """One filter triple: field, operator, operand values."""
    model_config = ConfigDict(populate_by_name=True)

    field_name: str = Field(alias="fieldName")
    operator: FilterOperator
    values: list[Any] = []


class OrderBy(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    field_name: str = Field(alias="fieldName")
    sort_type: SortType = Field(default=SortType.ASC, alias="SortType")


class FetchParams(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    fields: list[str]
    where: list[WhereCondition] = []
    order_by: list[OrderBy] = Field(default_factory=list, alias="orderBy")


class RecordResult(BaseModel):
    """Outcome for a single record of a create/update/delete batch."""
    success: bool
    data: Record | None = None
    message: str | None = None


class RecordResponse(BaseModel):
    """Envelope returned by every record client operation.

    ``data`` holds a list of records for fetches and a single record (or
    None) for lookups by id. ``results`` is filled for write operations.
    """
    success: bool = True
    data: Any = None
    results: list[RecordResult] = []
    message: str | None = None
