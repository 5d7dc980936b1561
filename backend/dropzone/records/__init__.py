"""Record store access — abstract client, SQL and HTTP implementations."""

from dropzone.records.client import RecordClient
from dropzone.records.http_client import HttpRecordClient
from dropzone.records.sql_client import SqlRecordClient
from dropzone.records.types import (
    FetchParams,
    FilterOperator,
    OrderBy,
    Record,
    RecordId,
    RecordResponse,
    RecordResult,
    SortType,
    WhereCondition,
)

__all__ = [
    "RecordClient",
    "HttpRecordClient",
    "SqlRecordClient",
    "FetchParams",
    "FilterOperator",
    "OrderBy",
    "Record",
    "RecordId",
    "RecordResponse",
    "RecordResult",
    "SortType",
    "WhereCondition",
]
