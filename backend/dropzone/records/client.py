"""Abstract record store client — five named-table operations."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from dropzone.records.types import FetchParams, Record, RecordId, RecordResponse


class RecordClient(ABC):
    """Named-table request/response interface to a record store.

    Filter semantics every implementation honours:

    * ``ExactMatch``: field equals any of ``values``.
    * ``DoesNotHaveValue``: field is unset (NULL or empty string).
    * ``Contains``: field contains ``values[0]``, case-insensitive.

    Store-side failures are reported through ``RecordResponse.success``
    and per-record ``results`` rather than raised.
    """

    @abstractmethod
    async def fetch_records(self, table: str, params: FetchParams) -> RecordResponse:
        ...

    @abstractmethod
    async def get_record_by_id(
        self, table: str, record_id: RecordId, fields: Sequence[str]
    ) -> RecordResponse:
        ...

    @abstractmethod
    async def create_record(self, table: str, records: Sequence[Record]) -> RecordResponse:
        ...

    @abstractmethod
    async def update_record(self, table: str, records: Sequence[Record]) -> RecordResponse:
        ...

    @abstractmethod
    async def delete_record(self, table: str, record_ids: Sequence[RecordId]) -> RecordResponse:
        ...

    async def close(self) -> None:
        """Release client resources (no-op by default)."""
