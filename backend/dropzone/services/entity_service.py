"""Shared CRUD contract for record-backed entities (files, folders)."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, ClassVar, Generic, Iterable, Mapping, TypeVar, Union

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from dropzone.exceptions import BackendError, ValidationError
from dropzone.records import (
    FetchParams,
    FilterOperator,
    OrderBy,
    Record,
    RecordClient,
    RecordId,
    RecordResponse,
    SortType,
    WhereCondition,
)
from dropzone.schemas.common import RecordFields, RecordOut

logger = logging.getLogger(__name__)

OutT = TypeVar("OutT", bound=RecordOut)
FieldsInput = Union[BaseModel, Mapping[str, Any]]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class EntityService(Generic[OutT]):
    """Translates domain calls into record client parameters.

    Subclasses name the table, its full field list, the parent reference
    field and the allow-listed write models.
    """

    table: ClassVar[str]
    label: ClassVar[str]
    all_fields: ClassVar[tuple[str, ...]]
    parent_field: ClassVar[str]
    record_model: ClassVar[type[RecordOut]]
    create_model: ClassVar[type[RecordFields]]
    update_model: ClassVar[type[RecordFields]]

    def __init__(self, client: RecordClient):
        self._client = client

    @property
    def client(self) -> RecordClient:
        return self._client

    # -- helpers ---------------------------------------------------------

    def _parse(self, model: type[RecordFields], fields: FieldsInput) -> RecordFields:
        """Validate caller fields against the allow-list model."""
        if isinstance(fields, model):
            return fields
        if isinstance(fields, BaseModel):
            fields = fields.model_dump(by_alias=True, exclude_unset=True)
        try:
            return model.model_validate(fields)
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid {self.label} fields: {e}") from e

    def _to_model(self, record: Any) -> OutT:
        if not isinstance(record, dict):
            raise BackendError(f"Unexpected {self.label} record: {record!r}")
        try:
            return self.record_model.model_validate(record)  # type: ignore[return-value]
        except PydanticValidationError as e:
            raise BackendError(f"Unexpected {self.label} record shape: {e}") from e

    def _single_result(self, response: RecordResponse, action: str) -> OutT:
        if not response.success or not response.results:
            raise BackendError(response.message or f"Failed to {action} {self.label}")
        result = response.results[0]
        if not result.success:
            raise BackendError(result.message or f"Failed to {action} {self.label}")
        return self._to_model(result.data)

    @staticmethod
    def _normalize_ids(ids: Union[RecordId, Iterable[RecordId]]) -> list[RecordId]:
        if isinstance(ids, (str, bytes)) or not isinstance(ids, Iterable):
            return [ids]  # type: ignore[list-item]
        return list(ids)

    def _apply_defaults(self, record: Record) -> None:
        """Fill defaults for absent fields before a create."""

    async def _validate_write(self, data: RecordFields, record_id: RecordId | None = None) -> None:
        """Reference checks run before create/update reach the store."""

    async def _before_delete(self, ids: list[RecordId]) -> None:
        """Checks run before a delete reaches the store."""

    def _where_parent(self, parent_id: RecordId | None) -> WhereCondition:
        if parent_id is not None:
            return WhereCondition(
                field_name=self.parent_field,
                operator=FilterOperator.EXACT_MATCH,
                values=[parent_id],
            )
        return WhereCondition(
            field_name=self.parent_field,
            operator=FilterOperator.DOES_NOT_HAVE_VALUE,
            values=[],
        )

    # -- contract --------------------------------------------------------

    async def list(self, parent_id: RecordId | None = None, search_text: str = "") -> list[OutT]:
        """Records under ``parent_id`` (root when None), name-filtered, by name."""
        try:
            where = [self._where_parent(parent_id)]
            search = (search_text or "").strip()
            if search:
                where.append(WhereCondition(
                    field_name="Name",
                    operator=FilterOperator.CONTAINS,
                    values=[search],
                ))
            params = FetchParams(
                fields=list(self.all_fields),
                where=where,
                order_by=[OrderBy(field_name="Name", sort_type=SortType.ASC)],
            )
            response = await self._client.fetch_records(self.table, params)
            if not response.success:
                raise BackendError(response.message or f"Failed to fetch {self.label}s")
            if not response.data:
                return []
            if not isinstance(response.data, list):
                raise BackendError(f"Unexpected {self.label} listing: {response.data!r}")
            return [self._to_model(record) for record in response.data]
        except Exception as e:
            logger.error("Error fetching %ss: %s", self.label, e)
            raise

    async def get_by_id(self, record_id: RecordId) -> OutT | None:
        try:
            response = await self._client.get_record_by_id(
                self.table, record_id, list(self.all_fields)
            )
            if not response.success:
                raise BackendError(response.message or f"Failed to fetch {self.label} {record_id}")
            if not response.data:
                return None
            return self._to_model(response.data)
        except Exception as e:
            logger.error("Error fetching %s with ID %s: %s", self.label, record_id, e)
            raise

    async def create(self, fields: FieldsInput) -> OutT:
        try:
            data = self._parse(self.create_model, fields)
            if not (data.name or "").strip():
                raise ValidationError(f"{self.label.capitalize()} name is required")
            await self._validate_write(data)

            record = data.to_record()
            self._apply_defaults(record)
            response = await self._client.create_record(self.table, [record])
            created = self._single_result(response, "create")
            logger.info("Created %s %s (%s)", self.label, created.id, created.name)
            return created
        except Exception as e:
            logger.error("Error creating %s: %s", self.label, e)
            raise

    async def update(self, record_id: RecordId, fields: FieldsInput) -> OutT:
        try:
            data = self._parse(self.update_model, fields)
            if "name" in data.model_fields_set and not (data.name or "").strip():
                raise ValidationError(f"{self.label.capitalize()} name cannot be empty")
            await self._validate_write(data, record_id)

            record = {"Id": record_id, **data.to_record()}
            response = await self._client.update_record(self.table, [record])
            return self._single_result(response, "update")
        except Exception as e:
            logger.error("Error updating %s %s: %s", self.label, record_id, e)
            raise

    async def delete(self, ids: Union[RecordId, Iterable[RecordId]]) -> bool:
        """Delete one id or a batch with a single store call."""
        try:
            record_ids = self._normalize_ids(ids)
            if not record_ids:
                raise ValidationError(f"No {self.label} ids given")
            await self._before_delete(record_ids)

            response = await self._client.delete_record(self.table, record_ids)
            if not response.success:
                raise BackendError(response.message or f"Failed to delete {self.label}s")
            missing = [r.message for r in response.results if not r.success]
            if missing:
                logger.warning("Delete of %ss partially skipped: %s", self.label, missing)
            logger.info("Deleted %d %s(s)", len(record_ids), self.label)
            return True
        except Exception as e:
            logger.error("Error deleting %ss: %s", self.label, e)
            raise
