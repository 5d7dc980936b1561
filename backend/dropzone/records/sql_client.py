"""Record client backed by the local SQLAlchemy tables (SQLite)."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Sequence

from sqlalchemy import DateTime, String, delete, func, inspect, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from dropzone.models import TABLES
from dropzone.records.client import RecordClient
from dropzone.records.types import (
    FetchParams,
    FilterOperator,
    Record,
    RecordId,
    RecordResponse,
    RecordResult,
    SortType,
    WhereCondition,
)

logger = logging.getLogger(__name__)

# Maintained by the store itself, never writable by clients
READ_ONLY_FIELDS = frozenset({"Id", "CreatedOn", "CreatedBy", "ModifiedOn", "ModifiedBy"})


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class _TableView:
    """Field-name view over one ORM model (``Name`` -> ``File.name``)."""

    def __init__(self, model: type):
        self.model = model
        mapper = inspect(model)
        self.columns = {col.name: col for col in mapper.columns}
        self.attrs = {col.name: key for key, col in mapper.columns.items()}

    def column(self, field_name: str):
        try:
            return self.columns[field_name]
        except KeyError:
            raise ValueError(
                f"Unknown field '{field_name}' for table {self.model.__tablename__}"
            ) from None

    def check_fields(self, fields: Sequence[str]) -> None:
        for name in fields:
            self.column(name)

    def clause(self, condition: WhereCondition):
        column = self.column(condition.field_name)
        if condition.operator is FilterOperator.EXACT_MATCH:
            values = [self.coerce(condition.field_name, v) for v in condition.values]
            return column.in_(values)
        if condition.operator is FilterOperator.DOES_NOT_HAVE_VALUE:
            if isinstance(column.type, String):
                return or_(column.is_(None), column == "")
            return column.is_(None)
        if not condition.values:
            raise ValueError(f"Contains on '{condition.field_name}' needs a value")
        # casefold() is registered on every connection by dropzone.database
        needle = str(condition.values[0]).casefold()
        return func.casefold(column, type_=String).contains(needle, autoescape=True)

    def coerce(self, field_name: str, value: Any) -> Any:
        """Normalize a client value for storage (ISO strings -> naive UTC)."""
        column = self.columns[field_name]
        if isinstance(column.type, DateTime) and value is not None:
            if isinstance(value, str):
                value = datetime.fromisoformat(value)
            if isinstance(value, datetime) and value.tzinfo is not None:
                value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value

    def writable(self, record: Record) -> dict[str, Any]:
        """Map a client record to ORM attribute values."""
        values: dict[str, Any] = {}
        for name, value in record.items():
            if name in READ_ONLY_FIELDS:
                raise ValueError(f"Field '{name}' is read-only")
            self.column(name)
            values[self.attrs[name]] = self.coerce(name, value)
        return values

    def to_record(self, obj: Any, fields: Sequence[str] | None = None) -> Record:
        record: Record = {"Id": obj.id}
        for name in fields or self.columns:
            value = getattr(obj, self.attrs[name])
            if isinstance(value, datetime) and value.tzinfo is None:
                value = value.replace(tzinfo=timezone.utc)
            record[name] = value
        return record


class SqlRecordClient(RecordClient):
    """Serves the ``file1``/``folder1`` tables from a SQLAlchemy async session."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        actor: str | None = None,
    ):
        self._session_factory = session_factory
        self._actor = actor
        self._views = {name: _TableView(model) for name, model in TABLES.items()}

    def _view(self, table: str) -> _TableView:
        try:
            return self._views[table]
        except KeyError:
            raise ValueError(f"Unknown table '{table}'") from None

    async def fetch_records(self, table: str, params: FetchParams) -> RecordResponse:
        try:
            view = self._view(table)
            view.check_fields(params.fields)
            stmt = select(view.model)
            for condition in params.where:
                stmt = stmt.where(view.clause(condition))
            for order in params.order_by:
                column = view.column(order.field_name)
                if isinstance(column.type, String):
                    column = column.collate("NOCASE")
                stmt = stmt.order_by(
                    column.desc() if order.sort_type is SortType.DESC else column.asc()
                )
            stmt = stmt.order_by(view.model.id)

            async with self._session_factory() as db:
                rows = (await db.execute(stmt)).scalars().all()
                records = [view.to_record(row, params.fields) for row in rows]
        except (ValueError, SQLAlchemyError) as e:
            logger.error("fetch_records(%s) failed: %s", table, e)
            return RecordResponse(success=False, message=str(e))

        logger.debug("fetch_records(%s): %d rows", table, len(records))
        return RecordResponse(data=records)

    async def get_record_by_id(
        self, table: str, record_id: RecordId, fields: Sequence[str]
    ) -> RecordResponse:
        try:
            view = self._view(table)
            view.check_fields(fields)
            async with self._session_factory() as db:
                obj = await db.get(view.model, record_id)
                if obj is None:
                    return RecordResponse(data=None)
                return RecordResponse(data=view.to_record(obj, fields))
        except (ValueError, SQLAlchemyError) as e:
            logger.error("get_record_by_id(%s, %s) failed: %s", table, record_id, e)
            return RecordResponse(success=False, message=str(e))

    async def create_record(self, table: str, records: Sequence[Record]) -> RecordResponse:
        try:
            view = self._view(table)
            results: list[RecordResult] = []
            async with self._session_factory() as db:
                for record in records:
                    try:
                        values = view.writable(record)
                        now = _utcnow()
                        obj = view.model(
                            **values,
                            created_on=now,
                            created_by=self._actor,
                            modified_on=now,
                            modified_by=self._actor,
                        )
                        async with db.begin_nested():
                            db.add(obj)
                            await db.flush()
                        results.append(RecordResult(success=True, data=view.to_record(obj)))
                    except (ValueError, TypeError, SQLAlchemyError) as e:
                        logger.warning("create_record(%s) rejected a record: %s", table, e)
                        results.append(RecordResult(success=False, message=str(e)))
                await db.commit()
        except (ValueError, SQLAlchemyError) as e:
            logger.error("create_record(%s) failed: %s", table, e)
            return RecordResponse(success=False, message=str(e))

        return RecordResponse(results=results)

    async def update_record(self, table: str, records: Sequence[Record]) -> RecordResponse:
        try:
            view = self._view(table)
            results: list[RecordResult] = []
            async with self._session_factory() as db:
                for record in records:
                    try:
                        record_id = record.get("Id")
                        if record_id is None:
                            raise ValueError("Id is required for update")
                        values = view.writable({k: v for k, v in record.items() if k != "Id"})
                        async with db.begin_nested():
                            obj = await db.get(view.model, record_id)
                            if obj is None:
                                raise LookupError(f"Record {record_id} not found")
                            for attr, value in values.items():
                                setattr(obj, attr, value)
                            obj.modified_on = _utcnow()
                            obj.modified_by = self._actor
                            await db.flush()
                        results.append(RecordResult(success=True, data=view.to_record(obj)))
                    except (LookupError, ValueError, TypeError, SQLAlchemyError) as e:
                        logger.warning("update_record(%s) rejected a record: %s", table, e)
                        results.append(RecordResult(success=False, message=str(e)))
                await db.commit()
        except (ValueError, SQLAlchemyError) as e:
            logger.error("update_record(%s) failed: %s", table, e)
            return RecordResponse(success=False, message=str(e))

        return RecordResponse(results=results)

    async def delete_record(self, table: str, record_ids: Sequence[RecordId]) -> RecordResponse:
        try:
            view = self._view(table)
            ids = list(record_ids)
            async with self._session_factory() as db:
                found = await db.execute(select(view.model.id).where(view.model.id.in_(ids)))
                existing = set(found.scalars().all())
                await db.execute(delete(view.model).where(view.model.id.in_(ids)))
                await db.commit()
        except (ValueError, SQLAlchemyError) as e:
            logger.error("delete_record(%s) failed: %s", table, e)
            return RecordResponse(success=False, message=str(e))

        results = [
            RecordResult(success=True, data={"Id": rid})
            if rid in existing
            else RecordResult(success=False, message=f"Record {rid} not found")
            for rid in ids
        ]
        logger.info("Deleted %d/%d records from %s", len(existing), len(ids), table)
        return RecordResponse(results=results)
