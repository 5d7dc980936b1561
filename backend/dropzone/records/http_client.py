"""Record client for a remote record API, authenticated by project id + public key."""

from __future__ import annotations

import logging
from typing import Any, Sequence

import httpx
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from dropzone.exceptions import BackendError
from dropzone.records.client import RecordClient
from dropzone.records.types import FetchParams, Record, RecordId, RecordResponse

logger = logging.getLogger(__name__)

_records_json = TypeAdapter(list[dict[str, Any]])


class HttpRecordClient(RecordClient):
    """JSON-over-HTTP record client.

    Every operation maps to one request under ``{base_url}/tables/{table}``:

    * fetch  -> ``POST   /records/query``   body ``{fields, where, orderBy}``
    * get    -> ``GET    /records/{id}``    query ``fields=a,b``
    * create -> ``POST   /records``         body ``{records}``
    * update -> ``PATCH  /records``         body ``{records}``
    * delete -> ``DELETE /records``         body ``{RecordIds}``

    The response body is the ``RecordResponse`` envelope. Transport errors
    and malformed bodies raise ``BackendError``; a 404 on a lookup by id
    is reported as "no data".
    """

    def __init__(
        self,
        base_url: str,
        project_id: str,
        public_key: str,
        timeout: float = 10.0,
    ):
        if not project_id or not public_key:
            raise ValueError("Record API project id and public key are required")
        self._base_url = base_url.rstrip("/")
        self._headers = {
            "X-Project-Id": project_id,
            "X-Public-Key": public_key,
        }
        self._timeout = timeout

    async def _request(
        self,
        method: str,
        path: str,
        *,
        allow_not_found: bool = False,
        **kwargs: Any,
    ) -> RecordResponse:
        url = f"{self._base_url}{path}"
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                resp = await client.request(method, url, headers=self._headers, **kwargs)
            if allow_not_found and resp.status_code == 404:
                return RecordResponse(data=None)
            resp.raise_for_status()
            return RecordResponse.model_validate(resp.json())
        except httpx.HTTPError as e:
            logger.error("Record API %s %s failed: %s", method, url, e)
            raise BackendError(f"Record API request failed: {e}") from e
        except (ValueError, PydanticValidationError) as e:
            logger.error("Record API %s %s returned an unexpected body: %s", method, url, e)
            raise BackendError(f"Unexpected record API response: {e}") from e

    async def fetch_records(self, table: str, params: FetchParams) -> RecordResponse:
        return await self._request(
            "POST",
            f"/tables/{table}/records/query",
            json=params.model_dump(by_alias=True, mode="json"),
        )

    async def get_record_by_id(
        self, table: str, record_id: RecordId, fields: Sequence[str]
    ) -> RecordResponse:
        return await self._request(
            "GET",
            f"/tables/{table}/records/{record_id}",
            params={"fields": ",".join(fields)},
            allow_not_found=True,
        )

    async def create_record(self, table: str, records: Sequence[Record]) -> RecordResponse:
        return await self._request(
            "POST",
            f"/tables/{table}/records",
            json={"records": _records_json.dump_python(list(records), mode="json")},
        )

    async def update_record(self, table: str, records: Sequence[Record]) -> RecordResponse:
        return await self._request(
            "PATCH",
            f"/tables/{table}/records",
            json={"records": _records_json.dump_python(list(records), mode="json")},
        )

    async def delete_record(self, table: str, record_ids: Sequence[RecordId]) -> RecordResponse:
        return await self._request(
            "DELETE",
            f"/tables/{table}/records",
            json={"RecordIds": list(record_ids)},
        )
