"""
Record store for a PostgREST/Supabase style REST service.

Collections live under <base_url>/rest/v1/<collection>. Filters use the
PostgREST operator syntax (`id=eq.<id>`), ordering uses
`order=<field>.asc|desc`. requests is blocking, so every call runs in a
worker thread.
"""
import asyncio
import json
import logging
from typing import Any, Dict, List, Optional

import requests

from pharmacy_pos.core.exceptions import RecordNotFound, StoreError
from pharmacy_pos.store.base import Record, StoreResult

logger = logging.getLogger(__name__)

RETURN_REPRESENTATION = "return=representation"
RETURN_MINIMAL = "return=minimal"


class RestRecordStore:
    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        self._base_url = base_url.rstrip("/") + "/rest/v1"
        self._timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.update({
            "apikey": api_key,
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        })

    def _error_from_response(self, collection: str, response) -> StoreError:
        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}
        message = body.get("message") or response.text or f"HTTP {response.status_code}"
        return StoreError(
            message,
            code=body.get("code") or str(response.status_code),
            details=body.get("details"),
            collection=collection,
        )

    def _request(
        self,
        method: str,
        collection: str,
        params: Optional[Dict[str, str]] = None,
        payload: Any = None,
        prefer: Optional[str] = None,
    ) -> StoreResult:
        headers = {"Prefer": prefer} if prefer else {}
        body = json.dumps(payload, default=str) if payload is not None else None
        try:
            response = self._session.request(
                method,
                f"{self._base_url}/{collection}",
                params=params,
                data=body,
                headers=headers,
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            logger.error(f"{method} {collection} failed: {type(e).__name__}: {e}")
            return StoreResult.failure(StoreError(str(e), code="network_error", collection=collection))

        if response.status_code >= 400:
            return StoreResult.failure(self._error_from_response(collection, response))
        if not response.content:
            return StoreResult.success(None)
        try:
            return StoreResult.success(response.json())
        except ValueError as e:
            logger.error(f"{method} {collection} returned a non-JSON body: {e}")
            return StoreResult.failure(
                StoreError("Store returned an unreadable response", code="invalid_response", collection=collection)
            )

    @staticmethod
    def _eq(value: Any) -> str:
        return f"eq.{value}"

    def _single(self, collection: str, record_id: str, result: StoreResult) -> StoreResult:
        if not result.ok:
            return result
        rows = result.data or []
        if not rows:
            return StoreResult.failure(RecordNotFound(collection, record_id))
        return StoreResult.success(rows[0])

    # ── RecordStore ────────────────────────────────────────────

    async def select_all(self, collection: str, order_by: str, ascending: bool = True) -> StoreResult:
        direction = "asc" if ascending else "desc"
        params = {"select": "*", "order": f"{order_by}.{direction}"}
        return await asyncio.to_thread(self._request, "GET", collection, params)

    async def select_where(self, collection: str, field: str, value: Any) -> StoreResult:
        params = {"select": "*", field: self._eq(value)}
        return await asyncio.to_thread(self._request, "GET", collection, params)

    async def select_by_id(self, collection: str, record_id: str) -> StoreResult:
        params = {"select": "*", "id": self._eq(record_id)}
        result = await asyncio.to_thread(self._request, "GET", collection, params)
        return self._single(collection, record_id, result)

    async def insert(self, collection: str, record: Record) -> StoreResult:
        result = await asyncio.to_thread(
            self._request, "POST", collection, {"select": "*"}, record, RETURN_REPRESENTATION
        )
        if not result.ok:
            return result
        rows = result.data or []
        if not rows:
            return StoreResult.failure(
                StoreError("Insert returned no record", code="empty_response", collection=collection)
            )
        return StoreResult.success(rows[0])

    async def insert_many(self, collection: str, records: List[Record]) -> StoreResult:
        result = await asyncio.to_thread(
            self._request, "POST", collection, None, list(records), RETURN_MINIMAL
        )
        return result if not result.ok else StoreResult.success(None)

    async def update(self, collection: str, record_id: str, changes: Record) -> StoreResult:
        params = {"id": self._eq(record_id)}
        result = await asyncio.to_thread(
            self._request, "PATCH", collection, params, changes, RETURN_REPRESENTATION
        )
        result = self._single(collection, record_id, result)
        return result if not result.ok else StoreResult.success(None)

    async def delete(self, collection: str, record_id: str) -> StoreResult:
        params = {"id": self._eq(record_id)}
        result = await asyncio.to_thread(
            self._request, "DELETE", collection, params, None, RETURN_REPRESENTATION
        )
        result = self._single(collection, record_id, result)
        return result if not result.ok else StoreResult.success(None)
