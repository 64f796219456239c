"""
Record store client for the hosted backend (profiles, talents, jobs).
Talks to the backend's REST interface; when credentials are missing a
degraded store answers every call with a descriptive error instead of
failing at start-up.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Protocol

import httpx

from lendaria.core.config import Settings, get_settings
from lendaria.core.logging import get_logger

logger = get_logger(__name__)

NOT_CONFIGURED_MESSAGE = "Supabase não configurado. Verifique o console."

PROFILES = "profiles"
TALENTS = "talents"
JOBS = "jobs"


@dataclass
class StoreError:
    message: str
    code: Optional[str] = None
    status: Optional[int] = None


@dataclass
class StoreResult:
    data: Any = None
    error: Optional[StoreError] = None
    count: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class RecordStore(Protocol):
    configured: bool

    async def select(
        self,
        table: str,
        columns: str = "*",
        filters: Optional[Mapping[str, Any]] = None,
        limit: Optional[int] = None,
        count: bool = False,
    ) -> StoreResult:
        ...

    async def find_first(self, table: str, filters: Mapping[str, Any], columns: str = "*") -> StoreResult:
        ...

    async def update(self, table: str, record_id: Any, values: Mapping[str, Any]) -> StoreResult:
        ...

    async def count(self, table: str) -> StoreResult:
        ...

    async def close(self) -> None:
        ...


def _eq_filters(filters: Optional[Mapping[str, Any]]) -> Dict[str, str]:
    return {column: f"eq.{value}" for column, value in (filters or {}).items()}


def _parse_content_range(header: Optional[str]) -> Optional[int]:
    # "0-24/3573" or "*/0"
    if not header or "/" not in header:
        return None
    total = header.rsplit("/", 1)[1]
    return int(total) if total.isdigit() else None


class SupabaseRecordStore:
    """Keyed reads and updates over the hosted backend's REST endpoint"""

    configured = True

    def __init__(
        self,
        url: str,
        api_key: str,
        *,
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.url = url.rstrip("/")
        headers = {
            "apikey": api_key,
            "Authorization": f"Bearer {api_key}",
            "Accept": "application/json",
            "Content-Type": "application/json",
        }
        self._client = httpx.AsyncClient(
            base_url=f"{self.url}/rest/v1/",
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    async def select(
        self,
        table: str,
        columns: str = "*",
        filters: Optional[Mapping[str, Any]] = None,
        limit: Optional[int] = None,
        count: bool = False,
    ) -> StoreResult:
        params: Dict[str, str] = {"select": columns, **_eq_filters(filters)}
        if limit is not None:
            params["limit"] = str(limit)
        headers = {"Prefer": "count=exact"} if count else None
        return await self._request("GET", table, params=params, headers=headers)

    async def find_first(self, table: str, filters: Mapping[str, Any], columns: str = "*") -> StoreResult:
        result = await self.select(table, columns, filters, limit=1)
        if not result.ok:
            return result
        rows = result.data or []
        return StoreResult(data=rows[0] if rows else None)

    async def update(self, table: str, record_id: Any, values: Mapping[str, Any]) -> StoreResult:
        result = await self._request(
            "PATCH",
            table,
            params=_eq_filters({"id": record_id}),
            headers={"Prefer": "return=representation"},
            json=dict(values),
        )
        if not result.ok:
            return result
        rows = result.data or []
        if not rows:
            return StoreResult(
                error=StoreError(f"Registro {record_id} não encontrado em {table}", code="not_found", status=404)
            )
        return StoreResult(data=rows[0])

    async def count(self, table: str) -> StoreResult:
        return await self._request(
            "HEAD",
            table,
            params={"select": "*"},
            headers={"Prefer": "count=exact"},
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def _request(
        self,
        method: str,
        table: str,
        *,
        params: Optional[Mapping[str, str]] = None,
        headers: Optional[Mapping[str, str]] = None,
        json: Any = None,
    ) -> StoreResult:
        try:
            response = await self._client.request(method, table, params=params, headers=headers, json=json)
        except httpx.HTTPError as exc:
            logger.error({"event": "record_store_request_failed", "table": table, "method": method, "error": str(exc)})
            return StoreResult(error=StoreError(str(exc) or exc.__class__.__name__, code="network"))

        total = _parse_content_range(response.headers.get("content-range"))
        if response.status_code >= 400:
            message, code = response.text, None
            try:
                body = response.json()
            except ValueError:
                body = None
            if isinstance(body, dict):
                message = body.get("message") or message
                code = body.get("code")
            logger.error({"event": "record_store_error", "table": table, "status": response.status_code, "error": message})
            return StoreResult(error=StoreError(message or f"HTTP {response.status_code}", code=code, status=response.status_code))

        data = response.json() if method != "HEAD" and response.content else None
        return StoreResult(data=data, count=total)


class UnconfiguredRecordStore:
    """Stand-in used when credentials are missing; every call reports it."""

    configured = False

    def _error(self) -> StoreResult:
        return StoreResult(error=StoreError(NOT_CONFIGURED_MESSAGE, code="not_configured"))

    async def select(self, table: str, columns: str = "*", filters=None, limit=None, count: bool = False) -> StoreResult:
        return self._error()

    async def find_first(self, table: str, filters: Mapping[str, Any], columns: str = "*") -> StoreResult:
        return self._error()

    async def update(self, table: str, record_id: Any, values: Mapping[str, Any]) -> StoreResult:
        return self._error()

    async def count(self, table: str) -> StoreResult:
        return self._error()

    async def close(self) -> None:
        return None


def create_record_store(
    settings: Optional[Settings] = None,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> RecordStore:
    """Build the configured store, or the degraded one when credentials are missing."""
    settings = settings or get_settings()
    if not settings.record_store_configured:
        logger.critical("ERRO CRÍTICO: Variáveis do Supabase não encontradas.")
        logger.critical("Verifique se .env.local contém SUPABASE_URL e SUPABASE_ANON_KEY.")
        return UnconfiguredRecordStore()
    return SupabaseRecordStore(
        settings.SUPABASE_URL,
        settings.SUPABASE_ANON_KEY,
        timeout=settings.SUPABASE_TIMEOUT,
        transport=transport,
    )
