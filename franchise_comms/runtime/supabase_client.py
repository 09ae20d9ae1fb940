# Copyright (c) 2026 Franchise Comms Contributors. All Rights Reserved.

"""
Supabase HTTP Client — async access to the managed backend's auth and REST APIs.

SupabaseBackend owns one pooled httpx.AsyncClient for the whole app and
hands out request-scoped SupabaseClient views:

  - for_user(token): anon key + caller JWT, row-level security applies
  - admin():         service-role key, bypasses row-level security

Every call returns a QueryResult. A backend-reported failure is carried in
QueryResult.error; transport failures raise httpx.HTTPError.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

import httpx

logger = logging.getLogger("franchise.supabase")

UNIQUE_VIOLATION = "23505"
NO_ROWS = "PGRST116"

_SINGLE_OBJECT = "application/vnd.pgrst.object+json"


class ServiceConfigError(RuntimeError):
    """Raised when a privileged client is requested without a service-role key."""


@dataclass
class BackendError:
    """Error object returned by the backend (PostgREST or auth)."""

    message: str
    code: Optional[str] = None
    details: Optional[str] = None
    hint: Optional[str] = None
    status: Optional[int] = None

    @property
    def is_unique_violation(self) -> bool:
        return self.code == UNIQUE_VIOLATION

    @property
    def is_no_rows(self) -> bool:
        return self.code == NO_ROWS

    @classmethod
    def from_response(cls, resp: httpx.Response) -> "BackendError":
        try:
            body = resp.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}
        message = (
            body.get("message")
            or body.get("msg")
            or body.get("error_description")
            or body.get("error")
            or f"HTTP {resp.status_code}"
        )
        code = body.get("error_code") or body.get("code")
        return cls(
            message=str(message),
            code=str(code) if code is not None else None,
            details=body.get("details"),
            hint=body.get("hint"),
            status=resp.status_code,
        )


@dataclass
class QueryResult:
    data: Any = None
    error: Optional[BackendError] = None
    count: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.error is None


Row = Dict[str, Any]


class SupabaseClient:
    """
    Request-scoped view over the shared HTTP pool.

    Usage:
        client = backend.for_user(token)
        result = await client.select("posts", "id, tenant_id", {"id": post_id}, single=True)
    """

    def __init__(
        self,
        http: httpx.AsyncClient,
        api_key: str,
        access_token: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> None:
        self._http = http
        self._api_key = api_key
        self._access_token = access_token
        self._headers = dict(headers or {})

    @property
    def access_token(self) -> Optional[str]:
        return self._access_token

    def _build_headers(self, extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        headers = {
            "apikey": self._api_key,
            "Authorization": f"Bearer {self._access_token or self._api_key}",
            **self._headers,
        }
        if extra:
            headers.update(extra)
        return headers

    async def _send(
        self,
        method: str,
        url: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> QueryResult:
        resp = await self._http.request(
            method, url, params=params, json=json, headers=self._build_headers(headers),
        )
        if resp.status_code >= 400:
            error = BackendError.from_response(resp)
            logger.debug(
                "[supabase] %s %s → %d code=%s", method, url, resp.status_code, error.code,
            )
            return QueryResult(error=error)
        data = resp.json() if resp.content else None
        return QueryResult(data=data, count=_total_from_range(resp.headers.get("Content-Range")))

    # ── Auth ─────────────────────────────────────────────────

    async def get_user(self) -> QueryResult:
        """Resolve the user behind this client's access token."""
        if not self._access_token:
            return QueryResult(error=BackendError(message="Auth session missing", status=401))
        return await self._send("GET", "/auth/v1/user")

    async def exchange_code_for_session(
        self, auth_code: str, code_verifier: Optional[str] = None,
    ) -> QueryResult:
        """Trade an OAuth/magic-link authorization code for a session."""
        payload: Dict[str, Any] = {"auth_code": auth_code}
        if code_verifier:
            payload["code_verifier"] = code_verifier
        return await self._send(
            "POST", "/auth/v1/token", params={"grant_type": "pkce"}, json=payload,
        )

    # ── REST ─────────────────────────────────────────────────

    @staticmethod
    def _filter_params(filters: Optional[Dict[str, Any]]) -> Dict[str, str]:
        return {column: f"eq.{value}" for column, value in (filters or {}).items()}

    async def select(
        self,
        table: str,
        columns: str = "*",
        filters: Optional[Dict[str, Any]] = None,
        *,
        in_filters: Optional[Dict[str, Sequence[Any]]] = None,
        or_filter: Optional[str] = None,
        order: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        count: bool = False,
        single: bool = False,
    ) -> QueryResult:
        """
        SELECT with equality and membership filters.

        Args:
            in_filters: column -> allowed values, sent as ``in.(...)``
            or_filter: raw PostgREST disjunction, see ilike_any()
            order: e.g. "created_at.desc"
            count: ask for an exact total, returned in QueryResult.count
            single: demand exactly one row
        """
        params: Dict[str, Any] = {"select": _compact(columns), **self._filter_params(filters)}
        for column, values in (in_filters or {}).items():
            params[column] = f"in.({_quote_list(values)})"
        if or_filter:
            params["or"] = or_filter
        if order:
            params["order"] = order
        if limit is not None:
            params["limit"] = limit
        if offset:
            params["offset"] = offset
        headers: Dict[str, str] = {}
        if single:
            headers["Accept"] = _SINGLE_OBJECT
        if count:
            headers["Prefer"] = "count=exact"
        return await self._send(
            "GET", f"/rest/v1/{table}", params=params, headers=headers or None,
        )

    async def insert(
        self,
        table: str,
        rows: Union[Row, List[Row]],
        columns: str = "*",
        *,
        single: bool = False,
    ) -> QueryResult:
        """INSERT returning the stored representation."""
        headers = {"Prefer": "return=representation"}
        if single:
            headers["Accept"] = _SINGLE_OBJECT
        return await self._send(
            "POST", f"/rest/v1/{table}",
            params={"select": _compact(columns)}, json=rows, headers=headers,
        )

    async def upsert(
        self,
        table: str,
        rows: Union[Row, List[Row]],
        on_conflict: Optional[str] = None,
        columns: str = "*",
    ) -> QueryResult:
        """INSERT ... ON CONFLICT DO UPDATE keyed by on_conflict columns."""
        params: Dict[str, Any] = {"select": _compact(columns)}
        if on_conflict:
            params["on_conflict"] = on_conflict
        headers = {"Prefer": "resolution=merge-duplicates,return=representation"}
        return await self._send(
            "POST", f"/rest/v1/{table}", params=params, json=rows, headers=headers,
        )

    async def delete(self, table: str, filters: Dict[str, Any]) -> QueryResult:
        """DELETE rows matching all equality filters."""
        if not filters:
            raise ValueError("delete requires at least one filter")
        return await self._send(
            "DELETE", f"/rest/v1/{table}",
            params=self._filter_params(filters), headers={"Prefer": "return=minimal"},
        )


def _compact(columns: str) -> str:
    """Strip whitespace from a select list so embeds survive URL encoding."""
    return "".join(columns.split())


def _quote(value: Any) -> str:
    """Double-quote a filter value so commas and parentheses stay literal."""
    text = str(value).replace("\\", "\\\\").replace('"', '\\"')
    return f'"{text}"'


def _quote_list(values: Iterable[Any]) -> str:
    return ",".join(_quote(v) for v in values)


def ilike_any(columns: Sequence[str], term: str) -> str:
    """Case-insensitive substring match on any of the columns, for or_filter."""
    pattern = _quote(f"*{term}*")
    return "(" + ",".join(f"{col}.ilike.{pattern}" for col in columns) + ")"


def _total_from_range(header: Optional[str]) -> Optional[int]:
    """Total from a Content-Range header ("0-19/57", "*/0"); None when unknown."""
    if not header or "/" not in header:
        return None
    total = header.rsplit("/", 1)[1]
    return int(total) if total.isdigit() else None


class SupabaseBackend:
    """Factory for request-scoped clients sharing one connection pool."""

    def __init__(
        self,
        url: str,
        anon_key: str,
        service_role_key: str = "",
        app_name: str = "franchise-communications",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._url = url.rstrip("/")
        self._anon_key = anon_key
        self._service_role_key = service_role_key
        self._app_name = app_name
        self._http = httpx.AsyncClient(base_url=self._url, timeout=timeout, transport=transport)

    @classmethod
    def from_settings(cls, settings, transport: Optional[httpx.AsyncBaseTransport] = None) -> "SupabaseBackend":
        return cls(
            url=settings.SUPABASE_URL,
            anon_key=settings.SUPABASE_ANON_KEY,
            service_role_key=settings.SUPABASE_SERVICE_ROLE_KEY,
            app_name=settings.APP_NAME,
            timeout=settings.HTTP_TIMEOUT,
            transport=transport,
        )

    @property
    def has_service_role(self) -> bool:
        return bool(self._service_role_key)

    def for_user(self, access_token: Optional[str]) -> SupabaseClient:
        return SupabaseClient(
            self._http, self._anon_key, access_token,
            headers={"x-application-name": self._app_name},
        )

    def anon(self) -> SupabaseClient:
        return self.for_user(None)

    def admin(self) -> SupabaseClient:
        if not self._service_role_key:
            raise ServiceConfigError("Missing SUPABASE_SERVICE_ROLE_KEY environment variable")
        return SupabaseClient(
            self._http, self._service_role_key,
            headers={"x-application-name": f"{self._app_name}-admin"},
        )

    # ── Lifecycle ─────────────────────────────────────────────

    async def health_check(self) -> bool:
        """Check if the auth service is reachable."""
        try:
            resp = await self._http.get("/auth/v1/health", headers={"apikey": self._anon_key})
            return resp.status_code == 200
        except httpx.HTTPError:
            return False

    async def close(self) -> None:
        await self._http.aclose()
