"""Table-oriented client for the backend's PostgREST-style REST interface.

Every request carries the project API key. When a caller's access token is
bound (``for_session``) it is sent as the bearer token so the backend's
row-level security sees the signed-in identity instead of the anonymous role.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any

import httpx
from loguru import logger

from thinktank_api.core.errors import RemoteError

_REST_PATH = "/rest/v1"

_OPERATORS = frozenset({"eq", "neq", "gt", "gte", "lt", "lte", "like", "ilike", "in", "is"})


def _format_value(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


@dataclass(frozen=True)
class Filter:
    """A single PostgREST filter (``column=operator.value``)."""

    column: str
    operator: str
    value: Any

    def __post_init__(self) -> None:
        if self.operator not in _OPERATORS:
            msg = f"Unsupported filter operator: {self.operator}"
            raise ValueError(msg)

    def to_param(self) -> tuple[str, str]:
        if self.operator == "in":
            joined = ",".join(_format_value(v) for v in self.value)
            return self.column, f"in.({joined})"
        return self.column, f"{self.operator}.{_format_value(self.value)}"


@dataclass(frozen=True)
class Order:
    """Sort key for ``select``."""

    column: str
    descending: bool = False

    def to_param(self) -> str:
        return f"{self.column}.{'desc' if self.descending else 'asc'}"


def eq(column: str, value: Any) -> Filter:
    return Filter(column, "eq", value)


def neq(column: str, value: Any) -> Filter:
    return Filter(column, "neq", value)


class DataStoreClient:
    """Async client for ``/rest/v1`` table and RPC endpoints.

    Args:
        http: Shared ``httpx.AsyncClient`` whose ``base_url`` is the backend URL.
        api_key: Project API key.
        access_token: Optional user access token for row-level security.
    """

    def __init__(self, http: httpx.AsyncClient, api_key: str, access_token: str | None = None) -> None:
        self._http = http
        self._api_key = api_key
        self._access_token = access_token

    @classmethod
    def create(cls, base_url: str, api_key: str, timeout: float = 15.0) -> DataStoreClient:
        """Build a client with its own connection pool."""
        return cls(httpx.AsyncClient(base_url=base_url, timeout=timeout), api_key)

    def for_session(self, access_token: str | None) -> DataStoreClient:
        """Return a client bound to ``access_token`` that shares this connection pool."""
        return DataStoreClient(self._http, self._api_key, access_token)

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._http.aclose()

    # ------------------------------------------------------------------
    # Table operations
    # ------------------------------------------------------------------

    async def select(
        self,
        table: str,
        columns: str = "*",
        filters: Iterable[Filter] | None = None,
        order: Sequence[Order] | None = None,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        """Read rows from ``table``.

        ``columns`` is passed through as the PostgREST ``select`` parameter, so
        embedded joins such as ``"*, department:departments(name, slug)"`` work.
        """
        params = [("select", columns), *self._filter_params(filters)]
        if order:
            params.append(("order", ",".join(o.to_param() for o in order)))
        if limit is not None:
            params.append(("limit", str(limit)))
        response = await self._request("GET", f"{_REST_PATH}/{table}", params=params)
        return list(response.json())

    async def count(self, table: str, filters: Iterable[Filter] | None = None) -> int:
        """Return the exact number of rows matching ``filters``."""
        params = [("select", "*"), *self._filter_params(filters)]
        response = await self._request("HEAD", f"{_REST_PATH}/{table}", params=params, prefer="count=exact")
        content_range = response.headers.get("content-range", "")
        total = content_range.rpartition("/")[2]
        if not total.isdigit():
            msg = f"Missing row count for {table}"
            raise RemoteError(msg, status_code=response.status_code)
        return int(total)

    async def insert(self, table: str, row: dict[str, Any]) -> dict[str, Any]:
        """Insert one row and return it as stored."""
        response = await self._request(
            "POST",
            f"{_REST_PATH}/{table}",
            json_body=row,
            prefer="return=representation",
        )
        rows = response.json()
        if not rows:
            msg = f"Insert into {table} returned no row"
            raise RemoteError(msg, status_code=response.status_code)
        result: dict[str, Any] = rows[0]
        return result

    async def update(
        self,
        table: str,
        filters: Iterable[Filter],
        patch: dict[str, Any],
    ) -> list[dict[str, Any]]:
        """Patch matching rows and return them as stored."""
        params = self._filter_params(filters)
        if not params:
            msg = "update requires at least one filter"
            raise ValueError(msg)
        response = await self._request(
            "PATCH",
            f"{_REST_PATH}/{table}",
            params=params,
            json_body=patch,
            prefer="return=representation",
        )
        return list(response.json())

    async def delete(self, table: str, filters: Iterable[Filter]) -> list[dict[str, Any]]:
        """Delete matching rows and return what was removed."""
        params = self._filter_params(filters)
        if not params:
            msg = "delete requires at least one filter"
            raise ValueError(msg)
        response = await self._request(
            "DELETE",
            f"{_REST_PATH}/{table}",
            params=params,
            prefer="return=representation",
        )
        return list(response.json())

    async def rpc(self, function: str, params: dict[str, Any] | None = None) -> Any:
        """Call a server-side procedure and return its decoded JSON result."""
        response = await self._request("POST", f"{_REST_PATH}/rpc/{function}", json_body=params or {})
        if not response.content:
            return None
        return response.json()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _filter_params(filters: Iterable[Filter] | None) -> list[tuple[str, str]]:
        return [f.to_param() for f in filters or ()]

    def _headers(self, prefer: str | None) -> dict[str, str]:
        headers = {
            "apikey": self._api_key,
            "Authorization": f"Bearer {self._access_token or self._api_key}",
        }
        if prefer:
            headers["Prefer"] = prefer
        return headers

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: list[tuple[str, str]] | None = None,
        json_body: Any = None,
        prefer: str | None = None,
    ) -> httpx.Response:
        try:
            response = await self._http.request(
                method,
                path,
                params=params,
                json=json_body,
                headers=self._headers(prefer),
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            message = extract_error_message(exc.response)
            logger.error("Data store error: {} {} on {} {}", exc.response.status_code, message, method, path)
            raise RemoteError(message, status_code=exc.response.status_code) from exc
        except httpx.RequestError as exc:
            logger.error("Data store request failed: {}", exc)
            raise RemoteError(f"Request failed: {exc}") from exc
        return response


def extract_error_message(response: httpx.Response) -> str:
    """Pull the backend's message out of an error response."""
    try:
        body = response.json()
    except (json.JSONDecodeError, ValueError):
        return response.text or response.reason_phrase
    if isinstance(body, dict):
        for key in ("message", "msg", "error_description", "error"):
            if body.get(key):
                return str(body[key])
    return response.reason_phrase
