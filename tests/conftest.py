"""Shared test fixtures: settings, in-memory backend doubles, identities and an API client."""

import asyncio
import json
import uuid
from collections import defaultdict
from collections.abc import AsyncGenerator
from datetime import UTC, datetime
from typing import Any
from unittest.mock import MagicMock

import httpx
import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from thinktank_api.core.backend import Backend, get_backend
from thinktank_api.core.config import Settings, get_settings
from thinktank_api.core.errors import RemoteError
from thinktank_api.lib.backend.auth import AuthClient
from thinktank_api.lib.backend.changes import ChangeFeed
from thinktank_api.lib.backend.client import Filter, Order
from thinktank_api.lib.backend.storage import ObjectStorage
from thinktank_api.models.identity import Identity
from thinktank_api.services.publication_service import PublicationCache
from thinktank_api.services.session_resolver import SessionResolver

BACKEND_URL = "https://backend.test"
STORAGE_URL = "https://storage.test/public"

ADMIN = Identity(id=str(uuid.uuid4()), email="admin@thinktank.test")
MODERATOR = Identity(id=str(uuid.uuid4()), email="moderator@thinktank.test")
READER = Identity(id=str(uuid.uuid4()), email="reader@thinktank.test")

TOKENS = {"admin-token": ADMIN, "moderator-token": MODERATOR, "reader-token": READER}


class FakeDataStore:
    """In-memory stand-in for ``DataStoreClient``.

    Supports ``eq``, ``neq`` and ``is`` filters and single-column ordering.
    ``fail(op, table)`` makes the next calls of that operation raise
    ``RemoteError``; ``gate(op, table)`` blocks them until the returned event
    is set.
    """

    def __init__(self) -> None:
        self.tables: dict[str, list[dict[str, Any]]] = defaultdict(list)
        self.rpc_results: dict[str, Any] = {}
        self.calls: list[tuple[str, str]] = []
        self._failures: dict[tuple[str, str], RemoteError] = {}
        self._gates: dict[tuple[str, str], asyncio.Event] = {}

    def seed(self, table: str, *rows: dict[str, Any]) -> None:
        for row in rows:
            self.tables[table].append(dict(row))

    def fail(self, op: str, table: str, message: str = "backend unavailable", status_code: int = 500) -> None:
        self._failures[(op, table)] = RemoteError(message, status_code=status_code)

    def gate(self, op: str, table: str) -> asyncio.Event:
        event = asyncio.Event()
        self._gates[(op, table)] = event
        return event

    def audit_entries(self) -> list[dict[str, Any]]:
        return list(self.tables["audit_logs"])

    def for_session(self, access_token: str | None) -> "FakeDataStore":
        return self

    async def close(self) -> None:
        return None

    async def select(
        self,
        table: str,
        columns: str = "*",
        filters: list[Filter] | None = None,
        order: list[Order] | None = None,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        await self._enter("select", table)
        rows = [dict(row) for row in self.tables[table] if _matches(row, filters)]
        for key in reversed(order or []):
            rows.sort(key=lambda row, col=key.column: str(row.get(col) or ""), reverse=key.descending)
        return rows[:limit] if limit is not None else rows

    async def count(self, table: str, filters: list[Filter] | None = None) -> int:
        await self._enter("count", table)
        return sum(1 for row in self.tables[table] if _matches(row, filters))

    async def insert(self, table: str, row: dict[str, Any]) -> dict[str, Any]:
        await self._enter("insert", table)
        stored = dict(row)
        stored.setdefault("id", str(uuid.uuid4()))
        stored.setdefault("created_at", datetime.now(UTC).isoformat())
        self.tables[table].append(stored)
        return dict(stored)

    async def update(self, table: str, filters: list[Filter], patch: dict[str, Any]) -> list[dict[str, Any]]:
        await self._enter("update", table)
        updated = []
        for row in self.tables[table]:
            if _matches(row, filters):
                row.update(patch)
                updated.append(dict(row))
        return updated

    async def delete(self, table: str, filters: list[Filter]) -> list[dict[str, Any]]:
        await self._enter("delete", table)
        removed = [row for row in self.tables[table] if _matches(row, filters)]
        self.tables[table] = [row for row in self.tables[table] if not _matches(row, filters)]
        return removed

    async def rpc(self, function: str, params: dict[str, Any] | None = None) -> Any:
        await self._enter("rpc", function)
        return self.rpc_results.get(function)

    async def _enter(self, op: str, table: str) -> None:
        self.calls.append((op, table))
        gate = self._gates.get((op, table))
        if gate is not None:
            await gate.wait()
        failure = self._failures.get((op, table))
        if failure is not None:
            raise failure


def _matches(row: dict[str, Any], filters: list[Filter] | None) -> bool:
    for f in filters or ():
        value = row.get(f.column)
        if f.operator in ("eq", "is") and value != f.value:
            return False
        if f.operator == "neq" and value == f.value:
            return False
    return True


class FakeAuthServer:
    """Answers the auth provider's ``/auth/v1`` endpoints for an ``httpx.MockTransport``."""

    def __init__(self) -> None:
        self.tokens: dict[str, Identity] = dict(TOKENS)
        self.passwords: dict[str, tuple[str, Identity]] = {
            identity.email: ("correct-horse", identity) for identity in TOKENS.values()
        }
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path == "/auth/v1/user":
            token = request.headers.get("Authorization", "").removeprefix("Bearer ")
            identity = self.tokens.get(token)
            if identity is None:
                return httpx.Response(401, json={"msg": "invalid JWT"})
            return httpx.Response(200, json={"id": identity.id, "email": identity.email})
        if path == "/auth/v1/token":
            body = json.loads(request.content)
            entry = self.passwords.get(body.get("email"))
            if entry is None or entry[0] != body.get("password"):
                return httpx.Response(400, json={"error_description": "Invalid login credentials"})
            identity = entry[1]
            token = f"session-{uuid.uuid4().hex}"
            self.tokens[token] = identity
            return httpx.Response(
                200,
                json={
                    "access_token": token,
                    "refresh_token": "refresh",
                    "expires_in": 3600,
                    "user": {"id": identity.id, "email": identity.email},
                },
            )
        if path == "/auth/v1/logout":
            token = request.headers.get("Authorization", "").removeprefix("Bearer ")
            self.tokens.pop(token, None)
            return httpx.Response(204)
        return httpx.Response(404, json={"message": "not found"})


@pytest.fixture
def settings() -> Settings:
    """Test application settings."""
    return Settings(
        backend_url=BACKEND_URL,
        backend_anon_key="anon-key",
        storage_public_url=STORAGE_URL,
        environment="test",
        rate_limit_per_minute=1000,
    )


@pytest.fixture
def store() -> FakeDataStore:
    """Data store seeded with one admin and one moderator role row."""
    fake = FakeDataStore()
    fake.seed(
        "user_roles",
        {"id": str(uuid.uuid4()), "user_id": ADMIN.id, "role": "admin", "created_at": "2024-01-01T00:00:00+00:00"},
        {
            "id": str(uuid.uuid4()),
            "user_id": MODERATOR.id,
            "role": "moderator",
            "created_at": "2024-01-02T00:00:00+00:00",
        },
    )
    return fake


@pytest.fixture
def auth_server() -> FakeAuthServer:
    return FakeAuthServer()


@pytest.fixture
async def http_client(auth_server: FakeAuthServer) -> AsyncGenerator[httpx.AsyncClient]:
    async with httpx.AsyncClient(transport=httpx.MockTransport(auth_server.handler), base_url=BACKEND_URL) as client:
        yield client


@pytest.fixture
def auth_client(http_client: httpx.AsyncClient) -> AuthClient:
    return AuthClient(http_client, "anon-key")


@pytest.fixture
async def resolver(auth_client: AuthClient) -> AsyncGenerator[SessionResolver]:
    session_resolver = SessionResolver(auth_client, lookup_timeout=1.0)
    yield session_resolver
    session_resolver.close()


@pytest.fixture
def s3_client() -> MagicMock:
    return MagicMock()


@pytest.fixture
def storage(s3_client: MagicMock) -> ObjectStorage:
    """Object storage whose boto3 client is a mock."""
    return ObjectStorage(s3_client, STORAGE_URL)


@pytest.fixture
def changes() -> ChangeFeed:
    return ChangeFeed()


@pytest.fixture
def backend(
    http_client: httpx.AsyncClient,
    store: FakeDataStore,
    auth_client: AuthClient,
    storage: ObjectStorage,
    changes: ChangeFeed,
    resolver: SessionResolver,
) -> Backend:
    return Backend(
        http=http_client,
        data_store=store,  # type: ignore[arg-type]
        auth=auth_client,
        storage=storage,
        changes=changes,
        resolver=resolver,
        publications=PublicationCache(changes),
        service_store=None,
    )


@pytest.fixture
def app(settings: Settings, backend: Backend) -> FastAPI:
    """Full API with the backend and settings dependencies overridden."""
    from thinktank_api.api.router import create_router
    from thinktank_api.main import register_exception_handlers

    application = FastAPI()
    register_exception_handlers(application)
    application.include_router(create_router(settings))
    application.dependency_overrides[get_backend] = lambda: backend
    application.dependency_overrides[get_settings] = lambda: settings
    return application


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="https://test") as api_client:
        yield api_client


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers() -> dict[str, str]:
    return bearer("admin-token")


@pytest.fixture
def moderator_headers() -> dict[str, str]:
    return bearer("moderator-token")


@pytest.fixture
def reader_headers() -> dict[str, str]:
    return bearer("reader-token")


@pytest.fixture
def admin_identity() -> Identity:
    return ADMIN


@pytest.fixture
def moderator_identity() -> Identity:
    return MODERATOR


@pytest.fixture
def reader_identity() -> Identity:
    return READER
