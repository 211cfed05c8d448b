"""Client for the backend's GoTrue-style auth endpoints.

Holds the current session for the process behind an ``asyncio.Lock``. State
change listeners are notified synchronously while that lock is held, so a
listener must not await another auth call; it should schedule follow-up work
instead (see ``SessionResolver.defer_to_next_turn``).
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Any

import httpx
from loguru import logger

from thinktank_api.core.errors import AuthError, RemoteError
from thinktank_api.lib.backend.client import extract_error_message
from thinktank_api.models.identity import Identity, Session

_AUTH_PATH = "/auth/v1"

SIGNED_IN = "SIGNED_IN"
SIGNED_OUT = "SIGNED_OUT"

AuthStateCallback = Callable[[str, Session | None], None]


class AuthSubscription:
    """Handle returned by ``AuthClient.on_auth_state_change``."""

    def __init__(self, listeners: list[AuthStateCallback], callback: AuthStateCallback) -> None:
        self._listeners = listeners
        self._callback = callback

    @property
    def active(self) -> bool:
        return self._callback in self._listeners

    def unsubscribe(self) -> None:
        if self._callback in self._listeners:
            self._listeners.remove(self._callback)


def _parse_identity(data: dict[str, Any]) -> Identity:
    return Identity(id=str(data["id"]), email=data.get("email") or "")


def _parse_session(data: dict[str, Any]) -> Session:
    expires_at: datetime | None = None
    if data.get("expires_at") is not None:
        expires_at = datetime.fromtimestamp(int(data["expires_at"]), tz=UTC)
    elif data.get("expires_in") is not None:
        expires_at = datetime.now(UTC) + timedelta(seconds=int(data["expires_in"]))
    return Session(
        access_token=data["access_token"],
        refresh_token=data.get("refresh_token"),
        expires_at=expires_at,
        identity=_parse_identity(data["user"]),
    )


def session_expired(session: Session, now: datetime | None = None) -> bool:
    """Return True when ``session`` has a known expiry that has passed."""
    if session.expires_at is None:
        return False
    return session.expires_at <= (now or datetime.now(UTC))


class AuthClient:
    """Sign-in, sign-out and identity lookup against the auth provider.

    Args:
        http: Shared ``httpx.AsyncClient`` whose ``base_url`` is the backend URL.
        api_key: Project API key.
    """

    def __init__(self, http: httpx.AsyncClient, api_key: str) -> None:
        self._http = http
        self._api_key = api_key
        self._session: Session | None = None
        self._lock = asyncio.Lock()
        self._listeners: list[AuthStateCallback] = []

    async def sign_in(self, email: str, password: str, *, persist: bool = True) -> Session:
        """Exchange email and password for a session.

        Args:
            email: Account email.
            password: Account password.
            persist: Keep the session as this client's current session and
                notify listeners. Per-request API logins pass False.

        Raises:
            AuthError: If the provider rejects the credentials.
            RemoteError: If the provider cannot be reached.
        """
        async with self._lock:
            response = await self._send(
                "POST",
                f"{_AUTH_PATH}/token",
                params={"grant_type": "password"},
                json_body={"email": email, "password": password},
            )
            if response.status_code in (400, 401, 422):
                msg = extract_error_message(response)
                logger.info(f"Sign-in rejected for {email}")
                raise AuthError(msg)
            self._raise_for_status(response)
            session = _parse_session(response.json())
            logger.info(f"Signed in {session.identity.email}")
            if persist:
                self._session = session
                self._notify(SIGNED_IN, session)
        return session

    async def get_session(self) -> Session | None:
        """Return the current unexpired session, if any."""
        async with self._lock:
            if self._session is None or session_expired(self._session):
                return None
            return self._session

    async def get_user(self, access_token: str) -> Identity | None:
        """Resolve ``access_token`` to an identity, or None if it is invalid or expired."""
        response = await self._send(
            "GET",
            f"{_AUTH_PATH}/user",
            access_token=access_token,
        )
        if response.status_code in (401, 403):
            return None
        self._raise_for_status(response)
        return _parse_identity(response.json())

    async def sign_out(self, access_token: str | None = None) -> None:
        """Revoke a session.

        Listeners are notified only when this clears the current session.

        Args:
            access_token: Token to revoke. Defaults to the current session's token.
        """
        async with self._lock:
            token = access_token or (self._session.access_token if self._session else None)
            if token is not None:
                response = await self._send("POST", f"{_AUTH_PATH}/logout", access_token=token)
                if response.status_code not in (401, 403, 404):
                    self._raise_for_status(response)
            if self._session is not None and (access_token is None or self._session.access_token == access_token):
                self._session = None
                self._notify(SIGNED_OUT, None)

    def on_auth_state_change(self, callback: AuthStateCallback) -> AuthSubscription:
        """Register a synchronous listener for sign-in and sign-out events.

        Raises:
            TypeError: If ``callback`` is a coroutine function.
        """
        if inspect.iscoroutinefunction(callback):
            msg = "Auth state listeners must be synchronous; schedule async work instead"
            raise TypeError(msg)
        self._listeners.append(callback)
        return AuthSubscription(self._listeners, callback)

    def _notify(self, event: str, session: Session | None) -> None:
        for callback in list(self._listeners):
            try:
                callback(event, session)
            except Exception:
                logger.exception(f"Auth state listener failed on {event}")

    async def _send(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, str] | None = None,
        json_body: Any = None,
        access_token: str | None = None,
    ) -> httpx.Response:
        headers = {"apikey": self._api_key}
        if access_token:
            headers["Authorization"] = f"Bearer {access_token}"
        try:
            return await self._http.request(method, path, params=params, json=json_body, headers=headers)
        except httpx.RequestError as exc:
            logger.error("Auth request failed: {}", exc)
            raise RemoteError(f"Request failed: {exc}") from exc

    @staticmethod
    def _raise_for_status(response: httpx.Response) -> None:
        if response.is_error:
            message = extract_error_message(response)
            logger.error("Auth provider error: {} {}", response.status_code, message)
            raise RemoteError(message, status_code=response.status_code)
