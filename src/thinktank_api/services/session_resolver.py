"""Session resolver: answers "who is the current identity?".

One resolver is created per application (or per test) and injected wherever
an identity is needed. Subscriptions it registers with the auth client are
owned by the resolver and torn down by ``close()``.
"""

import asyncio
import inspect
from collections.abc import Awaitable, Callable
from typing import Any

from loguru import logger

from thinktank_api.lib.backend.auth import AuthClient, AuthSubscription
from thinktank_api.models.identity import Identity, Session

IdentityCallback = Callable[[Identity | None], None]


class IdentitySubscription:
    """Handle returned by ``SessionResolver.on_identity_change``.

    Unsubscribing detaches the listener from the auth client and drops it
    from the resolver that registered it.
    """

    def __init__(self, owner: list["IdentitySubscription"], auth_subscription: AuthSubscription) -> None:
        self._owner = owner
        self._auth_subscription = auth_subscription

    @property
    def active(self) -> bool:
        return self._auth_subscription.active

    def unsubscribe(self) -> None:
        self._auth_subscription.unsubscribe()
        if self in self._owner:
            self._owner.remove(self)


class SessionResolver:
    """Resolve access tokens and the auth client's session into identities.

    Args:
        auth: The auth collaborator.
        lookup_timeout: Seconds to wait for the collaborator before giving up.
    """

    def __init__(self, auth: AuthClient, lookup_timeout: float = 5.0) -> None:
        self._auth = auth
        self._lookup_timeout = lookup_timeout
        self._subscriptions: list[IdentitySubscription] = []
        self._pending: set[asyncio.Task[Any]] = set()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def subscription_count(self) -> int:
        """Number of identity callbacks currently registered."""
        return len(self._subscriptions)

    async def get_current_identity(self, access_token: str | None = None) -> Identity | None:
        """Return the identity behind ``access_token`` or the current session.

        Returns None when there is no session, the token is invalid or
        expired, or the collaborator does not answer within the timeout.

        Raises:
            RemoteError: If the auth collaborator fails for another reason.
        """
        try:
            async with asyncio.timeout(self._lookup_timeout):
                if access_token:
                    return await self._auth.get_user(access_token)
                session = await self._auth.get_session()
        except TimeoutError:
            logger.warning(f"Session lookup timed out after {self._lookup_timeout}s")
            return None
        return session.identity if session else None

    def on_identity_change(self, callback: IdentityCallback) -> IdentitySubscription:
        """Register a synchronous callback invoked with the new identity (None on sign-out).

        Raises:
            TypeError: If ``callback`` is a coroutine function. Use
                ``defer_to_next_turn`` from inside the callback instead.
            RuntimeError: If the resolver has been closed.
        """
        if self._closed:
            msg = "SessionResolver is closed"
            raise RuntimeError(msg)
        if inspect.iscoroutinefunction(callback):
            msg = "Identity callbacks must be synchronous; use defer_to_next_turn for async work"
            raise TypeError(msg)

        def _listener(_event: str, session: Session | None) -> None:
            callback(session.identity if session else None)

        subscription = IdentitySubscription(self._subscriptions, self._auth.on_auth_state_change(_listener))
        self._subscriptions.append(subscription)
        return subscription

    def defer_to_next_turn(self, factory: Callable[[], Awaitable[Any]]) -> None:
        """Schedule ``factory()`` to run as a task on the next event-loop turn.

        Used by identity callbacks, which run while the auth client holds its
        lock and so must not await collaborator calls themselves.
        """
        if self._closed:
            return
        loop = asyncio.get_running_loop()

        def _start() -> None:
            if self._closed:
                return
            task = loop.create_task(_run(factory))
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)

        loop.call_soon(_start)

    def close(self) -> None:
        """Unsubscribe every listener and cancel deferred work still pending."""
        self._closed = True
        for subscription in list(self._subscriptions):
            subscription.unsubscribe()
        self._subscriptions.clear()
        for task in list(self._pending):
            task.cancel()


async def _run(factory: Callable[[], Awaitable[Any]]) -> Any:
    return await factory()
