"""Access-check state machine bound to one resolver and one surface.

``Unresolved -> Checking -> {Denied, AdminGranted, ModeratorGranted}``.
An identity change re-enters ``Checking``; a sign-out returns to
``Unresolved``. A role check that completes after ``close()`` or after a
newer identity change is discarded.
"""

import asyncio

from loguru import logger

from thinktank_api.lib.backend.client import DataStoreClient
from thinktank_api.models.identity import Identity
from thinktank_api.models.role import AccessOutcome, AccessSurface, GateState
from thinktank_api.services.role_gate import resolve_role
from thinktank_api.services.session_resolver import SessionResolver


class AccessSession:
    """Track the gate state for one surface across identity changes.

    Args:
        resolver: Session resolver supplying the identity and change events.
        store: Data store used for role lookups.
        required: The surface this session guards.
    """

    def __init__(self, resolver: SessionResolver, store: DataStoreClient, required: AccessSurface) -> None:
        self._resolver = resolver
        self._store = store
        self.required = required
        self.state = GateState.UNRESOLVED
        self.identity: Identity | None = None
        self.outcome: AccessOutcome | None = None
        self._generation = 0
        self._closed = False
        self._settled = asyncio.Event()
        self._subscription = resolver.on_identity_change(self._on_identity_change)

    async def __aenter__(self) -> "AccessSession":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def closed(self) -> bool:
        return self._closed

    async def start(self, access_token: str | None = None) -> AccessOutcome | None:
        """Resolve the current identity and run the first role check."""
        identity = await self._resolver.get_current_identity(access_token)
        return await self.check(identity)

    async def check(self, identity: Identity | None) -> AccessOutcome | None:
        """Run a role check for ``identity``.

        Returns:
            The outcome, or None when there is no identity or the result
            was superseded.
        """
        if self._closed:
            return None
        self._generation += 1
        generation = self._generation
        self.identity = identity
        if identity is None:
            self._settle(GateState.UNRESOLVED, None)
            return None

        self.state = GateState.CHECKING
        self._settled.clear()
        outcome = await resolve_role(self._store, identity.id, self.required)
        if self._closed or generation != self._generation:
            logger.debug(f"Discarding stale role check for {identity.id}")
            return None
        self._settle(outcome.state, outcome)
        return outcome

    async def wait_settled(self) -> AccessOutcome | None:
        """Wait until the latest check has finished and return its outcome."""
        await self._settled.wait()
        return self.outcome

    def close(self) -> None:
        self._closed = True
        self._subscription.unsubscribe()
        self._settled.set()

    def _settle(self, state: GateState, outcome: AccessOutcome | None) -> None:
        self.state = state
        self.outcome = outcome
        self._settled.set()

    def _on_identity_change(self, identity: Identity | None) -> None:
        if self._closed:
            return
        # Invalidate any check already in flight before the new one starts.
        self._generation += 1
        self.outcome = None
        self._settled.clear()
        self.state = GateState.CHECKING if identity is not None else GateState.UNRESOLVED
        self._resolver.defer_to_next_turn(lambda: self.check(identity))
