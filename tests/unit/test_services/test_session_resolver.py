"""Tests for the session resolver."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from thinktank_api.core.errors import RemoteError
from thinktank_api.models.identity import Identity
from thinktank_api.services.session_resolver import SessionResolver


class TestGetCurrentIdentity:
    async def test_token_resolves_identity(self, resolver: SessionResolver, admin_identity) -> None:
        assert await resolver.get_current_identity("admin-token") == admin_identity

    async def test_invalid_token_returns_none(self, resolver: SessionResolver) -> None:
        assert await resolver.get_current_identity("expired") is None

    async def test_no_session_returns_none(self, resolver: SessionResolver) -> None:
        assert await resolver.get_current_identity() is None

    async def test_uses_signed_in_session(self, resolver: SessionResolver, auth_client, moderator_identity) -> None:
        await auth_client.sign_in(moderator_identity.email, "correct-horse")
        assert await resolver.get_current_identity() == moderator_identity

    async def test_slow_collaborator_times_out_to_none(self) -> None:
        auth = AsyncMock()

        async def hang(token: str) -> Identity:
            await asyncio.sleep(10)
            return Identity("1", "a@b.org")

        auth.get_user.side_effect = hang
        resolver = SessionResolver(auth, lookup_timeout=0.05)
        assert await resolver.get_current_identity("t") is None

    async def test_remote_error_propagates(self) -> None:
        auth = AsyncMock()
        auth.get_user.side_effect = RemoteError("auth down", status_code=503)
        resolver = SessionResolver(auth)
        with pytest.raises(RemoteError, match="auth down"):
            await resolver.get_current_identity("t")


class TestIdentityChanges:
    async def test_callback_receives_identity_then_none(
        self, resolver: SessionResolver, auth_client, admin_identity
    ) -> None:
        seen: list[Identity | None] = []
        resolver.on_identity_change(seen.append)

        await auth_client.sign_in(admin_identity.email, "correct-horse")
        await auth_client.sign_out()

        assert seen == [admin_identity, None]

    async def test_coroutine_callback_rejected(self, resolver: SessionResolver) -> None:
        async def callback(identity: Identity | None) -> None:
            return None

        with pytest.raises(TypeError, match="defer_to_next_turn"):
            resolver.on_identity_change(callback)

    async def test_close_unsubscribes(self, resolver: SessionResolver, auth_client, admin_identity) -> None:
        seen: list[Identity | None] = []
        subscription = resolver.on_identity_change(seen.append)

        resolver.close()
        await auth_client.sign_in(admin_identity.email, "correct-horse")

        assert seen == []
        assert not subscription.active
        with pytest.raises(RuntimeError, match="closed"):
            resolver.on_identity_change(seen.append)

    async def test_deferred_work_may_call_the_collaborator(
        self, resolver: SessionResolver, auth_client, admin_identity
    ) -> None:
        """Follow-up lookups run after the auth client has released its lock."""
        looked_up: list[Identity | None] = []
        done = asyncio.Event()

        async def follow_up() -> None:
            looked_up.append(await resolver.get_current_identity())
            done.set()

        resolver.on_identity_change(lambda identity: resolver.defer_to_next_turn(follow_up))
        await auth_client.sign_in(admin_identity.email, "correct-horse")
        await asyncio.wait_for(done.wait(), timeout=1)

        assert looked_up == [admin_identity]

    async def test_close_cancels_pending_work(self, resolver: SessionResolver) -> None:
        started = asyncio.Event()

        async def slow() -> None:
            started.set()
            await asyncio.sleep(10)

        resolver.defer_to_next_turn(slow)
        await asyncio.wait_for(started.wait(), timeout=1)
        resolver.close()
        await asyncio.sleep(0)
        assert resolver.closed


class TestIdentitySubscription:
    async def test_unsubscribe_detaches_from_resolver(
        self, resolver: SessionResolver, auth_client, admin_identity
    ) -> None:
        seen: list[Identity | None] = []
        subscription = resolver.on_identity_change(seen.append)

        subscription.unsubscribe()
        await auth_client.sign_in(admin_identity.email, "correct-horse")

        assert seen == []
        assert not subscription.active
        assert resolver.subscription_count == 0

    async def test_close_clears_every_subscription(self, resolver: SessionResolver) -> None:
        subscriptions = [resolver.on_identity_change(lambda identity: None) for _ in range(3)]

        resolver.close()

        assert resolver.subscription_count == 0
        assert not any(subscription.active for subscription in subscriptions)
