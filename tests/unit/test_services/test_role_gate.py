"""Tests for role lookup and classification."""

import pytest

from thinktank_api.models.role import AccessDecision, AccessOutcome, AccessSurface, GateState, Role
from thinktank_api.services.role_gate import classify_role, lookup_role, resolve_role


class TestClassifyRole:
    def test_admin_on_admin_surface_granted(self) -> None:
        outcome = classify_role("admin", AccessSurface.ADMIN)
        assert outcome.decision == AccessDecision.ADMIN_GRANTED
        assert outcome.role == Role.ADMIN

    def test_admin_on_moderator_surface_redirected_to_admin(self) -> None:
        outcome = classify_role("admin", AccessSurface.MODERATOR)
        assert outcome == AccessOutcome.redirect(AccessSurface.ADMIN, Role.ADMIN)

    def test_moderator_on_moderator_surface_granted(self) -> None:
        outcome = classify_role("moderator", AccessSurface.MODERATOR)
        assert outcome.decision == AccessDecision.MODERATOR_GRANTED

    def test_moderator_on_admin_surface_redirected_to_moderator(self) -> None:
        outcome = classify_role("moderator", AccessSurface.ADMIN)
        assert outcome.decision == AccessDecision.REDIRECT
        assert outcome.redirect_to == AccessSurface.MODERATOR

    @pytest.mark.parametrize("role", ["admin", "moderator"])
    def test_staff_surface_grants_both_roles(self, role: str) -> None:
        assert classify_role(role, AccessSurface.STAFF).granted

    @pytest.mark.parametrize("role", [None, "user", "superuser", "", "ADMIN"])
    @pytest.mark.parametrize("surface", list(AccessSurface))
    def test_no_or_unknown_role_denied_everywhere(self, role: str | None, surface: AccessSurface) -> None:
        outcome = classify_role(role, surface)
        assert outcome.decision == AccessDecision.DENIED
        assert outcome.state == GateState.DENIED
        assert not outcome.granted


class TestLookupRole:
    async def test_returns_role(self, store, moderator_identity) -> None:
        assert await lookup_role(store, moderator_identity.id) == "moderator"

    async def test_missing_row_returns_none(self, store, reader_identity) -> None:
        assert await lookup_role(store, reader_identity.id) is None

    async def test_latest_row_wins(self, store, reader_identity) -> None:
        store.seed(
            "user_roles",
            {"id": "r1", "user_id": reader_identity.id, "role": "admin", "created_at": "2024-01-01T00:00:00+00:00"},
            {"id": "r2", "user_id": reader_identity.id, "role": "moderator", "created_at": "2024-06-01T00:00:00+00:00"},
        )
        assert await lookup_role(store, reader_identity.id) == "moderator"


class TestResolveRole:
    async def test_moderator_on_admin_surface(self, store, moderator_identity) -> None:
        """A moderator asking for the admin surface is sent to the moderator surface."""
        outcome = await resolve_role(store, moderator_identity.id, AccessSurface.ADMIN)
        assert outcome.decision == AccessDecision.REDIRECT
        assert outcome.redirect_to == AccessSurface.MODERATOR

    async def test_identity_without_role_rows_denied(self, store) -> None:
        outcome = await resolve_role(store, "none@example.org-id", AccessSurface.ADMIN)
        assert outcome == AccessOutcome.denied()

    async def test_lookup_failure_fails_closed(self, store, admin_identity) -> None:
        store.fail("select", "user_roles")
        outcome = await resolve_role(store, admin_identity.id, AccessSurface.ADMIN)
        assert outcome.decision == AccessDecision.DENIED
