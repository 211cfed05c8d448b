"""Tests for role-gate outcomes and audit log records."""

from datetime import datetime

import pytest

from thinktank_api.models.audit_log import AuditLogEntry
from thinktank_api.models.role import AccessDecision, AccessOutcome, AccessSurface, GateState, Role


class TestAccessOutcome:
    @pytest.mark.parametrize(
        ("outcome", "state"),
        [
            (AccessOutcome.denied(), GateState.DENIED),
            (AccessOutcome(AccessDecision.ADMIN_GRANTED, role=Role.ADMIN), GateState.ADMIN_GRANTED),
            (AccessOutcome(AccessDecision.MODERATOR_GRANTED, role=Role.MODERATOR), GateState.MODERATOR_GRANTED),
            (AccessOutcome.redirect(AccessSurface.ADMIN, Role.ADMIN), GateState.ADMIN_GRANTED),
            (AccessOutcome.redirect(AccessSurface.MODERATOR, Role.MODERATOR), GateState.MODERATOR_GRANTED),
        ],
    )
    def test_state(self, outcome: AccessOutcome, state: GateState) -> None:
        assert outcome.state == state

    def test_redirect_is_not_granted(self) -> None:
        outcome = AccessOutcome.redirect(AccessSurface.ADMIN, Role.ADMIN)
        assert not outcome.granted
        assert outcome.redirect_to == AccessSurface.ADMIN

    def test_denied_has_no_role(self) -> None:
        outcome = AccessOutcome.denied()
        assert not outcome.granted
        assert outcome.role is None


class TestAuditLogEntry:
    def test_to_row_omits_server_fields(self) -> None:
        entry = AuditLogEntry(
            user_id="u1",
            action="create",
            table_name="content",
            record_id="c1",
            new_values={"title": "Sahel Outlook"},
        )

        row = entry.to_row()

        assert row == {
            "user_id": "u1",
            "action": "create",
            "table_name": "content",
            "record_id": "c1",
            "old_values": None,
            "new_values": {"title": "Sahel Outlook"},
        }

    def test_from_row_parses_timestamp(self) -> None:
        entry = AuditLogEntry.from_row(
            {
                "id": "a1",
                "user_id": "u1",
                "action": "delete",
                "table_name": "reports",
                "record_id": "r1",
                "old_values": {"title": "Old"},
                "new_values": None,
                "created_at": "2024-03-01T12:00:00+00:00",
            }
        )

        assert entry.id == "a1"
        assert entry.action == "delete"
        assert entry.old_values == {"title": "Old"}
        assert isinstance(entry.created_at, datetime)
        assert entry.created_at.year == 2024

    def test_from_row_tolerates_missing_fields(self) -> None:
        entry = AuditLogEntry.from_row({"id": "a2"})
        assert entry.user_id == ""
        assert entry.record_id is None
        assert entry.created_at is None
