"""AuditLogEntry record and mutation kinds for the audited-mutation path."""

import enum
from dataclasses import dataclass
from datetime import datetime
from typing import Any


class MutationKind(enum.StrEnum):
    """Kinds of state-changing operations against a managed entity."""

    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


@dataclass(frozen=True)
class AuditLogEntry:
    """Immutable record of a mutating action. Append-only (no updates or deletes)."""

    user_id: str
    action: str
    table_name: str
    record_id: str | None
    old_values: dict[str, Any] | None = None
    new_values: dict[str, Any] | None = None
    created_at: datetime | None = None
    id: str | None = None

    def to_row(self) -> dict[str, Any]:
        """Return the insert payload for the ``audit_logs`` table."""
        return {
            "user_id": self.user_id,
            "action": self.action,
            "table_name": self.table_name,
            "record_id": self.record_id,
            "old_values": self.old_values,
            "new_values": self.new_values,
        }

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "AuditLogEntry":
        created_at = row.get("created_at")
        if isinstance(created_at, str):
            created_at = datetime.fromisoformat(created_at)
        return cls(
            id=row.get("id"),
            user_id=row.get("user_id") or "",
            action=row.get("action") or "",
            table_name=row.get("table_name") or "",
            record_id=row.get("record_id"),
            old_values=row.get("old_values"),
            new_values=row.get("new_values"),
            created_at=created_at,
        )


@dataclass(frozen=True)
class ChangeEvent:
    """A change notification for live refresh of read models."""

    table: str
    event_type: str
    new: dict[str, Any] | None = None
    old: dict[str, Any] | None = None
