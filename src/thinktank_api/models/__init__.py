"""Domain types shared by services and the HTTP layer."""

from thinktank_api.models.audit_log import AuditLogEntry, ChangeEvent, MutationKind
from thinktank_api.models.identity import Identity, Session
from thinktank_api.models.role import AccessDecision, AccessOutcome, AccessSurface, GateState, Role

__all__ = [
    "AccessDecision",
    "AccessOutcome",
    "AccessSurface",
    "AuditLogEntry",
    "ChangeEvent",
    "GateState",
    "Identity",
    "MutationKind",
    "Role",
    "Session",
]
