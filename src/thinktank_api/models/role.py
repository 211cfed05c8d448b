"""Role values, access surfaces and role-gate outcomes."""

import enum
from dataclasses import dataclass


class Role(enum.StrEnum):
    """Roles stored in the ``user_roles`` table."""

    ADMIN = "admin"
    MODERATOR = "moderator"
    USER = "user"


class AccessSurface(enum.StrEnum):
    """Work surfaces a caller can ask to enter.

    ``STAFF`` is the shared moderator-or-admin context used by the content,
    report and partner screens.
    """

    ADMIN = "admin-surface"
    MODERATOR = "moderator-surface"
    STAFF = "staff-surface"


class AccessDecision(enum.StrEnum):
    """Possible role-gate outcomes."""

    DENIED = "denied"
    ADMIN_GRANTED = "admin_granted"
    MODERATOR_GRANTED = "moderator_granted"
    REDIRECT = "redirect"


class GateState(enum.StrEnum):
    """States of the access-check state machine."""

    UNRESOLVED = "unresolved"
    CHECKING = "checking"
    DENIED = "denied"
    ADMIN_GRANTED = "admin_granted"
    MODERATOR_GRANTED = "moderator_granted"


@dataclass(frozen=True)
class AccessOutcome:
    """Declarative result of a role check.

    ``redirect_to`` is set only for ``REDIRECT`` outcomes. ``role`` carries the
    role that produced the outcome, when one was found.
    """

    decision: AccessDecision
    redirect_to: AccessSurface | None = None
    role: Role | None = None

    @classmethod
    def denied(cls) -> "AccessOutcome":
        return cls(AccessDecision.DENIED)

    @classmethod
    def redirect(cls, surface: AccessSurface, role: Role) -> "AccessOutcome":
        return cls(AccessDecision.REDIRECT, redirect_to=surface, role=role)

    @property
    def granted(self) -> bool:
        return self.decision in (AccessDecision.ADMIN_GRANTED, AccessDecision.MODERATOR_GRANTED)

    @property
    def state(self) -> GateState:
        """Terminal gate state for this outcome.

        A redirect still means the role was recognised, so it maps to the
        grant state of the role that triggered it.
        """
        if self.decision == AccessDecision.ADMIN_GRANTED:
            return GateState.ADMIN_GRANTED
        if self.decision == AccessDecision.MODERATOR_GRANTED:
            return GateState.MODERATOR_GRANTED
        if self.decision == AccessDecision.REDIRECT:
            return GateState.ADMIN_GRANTED if self.role == Role.ADMIN else GateState.MODERATOR_GRANTED
        return GateState.DENIED
