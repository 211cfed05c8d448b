"""Role management: list, assign by email, and remove role assignments.

Assignment goes through the ``assign_role_by_email`` procedure, which upserts
the identity's single ``user_roles`` row. Its JSON response is validated into
``RoleAssignmentSucceeded`` or ``RoleAssignmentFailed``.
"""

from typing import Any

import pydantic
from loguru import logger

from thinktank_api.core.errors import RemoteError, ValidationError
from thinktank_api.lib.backend.changes import ChangeFeed
from thinktank_api.lib.backend.client import DataStoreClient, Order
from thinktank_api.models.audit_log import AuditLogEntry, ChangeEvent, MutationKind
from thinktank_api.models.role import Role
from thinktank_api.schemas.role import (
    RoleAssignmentFailed,
    RoleAssignmentResult,
    role_assignment_result_adapter,
)
from thinktank_api.services.audited_mutation import append_audit_entry, perform_mutation
from thinktank_api.services.role_gate import ROLE_TABLE, lookup_role

ASSIGN_ROLE_FUNCTION = "assign_role_by_email"


async def list_user_roles(store: DataStoreClient) -> list[dict[str, Any]]:
    """Return every role assignment, newest first."""
    return await store.select(
        ROLE_TABLE,
        columns="id, user_id, role, created_at",
        order=[Order("created_at", descending=True)],
    )


async def get_identity_role(store: DataStoreClient, identity_id: str) -> Role | None:
    """Return the identity's role if it is a known role, else None."""
    role = await lookup_role(store, identity_id)
    if role in {r.value for r in Role}:
        return Role(role)
    return None


def parse_assignment_result(data: Any) -> RoleAssignmentResult:
    """Validate the procedure's response.

    PostgREST returns a scalar JSON result directly, but some deployments wrap
    it in a one-element list; both are accepted.

    Raises:
        RemoteError: If the response matches neither variant.
    """
    if isinstance(data, list) and len(data) == 1:
        data = data[0]
    try:
        return role_assignment_result_adapter.validate_python(data)
    except pydantic.ValidationError as exc:
        logger.error("Malformed {} response: {!r}", ASSIGN_ROLE_FUNCTION, data)
        msg = f"Malformed response from {ASSIGN_ROLE_FUNCTION}"
        raise RemoteError(msg) from exc


async def assign_role(
    store: DataStoreClient,
    email: str,
    role: Role,
    *,
    actor_id: str,
    changes: ChangeFeed | None = None,
) -> RoleAssignmentResult:
    """Create or update the role of the identity registered under ``email``.

    Args:
        store: Data store client acting for ``actor_id``.
        email: Email of the identity to grant the role to.
        role: Role to assign.
        actor_id: The admin performing the assignment.
        changes: Optional change feed.

    Returns:
        ``RoleAssignmentSucceeded`` with ``action`` ``created`` or ``updated``,
        or ``RoleAssignmentFailed`` carrying the procedure's message. A failed
        assignment writes no audit entry.

    Raises:
        ValidationError: If ``email`` is blank.
        RemoteError: If the call fails or the response is malformed.
    """
    email = email.strip()
    if not email:
        msg = "Please provide both email and role."
        raise ValidationError(msg, field="email")

    data = await store.rpc(ASSIGN_ROLE_FUNCTION, {"user_email": email, "user_role": str(role)})
    result = parse_assignment_result(data)
    if isinstance(result, RoleAssignmentFailed):
        logger.info(f"Role assignment for {email} refused: {result.message}")
        return result

    action = "role_update" if result.action == "updated" else "role_assignment"
    values = {"email": email, "role": str(role)}
    await append_audit_entry(
        store,
        AuditLogEntry(user_id=actor_id, action=action, table_name=ROLE_TABLE, record_id=None, new_values=values),
    )
    logger.info(f"{action}: {email} -> {role} by {actor_id}")
    if changes is not None:
        event_type = "UPDATE" if result.action == "updated" else "INSERT"
        changes.publish(ChangeEvent(table=ROLE_TABLE, event_type=event_type, new=values))
    return result


async def remove_role(
    store: DataStoreClient,
    role_id: str,
    *,
    actor_id: str,
    changes: ChangeFeed | None = None,
) -> dict[str, Any]:
    """Delete one role assignment. Raises ``NotFoundError`` if it is already gone."""
    return await perform_mutation(
        store,
        MutationKind.DELETE,
        ROLE_TABLE,
        actor_id=actor_id,
        record_id=role_id,
        action="role_removal",
        changes=changes,
    )
