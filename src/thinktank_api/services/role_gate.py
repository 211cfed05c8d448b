"""Role gate: classify an identity's role against a requested surface.

The gate only decides. Callers turn an ``AccessOutcome`` into a response
(403, redirect, or the work surface itself).
"""

from loguru import logger

from thinktank_api.core.errors import RemoteError
from thinktank_api.lib.backend.client import DataStoreClient, Order, eq
from thinktank_api.models.role import AccessDecision, AccessOutcome, AccessSurface, Role

ROLE_TABLE = "user_roles"


async def lookup_role(store: DataStoreClient, identity_id: str) -> str | None:
    """Return the identity's most recently assigned role, or None.

    Rows are ordered by ``created_at`` descending so the latest assignment
    wins when more than one row exists.

    Args:
        store: The data store client.
        identity_id: The identity's UUID.

    Returns:
        The raw role string, or None if no row exists.
    """
    rows = await store.select(
        ROLE_TABLE,
        columns="role, created_at",
        filters=[eq("user_id", identity_id)],
        order=[Order("created_at", descending=True)],
    )
    if not rows:
        return None
    if len(rows) > 1:
        logger.warning(f"Identity {identity_id} has {len(rows)} role rows; using the latest")
    role = rows[0].get("role")
    return role if isinstance(role, str) else None


def classify_role(role: str | None, required: AccessSurface) -> AccessOutcome:
    """Map a role and the requested surface to an outcome. Pure.

    Args:
        role: Raw role value, or None when no row exists.
        required: The surface being entered.

    Returns:
        The access outcome.
    """
    if role == Role.ADMIN:
        if required == AccessSurface.MODERATOR:
            return AccessOutcome.redirect(AccessSurface.ADMIN, Role.ADMIN)
        return AccessOutcome(AccessDecision.ADMIN_GRANTED, role=Role.ADMIN)
    if role == Role.MODERATOR:
        if required == AccessSurface.ADMIN:
            return AccessOutcome.redirect(AccessSurface.MODERATOR, Role.MODERATOR)
        return AccessOutcome(AccessDecision.MODERATOR_GRANTED, role=Role.MODERATOR)
    return AccessOutcome.denied()


async def resolve_role(store: DataStoreClient, identity_id: str, required: AccessSurface) -> AccessOutcome:
    """Look up and classify the role of ``identity_id`` for ``required``.

    A failed lookup yields ``Denied``.
    """
    try:
        role = await lookup_role(store, identity_id)
    except RemoteError as exc:
        logger.warning(f"Role lookup failed for {identity_id}, denying access: {exc.message}")
        return AccessOutcome.denied()
    outcome = classify_role(role, required)
    logger.debug("Role gate: identity={} role={} surface={} decision={}", identity_id, role, required, outcome.decision)
    return outcome
