"""Audited mutation: every create, update and delete on a managed entity.

The contract has two phases. The store mutation runs first and its failure
propagates unchanged with nothing logged. Once it succeeds exactly one
``audit_logs`` row is appended. A failed append is logged as a warning and
never undoes or fails the mutation.
"""

from typing import Any

from loguru import logger

from thinktank_api.core.errors import NotFoundError, RemoteError, ValidationError
from thinktank_api.lib.backend.changes import ChangeFeed
from thinktank_api.lib.backend.client import DataStoreClient, eq
from thinktank_api.models.audit_log import AuditLogEntry, ChangeEvent, MutationKind

AUDIT_TABLE = "audit_logs"

# Table name -> entity name used in default action tags.
ENTITY_NAMES: dict[str, str] = {
    "content": "content",
    "reports": "report",
    "partners": "partner",
    "opportunities": "opportunity",
    "user_roles": "role",
}

_ACTION_SUFFIXES = {
    MutationKind.CREATE: "creation",
    MutationKind.UPDATE: "update",
    MutationKind.DELETE: "deletion",
}

_EVENT_TYPES = {
    MutationKind.CREATE: "INSERT",
    MutationKind.UPDATE: "UPDATE",
    MutationKind.DELETE: "DELETE",
}


def default_action(kind: MutationKind, table: str) -> str:
    """Return the default audit tag, e.g. ``content_deletion`` or ``opportunity_update``."""
    return f"{ENTITY_NAMES.get(table, table)}_{_ACTION_SUFFIXES[kind]}"


async def append_audit_entry(store: DataStoreClient, entry: AuditLogEntry) -> bool:
    """Append one audit row. Best effort.

    Returns:
        True if the row was written, False if the store rejected it.
    """
    try:
        await store.insert(AUDIT_TABLE, entry.to_row())
    except RemoteError as exc:
        logger.warning(f"Audit log append failed for {entry.action} on {entry.table_name}: {exc.message}")
        return False
    return True


async def _snapshot(store: DataStoreClient, table: str, record_id: str, key: str) -> dict[str, Any] | None:
    """Read the row about to be deleted. Returns {} when the read fails."""
    try:
        rows = await store.select(table, filters=[eq(key, record_id)], limit=1)
    except RemoteError as exc:
        logger.warning(f"Could not snapshot {table} {record_id} before delete: {exc.message}")
        return {}
    return rows[0] if rows else None


async def perform_mutation(
    store: DataStoreClient,
    kind: MutationKind,
    table: str,
    *,
    actor_id: str,
    record_id: str | None = None,
    payload: dict[str, Any] | None = None,
    action: str | None = None,
    audit_values: dict[str, Any] | None = None,
    changes: ChangeFeed | None = None,
    key: str = "id",
) -> dict[str, Any]:
    """Mutate one row of ``table`` and record the change in the audit log.

    Args:
        store: Data store client acting for ``actor_id``.
        kind: Create, update or delete.
        table: Target table.
        actor_id: Identity performing the mutation.
        record_id: Target row id. Required for update and delete.
        payload: Row to insert or patch to apply.
        action: Audit tag. Defaults to ``<entity>_<creation|update|deletion>``.
        audit_values: Values recorded as ``new_values`` instead of the stored row.
        changes: Optional change feed notified after success.
        key: Column matched against ``record_id``.

    Returns:
        The created, updated or deleted row as returned by the store.

    Raises:
        ValidationError: If ``record_id`` is missing for update or delete.
        NotFoundError: If no row matches ``record_id``.
        RemoteError: If the store rejects the mutation.
    """
    if kind != MutationKind.CREATE and not record_id:
        msg = f"record_id is required to {kind} a {table} row"
        raise ValidationError(msg, field="record_id")
    action = action or default_action(kind, table)

    old_values: dict[str, Any] | None = None
    if kind == MutationKind.CREATE:
        row = await store.insert(table, dict(payload or {}))
        record_id = str(row.get(key) or record_id or "") or None
        new_values = audit_values if audit_values is not None else row
    elif kind == MutationKind.UPDATE:
        rows = await store.update(table, [eq(key, record_id)], dict(payload or {}))
        if not rows:
            msg = f"No {table} row with {key} {record_id}"
            raise NotFoundError(msg)
        row = rows[0]
        new_values = audit_values if audit_values is not None else dict(payload or {})
    else:
        snapshot = await _snapshot(store, table, record_id, key)
        rows = await store.delete(table, [eq(key, record_id)])
        if not rows:
            msg = f"No {table} row with {key} {record_id}"
            raise NotFoundError(msg)
        row = rows[0]
        old_values = snapshot or {}
        new_values = None

    entry = AuditLogEntry(
        user_id=actor_id,
        action=action,
        table_name=table,
        record_id=record_id,
        old_values=old_values,
        new_values=new_values,
    )
    await append_audit_entry(store, entry)
    logger.info(f"{action}: {table} {record_id} by {actor_id}")

    if changes is not None:
        changes.publish(
            ChangeEvent(
                table=table,
                event_type=_EVENT_TYPES[kind],
                new=row if kind != MutationKind.DELETE else None,
                old=old_values,
            )
        )
    return row
