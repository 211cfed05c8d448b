"""Audit log queries and activity feed labels.

Audit rows are written only by ``audited_mutation``; this module reads them.
"""

from typing import Any

from thinktank_api.lib.backend.client import DataStoreClient, Filter, Order, eq
from thinktank_api.models.audit_log import AuditLogEntry
from thinktank_api.services.audited_mutation import AUDIT_TABLE

_LABELS = {
    "blog_create": 'Created blog post "{title}"',
    "blog_update": 'Updated blog post "{title}"',
    "blog_delete": "Deleted a blog post",
    "content_upload": 'Uploaded content "{title}"',
    "report_upload": 'Uploaded report "{title}"',
    "opportunity_creation": 'Created opportunity "{title}"',
    "opportunity_update": 'Updated opportunity "{title}"',
    "partner_creation": 'Added partner "{title}"',
    "partner_update": 'Updated partner "{title}"',
    "role_assignment": "Assigned user role",
    "role_update": "Updated user role",
    "role_removal": "Removed user role",
}


async def list_audit_logs(
    store: DataStoreClient,
    *,
    limit: int = 50,
    action: str | None = None,
    table_name: str | None = None,
    user_id: str | None = None,
) -> list[AuditLogEntry]:
    """Query audit log entries, newest first.

    Args:
        store: The data store client.
        limit: Maximum number of entries.
        action: Filter by action tag.
        table_name: Filter by target table.
        user_id: Filter by acting identity.

    Returns:
        Matching entries.
    """
    filters: list[Filter] = []
    if action:
        filters.append(eq("action", action))
    if table_name:
        filters.append(eq("table_name", table_name))
    if user_id:
        filters.append(eq("user_id", user_id))
    rows = await store.select(
        AUDIT_TABLE,
        filters=filters,
        order=[Order("created_at", descending=True)],
        limit=limit,
    )
    return [AuditLogEntry.from_row(row) for row in rows]


def describe_activity(action: str, new_values: dict[str, Any] | None = None) -> str:
    """Return the activity feed label for an audit entry.

    Unknown actions are title-cased (``partner_deletion`` -> ``Partner Deletion``).
    """
    template = _LABELS.get(action)
    if template is None:
        return action.replace("_", " ").title()
    values = new_values or {}
    title = values.get("title") or values.get("name") or ""
    return template.format(title=title)
