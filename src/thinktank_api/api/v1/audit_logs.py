"""Audit log query endpoint (admin only)."""

import uuid
from typing import Annotated

from fastapi import APIRouter, Query

from thinktank_api.core.dependencies import AdminActor
from thinktank_api.schemas.audit import AuditLogListResponse, AuditLogResponse
from thinktank_api.services.audit_service import describe_activity, list_audit_logs

audit_logs_router = APIRouter(prefix="/audit-logs", tags=["audit"])


@audit_logs_router.get("", response_model=AuditLogListResponse)
async def query_audit_logs(
    actor: AdminActor,
    limit: Annotated[int, Query(ge=1, le=500)] = 50,
    action: str | None = None,
    table_name: str | None = None,
    user_id: uuid.UUID | None = None,
) -> AuditLogListResponse:
    """Return audit entries newest first, optionally filtered."""
    entries = await list_audit_logs(
        actor.store,
        limit=limit,
        action=action,
        table_name=table_name,
        user_id=str(user_id) if user_id else None,
    )
    return AuditLogListResponse(
        items=[
            AuditLogResponse(
                id=entry.id,
                user_id=entry.user_id or None,
                action=entry.action,
                table_name=entry.table_name,
                record_id=entry.record_id,
                old_values=entry.old_values,
                new_values=entry.new_values,
                created_at=entry.created_at,
                description=describe_activity(entry.action, entry.new_values),
            )
            for entry in entries
        ]
    )
