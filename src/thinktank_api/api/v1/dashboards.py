"""Dashboard endpoints for the admin and moderator surfaces.

A moderator asking for ``/admin`` is redirected to ``/moderator`` and an
admin asking for ``/moderator`` is redirected to ``/admin`` (303).
"""

import asyncio

from fastapi import APIRouter

from thinktank_api.core.dependencies import AdminActor, ModeratorActor
from thinktank_api.schemas.audit import AuditLogResponse
from thinktank_api.schemas.dashboard import AdminDashboardResponse, ModeratorDashboardResponse
from thinktank_api.services import analytics_service
from thinktank_api.services.audit_service import describe_activity, list_audit_logs

dashboards_router = APIRouter(tags=["dashboards"])

RECENT_ACTIVITY_LIMIT = 10

MODERATOR_SECTIONS = ["upload-reports", "upload-content", "manage-content", "manage-partners"]


@dashboards_router.get("/admin", response_model=AdminDashboardResponse)
async def admin_dashboard(actor: AdminActor) -> AdminDashboardResponse:
    """Admin overview: totals, content mix, active listings and recent activity."""
    stats, by_type, (active_opportunities, active_partners), entries = await asyncio.gather(
        analytics_service.get_admin_stats(actor.store),
        analytics_service.count_content_by_type(actor.store),
        analytics_service.count_active(actor.store),
        list_audit_logs(actor.store, limit=RECENT_ACTIVITY_LIMIT),
    )
    return AdminDashboardResponse(
        email=actor.identity.email,
        role=actor.role,
        stats=stats,
        content_by_type=by_type,
        active_opportunities=active_opportunities,
        active_partners=active_partners,
        recent_activity=[
            AuditLogResponse(
                id=entry.id,
                user_id=entry.user_id or None,
                action=entry.action,
                table_name=entry.table_name,
                record_id=entry.record_id,
                new_values=entry.new_values,
                created_at=entry.created_at,
                description=describe_activity(entry.action, entry.new_values),
            )
            for entry in entries
        ],
    )


@dashboards_router.get("/moderator", response_model=ModeratorDashboardResponse)
async def moderator_dashboard(actor: ModeratorActor) -> ModeratorDashboardResponse:
    """Moderator landing view."""
    return ModeratorDashboardResponse(email=actor.identity.email, role=actor.role, sections=MODERATOR_SECTIONS)
