"""Pydantic v2 schemas for the admin and moderator dashboards."""

from pydantic import BaseModel, Field

from thinktank_api.models.role import Role
from thinktank_api.schemas.audit import AuditLogResponse


class AdminStats(BaseModel):
    """Row returned by the ``get_admin_stats`` procedure."""

    total_reports: int = 0
    public_reports: int = 0
    total_content: int = 0
    published_content: int = 0
    recent_uploads: int = Field(default=0, description="Uploads in the last 30 days")
    total_users: int = 0


class ContentTypeCount(BaseModel):
    type: str
    count: int


class AdminDashboardResponse(BaseModel):
    """Everything the admin overview screen shows."""

    email: str
    role: Role
    stats: AdminStats
    content_by_type: list[ContentTypeCount]
    active_opportunities: int
    active_partners: int
    recent_activity: list[AuditLogResponse]


class ModeratorDashboardResponse(BaseModel):
    """The moderator landing view: who is signed in and which screens are available."""

    email: str
    role: Role
    sections: list[str]
