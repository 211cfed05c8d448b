"""Pydantic v2 schemas for content items."""

import enum
import uuid
from datetime import datetime

from pydantic import BaseModel, Field

from thinktank_api.schemas.common import DepartmentRef


class ContentType(enum.StrEnum):
    """Kinds of content an editor can publish."""

    BLOG = "blog"
    VIDEO = "video"
    INFOGRAPHICS = "infographics"
    POLICY_BRIEF = "policy-brief"
    OP_ED = "op-ed"
    NEWS_UPDATE = "news-update"


class ContentResponse(BaseModel):
    """A content row as stored."""

    id: uuid.UUID
    title: str
    body: str | None = None
    type: str
    media_type: str | None = None
    department_id: uuid.UUID | None = None
    department: DepartmentRef | None = None
    author: str | None = None
    published: bool = False
    slug: str | None = None
    thumbnail_url: str | None = None
    gallery_images: list[str] | None = None
    file_url: str | None = None
    file_name: str | None = None
    file_size: int | None = None
    file_type: str | None = None
    created_by: uuid.UUID | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ContentListResponse(BaseModel):
    """All content rows, newest first."""

    items: list[ContentResponse]


class PublishRequest(BaseModel):
    """Request body for changing a content item's visibility."""

    published: bool = Field(description="Whether the item appears on the public site")
