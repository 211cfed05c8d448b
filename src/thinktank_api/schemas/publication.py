"""Pydantic v2 schemas for the public publications feed and careers listing."""

import uuid
from datetime import datetime
from typing import Literal

from pydantic import BaseModel

from thinktank_api.schemas.common import DepartmentRef
from thinktank_api.schemas.opportunity import OpportunityResponse


class PublicationItem(BaseModel):
    """One entry in the merged feed of published content and public reports."""

    id: uuid.UUID
    title: str
    body: str | None = None
    type: str
    created_at: datetime | None = None
    file_url: str | None = None
    file_name: str | None = None
    media_type: str | None = None
    media_url: str | None = None
    thumbnail_url: str | None = None
    slug: str | None = None
    author: str | None = None
    read_time: int | None = None
    department: DepartmentRef | None = None
    source: Literal["content", "reports"]


class PublicationListResponse(BaseModel):
    """Filtered feed plus the facets available across the unfiltered feed."""

    items: list[PublicationItem]
    total: int
    types: list[str]
    departments: list[DepartmentRef]


class CareerListResponse(BaseModel):
    items: list[OpportunityResponse]
    total: int
