"""Pydantic v2 schemas for partner organisations."""

import uuid
from datetime import datetime

from pydantic import BaseModel, Field


class PartnerResponse(BaseModel):
    """A partner row as stored."""

    id: uuid.UUID
    name: str
    type: str
    description: str | None = None
    logo_url: str | None = None
    website_url: str | None = None
    display_order: int = 0
    active: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None


class PartnerListResponse(BaseModel):
    items: list[PartnerResponse]


class PartnerCreateRequest(BaseModel):
    """Request body for adding a partner."""

    name: str = Field(min_length=1, max_length=200)
    type: str = Field(min_length=1, max_length=100)
    description: str | None = None
    website_url: str | None = None
    display_order: int = 0
    active: bool = True


class PartnerUpdateRequest(BaseModel):
    """Request body for partially updating a partner (all fields optional)."""

    name: str | None = Field(default=None, min_length=1, max_length=200)
    type: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = None
    website_url: str | None = None
    display_order: int | None = None
    active: bool | None = None
