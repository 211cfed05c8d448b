"""Pydantic v2 schemas for job, internship and attachment opportunities."""

import enum
import uuid
from datetime import date, datetime

from pydantic import BaseModel, EmailStr, Field

from thinktank_api.schemas.common import DepartmentRef


class OpportunityType(enum.StrEnum):
    JOB = "job"
    INTERNSHIP = "internship"
    ATTACHMENT = "attachment"


class OpportunityResponse(BaseModel):
    """An opportunity row as stored."""

    id: uuid.UUID
    title: str
    type: OpportunityType
    department_id: uuid.UUID | None = None
    department: DepartmentRef | None = None
    location: str | None = None
    employment_type: str | None = None
    description: str
    requirements: str | None = None
    responsibilities: str | None = None
    application_deadline: datetime | date | None = None
    application_email: str | None = None
    application_url: str | None = None
    is_active: bool = True
    created_at: datetime | None = None


class OpportunityListResponse(BaseModel):
    items: list[OpportunityResponse]


class OpportunityCreateRequest(BaseModel):
    """Request body for posting an opportunity."""

    title: str = Field(min_length=1, max_length=200)
    type: OpportunityType = OpportunityType.JOB
    department_id: uuid.UUID | None = None
    location: str | None = None
    employment_type: str | None = None
    description: str = Field(min_length=1)
    requirements: str | None = None
    responsibilities: str | None = None
    application_deadline: date | None = None
    application_email: EmailStr | None = None
    application_url: str | None = None
    is_active: bool = True


class OpportunityUpdateRequest(BaseModel):
    """Request body for partially updating an opportunity (all fields optional)."""

    title: str | None = Field(default=None, min_length=1, max_length=200)
    type: OpportunityType | None = None
    department_id: uuid.UUID | None = None
    location: str | None = None
    employment_type: str | None = None
    description: str | None = Field(default=None, min_length=1)
    requirements: str | None = None
    responsibilities: str | None = None
    application_deadline: date | None = None
    application_email: EmailStr | None = None
    application_url: str | None = None
    is_active: bool | None = None
