"""Pydantic v2 schemas for research reports."""

import enum
import uuid
from datetime import datetime

from pydantic import BaseModel

from thinktank_api.schemas.common import DepartmentRef


class SensitivityLevel(enum.StrEnum):
    PUBLIC = "public"
    INTERNAL = "internal"
    CONFIDENTIAL = "confidential"


class ReportResponse(BaseModel):
    """A report row as stored."""

    id: uuid.UUID
    title: str
    description: str | None = None
    author: str | None = None
    department_id: uuid.UUID | None = None
    department: DepartmentRef | None = None
    uploaded_by: uuid.UUID | None = None
    public: bool = False
    sensitivity_level: SensitivityLevel | None = None
    file_url: str | None = None
    file_name: str | None = None
    file_size: int | None = None
    file_type: str | None = None
    thumbnail_url: str | None = None
    created_at: datetime | None = None


class ReportListResponse(BaseModel):
    items: list[ReportResponse]


class ReportVisibilityRequest(BaseModel):
    """Request body for changing a report's visibility."""

    public: bool
