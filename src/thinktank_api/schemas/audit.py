"""Pydantic v2 schemas for audit log queries and the activity feed."""

import uuid
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class AuditLogResponse(BaseModel):
    """An audit log entry with a human-readable description."""

    id: uuid.UUID | None = None
    user_id: uuid.UUID | None = None
    action: str
    table_name: str | None = None
    record_id: str | None = None
    old_values: dict[str, Any] | None = None
    new_values: dict[str, Any] | None = None
    created_at: datetime | None = None
    description: str = Field(description="Activity feed label for the action")


class AuditLogListResponse(BaseModel):
    items: list[AuditLogResponse]
