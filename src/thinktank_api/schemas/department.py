"""Pydantic v2 schemas for departments."""

import uuid

from pydantic import BaseModel


class DepartmentResponse(BaseModel):
    """A research department."""

    id: uuid.UUID
    name: str
    slug: str | None = None
