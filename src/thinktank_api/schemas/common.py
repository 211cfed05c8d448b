"""Common Pydantic v2 schemas shared across the API."""

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Standard error response body."""

    detail: str = Field(description="Human-readable error message")
    field: str | None = Field(default=None, description="Offending field, for validation errors")


class DepartmentRef(BaseModel):
    """Department embedded in another record."""

    name: str
    slug: str | None = None
