"""Pydantic v2 schemas for role management.

``RoleAssignmentResult`` validates the ``assign_role_by_email`` procedure's
JSON response into one of two tagged variants instead of trusting its shape.
"""

import uuid
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, EmailStr, TypeAdapter

from thinktank_api.models.role import Role


class RoleAssignmentSucceeded(BaseModel):
    """The procedure created or updated the identity's role row."""

    success: Literal[True]
    action: Literal["created", "updated"] = "created"


class RoleAssignmentFailed(BaseModel):
    """The procedure refused the assignment (for example, unknown email)."""

    success: Literal[False]
    error: str | None = None

    @property
    def message(self) -> str:
        return self.error or "Unknown error occurred"


RoleAssignmentResult = RoleAssignmentSucceeded | RoleAssignmentFailed

role_assignment_result_adapter: TypeAdapter[RoleAssignmentResult] = TypeAdapter(RoleAssignmentResult)


class UserRoleResponse(BaseModel):
    """A ``user_roles`` row."""

    id: uuid.UUID
    user_id: uuid.UUID
    role: Role
    created_at: datetime | None = None


class UserRoleListResponse(BaseModel):
    items: list[UserRoleResponse]


class RoleAssignmentRequest(BaseModel):
    """Request body for assigning a role by email."""

    email: EmailStr
    role: Role = Role.USER


class RoleAssignmentResponse(BaseModel):
    """Outcome of a successful assignment."""

    email: str
    role: Role
    action: Literal["created", "updated"]
