"""Authentication Pydantic v2 schemas."""

import uuid

from pydantic import BaseModel, Field

from thinktank_api.models.role import Role


class TokenResponse(BaseModel):
    """Session token issued by the auth provider."""

    access_token: str
    refresh_token: str | None = None
    token_type: str = "bearer"
    expires_in: int | None = Field(default=None, description="Seconds until the access token expires")


class IdentityResponse(BaseModel):
    """The signed-in identity and its role, if any."""

    id: uuid.UUID
    email: str
    role: Role | None = None
