"""Identity and session types issued by the external auth provider."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Identity:
    """An authenticated principal. Owned by the auth provider, never mutated here."""

    id: str
    email: str


@dataclass(frozen=True)
class Session:
    """A signed-in session returned by the auth provider."""

    access_token: str
    refresh_token: str | None
    expires_at: datetime | None
    identity: Identity
