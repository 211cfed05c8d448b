"""FastAPI dependency injection for backend clients, identity and surface access.

``require_surface`` runs the role gate for one request and turns its outcome
into a response: 401 without a valid token, 403 when denied, and a 303
redirect to the right dashboard when the role belongs on another surface.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Annotated, Any

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer

from thinktank_api.core.backend import Backend, get_backend
from thinktank_api.core.config import Settings, get_settings
from thinktank_api.lib.backend.client import DataStoreClient
from thinktank_api.models.identity import Identity
from thinktank_api.models.role import AccessDecision, AccessSurface, GateState, Role
from thinktank_api.services.access_session import AccessSession

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="api/v1/auth/login")

# Dashboard route for each surface, relative to the API prefix.
SURFACE_PATHS: dict[AccessSurface, str] = {
    AccessSurface.ADMIN: "/admin",
    AccessSurface.MODERATOR: "/moderator",
    AccessSurface.STAFF: "/moderator",
}


@dataclass(frozen=True)
class CurrentIdentity:
    """An authenticated caller and the token it presented."""

    identity: Identity
    access_token: str


@dataclass(frozen=True)
class Actor:
    """A caller that passed the role gate for a surface."""

    identity: Identity
    role: Role
    access_token: str
    store: DataStoreClient

    @property
    def id(self) -> str:
        return self.identity.id


def surface_path(surface: AccessSurface, prefix: str) -> str:
    return f"{prefix}{SURFACE_PATHS[surface]}"


def _credentials_exception() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_identity(
    token: Annotated[str, Depends(oauth2_scheme)],
    backend: Annotated[Backend, Depends(get_backend)],
) -> CurrentIdentity:
    """Resolve the bearer token to an identity.

    Raises:
        HTTPException: 401 if the token is missing, invalid or expired.
    """
    identity = await backend.resolver.get_current_identity(token)
    if identity is None:
        raise _credentials_exception()
    return CurrentIdentity(identity=identity, access_token=token)


def get_public_store(backend: Annotated[Backend, Depends(get_backend)]) -> DataStoreClient:
    """Anonymous data store client for public endpoints."""
    return backend.data_store


def require_surface(surface: AccessSurface) -> Callable[..., Any]:
    """Factory that creates a dependency admitting callers allowed on ``surface``.

    Args:
        surface: The surface the endpoint belongs to.

    Returns:
        A FastAPI dependency returning the ``Actor``.
    """

    async def surface_checker(
        token: Annotated[str, Depends(oauth2_scheme)],
        backend: Annotated[Backend, Depends(get_backend)],
        settings: Annotated[Settings, Depends(get_settings)],
    ) -> Actor:
        store = backend.data_store.for_session(token)
        async with AccessSession(backend.resolver, store, surface) as access:
            outcome = await access.start(token)
        if access.state == GateState.UNRESOLVED or outcome is None or access.identity is None:
            raise _credentials_exception()
        if outcome.decision == AccessDecision.REDIRECT and outcome.redirect_to is not None:
            raise HTTPException(
                status_code=status.HTTP_303_SEE_OTHER,
                detail=f"Use the {outcome.redirect_to} instead",
                headers={"Location": surface_path(outcome.redirect_to, settings.api_v1_prefix)},
            )
        if not outcome.granted or outcome.role is None:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access Denied")
        return Actor(identity=access.identity, role=outcome.role, access_token=token, store=store)

    return surface_checker


AdminActor = Annotated[Actor, Depends(require_surface(AccessSurface.ADMIN))]
ModeratorActor = Annotated[Actor, Depends(require_surface(AccessSurface.MODERATOR))]
StaffActor = Annotated[Actor, Depends(require_surface(AccessSurface.STAFF))]
BackendDep = Annotated[Backend, Depends(get_backend)]
SettingsDep = Annotated[Settings, Depends(get_settings)]
PublicStore = Annotated[DataStoreClient, Depends(get_public_store)]
