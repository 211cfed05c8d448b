"""Authentication API endpoints.

GET /health, GET /info, POST /auth/login, POST /auth/logout, GET /auth/me.
"""

from datetime import UTC, datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from fastapi.security import OAuth2PasswordRequestForm

from thinktank_api import __version__
from thinktank_api.core.dependencies import (
    BackendDep,
    CurrentIdentity,
    SettingsDep,
    get_current_identity,
    oauth2_scheme,
)
from thinktank_api.schemas.auth import IdentityResponse, TokenResponse
from thinktank_api.services.role_service import get_identity_role

router = APIRouter(tags=["auth"])


@router.get("/health", status_code=200)
async def health_check() -> dict:
    """Health check endpoint (no authentication required)."""
    return {"status": "healthy"}


@router.get("/info", status_code=200)
async def info(settings: SettingsDep) -> dict:
    """Return application version and environment."""
    return {"version": __version__, "environment": settings.environment}


@router.post("/auth/login", response_model=TokenResponse)
async def login(
    form_data: Annotated[OAuth2PasswordRequestForm, Depends()],
    backend: BackendDep,
) -> TokenResponse:
    """Sign in with email (sent as ``username``) and password.

    A rejected login raises ``AuthError``, answered with 401.
    """
    session = await backend.auth.sign_in(form_data.username, form_data.password, persist=False)
    expires_in = None
    if session.expires_at is not None:
        expires_in = max(0, int((session.expires_at - datetime.now(UTC)).total_seconds()))
    return TokenResponse(
        access_token=session.access_token,
        refresh_token=session.refresh_token,
        expires_in=expires_in,
    )


@router.post("/auth/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(
    token: Annotated[str, Depends(oauth2_scheme)],
    backend: BackendDep,
) -> Response:
    """Revoke the caller's session."""
    await backend.auth.sign_out(token)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/auth/me", response_model=IdentityResponse)
async def get_me(
    current: Annotated[CurrentIdentity, Depends(get_current_identity)],
    backend: BackendDep,
) -> IdentityResponse:
    """Return the signed-in identity and its role."""
    store = backend.data_store.for_session(current.access_token)
    role = await get_identity_role(store, current.identity.id)
    return IdentityResponse(id=current.identity.id, email=current.identity.email, role=role)
