"""Tests for the surface-access dependencies."""

import pytest
from fastapi import HTTPException

from thinktank_api.core.backend import Backend
from thinktank_api.core.config import Settings
from thinktank_api.core.dependencies import get_current_identity, require_surface, surface_path
from thinktank_api.models.role import AccessSurface, Role


class TestSurfacePath:
    def test_admin(self) -> None:
        assert surface_path(AccessSurface.ADMIN, "/api/v1") == "/api/v1/admin"

    def test_staff_lands_on_moderator_dashboard(self) -> None:
        assert surface_path(AccessSurface.STAFF, "/api/v1") == "/api/v1/moderator"


class TestRequireSurface:
    """Tests for the require_surface factory."""

    async def test_admin_admitted_to_admin_surface(self, backend: Backend, settings: Settings) -> None:
        checker = require_surface(AccessSurface.ADMIN)

        actor = await checker(token="admin-token", backend=backend, settings=settings)

        assert actor.role == Role.ADMIN
        assert actor.access_token == "admin-token"

    async def test_moderator_redirected_from_admin_surface(self, backend: Backend, settings: Settings) -> None:
        checker = require_surface(AccessSurface.ADMIN)

        with pytest.raises(HTTPException) as exc_info:
            await checker(token="moderator-token", backend=backend, settings=settings)

        assert exc_info.value.status_code == 303
        assert exc_info.value.headers == {"Location": "/api/v1/moderator"}

    async def test_admin_redirected_from_moderator_surface(self, backend: Backend, settings: Settings) -> None:
        checker = require_surface(AccessSurface.MODERATOR)

        with pytest.raises(HTTPException) as exc_info:
            await checker(token="admin-token", backend=backend, settings=settings)

        assert exc_info.value.status_code == 303
        assert exc_info.value.headers == {"Location": "/api/v1/admin"}

    async def test_staff_surface_admits_both_roles(self, backend: Backend, settings: Settings) -> None:
        checker = require_surface(AccessSurface.STAFF)

        admin = await checker(token="admin-token", backend=backend, settings=settings)
        moderator = await checker(token="moderator-token", backend=backend, settings=settings)

        assert admin.role == Role.ADMIN
        assert moderator.role == Role.MODERATOR

    async def test_user_without_role_denied(self, backend: Backend, settings: Settings) -> None:
        checker = require_surface(AccessSurface.STAFF)

        with pytest.raises(HTTPException) as exc_info:
            await checker(token="reader-token", backend=backend, settings=settings)

        assert exc_info.value.status_code == 403
        assert exc_info.value.detail == "Access Denied"

    async def test_invalid_token_rejected(self, backend: Backend, settings: Settings) -> None:
        checker = require_surface(AccessSurface.ADMIN)

        with pytest.raises(HTTPException) as exc_info:
            await checker(token="forged", backend=backend, settings=settings)

        assert exc_info.value.status_code == 401


class TestGetCurrentIdentity:
    async def test_valid_token(self, backend: Backend, reader_identity) -> None:
        current = await get_current_identity(token="reader-token", backend=backend)
        assert current.identity == reader_identity

    async def test_invalid_token_raises_401(self, backend: Backend) -> None:
        with pytest.raises(HTTPException) as exc_info:
            await get_current_identity(token="forged", backend=backend)
        assert exc_info.value.status_code == 401
