"""Role management endpoints (admin only)."""

import uuid

from fastapi import APIRouter, HTTPException, Response, status

from thinktank_api.core.dependencies import AdminActor, BackendDep
from thinktank_api.schemas.role import (
    RoleAssignmentFailed,
    RoleAssignmentRequest,
    RoleAssignmentResponse,
    UserRoleListResponse,
    UserRoleResponse,
)
from thinktank_api.services import role_service

roles_router = APIRouter(prefix="/roles", tags=["roles"])


@roles_router.get("", response_model=UserRoleListResponse)
async def list_roles(actor: AdminActor) -> UserRoleListResponse:
    rows = await role_service.list_user_roles(actor.store)
    return UserRoleListResponse(items=[UserRoleResponse.model_validate(row) for row in rows])


@roles_router.post("", response_model=RoleAssignmentResponse)
async def assign_role(
    request: RoleAssignmentRequest,
    actor: AdminActor,
    backend: BackendDep,
) -> RoleAssignmentResponse:
    """Grant a role to the identity registered under ``email``.

    Creates the identity's role row or replaces its role. A refusal from the
    backend (for example, no account with that email) is answered with 422.
    """
    result = await role_service.assign_role(
        actor.store,
        str(request.email),
        request.role,
        actor_id=actor.id,
        changes=backend.changes,
    )
    if isinstance(result, RoleAssignmentFailed):
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=result.message)
    return RoleAssignmentResponse(email=str(request.email), role=request.role, action=result.action)


@roles_router.delete("/{role_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_role(role_id: uuid.UUID, actor: AdminActor, backend: BackendDep) -> Response:
    await role_service.remove_role(actor.store, str(role_id), actor_id=actor.id, changes=backend.changes)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
