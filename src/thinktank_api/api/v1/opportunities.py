"""Opportunity management endpoints (admin only)."""

import uuid

from fastapi import APIRouter, Response, status

from thinktank_api.core.dependencies import AdminActor, BackendDep
from thinktank_api.core.errors import ValidationError
from thinktank_api.schemas.opportunity import (
    OpportunityCreateRequest,
    OpportunityListResponse,
    OpportunityResponse,
    OpportunityUpdateRequest,
)
from thinktank_api.services import opportunity_service

opportunities_router = APIRouter(prefix="/opportunities", tags=["opportunities"])


@opportunities_router.get("", response_model=OpportunityListResponse)
async def list_opportunities(actor: AdminActor) -> OpportunityListResponse:
    rows = await opportunity_service.list_opportunities(actor.store)
    return OpportunityListResponse(items=[OpportunityResponse.model_validate(row) for row in rows])


@opportunities_router.post("", response_model=OpportunityResponse, status_code=status.HTTP_201_CREATED)
async def create_opportunity(
    request: OpportunityCreateRequest,
    actor: AdminActor,
    backend: BackendDep,
) -> OpportunityResponse:
    row = await opportunity_service.create_opportunity(
        actor.store,
        request.model_dump(mode="json"),
        actor_id=actor.id,
        changes=backend.changes,
    )
    return OpportunityResponse.model_validate(row)


@opportunities_router.patch("/{opportunity_id}", response_model=OpportunityResponse)
async def update_opportunity(
    opportunity_id: uuid.UUID,
    request: OpportunityUpdateRequest,
    actor: AdminActor,
    backend: BackendDep,
) -> OpportunityResponse:
    """Update the given fields. Send ``{"is_active": false}`` to close an opportunity."""
    data = request.model_dump(mode="json", exclude_unset=True)
    if not data:
        msg = "No fields to update"
        raise ValidationError(msg)
    row = await opportunity_service.update_opportunity(
        actor.store,
        str(opportunity_id),
        data,
        actor_id=actor.id,
        changes=backend.changes,
    )
    return OpportunityResponse.model_validate(row)


@opportunities_router.delete("/{opportunity_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_opportunity(opportunity_id: uuid.UUID, actor: AdminActor, backend: BackendDep) -> Response:
    await opportunity_service.delete_opportunity(
        actor.store,
        str(opportunity_id),
        actor_id=actor.id,
        changes=backend.changes,
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
