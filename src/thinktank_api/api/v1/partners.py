"""Partner management endpoints (admin or moderator)."""

import uuid
from typing import Annotated

from fastapi import APIRouter, File, Response, UploadFile, status

from thinktank_api.api.uploads import read_upload
from thinktank_api.core.dependencies import BackendDep, SettingsDep, StaffActor
from thinktank_api.core.errors import ValidationError
from thinktank_api.schemas.partner import (
    PartnerCreateRequest,
    PartnerListResponse,
    PartnerResponse,
    PartnerUpdateRequest,
)
from thinktank_api.services import partner_service

partners_router = APIRouter(prefix="/partners", tags=["partners"])


@partners_router.get("", response_model=PartnerListResponse)
async def list_partners(actor: StaffActor) -> PartnerListResponse:
    """List all partners, inactive included, in display order."""
    rows = await partner_service.list_partners(actor.store)
    return PartnerListResponse(items=[PartnerResponse.model_validate(row) for row in rows])


@partners_router.post("", response_model=PartnerResponse, status_code=status.HTTP_201_CREATED)
async def create_partner(request: PartnerCreateRequest, actor: StaffActor, backend: BackendDep) -> PartnerResponse:
    row = await partner_service.create_partner(
        actor.store,
        request.model_dump(),
        actor_id=actor.id,
        changes=backend.changes,
    )
    return PartnerResponse.model_validate(row)


@partners_router.patch("/{partner_id}", response_model=PartnerResponse)
async def update_partner(
    partner_id: uuid.UUID,
    request: PartnerUpdateRequest,
    actor: StaffActor,
    backend: BackendDep,
) -> PartnerResponse:
    """Update the given partner fields."""
    data = request.model_dump(exclude_unset=True)
    if not data:
        msg = "No fields to update"
        raise ValidationError(msg)
    row = await partner_service.update_partner(
        actor.store,
        str(partner_id),
        data,
        actor_id=actor.id,
        changes=backend.changes,
    )
    return PartnerResponse.model_validate(row)


@partners_router.delete("/{partner_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_partner(partner_id: uuid.UUID, actor: StaffActor, backend: BackendDep) -> Response:
    await partner_service.delete_partner(actor.store, str(partner_id), actor_id=actor.id, changes=backend.changes)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@partners_router.post("/{partner_id}/logo", response_model=PartnerResponse)
async def upload_logo(
    partner_id: uuid.UUID,
    logo: Annotated[UploadFile, File()],
    actor: StaffActor,
    backend: BackendDep,
    settings: SettingsDep,
) -> PartnerResponse:
    """Upload an image and set it as the partner's logo."""
    upload = await read_upload(logo)
    if upload is None:
        msg = "Please select an image file"
        raise ValidationError(msg, field="logo")
    row = await partner_service.upload_partner_logo(
        actor.store,
        backend.storage,
        str(partner_id),
        upload,
        actor_id=actor.id,
        bucket=settings.partner_logo_bucket,
        max_file_size_mb=settings.content_max_file_size_mb,
        changes=backend.changes,
    )
    return PartnerResponse.model_validate(row)
