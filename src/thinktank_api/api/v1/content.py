"""Content management endpoints (admin or moderator)."""

import uuid
from typing import Annotated

from fastapi import APIRouter, File, Form, Response, UploadFile, status

from thinktank_api.api.uploads import read_upload
from thinktank_api.core.dependencies import BackendDep, SettingsDep, StaffActor
from thinktank_api.schemas.content import ContentListResponse, ContentResponse, PublishRequest
from thinktank_api.services import content_service

content_router = APIRouter(prefix="/content", tags=["content"])


@content_router.get("", response_model=ContentListResponse)
async def list_content(actor: StaffActor) -> ContentListResponse:
    """List all content, drafts included, newest first."""
    rows = await content_service.list_content(actor.store)
    return ContentListResponse(items=[ContentResponse.model_validate(row) for row in rows])


@content_router.post("", response_model=ContentResponse, status_code=status.HTTP_201_CREATED)
async def upload_content(
    actor: StaffActor,
    backend: BackendDep,
    settings: SettingsDep,
    title: Annotated[str, Form()],
    type: Annotated[str, Form()],
    department_id: Annotated[uuid.UUID | None, Form()] = None,
    body: Annotated[str | None, Form()] = None,
    author: Annotated[str | None, Form()] = None,
    published: Annotated[bool, Form()] = False,
    file: Annotated[UploadFile | None, File()] = None,
    thumbnail: Annotated[UploadFile | None, File()] = None,
) -> ContentResponse:
    """Upload a content item with an optional file and thumbnail."""
    row = await content_service.upload_content(
        actor.store,
        backend.storage,
        actor_id=actor.id,
        title=title,
        content_type=type,
        department_id=str(department_id) if department_id else None,
        body=body,
        author=author,
        published=published,
        file=await read_upload(file),
        thumbnail=await read_upload(thumbnail),
        bucket=settings.content_bucket,
        max_file_size_mb=settings.content_max_file_size_mb,
        default_author=settings.default_author,
        changes=backend.changes,
    )
    return ContentResponse.model_validate(row)


@content_router.patch("/{content_id}/publish", response_model=ContentResponse)
async def set_published(
    content_id: uuid.UUID,
    request: PublishRequest,
    actor: StaffActor,
    backend: BackendDep,
) -> ContentResponse:
    """Publish or unpublish a content item."""
    row = await content_service.set_content_published(
        actor.store,
        str(content_id),
        request.published,
        actor_id=actor.id,
        changes=backend.changes,
    )
    return ContentResponse.model_validate(row)


@content_router.delete("/{content_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_content(content_id: uuid.UUID, actor: StaffActor, backend: BackendDep) -> Response:
    """Delete a content item."""
    await content_service.delete_content(actor.store, str(content_id), actor_id=actor.id, changes=backend.changes)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
