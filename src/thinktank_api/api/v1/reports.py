"""Report management endpoints (admin or moderator)."""

import uuid
from typing import Annotated

from fastapi import APIRouter, File, Form, Response, UploadFile, status

from thinktank_api.api.uploads import read_upload
from thinktank_api.core.dependencies import BackendDep, SettingsDep, StaffActor
from thinktank_api.schemas.report import ReportListResponse, ReportResponse, ReportVisibilityRequest
from thinktank_api.services import report_service

reports_router = APIRouter(prefix="/reports", tags=["reports"])


@reports_router.get("", response_model=ReportListResponse)
async def list_reports(actor: StaffActor) -> ReportListResponse:
    rows = await report_service.list_reports(actor.store)
    return ReportListResponse(items=[ReportResponse.model_validate(row) for row in rows])


@reports_router.post("", response_model=ReportResponse, status_code=status.HTTP_201_CREATED)
async def upload_report(
    actor: StaffActor,
    backend: BackendDep,
    settings: SettingsDep,
    title: Annotated[str, Form()],
    department_id: Annotated[uuid.UUID | None, Form()] = None,
    description: Annotated[str | None, Form()] = None,
    author: Annotated[str | None, Form()] = None,
    public: Annotated[bool, Form()] = False,
    file: Annotated[UploadFile | None, File()] = None,
) -> ReportResponse:
    """Upload a report. Its sensitivity level is derived from the description."""
    row = await report_service.upload_report(
        actor.store,
        backend.storage,
        actor_id=actor.id,
        title=title,
        department_id=str(department_id) if department_id else None,
        description=description,
        author=author,
        public=public,
        file=await read_upload(file),
        bucket=settings.content_bucket,
        max_file_size_mb=settings.report_max_file_size_mb,
        changes=backend.changes,
    )
    return ReportResponse.model_validate(row)


@reports_router.patch("/{report_id}/visibility", response_model=ReportResponse)
async def set_visibility(
    report_id: uuid.UUID,
    request: ReportVisibilityRequest,
    actor: StaffActor,
    backend: BackendDep,
) -> ReportResponse:
    row = await report_service.set_report_public(
        actor.store,
        str(report_id),
        request.public,
        actor_id=actor.id,
        changes=backend.changes,
    )
    return ReportResponse.model_validate(row)


@reports_router.delete("/{report_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_report(report_id: uuid.UUID, actor: StaffActor, backend: BackendDep) -> Response:
    await report_service.delete_report(actor.store, str(report_id), actor_id=actor.id, changes=backend.changes)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
