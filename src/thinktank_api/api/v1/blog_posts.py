"""Blog post management endpoints (admin only)."""

import uuid
from typing import Annotated

from fastapi import APIRouter, File, Form, Response, UploadFile, status

from thinktank_api.api.uploads import read_upload, read_uploads
from thinktank_api.core.dependencies import AdminActor, BackendDep, SettingsDep
from thinktank_api.schemas.blog import BlogPostListResponse, BlogPostResponse
from thinktank_api.schemas.content import PublishRequest
from thinktank_api.services import blog_service

blog_posts_router = APIRouter(prefix="/blog-posts", tags=["blog"])


@blog_posts_router.get("", response_model=BlogPostListResponse)
async def list_blog_posts(actor: AdminActor) -> BlogPostListResponse:
    rows = await blog_service.list_blog_posts(actor.store)
    return BlogPostListResponse(items=[BlogPostResponse.model_validate(row) for row in rows])


@blog_posts_router.get("/{post_id}", response_model=BlogPostResponse)
async def get_blog_post(post_id: uuid.UUID, actor: AdminActor) -> BlogPostResponse:
    row = await blog_service.get_blog_post(actor.store, str(post_id))
    return BlogPostResponse.model_validate(row)


@blog_posts_router.post("", response_model=BlogPostResponse, status_code=status.HTTP_201_CREATED)
async def create_blog_post(
    actor: AdminActor,
    backend: BackendDep,
    settings: SettingsDep,
    title: Annotated[str, Form()],
    department_id: Annotated[uuid.UUID | None, Form()] = None,
    body: Annotated[str | None, Form()] = None,
    author: Annotated[str | None, Form()] = None,
    published: Annotated[bool, Form()] = False,
    thumbnail: Annotated[UploadFile | None, File()] = None,
    gallery: Annotated[list[UploadFile] | None, File()] = None,
) -> BlogPostResponse:
    """Create a blog post. The slug is generated from the title."""
    row = await blog_service.create_blog_post(
        actor.store,
        backend.storage,
        actor_id=actor.id,
        title=title,
        department_id=str(department_id) if department_id else None,
        body=body,
        author=author,
        published=published,
        thumbnail=await read_upload(thumbnail),
        gallery=await read_uploads(gallery),
        bucket=settings.content_bucket,
        max_file_size_mb=settings.content_max_file_size_mb,
        default_author=settings.default_author,
        changes=backend.changes,
    )
    return BlogPostResponse.model_validate(row)


@blog_posts_router.put("/{post_id}", response_model=BlogPostResponse)
async def update_blog_post(
    post_id: uuid.UUID,
    actor: AdminActor,
    backend: BackendDep,
    settings: SettingsDep,
    title: Annotated[str, Form()],
    department_id: Annotated[uuid.UUID | None, Form()] = None,
    body: Annotated[str | None, Form()] = None,
    author: Annotated[str | None, Form()] = None,
    published: Annotated[bool, Form()] = False,
    keep_gallery: Annotated[list[str] | None, Form()] = None,
    thumbnail: Annotated[UploadFile | None, File()] = None,
    gallery: Annotated[list[UploadFile] | None, File()] = None,
) -> BlogPostResponse:
    """Replace a blog post's fields. Omitting ``keep_gallery`` keeps the existing gallery."""
    row = await blog_service.update_blog_post(
        actor.store,
        backend.storage,
        str(post_id),
        actor_id=actor.id,
        title=title,
        department_id=str(department_id) if department_id else None,
        body=body,
        author=author,
        published=published,
        thumbnail=await read_upload(thumbnail),
        gallery=await read_uploads(gallery),
        keep_gallery=keep_gallery,
        bucket=settings.content_bucket,
        max_file_size_mb=settings.content_max_file_size_mb,
        default_author=settings.default_author,
        changes=backend.changes,
    )
    return BlogPostResponse.model_validate(row)


@blog_posts_router.patch("/{post_id}/publish", response_model=BlogPostResponse)
async def set_published(
    post_id: uuid.UUID,
    request: PublishRequest,
    actor: AdminActor,
    backend: BackendDep,
) -> BlogPostResponse:
    row = await blog_service.set_blog_published(
        actor.store,
        str(post_id),
        request.published,
        actor_id=actor.id,
        changes=backend.changes,
    )
    return BlogPostResponse.model_validate(row)


@blog_posts_router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_blog_post(post_id: uuid.UUID, actor: AdminActor, backend: BackendDep) -> Response:
    await blog_service.delete_blog_post(actor.store, str(post_id), actor_id=actor.id, changes=backend.changes)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
