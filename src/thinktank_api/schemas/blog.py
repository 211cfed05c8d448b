"""Pydantic v2 schemas for blog post management and the public blog page."""

import uuid
from datetime import datetime

from pydantic import BaseModel

from thinktank_api.schemas.common import DepartmentRef


class BlogPostResponse(BaseModel):
    """A blog post (a ``content`` row with type ``blog``)."""

    id: uuid.UUID
    title: str
    body: str | None = None
    author: str | None = None
    published: bool = False
    slug: str | None = None
    department_id: uuid.UUID | None = None
    department: DepartmentRef | None = None
    thumbnail_url: str | None = None
    gallery_images: list[str] | None = None
    read_time: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class BlogPostListResponse(BaseModel):
    items: list[BlogPostResponse]


class RelatedPost(BaseModel):
    """Short form of another published post."""

    id: uuid.UUID
    title: str
    slug: str | None = None
    thumbnail_url: str | None = None
    created_at: datetime | None = None


class BlogPostPage(BaseModel):
    """A published post with up to three related posts."""

    post: BlogPostResponse
    related: list[RelatedPost]
