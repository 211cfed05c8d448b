"""Blog post service.

Blog posts are ``content`` rows with ``type = 'blog'``. Their audit entries use
the ``blog_create``, ``blog_update`` and ``blog_delete`` tags.
"""

import uuid
from collections.abc import Sequence
from datetime import UTC, datetime
from typing import Any

from thinktank_api.core.errors import NotFoundError, ValidationError
from thinktank_api.lib.backend.changes import ChangeFeed
from thinktank_api.lib.backend.client import DataStoreClient, Order, eq
from thinktank_api.lib.backend.storage import ObjectStorage
from thinktank_api.lib.content import generate_slug, sanitize_body
from thinktank_api.lib.uploads import image_policy
from thinktank_api.models.audit_log import MutationKind
from thinktank_api.services.audited_mutation import perform_mutation
from thinktank_api.services.content_service import CONTENT_TABLE, DEFAULT_AUTHOR
from thinktank_api.services.upload_service import FileUpload, store_file, validate_file

BLOG_TYPE = "blog"
BLOG_COLUMNS = (
    "id, title, body, author, published, created_at, updated_at, thumbnail_url, "
    "gallery_images, slug, department_id, department:departments(name, slug)"
)


def _require_fields(title: str, department_id: str | None) -> None:
    if not title.strip():
        msg = "Title is required"
        raise ValidationError(msg, field="title")
    if not department_id:
        msg = "Department is required"
        raise ValidationError(msg, field="department_id")


def _validate_images(thumbnail: FileUpload | None, gallery: Sequence[FileUpload], max_file_size_mb: int) -> None:
    policy = image_policy(max_file_size_mb)
    if thumbnail is not None:
        validate_file(policy, thumbnail, field="thumbnail")
    for image in gallery:
        validate_file(policy, image, field="gallery")


async def _store_gallery(
    storage: ObjectStorage,
    bucket: str,
    record_id: str,
    gallery: Sequence[FileUpload],
) -> list[str]:
    urls = []
    for image in gallery:
        stored = await store_file(storage, bucket=bucket, folder="gallery", record_id=record_id, upload=image)
        urls.append(stored.url)
    return urls


async def list_blog_posts(store: DataStoreClient) -> list[dict[str, Any]]:
    """Return all blog posts, drafts included, newest first."""
    return await store.select(
        CONTENT_TABLE,
        columns=BLOG_COLUMNS,
        filters=[eq("type", BLOG_TYPE)],
        order=[Order("created_at", descending=True)],
    )


async def get_blog_post(store: DataStoreClient, post_id: str) -> dict[str, Any]:
    """Return one blog post by id.

    Raises:
        NotFoundError: If no blog post has this id.
    """
    rows = await store.select(
        CONTENT_TABLE,
        columns=BLOG_COLUMNS,
        filters=[eq("id", post_id), eq("type", BLOG_TYPE)],
        limit=1,
    )
    if not rows:
        msg = f"Blog post {post_id} not found"
        raise NotFoundError(msg)
    return rows[0]


async def create_blog_post(
    store: DataStoreClient,
    storage: ObjectStorage,
    *,
    actor_id: str,
    title: str,
    department_id: str | None,
    body: str | None = None,
    author: str | None = None,
    published: bool = False,
    thumbnail: FileUpload | None = None,
    gallery: Sequence[FileUpload] = (),
    bucket: str = "admin-uploads",
    max_file_size_mb: int = 100,
    default_author: str = DEFAULT_AUTHOR,
    changes: ChangeFeed | None = None,
) -> dict[str, Any]:
    """Create a blog post with a generated slug, optional thumbnail and gallery.

    Returns:
        The inserted row.

    Raises:
        ValidationError: If the title or department is missing or an image is rejected.
        RemoteError: If storage or the data store fails.
    """
    _require_fields(title, department_id)
    _validate_images(thumbnail, gallery, max_file_size_mb)

    record_id = str(uuid.uuid4())
    row: dict[str, Any] = {
        "id": record_id,
        "title": title.strip(),
        "body": sanitize_body(body),
        "type": BLOG_TYPE,
        "media_type": BLOG_TYPE,
        "department_id": department_id,
        "published": published,
        "created_by": actor_id,
        "author": (author or "").strip() or default_author,
        "slug": generate_slug(title),
    }
    if thumbnail is not None:
        stored = await store_file(storage, bucket=bucket, folder="thumbnails", record_id=record_id, upload=thumbnail)
        row["thumbnail_url"] = stored.url
    if gallery:
        row["gallery_images"] = await _store_gallery(storage, bucket, record_id, gallery)

    return await perform_mutation(
        store,
        MutationKind.CREATE,
        CONTENT_TABLE,
        actor_id=actor_id,
        payload=row,
        action="blog_create",
        audit_values={"title": row["title"], "published": published},
        changes=changes,
    )


async def update_blog_post(
    store: DataStoreClient,
    storage: ObjectStorage,
    post_id: str,
    *,
    actor_id: str,
    title: str,
    department_id: str | None,
    body: str | None = None,
    author: str | None = None,
    published: bool = False,
    thumbnail: FileUpload | None = None,
    gallery: Sequence[FileUpload] = (),
    keep_gallery: Sequence[str] | None = None,
    bucket: str = "admin-uploads",
    max_file_size_mb: int = 100,
    default_author: str = DEFAULT_AUTHOR,
    changes: ChangeFeed | None = None,
) -> dict[str, Any]:
    """Replace a blog post's editable fields.

    The existing slug is kept; a post without one gets a slug from ``title``.
    New gallery images are appended to ``keep_gallery`` (the existing gallery
    when None).

    Raises:
        ValidationError: If the title or department is missing or an image is rejected.
        NotFoundError: If the post does not exist.
        RemoteError: If storage or the data store fails.
    """
    _require_fields(title, department_id)
    _validate_images(thumbnail, gallery, max_file_size_mb)

    existing = await get_blog_post(store, post_id)
    thumbnail_url = existing.get("thumbnail_url")
    if thumbnail is not None:
        stored = await store_file(storage, bucket=bucket, folder="thumbnails", record_id=post_id, upload=thumbnail)
        thumbnail_url = stored.url
    kept = list(keep_gallery) if keep_gallery is not None else list(existing.get("gallery_images") or [])
    new_urls = await _store_gallery(storage, bucket, post_id, gallery)

    patch = {
        "title": title.strip(),
        "body": sanitize_body(body),
        "author": (author or "").strip() or default_author,
        "department_id": department_id,
        "published": published,
        "thumbnail_url": thumbnail_url,
        "gallery_images": kept + new_urls,
        "slug": existing.get("slug") or generate_slug(title),
        "updated_at": datetime.now(UTC).isoformat(),
    }
    return await perform_mutation(
        store,
        MutationKind.UPDATE,
        CONTENT_TABLE,
        actor_id=actor_id,
        record_id=post_id,
        payload=patch,
        action="blog_update",
        audit_values={"title": patch["title"], "published": published},
        changes=changes,
    )


async def set_blog_published(
    store: DataStoreClient,
    post_id: str,
    published: bool,
    *,
    actor_id: str,
    changes: ChangeFeed | None = None,
) -> dict[str, Any]:
    return await perform_mutation(
        store,
        MutationKind.UPDATE,
        CONTENT_TABLE,
        actor_id=actor_id,
        record_id=post_id,
        payload={"published": published},
        action="blog_update",
        audit_values={"published": published},
        changes=changes,
    )


async def delete_blog_post(
    store: DataStoreClient,
    post_id: str,
    *,
    actor_id: str,
    changes: ChangeFeed | None = None,
) -> dict[str, Any]:
    return await perform_mutation(
        store,
        MutationKind.DELETE,
        CONTENT_TABLE,
        actor_id=actor_id,
        record_id=post_id,
        action="blog_delete",
        changes=changes,
    )
