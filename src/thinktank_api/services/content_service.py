"""Content service: listing, uploading, publishing and deleting content items.

Uploads generate the row id up front, store the files, then insert the row
once so the action produces a single ``content_upload`` audit entry.
"""

import uuid
from typing import Any

from thinktank_api.core.errors import ValidationError
from thinktank_api.lib.backend.changes import ChangeFeed
from thinktank_api.lib.backend.client import DataStoreClient, Order
from thinktank_api.lib.backend.storage import ObjectStorage
from thinktank_api.lib.content import sanitize_body
from thinktank_api.lib.uploads import content_policy, image_policy
from thinktank_api.models.audit_log import MutationKind
from thinktank_api.schemas.content import ContentType
from thinktank_api.services.audited_mutation import perform_mutation
from thinktank_api.services.upload_service import FileUpload, store_file, validate_file

CONTENT_TABLE = "content"
CONTENT_COLUMNS = "*, department:departments(name, slug)"
DEFAULT_AUTHOR = "AfroStrategia"

_CONTENT_TYPES = frozenset(t.value for t in ContentType)


async def list_content(store: DataStoreClient) -> list[dict[str, Any]]:
    """Return every content row with its department, newest first."""
    return await store.select(
        CONTENT_TABLE,
        columns=CONTENT_COLUMNS,
        order=[Order("created_at", descending=True)],
    )


async def upload_content(
    store: DataStoreClient,
    storage: ObjectStorage,
    *,
    actor_id: str,
    title: str,
    content_type: str,
    department_id: str | None,
    body: str | None = None,
    author: str | None = None,
    published: bool = False,
    file: FileUpload | None = None,
    thumbnail: FileUpload | None = None,
    bucket: str = "admin-uploads",
    max_file_size_mb: int = 100,
    default_author: str = DEFAULT_AUTHOR,
    changes: ChangeFeed | None = None,
) -> dict[str, Any]:
    """Create a content item with an optional attached file and thumbnail.

    Args:
        store: Data store client acting for ``actor_id``.
        storage: Object storage client.
        actor_id: The uploading identity.
        title: Item title.
        content_type: One of the ``ContentType`` values.
        department_id: Owning department.
        body: Rich-text body, sanitized before storage.
        author: Byline. Defaults to ``default_author``.
        published: Whether the item is publicly visible.
        file: Optional attached document or media file.
        thumbnail: Optional thumbnail image.
        bucket: Storage bucket for both files.
        max_file_size_mb: Size limit for ``file`` and ``thumbnail``.
        default_author: Byline used when ``author`` is blank.
        changes: Optional change feed.

    Returns:
        The inserted content row.

    Raises:
        ValidationError: If a required field is missing or a file is rejected.
        RemoteError: If storage or the data store fails.
    """
    if not title.strip():
        msg = "Title is required"
        raise ValidationError(msg, field="title")
    if content_type not in _CONTENT_TYPES:
        msg = f"Unknown content type: {content_type or '(empty)'}"
        raise ValidationError(msg, field="type")
    if not department_id:
        msg = "Department is required"
        raise ValidationError(msg, field="department_id")
    if file is not None:
        validate_file(content_policy(max_file_size_mb), file, field="file")
    if thumbnail is not None:
        validate_file(image_policy(max_file_size_mb), thumbnail, field="thumbnail")

    record_id = str(uuid.uuid4())
    row: dict[str, Any] = {
        "id": record_id,
        "title": title.strip(),
        "body": sanitize_body(body),
        "type": content_type,
        "department_id": department_id,
        "published": published,
        "created_by": actor_id,
        "author": (author or "").strip() or default_author,
        "file_size": file.size if file else None,
        "file_type": file.content_type if file else None,
    }
    if thumbnail is not None:
        stored = await store_file(storage, bucket=bucket, folder="thumbnails", record_id=record_id, upload=thumbnail)
        row["thumbnail_url"] = stored.url
    if file is not None:
        stored = await store_file(storage, bucket=bucket, folder="content", record_id=record_id, upload=file)
        row["file_url"] = stored.url
        row["file_name"] = stored.file_name

    return await perform_mutation(
        store,
        MutationKind.CREATE,
        CONTENT_TABLE,
        actor_id=actor_id,
        payload=row,
        action="content_upload",
        audit_values={"title": row["title"], "type": content_type, "published": published},
        changes=changes,
    )


async def set_content_published(
    store: DataStoreClient,
    content_id: str,
    published: bool,
    *,
    actor_id: str,
    changes: ChangeFeed | None = None,
) -> dict[str, Any]:
    """Publish or unpublish a content item."""
    return await perform_mutation(
        store,
        MutationKind.UPDATE,
        CONTENT_TABLE,
        actor_id=actor_id,
        record_id=content_id,
        payload={"published": published},
        changes=changes,
    )


async def delete_content(
    store: DataStoreClient,
    content_id: str,
    *,
    actor_id: str,
    changes: ChangeFeed | None = None,
) -> dict[str, Any]:
    """Delete a content item. Raises ``NotFoundError`` if it is already gone."""
    return await perform_mutation(
        store,
        MutationKind.DELETE,
        CONTENT_TABLE,
        actor_id=actor_id,
        record_id=content_id,
        changes=changes,
    )
