"""File upload service: validate, then store in object storage.

Validation happens for every file of a request before the first upload, so a
bad file never leaves earlier files orphaned in storage.
"""

import asyncio
import time
from dataclasses import dataclass

from loguru import logger

from thinktank_api.lib.backend.storage import ObjectStorage
from thinktank_api.lib.uploads import UploadPolicy, build_object_path, normalize_content_type, validate_upload


@dataclass(frozen=True)
class FileUpload:
    """A file received from a client, held in memory."""

    filename: str
    content_type: str | None
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class StoredFile:
    """Where an uploaded file ended up."""

    url: str
    path: str
    file_name: str
    file_size: int
    file_type: str


def validate_file(policy: UploadPolicy, upload: FileUpload, field: str = "file") -> None:
    """Raise ``ValidationError`` if ``upload`` breaks ``policy``."""
    validate_upload(
        policy,
        filename=upload.filename,
        content_type=upload.content_type,
        size=upload.size,
        field=field,
    )


async def store_file(
    storage: ObjectStorage,
    *,
    bucket: str,
    folder: str,
    record_id: str,
    upload: FileUpload,
) -> StoredFile:
    """Upload one already-validated file.

    Args:
        storage: Object storage client.
        bucket: Target bucket.
        folder: Folder inside the bucket (``content``, ``reports``, ...).
        record_id: Id of the row the file belongs to.
        upload: The file.

    Returns:
        The stored file's public URL and metadata.

    Raises:
        RemoteError: If object storage rejects the upload.
    """
    path = build_object_path(folder, record_id, upload.filename, int(time.time() * 1000))
    content_type = normalize_content_type(upload.content_type or "application/octet-stream")
    url = await asyncio.to_thread(storage.upload, bucket, path, upload.content, content_type)
    logger.debug(f"Stored {upload.filename} as {bucket}/{path}")
    return StoredFile(
        url=url,
        path=path,
        file_name=upload.filename,
        file_size=upload.size,
        file_type=content_type,
    )
