"""Upload policies and pre-flight validation for stored files.

Every check here is pure: a file that fails validation is rejected before any
request reaches object storage or the data store.
"""

from dataclasses import dataclass

from thinktank_api.core.errors import ValidationError

_MB = 1024 * 1024

# Allowed MIME types for content uploads (documents, images, video, audio).
CONTENT_MIME_TYPES: frozenset[str] = frozenset(
    {
        "application/pdf",
        "application/msword",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        "text/plain",
        "image/jpeg",
        "image/jpg",
        "image/png",
        "image/gif",
        "image/webp",
        "video/mp4",
        "video/webm",
        "audio/mpeg",
        "audio/wav",
    }
)

# Allowed MIME types for report uploads (documents, spreadsheets, images).
REPORT_MIME_TYPES: frozenset[str] = frozenset(
    {
        "application/pdf",
        "application/msword",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        "text/plain",
        "application/vnd.ms-excel",
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        "image/jpeg",
        "image/jpg",
        "image/png",
        "image/gif",
        "image/webp",
    }
)


@dataclass(frozen=True)
class UploadPolicy:
    """Size and type limits for one upload slot.

    ``allowed_types`` of None with ``allowed_prefix`` set accepts any MIME type
    under that prefix (for example every ``image/*`` type).
    """

    name: str
    max_bytes: int
    allowed_types: frozenset[str] | None = None
    allowed_prefix: str | None = None

    def allows(self, content_type: str) -> bool:
        normalized = normalize_content_type(content_type)
        if self.allowed_types is not None and normalized in self.allowed_types:
            return True
        return self.allowed_prefix is not None and normalized.startswith(self.allowed_prefix)


def content_policy(max_mb: int = 100) -> UploadPolicy:
    return UploadPolicy("content", max_mb * _MB, allowed_types=CONTENT_MIME_TYPES)


def report_policy(max_mb: int = 50) -> UploadPolicy:
    return UploadPolicy("report", max_mb * _MB, allowed_types=REPORT_MIME_TYPES)


def image_policy(max_mb: int = 100) -> UploadPolicy:
    return UploadPolicy("image", max_mb * _MB, allowed_prefix="image/")


def normalize_content_type(content_type: str) -> str:
    """Strip parameters and lowercase a MIME type (``"Text/Plain; charset=x"`` -> ``"text/plain"``)."""
    return content_type.split(";")[0].strip().lower()


def validate_upload(
    policy: UploadPolicy,
    *,
    filename: str,
    content_type: str | None,
    size: int,
    field: str = "file",
) -> None:
    """Check a file against ``policy``.

    Args:
        policy: The limits to enforce.
        filename: Original filename, used in error messages.
        content_type: Declared MIME type of the file.
        size: File size in bytes.
        field: Form field name reported on failure.

    Raises:
        ValidationError: If the file is empty, too large or of a disallowed type.
    """
    if size <= 0:
        msg = f"{filename} is empty"
        raise ValidationError(msg, field=field)
    if size > policy.max_bytes:
        limit_mb = policy.max_bytes // _MB
        msg = f"File size must be less than {limit_mb}MB"
        raise ValidationError(msg, field=field)
    if not content_type or not policy.allows(content_type):
        msg = f"File type {content_type or 'unknown'} is not allowed for {policy.name} uploads"
        raise ValidationError(msg, field=field)


def extract_extension(filename: str) -> str:
    """Return the lowercase extension including the dot, or an empty string.

    Args:
        filename: The filename to extract from.

    Returns:
        The lowercase extension (e.g., ".pdf") or empty string if none.
    """
    dot_idx = filename.rfind(".")
    if dot_idx <= 0 or dot_idx == len(filename) - 1:
        return ""
    return filename[dot_idx:].lower()


def build_object_path(folder: str, record_id: str, filename: str, unix_millis: int) -> str:
    """Build ``<folder>/<record_id>-<unix_millis><ext>``.

    The original filename never appears in the path, only its extension.
    """
    return f"{folder}/{record_id}-{unix_millis}{extract_extension(filename)}"
