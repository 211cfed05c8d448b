"""Upload policies, validation and object path naming."""

from thinktank_api.lib.uploads.validators import (
    CONTENT_MIME_TYPES,
    REPORT_MIME_TYPES,
    UploadPolicy,
    build_object_path,
    content_policy,
    extract_extension,
    image_policy,
    normalize_content_type,
    report_policy,
    validate_upload,
)

__all__ = [
    "CONTENT_MIME_TYPES",
    "REPORT_MIME_TYPES",
    "UploadPolicy",
    "build_object_path",
    "content_policy",
    "extract_extension",
    "image_policy",
    "normalize_content_type",
    "report_policy",
    "validate_upload",
]
