"""Report service: research report uploads and visibility."""

import uuid
from typing import Any

from thinktank_api.core.errors import ValidationError
from thinktank_api.lib.backend.changes import ChangeFeed
from thinktank_api.lib.backend.client import DataStoreClient, Order
from thinktank_api.lib.backend.storage import ObjectStorage
from thinktank_api.lib.uploads import report_policy
from thinktank_api.models.audit_log import MutationKind
from thinktank_api.schemas.report import SensitivityLevel
from thinktank_api.services.audited_mutation import perform_mutation
from thinktank_api.services.upload_service import FileUpload, store_file, validate_file

REPORT_TABLE = "reports"
REPORT_COLUMNS = "*, department:departments(name, slug)"


def derive_sensitivity(description: str | None) -> SensitivityLevel:
    """Classify a report by keywords in its description.

    Args:
        description: Free-text description, may be None.

    Returns:
        ``confidential`` if it mentions "confidential" or "classified",
        ``internal`` if it mentions "internal" or "private", else ``public``.
    """
    text = (description or "").lower()
    if "confidential" in text or "classified" in text:
        return SensitivityLevel.CONFIDENTIAL
    if "internal" in text or "private" in text:
        return SensitivityLevel.INTERNAL
    return SensitivityLevel.PUBLIC


async def list_reports(store: DataStoreClient) -> list[dict[str, Any]]:
    """Return every report with its department, newest first."""
    return await store.select(
        REPORT_TABLE,
        columns=REPORT_COLUMNS,
        order=[Order("created_at", descending=True)],
    )


async def upload_report(
    store: DataStoreClient,
    storage: ObjectStorage,
    *,
    actor_id: str,
    title: str,
    department_id: str | None,
    description: str | None = None,
    author: str | None = None,
    public: bool = False,
    file: FileUpload | None = None,
    bucket: str = "admin-uploads",
    max_file_size_mb: int = 50,
    changes: ChangeFeed | None = None,
) -> dict[str, Any]:
    """Create a report with an optional attached file.

    Raises:
        ValidationError: If the title or department is missing or the file is rejected.
        RemoteError: If storage or the data store fails.
    """
    if not title.strip():
        msg = "Title is required"
        raise ValidationError(msg, field="title")
    if not department_id:
        msg = "Department is required"
        raise ValidationError(msg, field="department_id")
    if file is not None:
        validate_file(report_policy(max_file_size_mb), file)

    sensitivity = derive_sensitivity(description)
    record_id = str(uuid.uuid4())
    row: dict[str, Any] = {
        "id": record_id,
        "title": title.strip(),
        "description": description,
        "author": author or None,
        "department_id": department_id,
        "uploaded_by": actor_id,
        "public": public,
        "sensitivity_level": str(sensitivity),
        "file_size": file.size if file else None,
        "file_type": file.content_type if file else None,
    }
    if file is not None:
        stored = await store_file(storage, bucket=bucket, folder="reports", record_id=record_id, upload=file)
        row["file_url"] = stored.url
        row["file_name"] = stored.file_name

    return await perform_mutation(
        store,
        MutationKind.CREATE,
        REPORT_TABLE,
        actor_id=actor_id,
        payload=row,
        action="report_upload",
        audit_values={"title": row["title"], "sensitivity_level": str(sensitivity), "public": public},
        changes=changes,
    )


async def set_report_public(
    store: DataStoreClient,
    report_id: str,
    public: bool,
    *,
    actor_id: str,
    changes: ChangeFeed | None = None,
) -> dict[str, Any]:
    return await perform_mutation(
        store,
        MutationKind.UPDATE,
        REPORT_TABLE,
        actor_id=actor_id,
        record_id=report_id,
        payload={"public": public},
        changes=changes,
    )


async def delete_report(
    store: DataStoreClient,
    report_id: str,
    *,
    actor_id: str,
    changes: ChangeFeed | None = None,
) -> dict[str, Any]:
    return await perform_mutation(
        store,
        MutationKind.DELETE,
        REPORT_TABLE,
        actor_id=actor_id,
        record_id=report_id,
        changes=changes,
    )
