"""Partner service: partner organisations shown on the public site."""

from typing import Any

from thinktank_api.lib.backend.changes import ChangeFeed
from thinktank_api.lib.backend.client import DataStoreClient, Order, eq
from thinktank_api.lib.backend.storage import ObjectStorage
from thinktank_api.lib.uploads import image_policy
from thinktank_api.models.audit_log import MutationKind
from thinktank_api.services.audited_mutation import perform_mutation
from thinktank_api.services.upload_service import FileUpload, store_file, validate_file

PARTNER_TABLE = "partners"


async def list_partners(store: DataStoreClient, *, active_only: bool = False) -> list[dict[str, Any]]:
    """Return partners in display order.

    Args:
        store: The data store client.
        active_only: Only return partners with ``active = true``.
    """
    filters = [eq("active", True)] if active_only else None
    return await store.select(
        PARTNER_TABLE,
        filters=filters,
        order=[Order("display_order")],
    )


async def create_partner(
    store: DataStoreClient,
    data: dict[str, Any],
    *,
    actor_id: str,
    changes: ChangeFeed | None = None,
) -> dict[str, Any]:
    return await perform_mutation(
        store,
        MutationKind.CREATE,
        PARTNER_TABLE,
        actor_id=actor_id,
        payload=data,
        changes=changes,
    )


async def update_partner(
    store: DataStoreClient,
    partner_id: str,
    data: dict[str, Any],
    *,
    actor_id: str,
    changes: ChangeFeed | None = None,
) -> dict[str, Any]:
    return await perform_mutation(
        store,
        MutationKind.UPDATE,
        PARTNER_TABLE,
        actor_id=actor_id,
        record_id=partner_id,
        payload=data,
        changes=changes,
    )


async def delete_partner(
    store: DataStoreClient,
    partner_id: str,
    *,
    actor_id: str,
    changes: ChangeFeed | None = None,
) -> dict[str, Any]:
    return await perform_mutation(
        store,
        MutationKind.DELETE,
        PARTNER_TABLE,
        actor_id=actor_id,
        record_id=partner_id,
        changes=changes,
    )


async def upload_partner_logo(
    store: DataStoreClient,
    storage: ObjectStorage,
    partner_id: str,
    logo: FileUpload,
    *,
    actor_id: str,
    bucket: str = "partner-logos",
    max_file_size_mb: int = 100,
    changes: ChangeFeed | None = None,
) -> dict[str, Any]:
    """Store a partner logo image and point the partner's ``logo_url`` at it.

    Raises:
        ValidationError: If the file is not an image or is too large.
        NotFoundError: If the partner does not exist.
        RemoteError: If storage or the data store fails.
    """
    validate_file(image_policy(max_file_size_mb), logo, field="logo")
    stored = await store_file(storage, bucket=bucket, folder="logos", record_id=partner_id, upload=logo)
    return await perform_mutation(
        store,
        MutationKind.UPDATE,
        PARTNER_TABLE,
        actor_id=actor_id,
        record_id=partner_id,
        payload={"logo_url": stored.url},
        changes=changes,
    )
