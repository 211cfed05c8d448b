"""Opportunity service: job, internship and attachment postings."""

from typing import Any

from thinktank_api.lib.backend.changes import ChangeFeed
from thinktank_api.lib.backend.client import DataStoreClient, Order, eq
from thinktank_api.models.audit_log import MutationKind
from thinktank_api.services.audited_mutation import perform_mutation

OPPORTUNITY_TABLE = "opportunities"
OPPORTUNITY_COLUMNS = "*, department:departments(name, slug)"


async def list_opportunities(store: DataStoreClient, *, active_only: bool = False) -> list[dict[str, Any]]:
    """Return opportunities with their department, newest first."""
    filters = [eq("is_active", True)] if active_only else None
    return await store.select(
        OPPORTUNITY_TABLE,
        columns=OPPORTUNITY_COLUMNS,
        filters=filters,
        order=[Order("created_at", descending=True)],
    )


async def create_opportunity(
    store: DataStoreClient,
    data: dict[str, Any],
    *,
    actor_id: str,
    changes: ChangeFeed | None = None,
) -> dict[str, Any]:
    return await perform_mutation(
        store,
        MutationKind.CREATE,
        OPPORTUNITY_TABLE,
        actor_id=actor_id,
        payload=data,
        audit_values={"title": data.get("title"), "type": data.get("type"), "is_active": data.get("is_active")},
        changes=changes,
    )


async def update_opportunity(
    store: DataStoreClient,
    opportunity_id: str,
    data: dict[str, Any],
    *,
    actor_id: str,
    changes: ChangeFeed | None = None,
) -> dict[str, Any]:
    return await perform_mutation(
        store,
        MutationKind.UPDATE,
        OPPORTUNITY_TABLE,
        actor_id=actor_id,
        record_id=opportunity_id,
        payload=data,
        changes=changes,
    )


async def set_opportunity_active(
    store: DataStoreClient,
    opportunity_id: str,
    is_active: bool,
    *,
    actor_id: str,
    changes: ChangeFeed | None = None,
) -> dict[str, Any]:
    """Open or close an opportunity to applicants."""
    return await update_opportunity(
        store,
        opportunity_id,
        {"is_active": is_active},
        actor_id=actor_id,
        changes=changes,
    )


async def delete_opportunity(
    store: DataStoreClient,
    opportunity_id: str,
    *,
    actor_id: str,
    changes: ChangeFeed | None = None,
) -> dict[str, Any]:
    return await perform_mutation(
        store,
        MutationKind.DELETE,
        OPPORTUNITY_TABLE,
        actor_id=actor_id,
        record_id=opportunity_id,
        changes=changes,
    )
