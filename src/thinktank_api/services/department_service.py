"""Department lookups."""

from typing import Any

from thinktank_api.lib.backend.client import DataStoreClient, Order

DEPARTMENT_TABLE = "departments"


async def list_departments(store: DataStoreClient) -> list[dict[str, Any]]:
    """Return all departments ordered by name."""
    return await store.select(DEPARTMENT_TABLE, columns="id, name, slug", order=[Order("name")])
