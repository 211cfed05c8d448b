"""Admin dashboard figures."""

import asyncio
from collections import Counter

from thinktank_api.lib.backend.client import DataStoreClient, eq
from thinktank_api.schemas.dashboard import AdminStats, ContentTypeCount

ADMIN_STATS_FUNCTION = "get_admin_stats"


async def get_admin_stats(store: DataStoreClient) -> AdminStats:
    """Call ``get_admin_stats`` and return its single row (zeros when empty)."""
    data = await store.rpc(ADMIN_STATS_FUNCTION)
    if isinstance(data, list):
        data = data[0] if data else {}
    return AdminStats.model_validate(data or {})


async def count_content_by_type(store: DataStoreClient) -> list[ContentTypeCount]:
    """Count content rows per type, most common first."""
    rows = await store.select("content", columns="type")
    counts = Counter(row.get("type") or "unknown" for row in rows)
    return [ContentTypeCount(type=t, count=c) for t, c in sorted(counts.items(), key=lambda kv: (-kv[1], kv[0]))]


async def count_active(store: DataStoreClient) -> tuple[int, int]:
    """Return (active opportunities, active partners)."""
    opportunities, partners = await asyncio.gather(
        store.count("opportunities", filters=[eq("is_active", True)]),
        store.count("partners", filters=[eq("active", True)]),
    )
    return opportunities, partners
