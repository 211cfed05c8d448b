"""Public read models: the publications feed, blog pages and careers listing.

The feed merges published content with public reports. ``PublicationCache``
holds the merged feed and drops it whenever the change feed reports a write
to ``content`` or ``reports``, and once it is older than its TTL.
"""

import time
from datetime import UTC, datetime
from typing import Any

from loguru import logger

from thinktank_api.core.errors import NotFoundError
from thinktank_api.lib.backend.changes import ChangeFeed, ChangeSubscription
from thinktank_api.lib.backend.client import DataStoreClient, Order, eq, neq
from thinktank_api.models.audit_log import ChangeEvent
from thinktank_api.services.blog_service import BLOG_TYPE
from thinktank_api.services.content_service import CONTENT_TABLE, DEFAULT_AUTHOR
from thinktank_api.services.opportunity_service import list_opportunities
from thinktank_api.services.report_service import REPORT_TABLE

RESEARCH_TYPE = "Research"

_REPORT_FEED_COLUMNS = (
    "id, title, description, author, created_at, file_url, file_name, thumbnail_url, "
    "department_id, department:departments(name, slug)"
)
_POST_COLUMNS = (
    "id, title, body, author, published, created_at, updated_at, thumbnail_url, "
    "gallery_images, read_time, slug, department_id, department:departments(name, slug)"
)
_RELATED_COLUMNS = "id, title, thumbnail_url, created_at, slug"
_RELATED_LIMIT = 3
_EPOCH = datetime.min.replace(tzinfo=UTC)


def _created_at(item: dict[str, Any]) -> datetime:
    value = item.get("created_at")
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        parsed = datetime.fromisoformat(value)
    else:
        return _EPOCH
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)


def report_to_publication(report: dict[str, Any]) -> dict[str, Any]:
    """Map a public report row onto the feed item shape."""
    return {
        "id": report["id"],
        "title": report.get("title") or "",
        "body": report.get("description"),
        "type": RESEARCH_TYPE,
        "created_at": report.get("created_at"),
        "file_url": report.get("file_url"),
        "file_name": report.get("file_name"),
        "media_type": None,
        "media_url": None,
        "thumbnail_url": report.get("thumbnail_url"),
        "slug": None,
        "author": report.get("author") or DEFAULT_AUTHOR,
        "read_time": None,
        "department": report.get("department"),
        "source": "reports",
    }


def merge_publications(content: list[dict[str, Any]], reports: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Combine content and report rows into one feed, newest first."""
    items = [{**row, "source": "content"} for row in content]
    items.extend(report_to_publication(row) for row in reports)
    items.sort(key=_created_at, reverse=True)
    return items


def filter_publications(
    items: list[dict[str, Any]],
    *,
    search: str | None = None,
    content_type: str | None = None,
    department: str | None = None,
) -> list[dict[str, Any]]:
    """Filter the feed the way the publications page does.

    Args:
        items: Merged feed items.
        search: Case-insensitive substring matched against title, body and author.
        content_type: Case-insensitive type, or ``all``/None for every type.
        department: Department slug, or ``all``/None for every department.

    Returns:
        The matching items in their original order.
    """
    needle = (search or "").lower()
    wanted_type = (content_type or "all").lower()
    wanted_department = department or "all"

    def _matches(item: dict[str, Any]) -> bool:
        if needle:
            fields = (item.get("title"), item.get("body"), item.get("author"))
            if not any(needle in (value or "").lower() for value in fields):
                return False
        if wanted_type != "all" and (item.get("type") or "").lower() != wanted_type:
            return False
        if wanted_department != "all":
            dept = item.get("department") or {}
            if dept.get("slug") != wanted_department:
                return False
        return True

    return [item for item in items if _matches(item)]


def feed_types(items: list[dict[str, Any]]) -> list[str]:
    return sorted({item["type"] for item in items if item.get("type")})


def feed_departments(items: list[dict[str, Any]]) -> list[dict[str, Any]]:
    seen: dict[str, dict[str, Any]] = {}
    for item in items:
        dept = item.get("department")
        if dept and dept.get("name") and dept["name"] not in seen:
            seen[dept["name"]] = {"name": dept["name"], "slug": dept.get("slug")}
    return [seen[name] for name in sorted(seen)]


async def fetch_publications(store: DataStoreClient) -> list[dict[str, Any]]:
    """Read published content and public reports and merge them."""
    content = await store.select(
        CONTENT_TABLE,
        columns="*, department:departments(name, slug)",
        filters=[eq("published", True)],
        order=[Order("created_at", descending=True)],
    )
    reports = await store.select(
        REPORT_TABLE,
        columns=_REPORT_FEED_COLUMNS,
        filters=[eq("public", True)],
        order=[Order("created_at", descending=True)],
    )
    return merge_publications(content, reports)


class PublicationCache:
    """Merged feed cached until the next content or report change or until it expires.

    A fetch that was in flight when a change arrived returns its result to the
    caller but is not kept, so a later reader fetches again.

    Args:
        changes: Change feed to listen on. Without one the cache only drops
            the feed on expiry or an explicit ``invalidate``.
        ttl_seconds: Maximum age of a cached feed. Covers writes made by
            other processes, which never reach this change feed. None keeps
            the feed until the next change.
    """

    def __init__(self, changes: ChangeFeed | None = None, ttl_seconds: float | None = None) -> None:
        self._items: list[dict[str, Any]] | None = None
        self._loaded_at = 0.0
        self._generation = 0
        self._ttl_seconds = ttl_seconds
        self._subscriptions: list[ChangeSubscription] = []
        if changes is not None:
            for table in (CONTENT_TABLE, REPORT_TABLE):
                self._subscriptions.append(changes.subscribe(table, self._on_change))

    @property
    def loaded(self) -> bool:
        return self._items is not None and not self._expired()

    async def get(self, store: DataStoreClient) -> list[dict[str, Any]]:
        cached = self._items
        if cached is not None and not self._expired():
            return cached
        generation = self._generation
        items = await fetch_publications(store)
        if generation == self._generation:
            self._items = items
            self._loaded_at = time.monotonic()
            logger.debug(f"Publication feed loaded ({len(items)} items)")
        else:
            logger.debug("Publication feed changed during fetch, not caching")
        return items

    def invalidate(self) -> None:
        self._generation += 1
        self._items = None

    def close(self) -> None:
        for subscription in self._subscriptions:
            subscription.unsubscribe()
        self._subscriptions.clear()
        self.invalidate()

    def _expired(self) -> bool:
        if self._ttl_seconds is None:
            return False
        return time.monotonic() - self._loaded_at >= self._ttl_seconds

    def _on_change(self, event: ChangeEvent) -> None:
        logger.debug(f"Publication feed invalidated by {event.event_type} on {event.table}")
        self.invalidate()


async def get_blog_post_page(store: DataStoreClient, slug: str) -> tuple[dict[str, Any], list[dict[str, Any]]]:
    """Return a published blog post by slug and up to three other published posts.

    Raises:
        NotFoundError: If no published blog post has this slug.
    """
    rows = await store.select(
        CONTENT_TABLE,
        columns=_POST_COLUMNS,
        filters=[eq("slug", slug), eq("published", True), eq("type", BLOG_TYPE)],
        limit=1,
    )
    if not rows:
        msg = f"Blog post '{slug}' not found"
        raise NotFoundError(msg)
    post = rows[0]
    related = await store.select(
        CONTENT_TABLE,
        columns=_RELATED_COLUMNS,
        filters=[eq("type", BLOG_TYPE), eq("published", True), neq("id", post["id"])],
        limit=_RELATED_LIMIT,
    )
    return post, related


async def list_careers(
    store: DataStoreClient,
    *,
    opportunity_type: str | None = None,
    department: str | None = None,
) -> list[dict[str, Any]]:
    """Return active opportunities, optionally filtered by type and department slug."""
    items = await list_opportunities(store, active_only=True)
    if opportunity_type and opportunity_type != "all":
        items = [item for item in items if item.get("type") == opportunity_type]
    if department and department != "all":
        items = [item for item in items if (item.get("department") or {}).get("slug") == department]
    return items
