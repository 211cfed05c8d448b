"""In-process change feed for live refresh of read models.

Successful audited mutations publish a ``ChangeEvent`` here. Subscribers
(for example the public publications cache) react synchronously.
"""

from collections.abc import Callable

from loguru import logger

from thinktank_api.models.audit_log import ChangeEvent

ChangeCallback = Callable[[ChangeEvent], None]
ChangePredicate = Callable[[ChangeEvent], bool]


class ChangeSubscription:
    """Handle returned by ``ChangeFeed.subscribe``."""

    def __init__(self, feed: "ChangeFeed", key: int) -> None:
        self._feed = feed
        self._key = key

    @property
    def active(self) -> bool:
        return self._key in self._feed._subscribers

    def unsubscribe(self) -> None:
        self._feed._subscribers.pop(self._key, None)


class ChangeFeed:
    """Table-scoped publish/subscribe of change events."""

    def __init__(self) -> None:
        self._subscribers: dict[int, tuple[str, ChangeCallback, ChangePredicate | None]] = {}
        self._next_key = 0

    def subscribe(
        self,
        table: str,
        callback: ChangeCallback,
        predicate: ChangePredicate | None = None,
    ) -> ChangeSubscription:
        """Call ``callback`` for every event on ``table`` that passes ``predicate``."""
        key = self._next_key
        self._next_key += 1
        self._subscribers[key] = (table, callback, predicate)
        return ChangeSubscription(self, key)

    def publish(self, event: ChangeEvent) -> None:
        for table, callback, predicate in list(self._subscribers.values()):
            if table != event.table:
                continue
            if predicate is not None and not predicate(event):
                continue
            try:
                callback(event)
            except Exception:
                logger.exception(f"Change subscriber failed for {event.table} {event.event_type}")
