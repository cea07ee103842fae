"""
In-process change feed.

Delivers committed row changes to subscribers of the affected tenant.
"""

import logging
from collections import defaultdict
from typing import Dict, List
from uuid import UUID

from seatkeeper.app.services.change_feed import (
    ChangeEvent,
    ChangeHandler,
    ChangeSubscription,
    IChangeFeed,
)

logger = logging.getLogger(__name__)


class InMemoryChangeSubscription(ChangeSubscription):
    def __init__(self, feed: "InMemoryChangeFeed", tenant_id: UUID, handler: ChangeHandler):
        self._feed = feed
        self.tenant_id = tenant_id
        self.handler = handler
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def unsubscribe(self) -> None:
        if self._active:
            self._feed._remove(self)
            self._active = False


class InMemoryChangeFeed(IChangeFeed):
    """Tenant-scoped publish/subscribe inside one process"""

    def __init__(self):
        self._subscriptions: Dict[UUID, List[InMemoryChangeSubscription]] = defaultdict(list)

    def subscribe(self, tenant_id: UUID, handler: ChangeHandler) -> ChangeSubscription:
        subscription = InMemoryChangeSubscription(self, tenant_id, handler)
        self._subscriptions[tenant_id].append(subscription)
        return subscription

    def publish(self, event: ChangeEvent) -> None:
        for subscription in list(self._subscriptions.get(event.tenant_id, ())):
            try:
                subscription.handler(event)
            except Exception:
                logger.exception(
                    f"Change handler failed for {event.table} {event.action.value} "
                    f"(tenant {event.tenant_id})"
                )

    def subscriber_count(self, tenant_id: UUID) -> int:
        return len(self._subscriptions.get(tenant_id, ()))

    def _remove(self, subscription: InMemoryChangeSubscription) -> None:
        subscriptions = self._subscriptions.get(subscription.tenant_id)
        if not subscriptions:
            return
        if subscription in subscriptions:
            subscriptions.remove(subscription)
        if not subscriptions:
            del self._subscriptions[subscription.tenant_id]
