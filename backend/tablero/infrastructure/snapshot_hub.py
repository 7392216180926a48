"""Snapshot Hub — fan-out of full-snapshot pushes to path subscribers.

Invariants:
    - A write notifies every live subscription whose path overlaps a written path
    - Each subscriber receives a freshly read snapshot of ITS watched path
    - After release() a subscription never receives another snapshot, even one
      read before the release
    - A failing callback is logged and never fails the write that triggered it

Design Decisions:
    - No local/remote distinction: the writer's own subscriptions are notified
      exactly like any other listener
    - Shared by both store implementations so push semantics cannot diverge
"""

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from tablero.core.repository_protocols import SnapshotCallback
from tablero.core.tree_paths import paths_overlap, split_path

logger = logging.getLogger(__name__)

SnapshotReader = Callable[[str], Awaitable[Any]]


class StoreSubscription:
    """Release handle returned by EntityStore.subscribe."""

    def __init__(self, hub: "SnapshotHub", path: str, callback: SnapshotCallback):
        self.path = path
        self.segments = split_path(path)
        self._hub = hub
        self._callback = callback
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def release(self) -> None:
        if not self._active:
            return
        self._active = False
        self._hub.remove(self)
        logger.debug("Subscription released", extra={"path": self.path})

    def deliver(self, snapshot: Any) -> None:
        if not self._active:
            return
        try:
            self._callback(snapshot)
        except Exception as e:
            logger.error(
                f"Snapshot callback failed: {e}",
                extra={"path": self.path}, exc_info=True,
            )


class SnapshotHub:
    """Registry of live subscriptions for one store instance."""

    def __init__(self):
        self._subscriptions: list[StoreSubscription] = []

    def register(self, path: str, callback: SnapshotCallback) -> StoreSubscription:
        subscription = StoreSubscription(self, path, callback)
        self._subscriptions.append(subscription)
        return subscription

    def remove(self, subscription: StoreSubscription) -> None:
        if subscription in self._subscriptions:
            self._subscriptions.remove(subscription)

    @property
    def subscription_count(self) -> int:
        return len(self._subscriptions)

    def affected_by(self, written_paths: list[str]) -> list[StoreSubscription]:
        written = [split_path(p) for p in written_paths]
        return [
            sub for sub in list(self._subscriptions)
            if any(paths_overlap(sub.segments, segments) for segments in written)
        ]

    async def publish(self, written_paths: list[str], read: SnapshotReader) -> None:
        for subscription in self.affected_by(written_paths):
            snapshot = await read(subscription.path)
            subscription.deliver(snapshot)
