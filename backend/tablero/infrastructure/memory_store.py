"""In-Memory Entity Store — nested-dict tree with snapshot pushes.

Invariants:
    - Reads return deep copies: callers and subscribers can never mutate the tree
    - patch applies all child paths before notifying (one batch, one push)
    - Every write notifies overlapping subscriptions after it is applied

Design Decisions:
    - Development and test backend; same semantics as SqlEntityStore because
      both delegate tree manipulation to core/tree_paths.py
"""

import copy
from typing import Any

from tablero.core.repository_protocols import SnapshotCallback
from tablero.core.tree_paths import get_in, join_path, set_in, split_path
from tablero.infrastructure.snapshot_hub import SnapshotHub, StoreSubscription


class InMemoryEntityStore:
    """EntityStore backed by a process-local tree."""

    def __init__(self, initial: dict | None = None):
        self._tree: Any = copy.deepcopy(initial) if initial else None
        self.hub = SnapshotHub()

    async def get(self, path: str) -> Any:
        return copy.deepcopy(get_in(self._tree, split_path(path)))

    async def put(self, path: str, value: Any) -> None:
        self._tree = set_in(self._tree, split_path(path), value)
        await self.hub.publish([path], self.get)

    async def patch(self, path: str, updates: dict[str, Any]) -> None:
        if not updates:
            return
        written = []
        for relative, value in updates.items():
            full = join_path(path, relative)
            self._tree = set_in(self._tree, split_path(full), value)
            written.append(full)
        await self.hub.publish(written, self.get)

    async def delete(self, path: str) -> None:
        self._tree = set_in(self._tree, split_path(path), None)
        await self.hub.publish([path], self.get)

    async def subscribe(self, path: str, callback: SnapshotCallback) -> StoreSubscription:
        subscription = self.hub.register(path, callback)
        subscription.deliver(await self.get(path))
        return subscription

    async def health_check(self) -> bool:
        return True

    def dump(self) -> Any:
        """Whole tree, for debugging and tests."""
        return copy.deepcopy(self._tree)
