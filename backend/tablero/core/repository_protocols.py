"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - All store IO goes through EntityStore; repositories never touch a backend
    - A Subscription stays live until release() is called; release is idempotent

Design Decisions:
    - Protocol over ABC: structural subtyping, so the in-memory store, the SQL
      store and test doubles need no shared base class
    - Async in Protocol: boundary methods are async because implementations do
      IO; snapshot callbacks are plain callables because a projection rebuild
      is pure CPU work
"""

from collections.abc import Callable
from typing import Any, Protocol

SnapshotCallback = Callable[[Any], None]


class Subscription(Protocol):
    """Release handle for a snapshot subscription."""
    path: str

    @property
    def active(self) -> bool: ...

    def release(self) -> None: ...


class EntityStore(Protocol):
    """Tree-shaped key-value store with full-snapshot push notifications.

    put replaces the subtree at path; patch writes several relative child
    paths as one batch; delete removes a subtree. subscribe delivers the
    current snapshot of path immediately and again after every write whose
    path overlaps it (ancestor, descendant or equal).
    """
    async def get(self, path: str) -> Any: ...
    async def put(self, path: str, value: Any) -> None: ...
    async def patch(self, path: str, updates: dict[str, Any]) -> None: ...
    async def delete(self, path: str) -> None: ...
    async def subscribe(self, path: str, callback: SnapshotCallback) -> Subscription: ...
    async def health_check(self) -> bool: ...
