"""SQL Entity Store — the tree-shaped store persisted as leaf rows via SQLAlchemy.

Invariants:
    - Same put/patch/delete/subscribe semantics as InMemoryEntityStore
      (tree manipulation delegated to core/tree_paths.py)
    - Rows never overlap: writing beneath a leaf rewrites that leaf as a subtree
    - A patch commits all of its child paths in ONE transaction, then pushes
    - Snapshots are pushed only after commit; a failed write pushes nothing
    - SQLAlchemy failures surface as StoreError (via DatabaseSessionManager)

Design Decisions:
    - Bulk Core-style INSERT/DELETE instead of ORM unit-of-work: no identity-map
      bookkeeping for rows that are replaced several times in one patch
    - Prefix scans use startswith(autoescape=True) because keys contain "_",
      a LIKE wildcard
"""

import logging
from typing import Any

from sqlalchemy import delete, insert, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from tablero.core.repository_protocols import SnapshotCallback
from tablero.core.tree_paths import (
    flatten, get_in, join_path, set_in, split_path,
)
from tablero.infrastructure.database import DatabaseSessionManager
from tablero.infrastructure.snapshot_hub import SnapshotHub, StoreSubscription
from tablero.models.store_node import StoreNode

logger = logging.getLogger(__name__)


def _ancestor_paths(segments: list[str], include_self: bool) -> list[str]:
    stop = len(segments) + 1 if include_self else len(segments)
    return ["/".join(segments[:i]) for i in range(1, stop)]


def _subtree_clause(segments: list[str]):
    prefix = "/".join(segments)
    return or_(
        StoreNode.path == prefix,
        StoreNode.path.startswith(prefix + "/", autoescape=True),
    )


class SqlEntityStore:
    """EntityStore backed by the store_nodes table."""

    def __init__(self, db: DatabaseSessionManager):
        self.db = db
        self.hub = SnapshotHub()

    async def get(self, path: str) -> Any:
        segments = split_path(path)
        async with self.db.session() as session:
            rows = await self._load(session, segments)
        return self._assemble(segments, rows)

    async def put(self, path: str, value: Any) -> None:
        async with self.db.session() as session:
            await self._write(session, split_path(path), value)
            await session.commit()
        await self.hub.publish([path], self.get)

    async def patch(self, path: str, updates: dict[str, Any]) -> None:
        if not updates:
            return
        written = [join_path(path, relative) for relative in updates]
        async with self.db.session() as session:
            for full, value in zip(written, updates.values()):
                await self._write(session, split_path(full), value)
            await session.commit()
        await self.hub.publish(written, self.get)

    async def delete(self, path: str) -> None:
        await self.put(path, None)

    async def subscribe(self, path: str, callback: SnapshotCallback) -> StoreSubscription:
        subscription = self.hub.register(path, callback)
        subscription.deliver(await self.get(path))
        return subscription

    async def health_check(self) -> bool:
        return await self.db.health_check()

    # ─── Row-level helpers ──────────────────────────────────────

    async def _load(self, session: AsyncSession, segments: list[str]) -> list[tuple[str, Any]]:
        query = select(StoreNode.path, StoreNode.value).order_by(StoreNode.path)
        if segments:
            query = query.where(or_(
                StoreNode.path.in_(_ancestor_paths(segments, include_self=True)),
                StoreNode.path.startswith("/".join(segments) + "/", autoescape=True),
            ))
        result = await session.execute(query)
        return [(row.path, row.value) for row in result]

    @staticmethod
    def _assemble(segments: list[str], rows: list[tuple[str, Any]]) -> Any:
        tree: Any = None
        for row_path, value in rows:
            row_segments = split_path(row_path)
            if len(row_segments) <= len(segments):
                # A leaf at or above the requested path holds the whole answer
                return get_in(value, segments[len(row_segments):])
            tree = set_in(tree, row_segments[len(segments):], value)
        return tree

    async def _write(self, session: AsyncSession, segments: list[str], value: Any) -> None:
        ancestors = _ancestor_paths(segments, include_self=False)
        if ancestors:
            result = await session.execute(
                select(StoreNode.path, StoreNode.value).where(StoreNode.path.in_(ancestors)),
            )
            leaf = result.first()
            if leaf is not None:
                base = split_path(leaf.path)
                subtree = set_in(leaf.value, segments[len(base):], value)
                await self._replace(session, base, subtree)
                return
        await self._replace(session, segments, value)

    async def _replace(self, session: AsyncSession, segments: list[str], value: Any) -> None:
        statement = delete(StoreNode)
        if segments:
            statement = statement.where(_subtree_clause(segments))
        await session.execute(statement.execution_options(synchronize_session=False))
        rows = flatten(value, segments)
        if rows:
            await session.execute(
                insert(StoreNode), [{"path": p, "value": v} for p, v in rows],
            )
