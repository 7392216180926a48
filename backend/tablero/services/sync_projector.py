"""Sync Projector — turns snapshot pushes into ordered, render-ready views.

Invariants:
    - Two independent subscriptions per board: boards/<id> and cards/<id>
    - Every snapshot discards the previous projection and rebuilds it from
      scratch (core/projection.py); nothing is patched in place
    - No local/remote distinction: the projector's own writes come back as
      ordinary snapshots
    - Views are emitted only once both streams have delivered at least once
    - After release() no callback fires and every updates() consumer ends

Design Decisions:
    - Explicit event channel (one asyncio.Queue per consumer) instead of any
      UI reactivity primitive; SSE routes and tests consume it the same way
    - Each channel holds at most one view: every snapshot is a full rebuild, so
      a slow consumer skips straight to the newest view
    - Scoped resource: start() acquires, release() or `async with` tears down.
      A projector that is never released keeps receiving pushes
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from typing import Any

from tablero.core.entities import Board, Card
from tablero.core.projection import BoardView, project_board, project_board_list, project_cards
from tablero.core.repository_protocols import EntityStore, Subscription
from tablero.core.store_layout import BOARDS_ROOT, board_cards_path, board_path

logger = logging.getLogger(__name__)

_CLOSED = object()


def _offer(channel: asyncio.Queue, item: Any) -> None:
    """Replace whatever the consumer has not read yet with the newer item."""
    if channel.full():
        channel.get_nowait()
    channel.put_nowait(item)


class _ChannelProjector(ABC):
    """Subscription bookkeeping and per-consumer queues shared by projectors."""

    def __init__(self, store: EntityStore):
        self.store = store
        self._subscriptions: list[Subscription] = []
        self._channels: list[asyncio.Queue] = []
        self._released = False

    @property
    def active(self) -> bool:
        return bool(self._subscriptions) and not self._released

    @abstractmethod
    def _is_ready(self) -> bool: ...

    @abstractmethod
    def view(self) -> Any: ...

    @abstractmethod
    async def start(self) -> None: ...

    def _emit(self) -> None:
        if self._released or not self._is_ready():
            return
        current = self.view()
        for channel in self._channels:
            _offer(channel, current)

    def release(self) -> None:
        """Release every subscription and close all consumer channels. Idempotent."""
        if self._released:
            return
        self._released = True
        for subscription in self._subscriptions:
            subscription.release()
        self._subscriptions.clear()
        for channel in self._channels:
            _offer(channel, _CLOSED)

    async def updates(self) -> AsyncIterator[Any]:
        """Yield the current view (when ready), then the newest view after each snapshot."""
        channel: asyncio.Queue = asyncio.Queue(maxsize=1)
        if self._released:
            return
        self._channels.append(channel)
        if self._is_ready():
            channel.put_nowait(self.view())
        try:
            while True:
                item = await channel.get()
                if item is _CLOSED:
                    return
                yield item
        finally:
            if channel in self._channels:
                self._channels.remove(channel)

    async def __aenter__(self):
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.release()


class SyncProjector(_ChannelProjector):
    """Live projection of one board and its cards."""

    def __init__(self, store: EntityStore, board_id: str):
        super().__init__(store)
        self.board_id = board_id
        self.current_board: Board | None = None
        self.cards_by_column: dict[str, list[Card]] = {}
        self._board_seen = False
        self._cards_seen = False

    async def start(self) -> None:
        if self._subscriptions:
            return
        self._subscriptions.append(
            await self.store.subscribe(board_path(self.board_id), self._on_board),
        )
        self._subscriptions.append(
            await self.store.subscribe(board_cards_path(self.board_id), self._on_cards),
        )
        logger.debug("Projector started", extra={"board_id": self.board_id})

    def _on_board(self, snapshot: Any) -> None:
        self.current_board = project_board(self.board_id, snapshot)
        self._board_seen = True
        self._emit()

    def _on_cards(self, snapshot: Any) -> None:
        self.cards_by_column = project_cards(snapshot)
        self._cards_seen = True
        self._emit()

    def _is_ready(self) -> bool:
        return self._board_seen and self._cards_seen

    def view(self) -> BoardView:
        return BoardView(board=self.current_board, cards_by_column=self.cards_by_column)


class BoardListProjector(_ChannelProjector):
    """Live projection of the board index (boards/)."""

    def __init__(self, store: EntityStore):
        super().__init__(store)
        self.boards: list[Board] = []
        self._seen = False

    async def start(self) -> None:
        if self._subscriptions:
            return
        self._subscriptions.append(await self.store.subscribe(BOARDS_ROOT, self._on_boards))

    def _on_boards(self, snapshot: Any) -> None:
        self.boards = project_board_list(snapshot)
        self._seen = True
        self._emit()

    def _is_ready(self) -> bool:
        return self._seen

    def view(self) -> list[Board]:
        return list(self.boards)
