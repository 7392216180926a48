"""Service test fixtures — in-memory store, wired services, failure injection.

Invariants:
    - Every test gets a fresh InMemoryEntityStore
    - Services share one OrderingEngine, the way api/dependencies.py wires them
    - fail_writes patches one store method to raise StoreError after N calls

Design Decisions:
    - In-memory store for service tests: same tree semantics as the SQL store
      (see test_sql_store.py for the SQL-backed checks)
"""

import pytest
from unittest.mock import patch

from tablero.core.errors import StoreError
from tablero.infrastructure.memory_store import InMemoryEntityStore
from tablero.services.board_repository import BoardRepository, ColumnDraft
from tablero.services.card_repository import CardRepository
from tablero.services.ordering_engine import OrderingEngine


@pytest.fixture
def store():
    return InMemoryEntityStore()


@pytest.fixture
def engine(store):
    return OrderingEngine(store)


@pytest.fixture
def boards(store, engine):
    return BoardRepository(store, engine)


@pytest.fixture
def cards(store, boards, engine):
    return CardRepository(store, boards, engine)


@pytest.fixture
async def board(boards):
    """Board with columns "Col A" and "Col B"."""
    board_id = await boards.create_board(
        "Sprint", [ColumnDraft(name="Col A"), ColumnDraft(name="Col B", color="green")],
    )
    return await boards.require_board(board_id)


@pytest.fixture
def fail_writes(store):
    """Make store.<method> raise StoreError once it has succeeded `after` times."""
    patches = []

    def _install(method: str, after: int = 0):
        original = getattr(store, method)
        calls = {"n": 0}

        async def flaky(*args, **kwargs):
            calls["n"] += 1
            if calls["n"] > after:
                raise StoreError("injected failure", method)
            return await original(*args, **kwargs)

        p = patch.object(store, method, side_effect=flaky)
        p.start()
        patches.append(p)
        return calls

    yield _install
    for p in patches:
        p.stop()
