"""API test fixtures — FastAPI app over a fresh in-memory store.

Invariants:
    - get_store dependency overridden per test (lifespan is not run by ASGITransport)
    - store_provider.store patched so the readiness probe sees the same store
"""

import pytest
from httpx import ASGITransport, AsyncClient

import tablero.infrastructure.store_provider as store_module
from tablero.infrastructure.memory_store import InMemoryEntityStore
from tablero.infrastructure.store_provider import get_store
from tablero.main import app


@pytest.fixture
def store():
    return InMemoryEntityStore()


@pytest.fixture
async def client(store, monkeypatch):
    app.dependency_overrides[get_store] = lambda: store
    monkeypatch.setattr(store_module, "store", store)
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
async def board(client):
    """Board created over HTTP with columns "Col A" and "Col B"."""
    res = await client.post("/api/v1/boards", json={
        "title": "Sprint",
        "columns": [{"name": "Col A"}, {"name": "Col B", "color": "green"}],
    })
    assert res.status_code == 201
    return res.json()
