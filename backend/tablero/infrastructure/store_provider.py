"""Store Provider — process-wide EntityStore selected from settings.

Invariants:
    - Exactly one store per process, created in the FastAPI lifespan
    - get_store() fails loudly when called before init_store()

Design Decisions:
    - Module-level singleton mirroring the database session manager: the
      lifespan owns creation and disposal, no import-time side effects
"""

import logging

from tablero.config import Settings
from tablero.core.domain_types import StoreBackend
from tablero.core.repository_protocols import EntityStore
from tablero.infrastructure.database import DatabaseSessionManager
from tablero.infrastructure.memory_store import InMemoryEntityStore
from tablero.infrastructure.sql_store import SqlEntityStore

logger = logging.getLogger(__name__)

# Singleton (initialized on startup)
store: EntityStore | None = None
db_manager: DatabaseSessionManager | None = None


async def init_store(settings: Settings) -> EntityStore:
    global store, db_manager
    if settings.store_backend == StoreBackend.MEMORY:
        store = InMemoryEntityStore()
    else:
        db_manager = DatabaseSessionManager(
            settings.database_url,
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
        )
        if settings.database_create_tables:
            await db_manager.create_all()
        store = SqlEntityStore(db_manager)
    logger.info(f"Entity store ready ({settings.store_backend.value})")
    return store


async def close_store() -> None:
    global store, db_manager
    if db_manager is not None:
        await db_manager.dispose()
    store = None
    db_manager = None


def get_store() -> EntityStore:
    """FastAPI dependency for the entity store."""
    if store is None:
        raise RuntimeError("Entity store not initialized")
    return store
