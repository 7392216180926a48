"""Tablero API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map TableroError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Entity store initialized on startup and closed on shutdown via lifespan

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Error handlers live in api/error_handlers.py to keep this module's
      import fan-out small
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tablero.infrastructure.observability import setup_logging
from tablero.infrastructure.store_provider import close_store, init_store
from tablero.config import get_settings
from tablero.api.error_handlers import register_error_handlers
from tablero.api.routes import board_csv, board_stream, boards, cards, health

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    await init_store(settings)
    logger.info("Tablero API started")
    yield
    await close_store()
    logger.info("Tablero API shutting down")


app = FastAPI(
    title="Tablero API", version="1.0.0", lifespan=lifespan,
)

# CORS: configured from settings, not hardcoded
settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routes: explicit registration. board_stream goes before boards so that
# /boards/stream is not captured by /boards/{board_id}
app.include_router(health.router)
app.include_router(board_stream.router)
app.include_router(boards.router)
app.include_router(cards.router)
app.include_router(board_csv.router)

register_error_handlers(app)
