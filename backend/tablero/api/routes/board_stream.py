"""Board Stream — SSE feeds of live projections.

Invariants:
    - GET /boards/stream pushes the board index on every boards/ change
    - GET /boards/{id}/stream pushes the full BoardView on every board or
      cards change; the first event is the current state
    - The projector is released when the client disconnects or the stream
      ends, so no callback outlives its consumer
    - A deleted board emits {"type": "board_deleted"} and closes the stream
    - A store failure is sent as an SSE error event before the stream ends

Design Decisions:
    - StreamingResponse for SSE: event generators yield formatted SSE lines
    - Generators are module-level functions so they can be driven without HTTP
"""

import asyncio
import json
import logging
from collections.abc import AsyncIterator

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from tablero.core.errors import TableroError
from tablero.core.repository_protocols import EntityStore
from tablero.infrastructure.store_provider import get_store
from tablero.services.board_repository import BoardRepository
from tablero.services.sync_projector import BoardListProjector, SyncProjector

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/boards", tags=["stream"])

# SSE headers prevent proxy/browser buffering of streamed events.
SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "X-Accel-Buffering": "no",
    "Connection": "keep-alive",
}


def sse_line(event: dict) -> str:
    """Format event as SSE data line."""
    return f"data: {json.dumps(event, ensure_ascii=False)}\n\n"


async def board_events(projector: SyncProjector) -> AsyncIterator[str]:
    """Start the projector and yield one SSE line per rebuilt view."""
    try:
        await projector.start()
        async for view in projector.updates():
            if view.board is None:
                yield sse_line({"type": "board_deleted", "data": {"board_id": projector.board_id}})
                return
            yield sse_line({"type": "board", "data": view.to_dict()})
    except TableroError as e:
        logger.error(f"Board stream failed: {e.message}", extra={"error_code": e.code})
        yield sse_line(e.to_sse_event())
    except asyncio.CancelledError:
        logger.info("Client disconnected from board stream", extra={"board_id": projector.board_id})
        raise
    finally:
        projector.release()


async def board_list_events(projector: BoardListProjector) -> AsyncIterator[str]:
    try:
        await projector.start()
        async for boards in projector.updates():
            yield sse_line({
                "type": "boards",
                "data": [board.to_record() for board in boards],
            })
    except TableroError as e:
        yield sse_line(e.to_sse_event())
    except asyncio.CancelledError:
        logger.info("Client disconnected from board index stream")
        raise
    finally:
        projector.release()


@router.get("/stream")
async def stream_boards(store: EntityStore = Depends(get_store)):
    """SSE stream of the board index."""
    return StreamingResponse(
        board_list_events(BoardListProjector(store)),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )


@router.get("/{board_id}/stream")
async def stream_board(board_id: str, store: EntityStore = Depends(get_store)):
    """SSE stream of one board's projection."""
    await BoardRepository(store).require_board(board_id)
    return StreamingResponse(
        board_events(SyncProjector(store, board_id)),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )
