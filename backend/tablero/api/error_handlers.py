"""Error Handlers — how board, column, card and CSV failures reach API clients.

Invariants:
    - TableroError keeps its own status: 404 for a missing board/column/card,
      409 for a column-constraint violation, 400 for bad input or a rejected CSV
      header (with missing_headers listed), 503 when the entity store fails
    - Malformed request bodies become VALIDATION_ERROR with one entry per field
    - Anything else is a 500 with a fixed body; store paths and card contents
      never appear in it

Design Decisions:
    - Client mistakes log at WARNING; store and server faults log at ERROR
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from tablero.core.errors import ErrorSeverity, ParseError, TableroError

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_tablero_error_handler(app)
    _register_validation_error_handler(app)
    _register_generic_error_handler(app)


def _register_tablero_error_handler(app: FastAPI) -> None:
    """Domain and store errors carry their own HTTP status."""

    @app.exception_handler(TableroError)
    async def tablero_error_handler(request: Request, exc: TableroError):
        log = logger.error if exc.http_status >= 500 else logger.warning
        log(
            f"TableroError: {exc.message}",
            extra={"error_code": exc.code, "path": request.url.path},
        )
        content = exc.to_response()
        if isinstance(exc, ParseError) and exc.missing_headers:
            content["error"]["missing_headers"] = exc.missing_headers
        return JSONResponse(status_code=exc.http_status, content=content)


def _register_validation_error_handler(app: FastAPI) -> None:
    """Request bodies that fail the schemas in schemas/board.py."""

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        logger.warning(
            f"Rejected request body: {len(exc.errors())} invalid field(s)",
            extra={"error_code": "VALIDATION_ERROR", "path": request.url.path},
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_build_validation_error_response(exc),
        )


def _register_generic_error_handler(app: FastAPI) -> None:
    """Last resort: a 500 with a fixed body."""

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        logger.error(
            f"Unhandled {type(exc).__name__}: {exc}",
            extra={"error_code": "INTERNAL_ERROR", "path": request.url.path},
            exc_info=True,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": "An unexpected error occurred",
                    "category": "internal",
                    "severity": ErrorSeverity.CRITICAL.value,
                },
            },
        )


def _build_validation_error_response(exc: RequestValidationError) -> dict:
    return {
        "error": {
            "code": "VALIDATION_ERROR",
            "message": "Invalid request data",
            "category": "validation",
            "severity": ErrorSeverity.ERROR.value,
            "details": [
                {
                    "field": ".".join(str(loc) for loc in e["loc"]),
                    "message": e["msg"],
                    "type": e["type"],
                }
                for e in exc.errors()
            ],
        },
    }
