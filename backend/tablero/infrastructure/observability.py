"""Structured Logging — one JSON object per line, keyed by board, column and card.

Invariants:
    - Every line has timestamp, level, logger and message
    - Board/column/card ids, error codes, store paths and CSV import counts
      are lifted from `extra` into top-level keys
    - LOG_FORMAT=text switches to a plain single-line format for local runs

Design Decisions:
    - Stdlib logging only; services attach ids through `extra=` rather than
      only inside the message text
    - setup_logging runs once from the app lifespan
"""

import logging
import json
from datetime import datetime, timezone

_EXTRA_FIELDS = (
    "board_id", "column_id", "card_id", "error_code", "path",
    "imported", "failed",
)


class JSONFormatter(logging.Formatter):
    """Render a LogRecord as JSON, including the domain extra fields."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in _EXTRA_FIELDS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False)


def setup_logging(level: str = "INFO", fmt: str = "json"):
    """Install the root handler; `fmt` is "json" or "text"."""
    handler = logging.StreamHandler()
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s: %(message)s",
        ))
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
