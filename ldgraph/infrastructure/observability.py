"""Structured Logging — JSON formatter, setup and timing helper.

Invariants:
    - All logs include timestamp, level, logger name, and message
    - Graph fields (entity_count, root_count, operation, duration_ms) and
      error fields (error_code, path) are surfaced when present
    - setup_logging is idempotent: calling it twice never duplicates output

Design Decisions:
    - JSONFormatter over third-party libs: zero dependencies, full control
    - setup_logging called once on startup via lifespan
"""

import logging
import json
import time
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator

_EXTRA_FIELDS: tuple[str, ...] = (
    "error_code", "path", "operation", "entity_count", "root_count", "duration_ms",
)
_HANDLER_NAME = "ldgraph"


class JSONFormatter(logging.Formatter):
    """Format logs as JSON for structured logging in production."""

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


def setup_logging(level: str = "INFO", fmt: str = "json") -> None:
    """Configure root logging; replaces a handler installed by an earlier call."""
    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s - %(message)s",
        ))
    for existing in list(logging.root.handlers):
        if existing.get_name() == _HANDLER_NAME:
            logging.root.removeHandler(existing)
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))


@contextmanager
def log_duration(
    logger: logging.Logger, operation: str, **extra: object,
) -> Iterator[None]:
    """Log how long the wrapped block took, at DEBUG level."""
    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed_ms = round((time.perf_counter() - start) * 1000.0, 3)
        logger.debug(
            "%s took %.3f ms", operation, elapsed_ms,
            extra={"operation": operation, "duration_ms": elapsed_ms, **extra},
        )
