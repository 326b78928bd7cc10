"""Error Handlers — map engine errors and bad requests onto the JSON error envelope.

Invariants:
    - Every error response has the shape {"error": {code, message, category, severity, ...}}
    - LdGraphError keeps its own http_status; its severity picks the log level
    - RequestValidationError → 400 with one detail per failing field
    - Exception (catch-all) → 500, message never includes internals

Design Decisions:
    - Handlers are plain module functions listed in one table, registered with
      add_exception_handler: the table reads as the API's error contract
    - One envelope builder shared by validation and catch-all responses;
      LdGraphError.to_response() stays the source for engine errors
"""

import logging
from typing import Any, Awaitable, Callable

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ldgraph.core.errors import ErrorCategory, ErrorSeverity, LdGraphError

logger = logging.getLogger(__name__)

_LOG_LEVELS: dict[ErrorSeverity, int] = {
    ErrorSeverity.INFO: logging.INFO,
    ErrorSeverity.WARNING: logging.WARNING,
    ErrorSeverity.ERROR: logging.WARNING,
    ErrorSeverity.CRITICAL: logging.ERROR,
}


async def handle_ldgraph_error(request: Request, exc: LdGraphError) -> JSONResponse:
    """Engine misuse and lookup failures: client errors, logged with context."""
    logger.log(
        _LOG_LEVELS.get(exc.severity, logging.WARNING),
        "%s %s failed: %s", request.method, request.url.path, exc.message,
        extra={
            "error_code": exc.code,
            "path": request.url.path,
            "operation": exc.context.operation,
        },
    )
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


async def handle_validation_error(
    request: Request, exc: RequestValidationError,
) -> JSONResponse:
    details = [
        {
            "field": ".".join(str(part) for part in err["loc"]),
            "message": err["msg"],
            "type": err["type"],
        }
        for err in exc.errors()
    ]
    logger.warning(
        "Rejected %s %s: %d invalid field(s)",
        request.method, request.url.path, len(details),
        extra={"error_code": "VALIDATION_ERROR", "path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_envelope(
            "VALIDATION_ERROR", "Invalid request data",
            ErrorCategory.VALIDATION, ErrorSeverity.ERROR, details=details,
        ),
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all: full traceback to the log, generic message to the client."""
    logger.error(
        "Unhandled %s on %s %s", type(exc).__name__, request.method, request.url.path,
        exc_info=exc,
        extra={"error_code": "INTERNAL_ERROR", "path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_envelope(
            "INTERNAL_ERROR", "An unexpected error occurred",
            ErrorCategory.INTERNAL, ErrorSeverity.CRITICAL,
        ),
    )


# Most specific first; Starlette resolves by exception MRO either way
_HANDLERS: tuple[tuple[type[Exception], Callable[..., Awaitable[JSONResponse]]], ...] = (
    (LdGraphError, handle_ldgraph_error),
    (RequestValidationError, handle_validation_error),
    (Exception, handle_unexpected_error),
)


def register_error_handlers(app: FastAPI) -> None:
    """Install every handler in _HANDLERS on the app."""
    for exc_class, handler in _HANDLERS:
        app.add_exception_handler(exc_class, handler)


def _envelope(
    code: str,
    message: str,
    category: ErrorCategory,
    severity: ErrorSeverity,
    **fields: Any,
) -> dict:
    return {
        "error": {
            "code": code,
            "message": message,
            "category": category.value,
            "severity": severity.value,
            **fields,
        },
    }
