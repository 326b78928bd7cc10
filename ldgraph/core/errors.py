"""Error Hierarchy — typed, categorized exceptions for structural misuse of the engine.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Errors are raised synchronously and are fatal to the triggering call, never retried
    - to_response() produces the REST envelope used by the API layer
    - Filtering never raises: unknown roots, ids, types and dangling references narrow
      results instead (these errors cover misuse only)

Design Decisions:
    - Single hierarchy with LdGraphError base: FastAPI global handler catches all (ADR: uniform error shape)
    - ErrorContext as dataclass: rich observability without coupling to logging framework
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    entity_id: str | None = None
    operation: str | None = None
    debug_info: dict[str, Any] | None = None


class LdGraphError(Exception):
    """Base exception for all ldgraph errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "entity_id": self.context.entity_id,
                    "operation": self.context.operation,
                },
            }
        }


# ─── Configuration Errors (400-level) ───────────────────────────

class MissingBaseGraphError(LdGraphError):
    """Pipeline run without a base graph."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "No base graph provided. Use base_graph() or merge_config() with a base graph.",
            "MISSING_BASE_GRAPH", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )


class InvalidBaseGraphError(LdGraphError):
    """Base graph is not a sequence of entities."""
    def __init__(self, received: type, context: ErrorContext | None = None):
        super().__init__(
            f"Base graph must be a list of entities, got {received.__name__}",
            "INVALID_BASE_GRAPH", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.received = received


class InvalidMaxEntitiesError(LdGraphError):
    """max_entities set below 1."""
    def __init__(self, max_entities: int, context: ErrorContext | None = None):
        super().__init__(
            f"max_entities must be greater than 0 (got {max_entities})",
            "INVALID_MAX_ENTITIES", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.max_entities = max_entities


class GraphTooLargeError(LdGraphError):
    """Submitted graph exceeds the configured entity limit."""
    def __init__(self, size: int, limit: int, context: ErrorContext | None = None):
        super().__init__(
            f"Graph has {size} entities; the limit is {limit}",
            "GRAPH_TOO_LARGE", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 413,
        )
        self.size = size
        self.limit = limit


# ─── Lookup Errors (404-level) ──────────────────────────────────

class EntityNotFoundError(LdGraphError):
    """An explicitly requested entity is absent from the graph."""
    def __init__(self, entity_id: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.entity_id = entity_id
        super().__init__(
            f'Entity with @id "{entity_id}" not found',
            "ENTITY_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, ctx, 404,
        )
