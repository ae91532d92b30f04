"""Error Hierarchy - typed, categorized exceptions for every listapp failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - StartupError is fatal: raised before the server accepts traffic
    - StorageError and RenderError are per-request: converted to 5xx responses,
      never allowed to stop the process
    - to_response() never includes debug_info or driver messages

Design Decisions:
    - Single hierarchy with ListAppError base: one FastAPI handler catches all
    - ErrorContext as dataclass: carries route and item id for log lines
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    STARTUP = "startup"
    DATABASE = "database"
    RENDER = "render"
    INTERNAL = "internal"
    TIMEOUT = "timeout"


@dataclass
class ErrorContext:
    """Request-level context attached to an error for diagnosis."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    route: str | None = None
    item_id: str | None = None
    debug_info: dict[str, Any] | None = None


class ListAppError(Exception):
    """Base exception for all listapp errors."""

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
        """Convert to the JSON error envelope returned to clients."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "route": self.context.route,
                    "item_id": self.context.item_id,
                },
            }
        }


# ─── Startup Errors (fatal) ─────────────────────────────────────

class StartupError(ListAppError):
    """Configuration, storage or templates unusable; the process must not serve."""
    def __init__(self, message: str, component: str, context: ErrorContext | None = None):
        super().__init__(
            f"Startup failed ({component}): {message}",
            "STARTUP_ERROR", ErrorCategory.STARTUP,
            ErrorSeverity.CRITICAL, context, 500,
        )
        self.component = component


# ─── Request Errors (500-level) ─────────────────────────────────

class StorageError(ListAppError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


class StorageTimeoutError(StorageError):
    """Database operation exceeded the configured query timeout."""
    def __init__(self, timeout_seconds: float, operation: str, context: ErrorContext | None = None):
        super().__init__(f"timed out after {timeout_seconds}s", operation, context)
        self.code = "DATABASE_TIMEOUT"
        self.category = ErrorCategory.TIMEOUT
        self.http_status = 504
        self.timeout_seconds = timeout_seconds


class RenderError(ListAppError):
    """Template execution failed."""
    def __init__(self, message: str, template: str, context: ErrorContext | None = None):
        super().__init__(
            f"Rendering {template} failed: {message}",
            "RENDER_ERROR", ErrorCategory.RENDER,
            ErrorSeverity.ERROR, context, 500,
        )
        self.template = template
