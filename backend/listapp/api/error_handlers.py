"""Error Handlers - global exception handlers for the listapp API.

Invariants:
    - ListAppError -> JSON envelope with the error's own status (5xx for storage/render)
    - RequestValidationError -> 400 with one detail per offending form/path field
    - Exception (catch-all) -> 500, never leaks internal details
    - No handler stops the process; every failure ends as a response
    - Every envelope has the same top-level keys: code, message, category, severity

Design Decisions:
    - Log lines carry method, path, route and item_id so a failed request can be
      traced to its input
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from listapp.core.errors import ErrorCategory, ErrorSeverity, ListAppError

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register the domain, validation and catch-all handlers on app."""
    app.add_exception_handler(ListAppError, handle_listapp_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)


def _request_fields(request: Request) -> dict:
    return {"method": request.method, "path": request.url.path}


def error_envelope(
    code: str, message: str, category: ErrorCategory, severity: ErrorSeverity,
    **extra,
) -> dict:
    """Body shared by the validation and catch-all responses."""
    return {
        "error": {
            "code": code,
            "message": message,
            "category": category.value,
            "severity": severity.value,
            **extra,
        },
    }


async def handle_listapp_error(request: Request, exc: ListAppError):
    """Storage, timeout and render failures raised by the item routes."""
    logger.error(
        f"{exc.code} on {request.method} {request.url.path}: {exc.message}",
        extra={
            **_request_fields(request),
            "error_code": exc.code,
            "route": exc.context.route,
            "item_id": exc.context.item_id,
        },
    )
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


async def handle_validation_error(request: Request, exc: RequestValidationError):
    """Malformed form bodies, e.g. a file upload where text is expected."""
    details = [
        {
            "field": ".".join(str(part) for part in err["loc"]),
            "message": err["msg"],
            "type": err["type"],
        }
        for err in exc.errors()
    ]
    logger.warning(
        f"Rejected {request.method} {request.url.path}: "
        f"{', '.join(d['field'] for d in details)}",
        extra={**_request_fields(request), "error_code": "VALIDATION_ERROR"},
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_envelope(
            "VALIDATION_ERROR", "Invalid request data",
            ErrorCategory.VALIDATION, ErrorSeverity.ERROR,
            details=details,
        ),
    )


async def handle_unexpected_error(request: Request, exc: Exception):
    """Anything else: logged with traceback, reported as a bare 500."""
    logger.error(
        f"Unhandled exception on {request.method} {request.url.path}: {exc}",
        exc_info=True,
        extra={**_request_fields(request), "error_code": "INTERNAL_ERROR"},
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_envelope(
            "INTERNAL_ERROR", "An unexpected error occurred",
            ErrorCategory.INTERNAL, ErrorSeverity.CRITICAL,
        ),
    )
