"""Error Hierarchy - verifies codes, statuses and the client-facing envelope.

Tests:
    - Storage and render failures map to 5xx statuses
    - StorageTimeoutError is a StorageError with its own code and 504
    - to_response() carries route and item_id but never debug_info
"""

from listapp.core.errors import (
    ErrorCategory, ErrorContext, ErrorSeverity, ListAppError,
    RenderError, StartupError, StorageError, StorageTimeoutError,
)


def test_storage_error_is_service_unavailable():
    err = StorageError("Connection or operational error", "execute")
    assert err.http_status == 503
    assert err.code == "DATABASE_ERROR"
    assert err.category == ErrorCategory.DATABASE
    assert err.operation == "execute"
    assert "execute" in err.message


def test_storage_timeout_error_is_storage_error_with_504():
    err = StorageTimeoutError(0.5, "list")
    assert isinstance(err, StorageError)
    assert err.http_status == 504
    assert err.code == "DATABASE_TIMEOUT"
    assert err.category == ErrorCategory.TIMEOUT
    assert err.timeout_seconds == 0.5


def test_render_error_is_internal_server_error():
    err = RenderError("template execution error", "list.html")
    assert err.http_status == 500
    assert err.category == ErrorCategory.RENDER
    assert err.template == "list.html"


def test_startup_error_is_critical():
    err = StartupError("invalid or missing settings: port", "config")
    assert isinstance(err, ListAppError)
    assert err.severity == ErrorSeverity.CRITICAL
    assert err.component == "config"
    assert err.message.startswith("Startup failed (config)")


def test_to_response_includes_route_and_item_id():
    ctx = ErrorContext(route="delete", item_id="7")
    body = StorageError("Database driver error", "query", ctx).to_response()
    assert body["error"]["code"] == "DATABASE_ERROR"
    assert body["error"]["severity"] == "critical"
    assert body["error"]["context"] == {"route": "delete", "item_id": "7"}


def test_to_response_never_exposes_debug_info():
    ctx = ErrorContext(debug_info={"sql": "select secret"})
    body = StorageError("Database operation failed", "unknown", ctx).to_response()
    assert "select secret" not in str(body)
