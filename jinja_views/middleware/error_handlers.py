"""Exception handlers for the application."""

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from jinja_views.exceptions import ViewEngineException
from jinja_views.logging_config import get_logger, log_with_context
from jinja_views.middleware.logging_middleware import redact_sensitive_data

logger = get_logger(__name__)


async def view_engine_exception_handler(request: Request, exc: ViewEngineException) -> PlainTextResponse:
    """Handle view engine exceptions with their HTTP status codes.

    Server-side failures (missing or broken templates, double writes) are
    logged as errors; client errors such as a bad antiforgery token as warnings.
    """
    log_with_context(
        logger,
        "error" if exc.status_code >= 500 else "warning",
        "View engine error",
        error_code=exc.code.value,
        error_message=exc.message,
        status_code=exc.status_code,
        method=request.method,
        url=redact_sensitive_data(str(request.url)),
        event_type="view_engine_error",
    )
    if exc.status_code >= 500:
        logger.error("Exception traceback:", exc_info=exc)

    return PlainTextResponse(exc.message, status_code=exc.status_code)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> PlainTextResponse:
    """Render HTTP errors (404, 405, ...) as plain text."""
    log_with_context(
        logger,
        "info",
        "HTTP error",
        status_code=exc.status_code,
        method=request.method,
        url=redact_sensitive_data(str(request.url)),
        event_type="http_error",
    )
    return PlainTextResponse(str(exc.detail), status_code=exc.status_code, headers=exc.headers)


async def general_exception_handler(request: Request, exc: Exception) -> PlainTextResponse:
    """Handle general exceptions with logging."""
    log_with_context(
        logger,
        "error",
        "An unhandled exception has occurred while executing the request",
        error=str(exc),
        error_type=type(exc).__name__,
        method=request.method,
        url=redact_sensitive_data(str(request.url)),
        event_type="unhandled_error",
    )
    logger.error("Exception traceback:", exc_info=exc)

    # Don't expose internal error details to clients
    return PlainTextResponse("Internal server error", status_code=500)


def register_error_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the application.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(ViewEngineException, view_engine_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
