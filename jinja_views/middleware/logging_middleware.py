"""Request logging with sensitive data redaction."""

import re
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from jinja_views.logging_config import get_logger, log_with_context

logger = get_logger(__name__)

# Query parameters never written to logs
SENSITIVE_PARAMS = [
    "__RequestVerificationToken",
    "token",
    "password",
    "secret",
    "session",
]


def redact_sensitive_data(url: str) -> str:
    """Redact sensitive query parameters from URL."""
    redacted = url
    for param in SENSITIVE_PARAMS:
        pattern = rf"({re.escape(param)})=([^&\s\"]+)"
        redacted = re.sub(pattern, r"\1=***REDACTED***", redacted, flags=re.IGNORECASE)
    return redacted


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log every request with its status code and duration."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        started = time.perf_counter()
        response = await call_next(request)
        log_with_context(
            logger,
            "info",
            "HTTP Request",
            method=request.method,
            url=redact_sensitive_data(str(request.url)),
            status_code=response.status_code,
            duration_ms=round((time.perf_counter() - started) * 1000, 2),
            event_type="http_request",
        )
        return response
