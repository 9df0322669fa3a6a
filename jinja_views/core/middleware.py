"""Middleware configuration."""

from fastapi import FastAPI
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from slowapi import Limiter
from slowapi.util import get_remote_address
from starlette.middleware.sessions import SessionMiddleware

from jinja_views.config import Settings
from jinja_views.logging_config import get_logger, log_with_context
from jinja_views.middleware.logging_middleware import RequestLoggingMiddleware

logger = get_logger(__name__)

UPLOAD_RATE_LIMIT = "30/minute"

# Shared limiter; routes opt in with @limiter.limit(...)
limiter = Limiter(key_func=get_remote_address)


def setup_middleware(app: FastAPI, settings: Settings) -> Limiter:
    """Configure all middleware for the application.

    Args:
        app: FastAPI application instance
        settings: Application settings

    Returns:
        Limiter instance for rate limiting
    """
    app.add_middleware(RequestLoggingMiddleware)

    # Signed session cookie, holds the antiforgery token
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.secret_key,
        session_cookie=settings.session_cookie_name,
        same_site="lax",
        https_only=settings.https_only_cookies,
    )

    # Trusted hosts - prevent host header injection
    trusted_hosts = settings.trusted_host_list
    log_with_context(
        logger,
        "info",
        "Configuring TrustedHost middleware",
        event_type="security_config",
        hosts=trusted_hosts,
    )
    app.add_middleware(
        TrustedHostMiddleware,
        allowed_hosts=trusted_hosts,
    )

    app.state.limiter = limiter

    @app.middleware("http")
    async def count_requests(request, call_next):
        """Count total requests for the readiness endpoint."""
        app.state.request_count += 1
        response = await call_next(request)
        return response

    return limiter
