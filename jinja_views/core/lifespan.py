"""Application lifespan management."""

import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from jinja_views import __version__
from jinja_views.logging_config import get_logger, log_with_context

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifespan - startup and shutdown events.

    Exceptions after yield are re-raised so FastAPI can clean up.
    """
    app.state.startup_time = time.time()
    app.state.request_count = 0

    pipeline = app.state.render_pipeline
    log_with_context(
        logger,
        "info",
        "Starting jinja-views application",
        version=__version__,
        views_dir=str(pipeline.locator.root_dir),
        event_type="app_startup",
    )

    try:
        yield
    except Exception as e:
        log_with_context(
            logger,
            "error",
            "Application error during lifespan",
            error=str(e),
            error_type=type(e).__name__,
            event_type="app_error",
        )
        raise
    finally:
        log_with_context(
            logger,
            "info",
            "Shutting down jinja-views application",
            event_type="app_shutdown",
        )

        pipeline.compiler.clear()
        log_with_context(
            logger,
            "info",
            "Compiled view cache cleared",
            event_type="view_cache_cleanup",
        )
