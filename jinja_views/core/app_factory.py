"""Application factory for creating and configuring the FastAPI app."""

import time

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from jinja_views import __version__
from jinja_views.antiforgery import antiforgery_field
from jinja_views.config import Settings, get_settings
from jinja_views.core.lifespan import lifespan
from jinja_views.core.middleware import setup_middleware
from jinja_views.logging_config import get_logger, log_with_context
from jinja_views.middleware.error_handlers import register_error_handlers
from jinja_views.routers import health_router, sample_router
from jinja_views.views.pipeline import RenderPipeline

logger = get_logger(__name__)

TEMPLATE_GLOBALS = {
    "antiforgery_field": antiforgery_field,
}


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Settings to build the app from (defaults to get_settings())

    Returns:
        Configured FastAPI application instance
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="jinja-views sample",
        description="Server-rendered Jinja2 views on FastAPI: forms, file upload and antiforgery tokens.",
        version=__version__,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.render_pipeline = RenderPipeline.from_settings(settings, extra_globals=TEMPLATE_GLOBALS)
    app.state.startup_time = time.time()
    app.state.request_count = 0
    log_with_context(
        logger,
        "info",
        "Render pipeline configured",
        views_dir=str(settings.views_dir),
        extensions=settings.template_extensions,
        event_type="render_pipeline_ready",
    )

    setup_middleware(app, settings)

    register_error_handlers(app)

    app.mount("/static", StaticFiles(directory=str(settings.static_dir)), name="static")

    app.include_router(sample_router.router, tags=["sample"])
    app.include_router(health_router.router, tags=["health"])

    return app
