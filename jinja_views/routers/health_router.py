"""Health endpoints."""

import os
from datetime import UTC, datetime

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from jinja_views import __version__
from jinja_views.dependencies import get_render_pipeline
from jinja_views.models import DetailedHealthResponse, HealthResponse
from jinja_views.views.pipeline import RenderPipeline

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Basic health check endpoint.

    For view engine status, use `/health/ready`.
    """
    return HealthResponse(status="ok", version=__version__)


@router.get("/health/ready", response_model=DetailedHealthResponse)
async def readiness_check(
    request: Request,
    pipeline: RenderPipeline = Depends(get_render_pipeline),
):
    """Readiness probe - can the application render views?

    **Returns:**
    - 200: Views directory is readable
    - 503: Views directory is missing or unreadable
    """
    checks = {}
    views_dir = pipeline.locator.root_dir

    views_ok = views_dir.is_dir() and os.access(views_dir, os.R_OK)
    checks["views_dir"] = "ok" if views_ok else f"unreadable: {views_dir}"
    checks["requests_served"] = str(request.app.state.request_count)

    status_code = 200 if views_ok else 503
    status = "healthy" if views_ok else "unhealthy"

    return JSONResponse(
        status_code=status_code,
        content=DetailedHealthResponse(
            status=status,
            version=__version__,
            timestamp=datetime.now(UTC),
            checks=checks,
        ).model_dump(mode="json"),
    )
