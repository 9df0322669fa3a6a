"""FastAPI dependencies for dependency injection."""

from fastapi import Request

from jinja_views.exceptions import ConfigurationException
from jinja_views.views.pipeline import RenderPipeline


def get_render_pipeline(request: Request) -> RenderPipeline:
    """
    Get the render pipeline from app state.

    Args:
        request: The FastAPI request object.

    Returns:
        The RenderPipeline built at startup.

    Raises:
        ConfigurationException: If the app was created without a render pipeline.
    """
    pipeline: RenderPipeline | None = getattr(request.app.state, "render_pipeline", None)

    if pipeline is None:
        raise ConfigurationException("Render pipeline not initialized")

    return pipeline
