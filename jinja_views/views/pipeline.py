"""Render pipeline: locate a template, compile it, execute it against a model."""

import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from jinja2 import TemplateError
from starlette.requests import Request

from jinja_views.exceptions import RenderError
from jinja_views.logging_config import get_logger, log_with_context
from jinja_views.views.compiler import ViewCompiler
from jinja_views.views.locator import ViewLocator
from jinja_views.views.view_data import MODEL_STATE_KEY, ModelState, ViewData, ViewValue

if TYPE_CHECKING:
    from jinja_views.config import Settings

logger = get_logger(__name__)

DEFAULT_CONTENT_TYPE = "text/html"
DEFAULT_STATUS_CODE = 200


@dataclass(frozen=True)
class RenderedView:
    """Output of a render call, written once to a response."""

    body: str
    status_code: int = DEFAULT_STATUS_CODE
    content_type: str = DEFAULT_CONTENT_TYPE


def merge_view_data(
    view_data: Mapping[str, ViewValue] | None,
    model_state: ModelState | None,
) -> dict[str, Any]:
    """Combine user view data with validation state.

    Every user key is kept except ``MODEL_STATE_KEY``, which always holds the
    validation state (empty when none was given).
    """
    merged: dict[str, Any] = dict(ViewData(view_data)) if view_data is not None else {}
    if MODEL_STATE_KEY in merged:
        log_with_context(
            logger,
            "debug",
            "View data key replaced by validation state",
            key=MODEL_STATE_KEY,
            event_type="view_data_reserved_key",
        )
    merged[MODEL_STATE_KEY] = model_state if model_state is not None else ModelState()
    return merged


def build_context(
    model: Any = None,
    view_data: Mapping[str, ViewValue] | None = None,
    model_state: ModelState | None = None,
    request: Request | None = None,
) -> dict[str, Any]:
    """Build the template context for a render call."""
    merged = merge_view_data(view_data, model_state)
    context: dict[str, Any] = {
        "model": model,
        "view_data": merged,
        "model_state": merged[MODEL_STATE_KEY],
    }
    if request is not None:
        context["request"] = request
    return context


class RenderPipeline:
    """Locates, compiles and executes templates.

    The pipeline only produces a RenderedView; writing it to a response is
    left to ``jinja_views.views.responses``.
    """

    def __init__(self, locator: ViewLocator, compiler: ViewCompiler):
        self.locator = locator
        self.compiler = compiler

    @classmethod
    def from_settings(
        cls,
        settings: "Settings",
        extra_globals: Mapping[str, Callable[..., Any] | Any] | None = None,
    ) -> "RenderPipeline":
        """Build a pipeline from explicit settings."""
        locator = ViewLocator(settings.views_dir, settings.template_extensions)
        compiler = ViewCompiler(
            settings.views_dir,
            auto_reload=settings.auto_reload_templates,
            strict_undefined=settings.strict_undefined,
            cache_size=settings.template_cache_size,
            extra_globals=extra_globals,
        )
        return cls(locator, compiler)

    def render(
        self,
        template_name: str,
        model: Any = None,
        view_data: Mapping[str, ViewValue] | None = None,
        model_state: ModelState | None = None,
        content_type: str | None = None,
        status_code: int | None = None,
        request: Request | None = None,
    ) -> RenderedView:
        """Render a template to a string.

        Args:
            template_name: Template name, resolved under the views directory
            model: Object exposed to the template as ``model``
            view_data: Auxiliary values exposed as ``view_data``
            model_state: Validation errors exposed as ``model_state``
            content_type: MIME type of the output (default text/html)
            status_code: HTTP status for the output (default 200)
            request: Current request, exposed for ``url_for`` and antiforgery

        Returns:
            RenderedView with body, status code and content type

        Raises:
            TemplateNotFound: If the template name cannot be resolved
            RenderError: If the template fails to compile or execute
        """
        started = time.perf_counter()
        template_path = self.locator.locate(template_name)
        template = self.compiler.compile(template_path)
        context = build_context(model, view_data, model_state, request)

        try:
            body = template.render(context)
        except TemplateError as e:
            log_with_context(
                logger,
                "error",
                "Template failed to render",
                template=template_path.name,
                error=str(e),
                error_type=type(e).__name__,
                event_type="template_render_error",
            )
            raise RenderError(
                template_name,
                f"Template '{template_path.name}' failed to render: {e}",
            ) from e
        except Exception as e:
            log_with_context(
                logger,
                "error",
                "Template raised during execution",
                template=template_path.name,
                error=str(e),
                error_type=type(e).__name__,
                event_type="template_render_error",
            )
            raise RenderError(
                template_name,
                f"Template '{template_path.name}' raised {type(e).__name__}: {e}",
            ) from e

        log_with_context(
            logger,
            "debug",
            "Template rendered",
            template=template_path.name,
            duration_ms=round((time.perf_counter() - started) * 1000, 2),
            event_type="template_rendered",
        )
        return RenderedView(
            body=body,
            status_code=status_code if status_code is not None else DEFAULT_STATUS_CODE,
            content_type=content_type or DEFAULT_CONTENT_TYPE,
        )
