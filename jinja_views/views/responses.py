"""Write rendered views to Starlette responses."""

from collections.abc import Mapping
from typing import Any

from fastapi import Request
from starlette.responses import Response

from jinja_views.dependencies import get_render_pipeline
from jinja_views.exceptions import ResponseAlreadyStarted
from jinja_views.logging_config import get_logger, log_with_context
from jinja_views.views.pipeline import DEFAULT_CONTENT_TYPE, DEFAULT_STATUS_CODE
from jinja_views.views.view_data import ModelState, ViewValue

logger = get_logger(__name__)

_WRITTEN_FLAG = "_view_written"


class ViewResponse(Response):
    """An empty response that a rendered view is written into."""

    def __init__(self) -> None:
        super().__init__(content=None, status_code=DEFAULT_STATUS_CODE)


def respond(
    response: Response,
    body: str,
    content_type: str = DEFAULT_CONTENT_TYPE,
    status_code: int = DEFAULT_STATUS_CODE,
) -> Response:
    """Write a rendered body to a response.

    Sets the status, the content-type header and the encoded body. A response
    can only be written once.

    Raises:
        ResponseAlreadyStarted: If the response was already written
    """
    if getattr(response, _WRITTEN_FLAG, False):
        log_with_context(
            logger,
            "error",
            "Attempted to write a response twice",
            status_code=response.status_code,
            event_type="response_already_started",
        )
        raise ResponseAlreadyStarted()

    if content_type.startswith("text/") and "charset" not in content_type:
        content_type = f"{content_type}; charset={response.charset}"

    response.status_code = status_code
    response.headers["content-type"] = content_type
    response.body = response.render(body)
    response.headers["content-length"] = str(len(response.body))
    setattr(response, _WRITTEN_FLAG, True)
    return response


def view(
    request: Request,
    content_type: str,
    template_name: str,
    model: Any = None,
    view_data: Mapping[str, ViewValue] | None = None,
    model_state: ModelState | None = None,
    status_code: int = DEFAULT_STATUS_CODE,
) -> Response:
    """Render a template with the app's pipeline and return it as a response."""
    pipeline = get_render_pipeline(request)
    rendered = pipeline.render(
        template_name,
        model=model,
        view_data=view_data,
        model_state=model_state,
        content_type=content_type,
        status_code=status_code,
        request=request,
    )
    return respond(ViewResponse(), rendered.body, rendered.content_type, rendered.status_code)


def html_view(
    request: Request,
    template_name: str,
    model: Any = None,
    view_data: Mapping[str, ViewValue] | None = None,
    model_state: ModelState | None = None,
    status_code: int = DEFAULT_STATUS_CODE,
) -> Response:
    """Render a template as text/html."""
    return view(request, "text/html", template_name, model, view_data, model_state, status_code)
