"""View rendering for HTML templates.

Templates are located under the configured views directory, compiled by
Jinja2, executed against a model, a view data bag and validation state, and
written to a Starlette response.
"""

from jinja_views.views.compiler import ViewCompiler
from jinja_views.views.locator import TemplatePath, ViewLocator
from jinja_views.views.pipeline import RenderedView, RenderPipeline, build_context, merge_view_data
from jinja_views.views.view_data import MODEL_STATE_KEY, ModelState, ViewData, ViewValue

__all__ = [
    "MODEL_STATE_KEY",
    "ModelState",
    "RenderPipeline",
    "RenderedView",
    "TemplatePath",
    "ViewCompiler",
    "ViewData",
    "ViewLocator",
    "ViewValue",
    "build_context",
    "merge_view_data",
]
