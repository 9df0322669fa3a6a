"""Bind posted form fields to pydantic models."""

from typing import TypeVar

from fastapi import Request
from pydantic import BaseModel, ValidationError
from starlette.datastructures import FormData

from jinja_views.logging_config import get_logger, log_with_context
from jinja_views.views.view_data import ModelState

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def form_values(form: FormData, model_cls: type[BaseModel]) -> dict[str, str]:
    """Pick the first posted value for each model field.

    Fields are looked up by alias first, then by name. File parts are ignored.
    """
    values: dict[str, str] = {}
    for name, field in model_cls.model_fields.items():
        key = field.alias or name
        for candidate in (key, name):
            value = next((v for v in form.getlist(candidate) if isinstance(v, str)), None)
            if value is not None:
                values[key] = value
                break
    return values


def bind(form: FormData, model_cls: type[ModelT]) -> tuple[ModelT, ModelState]:
    """Validate form data into a model.

    On validation failure the returned model holds the defaults overlaid with
    the raw posted values, so the form can be redisplayed, and the model
    state holds pydantic's messages keyed by field alias.
    """
    values = form_values(form, model_cls)
    try:
        return model_cls.model_validate(values), ModelState()
    except ValidationError as e:
        log_with_context(
            logger,
            "info",
            "Form binding failed validation",
            model=model_cls.__name__,
            error_count=e.error_count(),
            event_type="form_binding_invalid",
        )
        fields = {
            name: values[field.alias or name]
            for name, field in model_cls.model_fields.items()
            if (field.alias or name) in values
        }
        return model_cls.model_construct(**fields), ModelState.from_validation_error(e)


async def bind_form(request: Request, model_cls: type[ModelT]) -> tuple[ModelT, ModelState]:
    """Read the request form and bind it to ``model_cls``."""
    form = await request.form()
    return bind(form, model_cls)
