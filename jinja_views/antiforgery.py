"""Antiforgery tokens for HTML forms.

A random token is kept in the signed session cookie (Starlette's
SessionMiddleware). Forms carry it in a hidden field; POST handlers check it
with the ``validate_antiforgery_token`` dependency.
"""

import secrets

from fastapi import Request
from jinja2 import pass_context
from jinja2.runtime import Context
from markupsafe import Markup

from jinja_views.exceptions import AntiforgeryException
from jinja_views.logging_config import get_logger, log_with_context

logger = get_logger(__name__)

FORM_FIELD_NAME = "__RequestVerificationToken"
HEADER_NAME = "RequestVerificationToken"
SESSION_KEY = "antiforgery_token"
TOKEN_BYTES = 32


def get_or_create_token(request: Request) -> str:
    """Return the session's antiforgery token, creating one on first use."""
    token = request.session.get(SESSION_KEY)
    if not token:
        token = secrets.token_urlsafe(TOKEN_BYTES)
        request.session[SESSION_KEY] = token
    return token


@pass_context
def antiforgery_field(context: Context) -> Markup:
    """Template global emitting the hidden antiforgery input."""
    request = context.get("request")
    if request is None:
        raise RuntimeError("antiforgery_field() needs the request in the template context")
    token = get_or_create_token(request)
    return Markup('<input type="hidden" name="{}" value="{}">').format(FORM_FIELD_NAME, token)


async def validate_antiforgery_token(request: Request) -> None:
    """Dependency rejecting requests without a valid antiforgery token.

    The token is read from the posted form or, for scripted clients, from the
    ``RequestVerificationToken`` header.

    Raises:
        AntiforgeryException: If the token is missing or does not match
    """
    expected = request.session.get(SESSION_KEY)

    submitted = request.headers.get(HEADER_NAME)
    if submitted is None:
        form = await request.form()
        value = form.get(FORM_FIELD_NAME)
        submitted = value if isinstance(value, str) else None

    if not expected or not submitted or not secrets.compare_digest(expected, submitted):
        log_with_context(
            logger,
            "warning",
            "Antiforgery token validation failed",
            has_session_token=bool(expected),
            has_submitted_token=bool(submitted),
            method=request.method,
            path=request.url.path,
            event_type="antiforgery_failure",
        )
        raise AntiforgeryException()
