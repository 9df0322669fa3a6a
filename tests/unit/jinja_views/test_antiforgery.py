"""Tests for antiforgery tokens."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from jinja2 import Environment
from starlette.datastructures import FormData

from jinja_views.antiforgery import (
    FORM_FIELD_NAME,
    HEADER_NAME,
    SESSION_KEY,
    antiforgery_field,
    get_or_create_token,
    validate_antiforgery_token,
)
from jinja_views.exceptions import AntiforgeryException, ErrorCode


def make_request(session=None, headers=None, form=None):
    """Mock request with a session, headers and a posted form."""
    request = MagicMock()
    request.session = session if session is not None else {}
    request.headers = headers or {}
    request.method = "POST"
    request.form = AsyncMock(return_value=FormData(form or []))
    return request


class TestTokens:
    """Tests for token creation and the template global."""

    def test_token_created_once(self):
        """Test the session token is created on first use and reused."""
        request = make_request()

        token = get_or_create_token(request)

        assert token
        assert request.session[SESSION_KEY] == token
        assert get_or_create_token(request) == token

    def test_antiforgery_field_renders_hidden_input(self):
        """Test the template global emits the token in a hidden input."""
        request = make_request(session={SESSION_KEY: "abc123"})
        env = Environment(autoescape=True)
        env.globals["antiforgery_field"] = antiforgery_field

        html = env.from_string("{{ antiforgery_field() }}").render(request=request)

        assert html == f'<input type="hidden" name="{FORM_FIELD_NAME}" value="abc123">'

    def test_antiforgery_field_needs_request(self):
        """Test the template global fails without a request."""
        env = Environment(autoescape=True)
        env.globals["antiforgery_field"] = antiforgery_field

        with pytest.raises(RuntimeError):
            env.from_string("{{ antiforgery_field() }}").render()


class TestValidation:
    """Tests for validate_antiforgery_token."""

    @pytest.mark.asyncio
    async def test_valid_form_token(self):
        """Test a matching form field passes."""
        request = make_request(session={SESSION_KEY: "tok"}, form=[(FORM_FIELD_NAME, "tok")])

        await validate_antiforgery_token(request)

    @pytest.mark.asyncio
    async def test_valid_header_token(self):
        """Test a matching header passes without reading the form."""
        request = make_request(session={SESSION_KEY: "tok"}, headers={HEADER_NAME: "tok"})

        await validate_antiforgery_token(request)

        request.form.assert_not_called()

    @pytest.mark.asyncio
    async def test_mismatched_token(self):
        """Test a different token is rejected."""
        request = make_request(session={SESSION_KEY: "tok"}, form=[(FORM_FIELD_NAME, "other")])

        with pytest.raises(AntiforgeryException) as exc_info:
            await validate_antiforgery_token(request)

        assert exc_info.value.status_code == 400
        assert exc_info.value.code == ErrorCode.ANTIFORGERY_ERROR
        assert exc_info.value.message == "Bad antiforgery token"

    @pytest.mark.asyncio
    async def test_missing_submitted_token(self):
        """Test a form without the token is rejected."""
        request = make_request(session={SESSION_KEY: "tok"}, form=[("Name", "Fox")])

        with pytest.raises(AntiforgeryException):
            await validate_antiforgery_token(request)

    @pytest.mark.asyncio
    async def test_missing_session_token(self):
        """Test a request without a session token is rejected."""
        request = make_request(form=[(FORM_FIELD_NAME, "tok")])

        with pytest.raises(AntiforgeryException):
            await validate_antiforgery_token(request)
