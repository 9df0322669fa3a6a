"""Tests for writing rendered views to responses."""

from unittest.mock import MagicMock

import pytest
from starlette.responses import Response

from jinja_views.exceptions import ErrorCode, ResponseAlreadyStarted
from jinja_views.models.person import Person
from jinja_views.views.responses import ViewResponse, html_view, respond, view


@pytest.fixture
def mock_request(pipeline):
    """Request whose app carries the test pipeline."""
    request = MagicMock()
    request.app.state.render_pipeline = pipeline
    return request


class TestRespond:
    """Tests for respond()."""

    def test_writes_body_and_headers(self):
        """Test status, content type and body are written."""
        response = respond(ViewResponse(), "<p>héllo</p>", "text/html", 201)

        assert response.status_code == 201
        assert response.headers["content-type"] == "text/html; charset=utf-8"
        assert response.body == "<p>héllo</p>".encode()
        assert response.headers["content-length"] == str(len(response.body))

    def test_content_type_set_once(self):
        """Test a single content-type header is present."""
        response = respond(ViewResponse(), "x")

        assert response.headers.getlist("content-type") == ["text/html; charset=utf-8"]

    def test_non_text_content_type_has_no_charset(self):
        """Test charset is only added to text types."""
        response = respond(ViewResponse(), "{}", "application/json")

        assert response.headers["content-type"] == "application/json"

    def test_explicit_charset_kept(self):
        """Test a content type that names a charset is left as is."""
        response = respond(ViewResponse(), "x", "text/plain; charset=latin-1")

        assert response.headers["content-type"] == "text/plain; charset=latin-1"

    def test_second_write_fails(self):
        """Test writing twice raises and keeps the first body."""
        response = respond(ViewResponse(), "first")

        with pytest.raises(ResponseAlreadyStarted) as exc_info:
            respond(response, "second")

        assert exc_info.value.code == ErrorCode.RESPONSE_ALREADY_STARTED
        assert response.body == b"first"

    def test_plain_starlette_response(self):
        """Test any Starlette response can be written once."""
        response = respond(Response(), "ok", "text/plain")

        assert response.body == b"ok"
        with pytest.raises(ResponseAlreadyStarted):
            respond(response, "again", "text/plain")


class TestViewHelpers:
    """Tests for view() and html_view()."""

    def test_html_view(self, mock_request):
        """Test html_view renders through the app pipeline."""
        response = html_view(mock_request, "Person", Person(name="Razor"), {"Title": "Mr Fox"})

        assert isinstance(response, ViewResponse)
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        assert b"Razor" in response.body

    def test_view_content_type(self, mock_request):
        """Test view() uses the given content type and status."""
        response = view(mock_request, "text/plain", "Plain", view_data={"Who": "Foo"}, status_code=202)

        assert response.status_code == 202
        assert response.headers["content-type"] == "text/plain; charset=utf-8"
        assert response.body == b"Foo & co"
