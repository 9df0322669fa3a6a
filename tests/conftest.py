"""Pytest configuration and shared fixtures."""

import re
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from jinja_views.config import Settings
from jinja_views.core.app_factory import create_app
from jinja_views.views.compiler import ViewCompiler
from jinja_views.views.locator import ViewLocator
from jinja_views.views.pipeline import RenderPipeline

TOKEN_PATTERN = re.compile(r'name="__RequestVerificationToken" value="([^"]+)"')


def write_templates(root: Path, templates: dict[str, str]) -> Path:
    """Write template files under root and return it."""
    for name, source in templates.items():
        path = root / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(source, encoding="utf-8")
    return root


@pytest.fixture
def views_dir(tmp_path):
    """Views directory with a small set of templates."""
    return write_templates(
        tmp_path / "views",
        {
            "Person.html": "<p>{{ view_data['Title'] }}: {{ model.name }}</p>",
            "Errors.html": "{% for message in model_state.errors_for('Name') %}<em>{{ message }}</em>{% endfor %}",
            "Plain.jinja": "{{ view_data['Who'] }} & co",
            "nested/Item.html": "<li>{{ model }}</li>",
        },
    )


@pytest.fixture
def test_settings(tmp_path, views_dir):
    """Settings pointing at the temporary views directory."""
    return Settings(
        views_dir=views_dir,
        log_dir=tmp_path / "logs",
        secret_key="test-secret-key-0123456789",
    )


@pytest.fixture
def pipeline(views_dir):
    """Render pipeline over the temporary views directory."""
    return RenderPipeline(ViewLocator(views_dir), ViewCompiler(views_dir))


@pytest.fixture
def app_settings(tmp_path):
    """Settings using the packaged sample templates."""
    return Settings(log_dir=tmp_path / "logs", secret_key="test-secret-key-0123456789")


@pytest.fixture
def sample_app(app_settings):
    """Sample FastAPI application."""
    return create_app(app_settings)


@pytest.fixture
def test_client(sample_app):
    """FastAPI test client with lifespan context."""
    with TestClient(sample_app) as client:
        yield client


@pytest.fixture
def antiforgery_token(test_client):
    """Antiforgery token issued by the create-person form."""
    response = test_client.get("/person/create")
    match = TOKEN_PATTERN.search(response.text)
    assert match is not None
    return match.group(1)
