"""Tests for logging configuration and redaction."""

import json
import logging
from logging.handlers import RotatingFileHandler

import pytest

from jinja_views.logging_config import (
    LOG_FILE_NAME,
    QUIET_LOGGERS,
    VIEW_LOGGER_NAME,
    ViewRecordFilter,
    get_logger,
    log_with_context,
    setup_logging,
)
from jinja_views.middleware.logging_middleware import redact_sensitive_data


@pytest.fixture
def restore_root_logger():
    """Put the root logger and tuned loggers back the way pytest configured them."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    tuned = {name: logging.getLogger(name).level for name in (VIEW_LOGGER_NAME, *QUIET_LOGGERS)}
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
    for name, tuned_level in tuned.items():
        logging.getLogger(name).setLevel(tuned_level)


def test_setup_logging_creates_handlers(tmp_path, restore_root_logger):
    """Test JSON file and console handlers are installed."""
    root = setup_logging("debug", tmp_path / "logs")

    assert root.level == logging.DEBUG
    assert len(root.handlers) == 2
    assert (tmp_path / "logs" / LOG_FILE_NAME).exists()


def test_log_with_context_adds_fields(caplog):
    """Test extra fields end up on the log record."""
    logger = get_logger("jinja_views.test")

    with caplog.at_level(logging.INFO, logger="jinja_views.test"):
        log_with_context(logger, "info", "Template rendered", template="Person", event_type="template_rendered")

    record = caplog.records[-1]
    assert record.getMessage() == "Template rendered"
    assert record.template == "Person"
    assert record.event_type == "template_rendered"


@pytest.mark.parametrize(
    ("url", "expected"),
    [
        (
            "http://testserver/person?__RequestVerificationToken=abc&name=Fox",
            "http://testserver/person?__RequestVerificationToken=***REDACTED***&name=Fox",
        ),
        ("http://testserver/login?password=hunter2", "http://testserver/login?password=***REDACTED***"),
        ("http://testserver/person?name=Fox", "http://testserver/person?name=Fox"),
    ],
)
def test_redact_sensitive_data(url, expected):
    """Test sensitive query parameters are redacted."""
    assert redact_sensitive_data(url) == expected


def test_view_record_filter_fills_defaults():
    """Test records without view fields get defaults and keep given ones."""
    view_filter = ViewRecordFilter()
    bare = logging.LogRecord("jinja_views", logging.INFO, __file__, 1, "plain", None, None)
    tagged = logging.LogRecord("jinja_views", logging.INFO, __file__, 1, "rendered", None, None)
    tagged.event_type = "template_rendered"
    tagged.template = "Person"

    assert view_filter.filter(bare) is True
    assert view_filter.filter(tagged) is True
    assert (bare.event_type, bare.template) == ("log", None)
    assert (tagged.event_type, tagged.template) == ("template_rendered", "Person")


def test_view_log_level_is_separate(tmp_path, restore_root_logger):
    """Test the view engine can log at DEBUG while the app stays at WARNING."""
    root = setup_logging("warning", tmp_path / "logs", view_log_level="debug")

    assert root.level == logging.WARNING
    assert logging.getLogger(VIEW_LOGGER_NAME).level == logging.DEBUG
    console = next(h for h in root.handlers if not isinstance(h, RotatingFileHandler))
    assert console.level == logging.DEBUG


def test_view_log_level_defaults_to_root(tmp_path, restore_root_logger):
    """Test the view engine follows the root level when none is given."""
    setup_logging("error", tmp_path / "logs")

    assert logging.getLogger(VIEW_LOGGER_NAME).level == logging.ERROR


def test_json_records_carry_view_fields(tmp_path, restore_root_logger):
    """Test every JSON line has event_type and template fields."""
    setup_logging("info", tmp_path / "logs")
    view_logger = get_logger("jinja_views.views.pipeline")

    log_with_context(view_logger, "info", "Template rendered", template="Person", event_type="template_rendered")
    get_logger("jinja_views.other").info("Plain message")

    lines = (tmp_path / "logs" / LOG_FILE_NAME).read_text(encoding="utf-8").splitlines()
    records = [json.loads(line) for line in lines]
    assert records[-2]["event_type"] == "template_rendered"
    assert records[-2]["template"] == "Person"
    assert records[-1]["event_type"] == "log"
    assert records[-1]["template"] is None


def test_third_party_noise_quieted(tmp_path, restore_root_logger):
    """Test chatty library loggers are raised to WARNING."""
    setup_logging("debug", tmp_path / "logs")

    for name in QUIET_LOGGERS:
        assert logging.getLogger(name).level == logging.WARNING
