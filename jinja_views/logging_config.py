"""Structured logging configuration for jinja-views.

JSON records go to a rotating log file and human-readable lines go to the console.
Records from the view engine (``jinja_views.views``) always carry ``event_type``
and ``template`` fields so render logs can be filtered per template. The view
engine has its own level, which lets per-render debug timings be switched on
without turning the whole app to DEBUG.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

from pythonjsonlogger import jsonlogger

DEFAULT_LOG_DIR = Path(__file__).resolve().parent.parent / "logs"
LOG_FILE_NAME = "jinja_views.log"
VIEW_LOGGER_NAME = "jinja_views.views"

QUIET_LOGGERS = ("uvicorn.access", "python_multipart", "multipart", "slowapi")


class ViewRecordFilter(logging.Filter):
    """Fill in the view engine's structured fields on every record.

    Records logged without ``event_type`` get ``"log"``, and records without
    ``template`` get ``None``, so every JSON line has the same shape.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "event_type"):
            record.event_type = "log"
        if not hasattr(record, "template"):
            record.template = None
        return True


def setup_logging(
    log_level: str = "INFO",
    log_dir: Path | None = None,
    view_log_level: str | None = None,
) -> logging.Logger:
    """Configure structured logging with JSON file output and console output.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_dir: Directory for the JSON log file (defaults to ./logs next to the package)
        view_log_level: Level for the view engine loggers (defaults to log_level)

    Returns:
        Configured root logger instance
    """
    log_dir = log_dir or DEFAULT_LOG_DIR
    log_dir.mkdir(parents=True, exist_ok=True)
    level = logging.getLevelName(log_level.upper())
    view_level = logging.getLevelName((view_log_level or log_level).upper())

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    json_handler = RotatingFileHandler(
        log_dir / LOG_FILE_NAME,
        maxBytes=10 * 1024 * 1024,
        backupCount=5,
        encoding="utf-8",
    )
    json_handler.setFormatter(
        jsonlogger.JsonFormatter(
            "%(asctime)s %(name)s %(levelname)s %(event_type)s %(template)s %(message)s",
            timestamp=True,
        )
    )
    json_handler.addFilter(ViewRecordFilter())
    json_handler.setLevel(logging.DEBUG)
    root_logger.addHandler(json_handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(
        logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    # Render debug lines pass the console when only the view engine is at DEBUG
    console_handler.setLevel(min(level, view_level))
    root_logger.addHandler(console_handler)

    logging.getLogger(VIEW_LOGGER_NAME).setLevel(view_level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return root_logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance (typically for ``__name__``)."""
    return logging.getLogger(name)


def log_with_context(
    logger: logging.Logger,
    level: str,
    message: str,
    **extra_fields: Any,
) -> None:
    """Log a message with additional structured context fields.

    Args:
        logger: Logger instance
        level: Log level (debug, info, warning, error, critical)
        message: Log message
        **extra_fields: Additional fields to include in the JSON record (e.g. template, event_type)
    """
    log_method = getattr(logger, level.lower())
    log_method(message, extra=extra_fields)
