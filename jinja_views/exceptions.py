"""Custom exceptions for the view engine with HTTP status codes."""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Error codes for structured error responses."""

    # Generic errors
    VIEW_ENGINE_ERROR = "VIEW_ENGINE_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    BAD_REQUEST = "BAD_REQUEST"

    # View resolution and rendering
    TEMPLATE_NOT_FOUND = "TEMPLATE_NOT_FOUND"
    TEMPLATE_AMBIGUOUS = "TEMPLATE_AMBIGUOUS"
    RENDER_ERROR = "RENDER_ERROR"
    RESPONSE_ALREADY_STARTED = "RESPONSE_ALREADY_STARTED"

    # Request protection
    ANTIFORGERY_ERROR = "ANTIFORGERY_ERROR"

    # Configuration errors
    CONFIG_ERROR = "CONFIG_ERROR"


class ViewEngineException(Exception):
    """Base exception for view engine errors with HTTP status code support.

    Every error raised by the view pipeline inherits from this class so the
    application-level handler can turn it into a response in one place.
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.VIEW_ENGINE_ERROR,
        status_code: int = 500,
        details: dict[str, Any] | None = None,
    ):
        """Initialize view engine exception.

        Args:
            message: Human-readable error message
            code: Error code from ErrorCode enum
            status_code: HTTP status code (default 500)
            details: Additional error context/details
        """
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


class TemplateNotFound(ViewEngineException):
    """A template name could not be resolved under the views directory."""

    def __init__(
        self,
        template_name: str,
        message: str | None = None,
        code: ErrorCode = ErrorCode.TEMPLATE_NOT_FOUND,
        details: dict[str, Any] | None = None,
    ):
        self.template_name = template_name
        super().__init__(
            message or f"Template '{template_name}' was not found",
            code=code,
            status_code=500,
            details={"template": template_name, **(details or {})},
        )


class AmbiguousTemplate(TemplateNotFound):
    """A template name matched more than one file."""

    def __init__(self, template_name: str, candidates: list[str]):
        super().__init__(
            template_name,
            message=f"Template '{template_name}' is ambiguous: {', '.join(candidates)}",
            code=ErrorCode.TEMPLATE_AMBIGUOUS,
            details={"candidates": candidates},
        )


class RenderError(ViewEngineException):
    """The template engine failed to compile or execute a template.

    The engine's own exception is kept as ``__cause__`` by raising with ``from``.
    """

    def __init__(self, template_name: str, message: str, details: dict[str, Any] | None = None):
        self.template_name = template_name
        super().__init__(
            message,
            code=ErrorCode.RENDER_ERROR,
            status_code=500,
            details={"template": template_name, **(details or {})},
        )


class ResponseAlreadyStarted(ViewEngineException):
    """A rendered view was written twice to the same response."""

    def __init__(self, message: str = "Response has already been written"):
        super().__init__(message, code=ErrorCode.RESPONSE_ALREADY_STARTED, status_code=500)


class AntiforgeryException(ViewEngineException):
    """Antiforgery token missing or invalid."""

    def __init__(self, message: str = "Bad antiforgery token", details: dict[str, Any] | None = None):
        super().__init__(message, code=ErrorCode.ANTIFORGERY_ERROR, status_code=400, details=details)


class ConfigurationException(ViewEngineException):
    """Configuration errors."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.CONFIG_ERROR,
        status_code: int = 500,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, code, status_code, details)
