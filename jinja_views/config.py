import logging
import secrets
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from jinja_views.logging_config import DEFAULT_LOG_DIR

PACKAGE_DIR = Path(__file__).resolve().parent
BASE_DIR = PACKAGE_DIR.parent


class Settings(BaseSettings):
    """Application settings with validation.

    Values come from environment variables or a .env file next to the package.
    The view engine never reads these globally: the render pipeline is built
    from a Settings instance handed to it at startup.
    """

    # Server
    app_host: str = Field(default="127.0.0.1", min_length=1, description="Host to bind (e.g. '0.0.0.0')")
    app_port: int = Field(ge=1, le=65535, default=5000, description="Port to bind")

    # View engine
    views_dir: Path = Field(default=PACKAGE_DIR / "templates", description="Root directory for template lookup")
    static_dir: Path = Field(default=PACKAGE_DIR / "static", description="Directory served under /static")
    template_extensions: list[str] = Field(
        default=[".html", ".jinja"],
        min_length=1,
        description="Extensions tried, in order, when a template name has none",
    )
    auto_reload_templates: bool = Field(default=True, description="Recompile templates when the file changes")
    strict_undefined: bool = Field(default=True, description="Fail rendering on undefined template variables")
    template_cache_size: int = Field(default=400, ge=0, description="Compiled templates kept by Jinja2")

    # Sessions and antiforgery
    secret_key: str = Field(
        default_factory=lambda: secrets.token_urlsafe(32),
        min_length=16,
        description="Key used to sign the session cookie",
    )
    session_cookie_name: str = Field(default="jinja_views_session", min_length=1)
    https_only_cookies: bool = Field(default=False, description="Mark the session cookie Secure")
    trusted_hosts: str = Field(
        default="localhost,127.0.0.1,testserver",
        description="Comma separated host patterns accepted by TrustedHostMiddleware",
    )

    # Uploads
    max_upload_files: int = Field(default=10, ge=1, description="Files accepted by /small-upload")
    large_upload_max_files: int = Field(default=100, ge=1, description="Files accepted by /large-upload")

    # Logging
    log_level: str = Field(default="INFO", description="Root log level")
    view_log_level: str | None = Field(default=None, description="View engine log level (defaults to log_level)")
    log_dir: Path = Field(default=DEFAULT_LOG_DIR, description="Directory for the JSON log file")

    model_config = SettingsConfigDict(
        env_file=Path(BASE_DIR / ".env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        validate_default=True,
    )

    @field_validator("views_dir", mode="after")
    @classmethod
    def validate_views_dir(cls, v: Path) -> Path:
        """Ensure the views directory exists and store it as an absolute path."""
        v = v.expanduser().resolve()
        if not v.is_dir():
            raise ValueError(f"views_dir must be an existing directory: {v}")
        return v

    @field_validator("template_extensions", mode="after")
    @classmethod
    def validate_template_extensions(cls, v: list[str]) -> list[str]:
        """Ensure every extension starts with a dot."""
        cleaned = [ext.strip() for ext in v]
        for ext in cleaned:
            if not ext.startswith(".") or len(ext) < 2:
                raise ValueError(f"template extension must look like '.html', got {ext!r}")
        return cleaned

    @field_validator("log_level", "view_log_level", mode="after")
    @classmethod
    def validate_log_level(cls, v: str | None) -> str | None:
        """Ensure log levels name a standard logging level."""
        if v is None:
            return v
        v = v.strip().upper()
        if v not in logging.getLevelNamesMapping():
            raise ValueError(f"log level must be a logging level name, got {v!r}")
        return v

    @property
    def trusted_host_list(self) -> list[str]:
        """Trusted host patterns as a list."""
        return [host.strip() for host in self.trusted_hosts.split(",") if host.strip()]


# Singleton settings instance (cached for performance)
_settings_instance: Settings | None = None


def get_settings() -> Settings:
    """Get singleton Settings instance for dependency injection.

    Avoids re-reading the .env file on every request. Use with FastAPI's
    Depends(); the view engine itself receives its settings explicitly.

    Returns:
        Cached Settings instance
    """
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance
