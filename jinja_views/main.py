"""Main FastAPI application entry point."""

from pathlib import Path

from dotenv import load_dotenv
from fastapi.responses import Response

from jinja_views.config import get_settings
from jinja_views.core.app_factory import create_app
from jinja_views.logging_config import setup_logging

# Load environment variables from .env file
load_dotenv(Path(__file__).parent.parent / ".env")

settings = get_settings()

# Configure structured logging (JSON to file + console)
setup_logging(settings.log_level, settings.log_dir, settings.view_log_level)

# Create application
app = create_app(settings)


@app.get("/favicon.ico")
async def favicon():
    """Return empty favicon to prevent 404 errors."""
    return Response(content=b"", media_type="image/x-icon")


def run() -> None:
    """Run the app with uvicorn."""
    import uvicorn

    uvicorn.run(
        "jinja_views.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=False,
    )


if __name__ == "__main__":
    run()
