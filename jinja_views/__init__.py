"""Jinja2 view engine for FastAPI, with a sample app."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("jinja-views")
except PackageNotFoundError:
    __version__ = "dev"
