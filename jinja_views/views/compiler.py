"""Jinja2 compilation of located templates.

Jinja2's environment keeps compiled templates in its own LRU cache and, with
auto_reload, recompiles when the source file changes. Every template load,
including layouts pulled in by ``extends``, ``include`` and ``import``, goes
through ``Environment._load_template``. ``LockingEnvironment`` puts a
per-name lock on that path: cache hits return without locking, and a miss
compiles under the lock after checking the cache again, so a template is
never compiled twice at once.
"""

import threading
import weakref
from collections.abc import Callable, Mapping, MutableMapping
from pathlib import Path
from typing import Any

from jinja2 import (
    Environment,
    FileSystemLoader,
    StrictUndefined,
    Template,
    TemplateSyntaxError,
    Undefined,
    select_autoescape,
)
from jinja2 import TemplateNotFound as JinjaTemplateNotFound

from jinja_views.exceptions import RenderError, TemplateNotFound
from jinja_views.logging_config import get_logger, log_with_context
from jinja_views.views.locator import TemplatePath

logger = get_logger(__name__)


class LockingEnvironment(Environment):
    """Jinja2 environment that compiles each template name at most once at a time."""

    def __init__(self, *args: Any, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self._locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def lock_for(self, name: str) -> threading.Lock:
        with self._locks_guard:
            lock = self._locks.get(name)
            if lock is None:
                lock = self._locks[name] = threading.Lock()
            return lock

    def is_cached(self, name: str) -> bool:
        """True when a usable compiled template for ``name`` is in the cache."""
        if self.cache is None or self.loader is None:
            return False
        template = self.cache.get((weakref.ref(self.loader), name))
        return template is not None and (not self.auto_reload or template.is_up_to_date)

    def _load_template(self, name: str, globals: MutableMapping[str, Any] | None) -> Template:
        if self.is_cached(name):
            return super()._load_template(name, globals)

        with self.lock_for(name):
            # Another thread may have compiled it while we waited
            return super()._load_template(name, globals)

    def clear(self) -> None:
        """Drop every compiled template and its lock."""
        if self.cache is not None:
            self.cache.clear()
        with self._locks_guard:
            self._locks.clear()


class ViewCompiler:
    """Compiles templates with a shared Jinja2 environment."""

    def __init__(
        self,
        views_dir: Path | str,
        auto_reload: bool = True,
        strict_undefined: bool = True,
        cache_size: int = 400,
        extra_globals: Mapping[str, Callable[..., Any] | Any] | None = None,
    ):
        self.environment = LockingEnvironment(
            loader=FileSystemLoader(str(views_dir)),
            autoescape=select_autoescape(
                enabled_extensions=("html", "htm", "xml", "jinja"),
                default_for_string=True,
                default=True,
            ),
            undefined=StrictUndefined if strict_undefined else Undefined,
            auto_reload=auto_reload,
            cache_size=cache_size,
        )
        if extra_globals:
            self.environment.globals.update(extra_globals)

    def compile(self, template_path: TemplatePath) -> Template:
        """Load a compiled template, compiling it on first use.

        Raises:
            TemplateNotFound: If the file disappeared after it was located
            RenderError: If the template has a syntax error
        """
        try:
            return self.environment.get_template(template_path.name)
        except TemplateSyntaxError as e:
            log_with_context(
                logger,
                "error",
                "Template failed to compile",
                template=template_path.name,
                error=str(e),
                line=e.lineno,
                event_type="template_compile_error",
            )
            raise RenderError(
                template_path.template_name,
                f"Template '{template_path.name}' failed to compile: {e.message}",
                details={"line": e.lineno},
            ) from e
        except JinjaTemplateNotFound as e:
            raise TemplateNotFound(template_path.template_name) from e

    def clear(self) -> None:
        """Drop every compiled template."""
        self.environment.clear()
