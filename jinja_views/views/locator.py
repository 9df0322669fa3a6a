"""Resolve template names to files under the views directory."""

from dataclasses import dataclass
from pathlib import Path, PurePosixPath

from jinja_views.exceptions import AmbiguousTemplate, TemplateNotFound
from jinja_views.logging_config import get_logger, log_with_context

logger = get_logger(__name__)

DEFAULT_EXTENSIONS = (".html", ".jinja")


@dataclass(frozen=True)
class TemplatePath:
    """A template name resolved to exactly one file."""

    template_name: str
    name: str  # posix path relative to the views root, as the Jinja2 loader expects
    path: Path


class ViewLocator:
    """Finds template files for template names.

    A name is tried with each configured extension appended and, when it
    already ends in one of them, as given. Exactly one existing file must
    match.
    """

    def __init__(self, root_dir: Path | str, extensions: tuple[str, ...] | list[str] = DEFAULT_EXTENSIONS):
        self.root_dir = Path(root_dir).resolve()
        self.extensions = tuple(extensions)

    def locate(self, template_name: str) -> TemplatePath:
        """Resolve a template name.

        Args:
            template_name: Name such as ``"Person"`` or ``"tiles/status.html"``

        Returns:
            The resolved TemplatePath

        Raises:
            TemplateNotFound: If the name is unsafe or no file matches
            AmbiguousTemplate: If more than one file matches
        """
        relative = self._validate_name(template_name)

        candidates = self._candidates(relative)
        found: list[TemplatePath] = []
        for candidate in candidates:
            path = (self.root_dir / candidate).resolve()
            if not path.is_relative_to(self.root_dir):
                log_with_context(
                    logger,
                    "warning",
                    "Template resolved outside views directory",
                    template=template_name,
                    event_type="template_escape",
                )
                raise TemplateNotFound(template_name)
            if path.is_file():
                found.append(TemplatePath(template_name=template_name, name=candidate.as_posix(), path=path))

        if not found:
            raise TemplateNotFound(
                template_name,
                details={"searched": [candidate.as_posix() for candidate in candidates]},
            )
        if len(found) > 1:
            raise AmbiguousTemplate(template_name, [match.name for match in found])

        return found[0]

    def _validate_name(self, template_name: str) -> PurePosixPath:
        if not template_name or not template_name.strip():
            raise TemplateNotFound(template_name, message="Template name is empty")
        if "\\" in template_name or "\x00" in template_name:
            raise TemplateNotFound(template_name)

        relative = PurePosixPath(template_name)
        if not relative.name:
            raise TemplateNotFound(template_name)
        if relative.is_absolute() or ".." in relative.parts:
            log_with_context(
                logger,
                "warning",
                "Rejected template name with path traversal",
                template=template_name,
                event_type="template_traversal",
            )
            raise TemplateNotFound(template_name)
        return relative

    def _candidates(self, relative: PurePosixPath) -> list[PurePosixPath]:
        candidates = [relative.with_name(relative.name + ext) for ext in self.extensions]
        if relative.suffix in self.extensions:
            candidates.append(relative)
        return candidates
