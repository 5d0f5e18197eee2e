from pathlib import Path
from typing import Any

import jinja2
from litestar.contrib.jinja import JinjaTemplateEngine
from litestar.exceptions import TemplateNotFoundException
from litestar.template import TemplateConfig

TEMPLATE_DIR = Path(__file__).parent / "templates"


class Template:
    """Template resolver with fallback support.

    Resolves templates in order of specificity:
    - Template("form", "contact") → tries form-contact.html, falls back to form.html
    - Template("form", "contact", "wide") → form-contact-wide.html → form-contact.html → form.html
    """

    def __init__(self, template_type: str, *slugs: str, context: dict[str, Any] | None = None):
        self.template_type = template_type
        self.slugs = [slug for slug in slugs if slug]
        self.context = context or {}

    def _candidates(self) -> list[str]:
        """Build list of template names to try, from most to least specific."""
        candidates = []
        if self.slugs:
            for i in range(len(self.slugs), 0, -1):
                slug_part = "-".join(self.slugs[:i])
                candidates.append(f"{self.template_type}-{slug_part}.html")
        candidates.append(f"{self.template_type}.html")
        return candidates

    def try_render(self, template_engine, **context) -> str | None:
        """Attempt to render using the template hierarchy.

        Iterates candidates from most to least specific, using the template
        engine to render. Returns the rendered string, or None if no matching
        template exists.
        """
        merged_context = {**self.context, **context}
        for candidate in self._candidates():
            try:
                template = template_engine.get_template(candidate)
                return template.render(**merged_context)
            except (jinja2.TemplateNotFound, TemplateNotFoundException):
                continue
        return None

    def __repr__(self) -> str:
        return f"Template({self.template_type!r}, {', '.join(repr(s) for s in self.slugs)})"


def get_template_directories() -> list[Path]:
    """./templates (user overrides) first, then the package templates."""
    directories = [TEMPLATE_DIR]
    override_dir = Path.cwd() / "templates"
    if override_dir.is_dir():
        directories.insert(0, override_dir)
    return directories


def get_template_config() -> TemplateConfig:
    return TemplateConfig(
        directory=get_template_directories(),
        engine=JinjaTemplateEngine,
    )
