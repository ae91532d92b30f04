"""Renderer - Jinja2 templates for the shell page and the list fragment.

Invariants:
    - Autoescape is on for .html templates: item text can never inject markup
    - Rendering is pure: same items in, same HTML out, order preserved
    - Output is a complete string; callers never stream a half-rendered fragment
    - All templates are compiled at construction; a broken template is a StartupError
    - jinja2.TemplateError during rendering becomes RenderError

Design Decisions:
    - Templates ship inside the package (PackageLoader); TEMPLATES_DIR overrides them
    - StrictUndefined: a missing variable fails the render instead of printing ""
"""

import logging
from pathlib import Path
from typing import Sequence

from jinja2 import (
    Environment, FileSystemLoader, PackageLoader, StrictUndefined,
    TemplateError, select_autoescape,
)

from listapp.core.errors import RenderError, StartupError
from listapp.schemas.item import ItemView

logger = logging.getLogger(__name__)

SHELL_TEMPLATE = "index.html"
LIST_TEMPLATE = "list.html"


class Renderer:
    """Renders item lists into HTML."""

    def __init__(self, environment: Environment):
        self._env = environment
        self._shell = environment.get_template(SHELL_TEMPLATE)
        self._list = environment.get_template(LIST_TEMPLATE)

    @classmethod
    def from_directory(cls, templates_dir: Path | None = None) -> "Renderer":
        """Build a renderer, loading templates from templates_dir or the package."""
        if templates_dir is not None:
            if not Path(templates_dir).is_dir():
                raise StartupError(
                    f"template directory {templates_dir} does not exist", "templates",
                )
            loader = FileSystemLoader(str(templates_dir))
        else:
            loader = PackageLoader("listapp", "templates")
        env = Environment(
            loader=loader,
            autoescape=select_autoescape(["html"]),
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        try:
            renderer = cls(env)
        except TemplateError as e:
            raise StartupError(f"cannot load templates: {e}", "templates") from e
        logger.info("Loaded templates")
        return renderer

    def render_shell(self) -> str:
        """Render the static page frame."""
        return self._render(self._shell, SHELL_TEMPLATE)

    def render_list(self, items: Sequence[ItemView]) -> str:
        """Render the list fragment for items, in the order given."""
        return self._render(self._list, LIST_TEMPLATE, items=list(items))

    def _render(self, template, name: str, **context) -> str:
        try:
            return template.render(**context)
        except TemplateError as e:
            logger.error(f"Template {name} failed: {e}", exc_info=True)
            raise RenderError("template execution error", name) from e
