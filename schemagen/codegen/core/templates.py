"""
Jinja2 rendering for generated source units.

Every undefined template variable is an error, so a context dict that
drifts from its template fails loudly instead of emitting blank code.
"""

from pathlib import Path
from typing import Any, Dict, Optional

from jinja2 import (
    Environment,
    FileSystemLoader,
    StrictUndefined,
    select_autoescape,
)
from jinja2.exceptions import TemplateError as JinjaTemplateError


class TemplateError(Exception):
    """Raised when a unit template is missing or fails to render."""

    pass


class TemplateEngine:
    """Renders ``*.j2`` unit templates from one directory."""

    def __init__(self, template_dir: Optional[Path] = None, indent_unit: str = "  "):
        """
        Args:
            template_dir: Directory holding the target language's templates
            indent_unit: Text inserted per level by the ``indent`` filter
        """
        self.template_dir = template_dir
        self.indent_unit = indent_unit

        search_path = [str(template_dir)] if template_dir else []
        self._env = Environment(
            loader=FileSystemLoader(search_path),
            autoescape=select_autoescape(["html", "xml"], default_for_string=False),
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        # Replaces jinja's builtin, which indents by spaces and skips line one
        self._env.filters["indent"] = self.indent

    def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        try:
            return self._env.get_template(template_name).render(**context)
        except JinjaTemplateError as e:
            raise TemplateError(f"Failed to render template {template_name}: {e}") from e

    def indent(self, value: Any, levels: int = 1) -> str:
        """Prefix every non-blank line of ``value`` with ``levels`` indent units."""
        prefix = self.indent_unit * levels
        return "\n".join(
            prefix + line if line.strip() else "" for line in str(value).split("\n")
        )


def create_template_engine(
    template_dir: Optional[Path] = None, indent_unit: str = "  "
) -> TemplateEngine:
    """Create a template engine, optionally backed by a template directory."""
    return TemplateEngine(template_dir, indent_unit)
