"""Evaluate template bodies against one codebase entity.

The renderer wraps a Jinja2 environment and offers one entry point per
binding kind (:meth:`Renderer.render_codebase`, :meth:`~Renderer.render_command`,
:meth:`~Renderer.render_structure`, :meth:`~Renderer.render_facet`,
:meth:`~Renderer.render_group`). Every binding is available to the
template as ``item`` and under its kind name, e.g.::

    package {{ structure.route_tag }}

    type {{ item.name }} struct {
    {% for m in item.members %}
        {{ m.name | go_name | pad(20) }} {{ m.type }}
    {% endfor %}
    }

The helper vocabulary of :mod:`tbmaker.generator.naming` is registered as
filters. The environment's loader is rooted at the generators folder so
bodies can ``{% include %}`` ``.partial.tmpl`` files.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

from jinja2 import Environment, FileSystemLoader, StrictUndefined, Template
from jinja2 import TemplateError as JinjaTemplateError

from tbmaker.exceptions import TemplateError, WriteError
from tbmaker.generator.naming import FILTERS
from tbmaker.generator.preserve import ENCODING_ERRORS, validate_template
from tbmaker.models import CodeBase, Command, Facet, Group, Structure

README_INTROS = "readme-intros"

_WS = "\n\r\t"


class Renderer:
    """Render template bodies, caching compiled templates by unique name.

    Args:
        generators: The generators folder, used to resolve includes.
        templates: The templates folder. When given, command bindings
            expose ``notes`` read from ``readme-intros/<route>.notes.md``.
    """

    def __init__(self, generators: Path, templates: Optional[Path] = None) -> None:
        self._templates = templates
        self._env = Environment(
            loader=FileSystemLoader(str(generators)),
            undefined=StrictUndefined,
            keep_trailing_newline=True,
            autoescape=False,
        )
        self._env.filters.update(FILTERS)
        self._cache: dict[str, Template] = {}

    # ------------------------------------------------------------------ #
    # One entry point per binding kind
    # ------------------------------------------------------------------ #

    def render_codebase(self, codebase: CodeBase, name: str, body: str) -> str:
        return self._execute(name, body, {"item": codebase, "codebase": codebase})

    def render_command(self, command: Command, name: str, body: str) -> str:
        context = {
            "item": command,
            "command": command,
            "notes": self.help_notes(command),
        }
        return self._execute(name, body, context)

    def render_structure(self, structure: Structure, name: str, body: str) -> str:
        return self._execute(name, body, {"item": structure, "structure": structure})

    def render_facet(self, facet: Facet, structure: Structure, name: str, body: str) -> str:
        context = {"item": facet, "facet": facet, "structure": structure}
        return self._execute(name, body, context)

    def render_group(
        self, group: Group, codebase: CodeBase, reason: str, name: str, body: str
    ) -> str:
        context = {
            "item": group,
            "group": group,
            "reason": reason,
            "codebase": codebase,
        }
        return self._execute(name, body, context)

    # ------------------------------------------------------------------ #
    # Command notes
    # ------------------------------------------------------------------ #

    def help_notes(self, command: Command) -> str:
        """Render the command's ``.notes.md`` intro, or return ``""``.

        The result is stripped of surrounding newlines and tabs and
        prefixed with a blank line so templates can append it directly
        after a usage block.

        Raises:
            TemplateError: If the notes file is empty or has an odd marker
                count.
        """
        if self._templates is None:
            return ""

        notes_name = command.readme_name.replace(".md", ".notes.md")
        path = self._templates / README_INTROS / notes_name
        if not path.is_file():
            return ""

        try:
            source = path.read_text(encoding="utf-8", errors=ENCODING_ERRORS)
        except OSError as exc:
            raise WriteError(f"Could not read template file: {path}: {exc}") from exc
        if not source:
            raise TemplateError(f"Could not read template file: {path}")
        validate_template(source, path)

        context = {"item": command, "command": command, "notes": ""}
        rendered = self._execute("Notes" + command.readme_name, source, context)
        return "\n\n" + rendered.strip(_WS)

    # ------------------------------------------------------------------ #
    # Evaluation
    # ------------------------------------------------------------------ #

    def _execute(self, name: str, body: str, context: dict[str, Any]) -> str:
        try:
            template = self._cache.get(name)
            if template is None:
                template = self._env.from_string(body)
                self._cache[name] = template
            return template.render(**context)
        except JinjaTemplateError as exc:
            raise TemplateError(f"template {name} failed to render: {exc}") from exc
