"""Expand each generator's templates over the matching codebase entities.

========  ================================================================
against   fan-out
========  ================================================================
codebase  each template once, bound to the codebase
groups    each template once per group with reason ``readme``, then
          again once per group with reason ``model``
routes    each template once per command
types     each template once per enabled structure, or once per facet
          when the destination contains ``/-facet-/``
========  ================================================================

Within a category the outer loop runs over templates and the inner loop
over entities, both in their stored order, so repeated runs touch files
in the same order.
"""

from __future__ import annotations

from pathlib import Path

from tbmaker.exceptions import TemplateError, WriteError
from tbmaker.generator.gate import should_process
from tbmaker.generator.metadata import parse_metadata_block, strip_metadata
from tbmaker.generator.placeholders import (
    expand_facets,
    has_facets,
    substitute_body,
    substitute_path,
)
from tbmaker.generator.preserve import ENCODING_ERRORS, validate_template, write_code
from tbmaker.generator.renderer import Renderer
from tbmaker.models import (
    Against,
    CodeBase,
    Command,
    GenerationReport,
    Generator,
    Group,
    Structure,
)
from tbmaker.output import debug

REASONS: tuple[str, ...] = ("readme", "model")
"""Reasons a group template is rendered for, in order."""

CODEBASE_TAG = "codebase"


def load_template(
    full_path: Path,
    group: str = "",
    reason: str = "",
    route: str = "",
    type_name: str = "",
) -> tuple[str, str]:
    """Read a template and return its ``(body, destination)``.

    The body has its metadata block stripped and ``[{GROUP}]`` /
    ``[{REASON}]`` replaced. The destination has every path placeholder
    expanded.

    Raises:
        TemplateError: If the file is missing, has an odd marker count,
            or lacks an ``output:`` metadata block.
        WriteError: If the file cannot be read.
    """
    if not full_path.is_file():
        raise TemplateError(f"Could not find generator file: {full_path}")
    try:
        content = full_path.read_text(encoding="utf-8", errors=ENCODING_ERRORS)
    except OSError as exc:
        raise WriteError(f"Failed to read template {full_path}: {exc}") from exc

    validate_template(content, full_path)

    metadata = parse_metadata_block(content, reason)
    if metadata is None:
        raise TemplateError(
            f"Old style templates should be gone: {full_path} has no output metadata"
        )
    dest = substitute_path(
        metadata.output, route=route, type_name=type_name, group=group, reason=reason
    )

    body = substitute_body(strip_metadata(content), group=group, reason=reason)
    return body, dest


class Dispatcher:
    """Run every template of a generator against its entities.

    Args:
        codebase: The loaded model.
        renderer: Evaluates template bodies.
        generators: The generators folder; template paths are resolved
            beneath ``<generators>/<against>/``.
        report: Collects the outcome of every write.
    """

    def __init__(
        self,
        codebase: CodeBase,
        renderer: Renderer,
        generators: Path,
        report: GenerationReport,
    ) -> None:
        self.codebase = codebase
        self.renderer = renderer
        self.generators = generators
        self.report = report

    def dispatch(self, generator: Generator) -> None:
        """Process all of *generator*'s templates.

        Raises:
            TemplateError: If ``generator.against`` is not a known category.
        """
        debug(f"Processing {generator.against} templates")
        if generator.against == Against.CODEBASE.value:
            for source in generator.templates:
                debug(f"Processing codebase template: {source}")
                self.process_codebase_file(source)

        elif generator.against == Against.GROUPS.value:
            groups = self.codebase.group_list()
            for reason in REASONS:
                for source in generator.templates:
                    debug(f"Processing group {reason} template: {source}")
                    for group in groups:
                        debug(f"  - For group: {group.group_name}")
                        self.process_group_file(source, group, reason)

        elif generator.against == Against.ROUTES.value:
            for source in generator.templates:
                debug(f"Processing route template: {source}")
                for command in self.codebase.commands:
                    debug(f"  - For command: {command.route}")
                    self.process_command_file(command, source)

        elif generator.against == Against.TYPES.value:
            for source in generator.templates:
                debug(f"Processing type template: {source}")
                for structure in self.codebase.structures:
                    structure.sort_members()
                    if structure.disabled:
                        continue
                    debug(f"  - For type: {structure.name}")
                    self.process_structure_file(structure, source)

        else:
            raise TemplateError(f"unknown against value: {generator.against}")

    # ------------------------------------------------------------------ #
    # Per-kind processors
    # ------------------------------------------------------------------ #

    def _template_path(self, against: Against, source: str) -> Path:
        return self.generators / against.value / source

    def _skip(self, full_path: Path, against: Against, tag: str) -> bool:
        if should_process(full_path, against.value, tag):
            return False
        debug(f"  Skipping {full_path} as it should not be processed")
        self.report.skipped += 1
        return True

    def _write(self, dest: str, result: str) -> None:
        debug(f"  Generating file: {dest}")
        self.report.record(dest, write_code(dest, result))

    def process_codebase_file(self, source: str) -> None:
        full_path = self._template_path(Against.CODEBASE, source)
        if self._skip(full_path, Against.CODEBASE, CODEBASE_TAG):
            return
        body, dest = load_template(full_path)
        result = self.renderer.render_codebase(self.codebase, str(full_path), body)
        self._write(dest, result)

    def process_group_file(self, source: str, group: Group, reason: str) -> None:
        full_path = self._template_path(Against.GROUPS, source)
        if self._skip(full_path, Against.GROUPS, group.group_name):
            return
        body, dest = load_template(full_path, group=group.group_name, reason=reason)
        name = str(full_path) + group.group_name + reason
        result = self.renderer.render_group(group, self.codebase, reason, name, body)
        self._write(dest, result)

    def process_command_file(self, command: Command, source: str) -> None:
        full_path = self._template_path(Against.ROUTES, source)
        if self._skip(full_path, Against.ROUTES, command.route):
            return
        body, dest = load_template(full_path, route=command.route)
        result = self.renderer.render_command(command, str(full_path), body)
        self._write(dest, result)

    def process_structure_file(self, structure: Structure, source: str) -> None:
        full_path = self._template_path(Against.TYPES, source)
        if self._skip(full_path, Against.TYPES, structure.class_name):
            return
        body, dest = load_template(
            full_path, route=structure.route_tag, type_name=structure.name
        )

        if not has_facets(dest):
            result = self.renderer.render_structure(structure, str(full_path), body)
            self._write(dest, result)
            return

        for facet_dest, facet in expand_facets(dest, structure.facets):
            name = str(full_path) + facet.name
            result = self.renderer.render_facet(facet, structure, name, body)
            self._write(facet_dest, result)
