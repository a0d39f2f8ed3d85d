"""Run a full generation pass.

Sequence:

1. Validate the setup: the templates root resolves, is not empty, and
   holds ``classDefinitions``.
2. Verify that every enum option is checked by its ``validate.go``.
3. Create the generated-documentation root.
4. Discover generators.
5. Dispatch each generator, in category order.
6. Print the ``Done`` line.

Everything runs on the calling thread; the filesystem is only written
through :func:`~tbmaker.generator.preserve.write_code`.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from tbmaker.config import (
    class_definitions_root,
    generated_root,
    generators_root,
    templates_root,
    validate_templates_folder,
)
from tbmaker.exceptions import ConfigError, WriteError
from tbmaker.generator.discovery import get_generators
from tbmaker.generator.dispatcher import Dispatcher
from tbmaker.generator.renderer import Renderer
from tbmaker.generator.validators import verify_validators
from tbmaker.models import CodeBase, GenerationReport
from tbmaker.output import debug, success


def validate_setup() -> None:
    """Check that the templates folder and its ``classDefinitions`` exist.

    Raises:
        ConfigError: If either is missing.
    """
    validate_templates_folder()
    classdefs = class_definitions_root()
    if not classdefs.is_dir():
        raise ConfigError(f"classDefinitions folder not found: {classdefs}")


def generate(codebase: CodeBase, source_root: Optional[Path] = None) -> GenerationReport:
    """Render every template against *codebase* and write the results.

    Args:
        codebase: The loaded model.
        source_root: Folder holding ``chifra/internal`` validators.
            Defaults to the working directory.

    Returns:
        Counts of written, unchanged and skipped outputs.

    Raises:
        MakerError: Any configuration, template, validator or I/O failure.
            Nothing is retried.
    """
    debug("Starting code generation process")

    validate_setup()
    verify_validators(codebase, source_root or Path.cwd())

    generated = generated_root()
    debug(f"Creating generated code directory at {generated}")
    try:
        generated.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise WriteError(f"Failed to create {generated}: {exc}") from exc

    generators_path = generators_root()
    generators = get_generators(generators_path)

    report = GenerationReport()
    renderer = Renderer(generators_path, templates=templates_root())
    dispatcher = Dispatcher(codebase, renderer, generators_path, report)

    debug("Processing generators")
    for generator in generators:
        dispatcher.dispatch(generator)

    success(f"Done... ({report.summary()})")
    return report
