"""tbmaker -- Template-driven source generator for a command-line API codebase.

This package walks a repository of template files, expands each template
against a data model of commands, structures, groups and facets, and
writes the rendered output while carrying hand-edited regions forward
from the previous version of each generated file.

Typical workflow::

    tbmaker            # run a full generation pass
    tbmaker --verbose  # same, with per-template diagnostics

Modules:
    app: Typer application and CLI entry point.
    models: Pydantic models for the codebase and generator records.
    config: Environment handling and templates/generators path resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes.
    output: stderr diagnostics with Rich support.
    parser: YAML class and command definition loader.
    generator: Template discovery, rendering and preserving writes.
"""

__version__ = "6.1.0"
