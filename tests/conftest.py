"""Shared test fixtures for tbmaker.

Provides fixtures for isolating the environment and the memoised
templates path, building a throwaway templates tree on disk, and running
the CLI. These fixtures are automatically discovered by pytest and
available to all test modules without explicit imports.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
import yaml

from tbmaker.config import reset_path_cache
from tbmaker.models import CodeBase, Command, Facet, Member, Option, Structure
from tbmaker.output import OutputManager, reset_output, set_output

TB_ENV_VARS = (
    "TB_TEMPLATES_PATH",
    "TB_GENERATORS_PATH",
    "TB_VERBOSE",
    "TB_GENERATOR_FILTER",
    "TB_MAKER_SINGLE",
)


# ---------------------------------------------------------------------------
# Auto-reset global state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _isolate_globals(monkeypatch: pytest.MonkeyPatch) -> None:
    """Clear TB_* variables, force plain output and forget the templates path.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time, so it is reset after every test to pick up the next
    test's captured streams.
    """
    for var in TB_ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("NO_COLOR", "1")
    reset_path_cache()
    reset_output()
    yield
    reset_path_cache()
    reset_output()


# ---------------------------------------------------------------------------
# Templates tree on disk
# ---------------------------------------------------------------------------


class TemplateTree:
    """Builder for a ``code_gen/templates`` tree under a working directory.

    Attributes:
        cwd: The working directory (tests chdir into it).
        templates: ``<cwd>/code_gen/templates``.
        generators: ``<cwd>/code_gen/templates/generators``.
    """

    def __init__(self, cwd: Path) -> None:
        self.cwd = cwd
        self.templates = cwd / "code_gen" / "templates"
        self.generators = self.templates / "generators"
        (self.templates / "classDefinitions").mkdir(parents=True)
        self.generators.mkdir(parents=True)

    def add_template(self, category: str, name: str, output: str, body: str = "") -> Path:
        """Write a template with a metadata block pointing at *output*."""
        content = f"/*\noutput: {output}\nscope: {category}\n*/\n{body}"
        return self.add_raw_template(category, name, content)

    def add_raw_template(self, category: str, name: str, content: str) -> Path:
        path = self.generators / category / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    def add_structure(self, file_name: str, data: dict[str, Any]) -> Path:
        path = self.templates / "classDefinitions" / f"{file_name}.yaml"
        path.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
        return path

    def add_command(self, file_name: str, data: dict[str, Any]) -> Path:
        folder = self.templates / "commands"
        folder.mkdir(exist_ok=True)
        path = folder / f"{file_name}.yaml"
        path.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
        return path

    def add_notes(self, route: str, text: str) -> Path:
        folder = self.templates / "readme-intros"
        folder.mkdir(exist_ok=True)
        path = folder / f"{route}.notes.md"
        path.write_text(text, encoding="utf-8")
        return path


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Change the working directory to a fresh tmp_path."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def tree(workdir: Path) -> TemplateTree:
    """An empty templates tree found through the ``./code_gen/templates`` candidate."""
    return TemplateTree(workdir)


# ---------------------------------------------------------------------------
# Model fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def manifest() -> Structure:
    """A structure with unsorted members and two facets."""
    return Structure(
        name="Manifest",
        class_name="manifest",
        route="scrape",
        group="Admin",
        members=[
            Member(name="version"),
            Member(name="chain"),
            Member(name="chunks", type="[]ChunkRecord", sort=1),
        ],
        facets=[Facet(name="Index"), Facet(name="Stats")],
    )


@pytest.fixture
def sample_codebase(manifest: Structure) -> CodeBase:
    """A small codebase: two commands, three structures (one disabled)."""
    return CodeBase(
        commands=[
            Command(
                route="blocks",
                group="Chain Data",
                options=[Option(name="flow", enums=["from", "to"])],
            ),
            Command(route="daemon", group="Admin"),
        ],
        structures=[
            manifest,
            Structure(name="Block", class_name="block", group="Chain Data"),
            Structure(name="Hidden", class_name="hidden", disabled=True),
        ],
    )


# ---------------------------------------------------------------------------
# Output and CLI fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def verbose_output() -> OutputManager:
    """Install a verbose, colourless OutputManager as the global output."""
    output = OutputManager(no_color=True, verbose=True)
    set_output(output)
    return output


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
