"""Load class definitions and command definitions from the templates folder.

Two folders feed the data model:

* ``templates/classDefinitions/*.yaml`` -- one :class:`~tbmaker.models.Structure`
  per file.
* ``templates/commands/*.yaml`` -- one :class:`~tbmaker.models.Command`
  per file. The folder is optional.

Files are read in sorted filename order, which is the model order every
later stage iterates in. A structure file looks like::

    name: Manifest
    class: manifest
    route: scrape
    group: Admin
    members:
      - name: version
        type: string
      - name: chunks
        type: "[]ChunkRecord"
        sort: 1
    facets:
      - name: Index
      - name: Stats
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional, TypeVar

import yaml
from pydantic import BaseModel, ValidationError

from tbmaker.config import class_definitions_root, templates_root
from tbmaker.exceptions import ModelError
from tbmaker.models import CodeBase, Command, Structure
from tbmaker.output import debug

COMMANDS_FOLDER = "commands"

_SUFFIXES = (".yaml", ".yml")

_ModelT = TypeVar("_ModelT", bound=BaseModel)


def load_codebase(templates: Optional[Path] = None) -> CodeBase:
    """Build the :class:`~tbmaker.models.CodeBase` from the templates folder.

    Args:
        templates: Templates folder. Defaults to the resolved
            :func:`~tbmaker.config.templates_root`.

    Raises:
        ConfigError: If the templates folder cannot be located.
        ModelError: If any definition file is unreadable or invalid.
    """
    if templates is None:
        classdefs = class_definitions_root()
        templates = templates_root()
    else:
        classdefs = templates / "classDefinitions"

    structures = load_structures(classdefs)
    commands = load_commands(templates / COMMANDS_FOLDER)
    debug(f"Loaded {len(structures)} structures and {len(commands)} commands")
    return CodeBase(commands=commands, structures=structures)


def load_structures(folder: Path) -> list[Structure]:
    """Load every structure definition in *folder*, sorted by file name."""
    return [_load_model(path, Structure) for path in _definition_files(folder)]


def load_commands(folder: Path) -> list[Command]:
    """Load every command definition in *folder*. A missing folder yields no commands."""
    if not folder.is_dir():
        return []
    return [_load_model(path, Command) for path in _definition_files(folder)]


def _definition_files(folder: Path) -> list[Path]:
    if not folder.is_dir():
        raise ModelError(f"Definitions folder not found: {folder}")
    return sorted(
        path for path in folder.iterdir()
        if path.is_file() and path.suffix.lower() in _SUFFIXES
    )


def _load_model(path: Path, model: type[_ModelT]) -> _ModelT:
    """Parse *path* as YAML and validate it into *model*.

    Raises:
        ModelError: On read, YAML or validation failure. The message names
            the file.
    """
    data = _read_yaml(path)
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise ModelError(f"Invalid definition in {path}: {exc}") from exc


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ModelError(f"Failed to read definition file {path}: {exc}") from exc

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        raise ModelError(f"Invalid YAML in {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ModelError(
            f"Definition file {path} must hold a mapping (got "
            f"{type(data).__name__ if data is not None else 'empty document'})"
        )
    return data
