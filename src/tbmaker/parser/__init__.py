"""Class-definition loader -- read structures and commands into a :class:`~tbmaker.models.CodeBase`.

Typical usage::

    from tbmaker.parser import load_codebase

    codebase = load_codebase()
    for command in codebase.commands:
        ...

Sub-modules:

* :mod:`~tbmaker.parser.loader` -- YAML I/O for ``classDefinitions/`` and
  ``commands/`` plus validation into the Pydantic models.
"""

from tbmaker.parser.loader import load_codebase, load_commands, load_structures

__all__ = ["load_codebase", "load_commands", "load_structures"]
