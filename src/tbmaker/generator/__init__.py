"""Generation engine -- turn templates plus a codebase model into source files.

Typical usage::

    from tbmaker.generator import generate
    from tbmaker.parser import load_codebase

    report = generate(load_codebase())

Sub-modules:

* :mod:`~tbmaker.generator.discovery` -- Find templates and group them by
  category.
* :mod:`~tbmaker.generator.metadata` -- Parse and strip the ``/* ... */``
  metadata block.
* :mod:`~tbmaker.generator.placeholders` -- Expand ``[[...]]`` path
  placeholders and facet fan-out.
* :mod:`~tbmaker.generator.naming` -- Case transforms and template filters.
* :mod:`~tbmaker.generator.gate` -- Skip excluded (template, entity) pairs.
* :mod:`~tbmaker.generator.renderer` -- Jinja2 evaluation per binding kind.
* :mod:`~tbmaker.generator.preserve` -- Merge ``// EXISTING_CODE`` regions
  and write atomically.
* :mod:`~tbmaker.generator.dispatcher` -- Per-category entity fan-out.
* :mod:`~tbmaker.generator.validators` -- Enum validator verification.
* :mod:`~tbmaker.generator.orchestrator` -- The full pass.
"""

from tbmaker.generator.discovery import get_generators
from tbmaker.generator.orchestrator import generate
from tbmaker.generator.preserve import write_code

__all__ = ["generate", "get_generators", "write_code"]
