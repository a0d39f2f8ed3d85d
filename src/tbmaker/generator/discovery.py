"""Find templates under the generators folder and group them by category.

Layout::

    generators/
        codebase/   rendered once
        groups/     rendered per group, for each reason
        routes/     rendered per command
        types/      rendered per structure (and per facet on request)

A file is a template when its name ends with ``.tmpl`` but not
``.partial.tmpl``. Files directly under ``generators/`` have no category
and are ignored.
"""

from __future__ import annotations

from collections import defaultdict
from pathlib import Path
from typing import Optional

from tbmaker.config import generator_filter
from tbmaker.exceptions import ConfigError
from tbmaker.models import Generator
from tbmaker.output import debug

TEMPLATE_SUFFIX = ".tmpl"
PARTIAL_SUFFIX = ".partial.tmpl"


def is_template(name: str) -> bool:
    return name.endswith(TEMPLATE_SUFFIX) and not name.endswith(PARTIAL_SUFFIX)


def get_generators(root: Path, path_filter: Optional[str] = None) -> list[Generator]:
    """Discover every template beneath *root*.

    Args:
        root: The generators folder.
        path_filter: Only admit templates whose full path contains this
            substring. Defaults to ``TB_GENERATOR_FILTER``.

    Returns:
        One :class:`~tbmaker.models.Generator` per category found, sorted
        by category. Each generator's templates are relative to the
        category folder and sorted lexicographically.

    Raises:
        ConfigError: If *root* is not a folder.
    """
    if not root.is_dir():
        raise ConfigError(f"generatorsPath ({root}) not found")
    if path_filter is None:
        path_filter = generator_filter()

    debug(f"Looking for templates in: {root}")
    by_category: dict[str, list[str]] = defaultdict(list)
    for path in sorted(root.rglob("*")):
        if not path.is_file() or not is_template(path.name):
            continue
        if path_filter and path_filter not in str(path):
            continue

        relative = path.relative_to(root).as_posix()
        if "/" not in relative:
            continue
        category, template = relative.split("/", 1)
        debug(f"  Found template: {path}")
        by_category[category].append(template)

    return [
        Generator(against=category, templates=sorted(templates))
        for category, templates in sorted(by_category.items())
    ]
