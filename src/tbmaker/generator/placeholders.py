"""Placeholder substitution for destination paths and template bodies.

Destination paths (the ``output:`` metadata value) accept::

    [[Route]] [[Type]] [[Group]] [[Reason]]   proper-cased
    [[route]] [[type]] [[group]] [[reason]]   lower-cased

and optionally the ``/-facet-/`` segment, which fans a type template out
to one destination per facet of the structure. Template bodies accept
``[{GROUP}]`` and ``[{REASON}]``, replaced verbatim.
"""

from __future__ import annotations

import re
from typing import Iterator

from tbmaker.exceptions import TemplateError
from tbmaker.generator.naming import lower, proper
from tbmaker.models import Facet

FACET_SEGMENT = "/-facet-/"

_RESIDUAL_RE = re.compile(r"\[\[[^\]]*\]\]")


def substitute_path(
    output: str,
    route: str = "",
    type_name: str = "",
    group: str = "",
    reason: str = "",
) -> str:
    """Expand the ``[[...]]`` placeholders of a metadata output path.

    Raises:
        TemplateError: If any ``[[...]]`` token survives substitution.

    Example::

        substitute_path("pkg/[[route]]/[[Type]].go", route="scrape", type_name="Manifest")
        # 'pkg/scrape/Manifest.go'
    """
    dest = output
    dest = dest.replace("[[Route]]", proper(route))
    dest = dest.replace("[[Type]]", proper(type_name))
    dest = dest.replace("[[Group]]", proper(group))
    dest = dest.replace("[[Reason]]", proper(reason))

    dest = dest.replace("[[route]]", lower(route))
    dest = dest.replace("[[type]]", lower(type_name))
    dest = dest.replace("[[group]]", lower(group))
    dest = dest.replace("[[reason]]", lower(reason))

    residual = _RESIDUAL_RE.search(dest)
    if residual is not None:
        raise TemplateError(
            f"unresolved placeholder {residual.group(0)} in output path {output}"
        )
    return dest


def substitute_body(body: str, group: str = "", reason: str = "") -> str:
    """Replace ``[{GROUP}]`` and ``[{REASON}]`` in a template body."""
    return body.replace("[{GROUP}]", group).replace("[{REASON}]", reason)


def has_facets(dest: str) -> bool:
    """Whether *dest* requests one output per facet."""
    return FACET_SEGMENT in dest


def expand_facets(dest: str, facets: list[Facet]) -> Iterator[tuple[str, Facet]]:
    """Yield ``(destination, facet)`` for every facet, in order.

    The ``/-facet-/`` segment becomes ``/<facet folder>/`` (see
    :attr:`~tbmaker.models.Facet.folder`).
    """
    for facet in facets:
        yield dest.replace(FACET_SEGMENT, f"/{facet.folder}/"), facet
