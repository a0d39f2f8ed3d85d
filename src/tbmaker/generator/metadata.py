"""Read the metadata block at the top of a template.

A template starts with a comment block naming where its output goes::

    /*
    output: pkg/types/[[route]]/[[Type]].go
    scope: types
    */
    package types
    ...

``output`` is required; ``scope`` is optional; any other key is ignored.
Templates without a valid block are rejected by the dispatcher.
"""

from __future__ import annotations

from typing import Optional

from tbmaker.models import TemplateMetadata

OPEN = "/*"
CLOSE = "*/"

REASON_PREFIX = "[[reason]]_"

REASON_FOLDERS: dict[str, str] = {
    "readme": "chifra/",
    "model": "data-model/",
}
"""Replacement for :data:`REASON_PREFIX` per group-template reason."""


def apply_reason_prefix(content: str, reason: str) -> str:
    """Replace ``[[reason]]_`` with the folder for *reason*, if it has one."""
    folder = REASON_FOLDERS.get(reason)
    if folder is None:
        return content
    return content.replace(REASON_PREFIX, folder)


def parse_metadata_block(content: str, reason: str = "") -> Optional[TemplateMetadata]:
    """Parse the leading metadata block of *content*.

    The reason prefix is substituted before parsing so that
    ``output: [[reason]]_...`` can point each reason at its own tree.

    Returns:
        The metadata, or ``None`` when the block is absent, never closed,
        or has an empty ``output``.
    """
    content = apply_reason_prefix(content, reason)

    lines = content.split("\n")
    if len(lines) < 3 or lines[0].strip() != OPEN:
        return None

    output = ""
    scope = ""
    closed = False
    for raw in lines[1:]:
        line = raw.strip()
        if line == CLOSE:
            closed = True
            break
        if line.startswith("output:"):
            output = line[len("output:"):].strip()
        elif line.startswith("scope:"):
            scope = line[len("scope:"):].strip()

    if not closed or not output:
        return None
    return TemplateMetadata(output=output, scope=scope)


def strip_metadata(content: str) -> str:
    """Remove the metadata block from *content*.

    Everything from the opening ``/*`` line through the closing ``*/``
    line is dropped, the remainder is stripped of surrounding whitespace
    and a single trailing newline is added. Content without a complete
    block is returned unchanged.
    """
    lines = content.split("\n")
    if len(lines) < 3 or lines[0].strip() != OPEN:
        return content

    for i in range(1, len(lines)):
        if lines[i].strip() == CLOSE:
            return "\n".join(lines[i + 1:]).strip() + "\n"
    return content
