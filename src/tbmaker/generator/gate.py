"""Decide whether a (template, entity) pair should be generated at all.

Skipping is the normal way to exclude combinations, so a rejected pair
returns ``False`` rather than raising. The rules, in order:

1. ``TB_MAKER_SINGLE`` is set and is not a substring of the template path.
2. The entity tag is empty.
3. Tag-specific exclusions, tested as substrings of the template path:

   ========  ===========================================================
   tag       excluded when the path contains
   ========  ===========================================================
   daemon    ``sdk_``, ``sdkFuzzer`` or ``examples_``
   scrape    ``sdkFuzzer`` or ``examples_``, then the ``explore`` rule
   explore   ``sdk_`` together with ``python``, ``typescript`` or
             ``sdkFuzzer``; or ``examples_``
   ========  ===========================================================
"""

from __future__ import annotations

from pathlib import Path

from tbmaker.config import maker_single
from tbmaker.exceptions import TemplateError


def _excluded_for_tag(source: str, tag: str) -> bool:
    is_sdk = "sdk_" in source
    is_example = "examples_" in source
    is_python = "python" in source
    is_typescript = "typescript" in source
    is_fuzzer = "sdkFuzzer" in source

    if tag == "daemon":
        return is_sdk or is_fuzzer or is_example

    if tag == "scrape" and (is_fuzzer or is_example):
        return True

    if tag in ("scrape", "explore"):
        return (is_sdk and (is_python or is_typescript or is_fuzzer)) or is_example

    return False


def should_process(source: str | Path, against: str, tag: str) -> bool:
    """Return True if the template at *source* should render for *tag*.

    Args:
        source: Full path to the template file.
        against: The template's category. No current rule reads it.
        tag: The entity tag (route, class, group name or ``codebase``).

    Raises:
        TemplateError: If the pair passes every rule but the template file
            does not exist.
    """
    path = str(source)

    single = maker_single()
    if single and single not in path:
        return False

    if not tag:
        return False

    if _excluded_for_tag(path, tag):
        return False

    if not Path(path).is_file():
        raise TemplateError(f"file does not exist {path}")

    return True
