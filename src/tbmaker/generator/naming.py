"""Case transforms and the helper vocabulary shared by every template binding.

The three transforms used in destination paths are locale-insensitive:

* :func:`proper` -- title-cases each word: first character title-cased,
  the rest lower-cased. A word is a run of letters, digits, ``_``, ``.``
  and ``'``; anything else (spaces, hyphens, slashes, brackets) breaks words.
* :func:`lower` / :func:`upper` -- ASCII-only case mapping; non-ASCII
  characters pass through untouched.

The remaining helpers are registered as Jinja filters by
:mod:`tbmaker.generator.renderer` (see :data:`FILTERS`).
"""

from __future__ import annotations

import re
import string
from typing import Callable

_WORD_RE = re.compile(r"[\w.']+")

_TO_LOWER = str.maketrans(string.ascii_uppercase, string.ascii_lowercase)
_TO_UPPER = str.maketrans(string.ascii_lowercase, string.ascii_uppercase)

_PLURAL_KEEP = ("config", "session", "publish")
_SINGULAR_KEEP = ("baddress", "status", "stats", "series", "dalledress")


def proper(s: str) -> str:
    """Title-case every word of *s* (``"chain data"`` -> ``"Chain Data"``)."""
    return _WORD_RE.sub(lambda m: m.group(0)[:1].title() + m.group(0)[1:].lower(), s)


def lower(s: str) -> str:
    return s.translate(_TO_LOWER)


def upper(s: str) -> str:
    return s.translate(_TO_UPPER)


def first_upper(s: str) -> str:
    return upper(s[:1]) + s[1:]


def first_lower(s: str) -> str:
    return lower(s[:1]) + s[1:]


def lower_no_spaces(s: str) -> str:
    return lower(s.replace(" ", ""))


def camel_case(s: str) -> str:
    """Convert ``snake_case`` to ``camelCase``, dropping spaces.

    Strings shorter than two characters are returned unchanged.
    """
    if len(s) < 2:
        return s

    chars: list[str] = []
    to_upper = False
    for c in s:
        if c == "_":
            to_upper = True
            continue
        chars.append(upper(c) if to_upper else c)
        to_upper = False
    result = "".join(chars)
    return first_lower(result).replace(" ", "")


def go_name(s: str) -> str:
    """Exported identifier form: ``block_number`` -> ``BlockNumber``."""
    return first_upper(camel_case(s))


def pad(s: str, width: int) -> str:
    """Right-pad *s* with spaces to *width* characters."""
    return s + " " * (width - len(s))


def plural(s: str) -> str:
    if s.endswith(("s", "ed", "ing")):
        return s
    if s.endswith("x"):
        return s + "es"
    if s.endswith("y"):
        return s[:-1] + "ies"
    if s in _PLURAL_KEEP:
        return s
    return s + "s"


def singular(s: str) -> str:
    s_lower = lower(s)
    if s_lower == "addresses":
        return s[:-2]
    if s_lower not in _SINGULAR_KEEP and s_lower.endswith("s"):
        return s[:-1]
    return s


FILTERS: dict[str, Callable[..., str]] = {
    "proper": proper,
    "lower": lower,
    "upper": upper,
    "first_upper": first_upper,
    "first_lower": first_lower,
    "lower_no_spaces": lower_no_spaces,
    "camel_case": camel_case,
    "go_name": go_name,
    "pad": pad,
    "plural": plural,
    "singular": singular,
}
"""Helper vocabulary exposed to templates as Jinja filters."""
