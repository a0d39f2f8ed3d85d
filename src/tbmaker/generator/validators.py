"""Check that every enum option is validated by its command's ``validate.go``.

For a command routed at ``<route>`` whose ``chifra/internal/<route>/validate.go``
exists, each option with an enumerated domain must appear in that file
as its domain string, e.g. ``[index|blooms|both]``::

    validate.ValidateEnum("--mode", opts.Mode, "[index|blooms|both]")

Commands without a ``validate.go`` are not checked.
"""

from __future__ import annotations

from pathlib import Path

from tbmaker.exceptions import ValidatorError, WriteError
from tbmaker.generator.preserve import ENCODING_ERRORS
from tbmaker.models import CodeBase, Option

VALIDATORS_FOLDER = Path("chifra") / "internal"


def enum_domain(option: Option) -> str:
    """Return the domain string for *option* (``[a|b|c]``)."""
    return "[" + "|".join(option.enums) + "]"


def validate_enums(contents: str, option: Option) -> tuple[bool, str]:
    """Return ``(ok, wanted)`` for one option against a validator's source."""
    if not option.enums:
        return True, ""
    domain = enum_domain(option)
    return domain in contents, domain


def verify_validators(codebase: CodeBase, source_root: Path) -> None:
    """Fail on the first enum option its ``validate.go`` does not reference.

    Args:
        codebase: The loaded model.
        source_root: Folder holding ``chifra/internal``, usually the
            working directory.

    Raises:
        ValidatorError: ``Missing enum validator (<domain>) for <path>``.
    """
    for command in codebase.commands:
        path = source_root / VALIDATORS_FOLDER / command.route / "validate.go"
        if not path.is_file():
            continue
        try:
            contents = path.read_text(encoding="utf-8", errors=ENCODING_ERRORS)
        except OSError as exc:
            raise WriteError(f"Failed to read {path}: {exc}") from exc
        for option in command.options:
            ok, wanted = validate_enums(contents, option)
            if not ok:
                raise ValidatorError(f"Missing enum validator ({wanted}) for {path}")
