"""Exception hierarchy for tbmaker.

All exceptions inherit from :class:`MakerError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`tbmaker.exit_codes`.
The top-level error handler in :func:`tbmaker.app.main` catches
``MakerError`` and exits with the appropriate code.

Subclass hierarchy::

    MakerError (exit 1)
    +-- ConfigError     (exit 1)
    +-- TemplateError   (exit 3)
    +-- ModelError      (exit 4)
    +-- ValidatorError  (exit 5)
    +-- WriteError      (exit 6)
"""

from tbmaker.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_MODEL_ERROR,
    EXIT_TEMPLATE_ERROR,
    EXIT_VALIDATOR_ERROR,
    EXIT_WRITE_ERROR,
)


class MakerError(Exception):
    """Base exception for all tbmaker errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`tbmaker.exit_codes`.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class ConfigError(MakerError):
    """Raised when the templates or generators folder cannot be located or is malformed.

    This is the only user-facing kind: the CLI prints the requirements
    banner after it.
    """

    exit_code = EXIT_GENERIC_FAILURE


class TemplateError(MakerError):
    """Raised for structural template problems (odd markers, missing metadata, bad category)."""

    exit_code = EXIT_TEMPLATE_ERROR


class ModelError(MakerError):
    """Raised when a class definition or command file cannot be parsed."""

    exit_code = EXIT_MODEL_ERROR


class ValidatorError(MakerError):
    """Raised when a command's ``validate.go`` does not check one of its enum values."""

    exit_code = EXIT_VALIDATOR_ERROR


class WriteError(MakerError):
    """Raised on I/O failures while reading templates or writing generated files."""

    exit_code = EXIT_WRITE_ERROR
