"""Numeric process exit codes.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~tbmaker.exceptions.MakerError` subclass. Build
scripts can inspect the exit code to tell a misconfigured checkout apart
from a broken template without parsing stderr.

Example::

    $ tbmaker
    $ echo $?
    3   # EXIT_TEMPLATE_ERROR -- a template failed structural checks
"""

EXIT_SUCCESS = 0
"""The generation pass completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified or user-facing error occurred (bad flag, missing templates)."""

EXIT_TEMPLATE_ERROR = 3
"""A template failed structural validation or evaluation."""

EXIT_MODEL_ERROR = 4
"""The class definitions could not be loaded."""

EXIT_VALIDATOR_ERROR = 5
"""A command option references an enum that its validator does not check."""

EXIT_WRITE_ERROR = 6
"""A template could not be read or an output file could not be written."""

EXIT_CANCELLED = 130
"""The run was interrupted with Ctrl-C."""
