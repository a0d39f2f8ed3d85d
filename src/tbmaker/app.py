"""Typer application and CLI entry point for tbmaker.

The binary takes informational flags only::

    --help, -h, -help, help     print help (verbose help with --verbose)
    --verbose, -v, -verbose     enable debug diagnostics
    --version                   print the version banner

Any other argument prints the valid options and exits 1. With no
arguments the program runs a generation pass in the working directory.

The flag spellings include single-dash long forms and a bare ``help``
word, so the command accepts raw arguments and matches them itself
instead of declaring Typer options.

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. It loads ``.env``, installs the global
:class:`~tbmaker.output.OutputManager` and invokes the Typer app.
"""

from __future__ import annotations

import signal
import sys
from pathlib import Path
from typing import Any

import typer

from tbmaker import __version__
from tbmaker.exceptions import ConfigError, MakerError
from tbmaker.exit_codes import EXIT_CANCELLED, EXIT_GENERIC_FAILURE
from tbmaker.output import (
    OutputManager,
    error,
    info,
    is_verbose,
    print_data,
    set_output,
    set_verbose,
)

HELP_FLAGS = ("--help", "-h", "-help", "help")
VERBOSE_FLAGS = ("--verbose", "-v", "-verbose")
VERSION_FLAG = "--version"

VALID_OPTIONS = """Valid options:
  --help, -h     Show help information
  --verbose, -v  Show verbose help information
  --version      Show version information"""

_HERE = Path(__file__).parent


app = typer.Typer(
    name="tbmaker",
    help="Generate source files from templates and class definitions.",
    add_completion=False,
)


def _show_help() -> None:
    """Print the packaged help text; the verbose variant in verbose mode."""
    name = "help_verbose.txt" if is_verbose() else "help.txt"
    try:
        text = (_HERE / name).read_text(encoding="utf-8")
    except OSError:
        print_data("Error: Could not load help text.")
        return
    print_data(text)


def _show_version() -> None:
    print_data(f"Version:  v{__version__}")


def _show_requirements(exc: ConfigError) -> None:
    """Print a configuration error followed by the non-verbose help text."""
    error(str(exc))
    print_data("\nHere are the requirements to run tbmaker:")
    set_verbose(False)
    _show_help()


def _run_generation() -> None:
    """Load the codebase and run a generation pass.

    Raises:
        typer.Exit: Code 1 on configuration errors (after printing the
            requirements); the error's own code for any other
            :class:`~tbmaker.exceptions.MakerError`.
    """
    from tbmaker.config import validate_templates_folder
    from tbmaker.generator import generate
    from tbmaker.parser import load_codebase

    info(f"Current folder: {Path.cwd()}")

    try:
        validate_templates_folder()
        codebase = load_codebase()
        generate(codebase)
    except ConfigError as exc:
        _show_requirements(exc)
        raise typer.Exit(code=EXIT_GENERIC_FAILURE) from None
    except MakerError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None


@app.command(
    add_help_option=False,
    context_settings={"allow_extra_args": True, "ignore_unknown_options": True},
)
def run(ctx: typer.Context) -> None:
    """Run a generation pass, or print help or version information."""
    show_help = False
    show_version = False

    for arg in ctx.args:
        if arg in HELP_FLAGS:
            show_help = True
        elif arg in VERBOSE_FLAGS:
            set_verbose(True)
        elif arg == VERSION_FLAG:
            show_version = True
        else:
            print_data(f"Error: Unknown option '{arg}'\n")
            print_data(VALID_OPTIONS)
            raise typer.Exit(code=EXIT_GENERIC_FAILURE)

    if show_version:
        _show_version()
        return

    if show_help:
        _show_help()
        return

    _run_generation()


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_CANCELLED)

    signal.signal(signal.SIGINT, _handler)


def main() -> None:
    """CLI entry point invoked by the ``tbmaker`` console script.

    1. Install signal handlers for clean Ctrl-C behaviour.
    2. Load ``.env`` from the working directory.
    3. Install the global output manager, verbose if ``TB_VERBOSE=true``.
    4. Invoke the Typer application.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    from tbmaker.config import env_verbose, load_environment

    _setup_signal_handlers()
    try:
        load_environment()
        set_output(OutputManager(verbose=env_verbose()))
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_CANCELLED)
    except Exception as exc:
        if isinstance(exc, MakerError):
            error(str(exc))
            sys.exit(exc.exit_code)
        error(f"Unexpected error: {exc}")
        sys.exit(EXIT_GENERIC_FAILURE)


if __name__ == "__main__":
    main()
