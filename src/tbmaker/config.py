"""Environment handling and templates/generators path resolution.

This module owns everything tbmaker reads from the environment:

* **.env loading** -- :func:`load_environment` reads ``.env`` from the
  working directory with python-dotenv before any ``TB_*`` variable is
  consulted. Variables already present in the environment win.
* **Templates root** -- :func:`templates_root` honours
  ``TB_TEMPLATES_PATH`` or falls back to a fixed list of candidate
  folders. The outcome (success *or* failure) is memoised for the life of
  the process by :class:`_TemplatesPathResolver`.
* **Generators root** -- :func:`generators_root` honours
  ``TB_GENERATORS_PATH`` with analogous rules, resolved on every call.
* **Derived paths** -- :func:`project_root`, :func:`generated_root` and
  :func:`class_definitions_root` hang off the resolved templates root.
* **Filters** -- :func:`generator_filter` and :func:`maker_single` return
  the substring filters applied during discovery and gating.
"""

from __future__ import annotations

import os
import threading
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from tbmaker.exceptions import ConfigError

TEMPLATES_PATH_ENV = "TB_TEMPLATES_PATH"
GENERATORS_PATH_ENV = "TB_GENERATORS_PATH"
VERBOSE_ENV = "TB_VERBOSE"
GENERATOR_FILTER_ENV = "TB_GENERATOR_FILTER"
MAKER_SINGLE_ENV = "TB_MAKER_SINGLE"

CLASS_DEFINITIONS = "classDefinitions"

TEMPLATE_CANDIDATES: tuple[str, ...] = (
    "./code_gen/templates",
    "../dev-tools/goMaker/templates",
    "./dev-tools/goMaker/templates",
)
"""Folders searched, in order, when ``TB_TEMPLATES_PATH`` is not set."""

GENERATOR_CANDIDATES: tuple[str, ...] = tuple(
    f"{candidate}/generators" for candidate in TEMPLATE_CANDIDATES
)
"""Folders searched, in order, when ``TB_GENERATORS_PATH`` is not set."""


# --- Environment ---


def load_environment(cwd: Optional[Path] = None) -> bool:
    """Load ``.env`` from *cwd* (default: the working directory).

    Returns:
        ``True`` if a ``.env`` file was found and loaded.
    """
    env_file = (cwd or Path.cwd()) / ".env"
    if not env_file.is_file():
        return False
    return load_dotenv(dotenv_path=env_file, override=False)


def env_verbose() -> bool:
    """Return True when ``TB_VERBOSE`` is set to ``true``."""
    return os.environ.get(VERBOSE_ENV, "").strip().lower() == "true"


def generator_filter() -> str:
    """Return the discovery substring filter, or an empty string."""
    return os.environ.get(GENERATOR_FILTER_ENV, "")


def maker_single() -> str:
    """Return the gate substring filter, or an empty string."""
    return os.environ.get(MAKER_SINGLE_ENV, "")


# --- Templates root ---


def _with_slash(path: str) -> str:
    return path if path.endswith("/") else path + "/"


def _locate_templates() -> tuple[Path, Path]:
    """Find the templates folder and its enclosing project root.

    Returns:
        ``(templates_path, root_path)``.

    Raises:
        ConfigError: If the override is malformed or no candidate matches.
    """
    env_path = os.environ.get(TEMPLATES_PATH_ENV, "")
    if env_path:
        env_path = _with_slash(env_path)
        if not env_path.endswith("templates/"):
            raise ConfigError(
                f"{TEMPLATES_PATH_ENV} must end with 'templates/', got: {env_path}"
            )
        if not Path(env_path).is_dir():
            raise ConfigError(
                f"{TEMPLATES_PATH_ENV} environment variable points to "
                f"non-existent directory: {env_path}"
            )
        if not (Path(env_path) / CLASS_DEFINITIONS).is_dir():
            raise ConfigError(
                f"{TEMPLATES_PATH_ENV} points to {env_path} but "
                f"{CLASS_DEFINITIONS} subfolder does not exist"
            )
        root = env_path[: -len("templates/")] or "."
        return Path(env_path), Path(root)

    for candidate in TEMPLATE_CANDIDATES:
        if (Path(candidate) / CLASS_DEFINITIONS).is_dir():
            root = candidate[: -len("templates")].rstrip("/") or "."
            return Path(candidate), Path(root)

    raise ConfigError(
        "could not find the templates directory with a "
        f"{CLASS_DEFINITIONS} subfolder in any of: {', '.join(TEMPLATE_CANDIDATES)}"
    )


class _TemplatesPathResolver:
    """Resolve the templates root exactly once and remember the outcome.

    Both a successful lookup and a failure are cached, so every caller in
    the process observes the same answer. The lock makes the first
    resolution single-shot even if callers race.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._resolved = False
        self._templates: Optional[Path] = None
        self._root: Optional[Path] = None
        self._error: Optional[str] = None

    def resolve(self) -> tuple[Path, Path]:
        with self._lock:
            if not self._resolved:
                try:
                    self._templates, self._root = _locate_templates()
                except ConfigError as exc:
                    self._error = str(exc)
                self._resolved = True

        if self._error is not None:
            raise ConfigError(self._error)
        assert self._templates is not None and self._root is not None
        return self._templates, self._root

    def reset(self) -> None:
        with self._lock:
            self._resolved = False
            self._templates = None
            self._root = None
            self._error = None


_resolver = _TemplatesPathResolver()


def reset_path_cache() -> None:
    """Forget the memoised templates root. Intended for test suites."""
    _resolver.reset()


def templates_root() -> Path:
    """Return the templates folder (memoised).

    Raises:
        ConfigError: If the folder cannot be located. The same error is
            raised on every later call.
    """
    return _resolver.resolve()[0]


def project_root() -> Path:
    """Return the folder enclosing the templates folder."""
    return _resolver.resolve()[1]


def class_definitions_root() -> Path:
    """Return the ``classDefinitions`` folder beneath the templates root."""
    return templates_root() / CLASS_DEFINITIONS


def generated_root() -> Path:
    """Return ``<root>/generated``, the root for generated documentation."""
    return project_root() / "generated"


def validate_templates_folder() -> Path:
    """Resolve the templates root and check that it is not empty.

    Returns:
        The templates folder.

    Raises:
        ConfigError: If the folder cannot be located or holds no entries.
    """
    path = templates_root()
    if not any(path.iterdir()):
        raise ConfigError(f"templates folder {path} is empty")
    return path


# --- Generators root ---


def generators_root() -> Path:
    """Return the generators folder.

    ``TB_GENERATORS_PATH`` must end with ``generators/`` and exist.
    Otherwise the first existing folder in :data:`GENERATOR_CANDIDATES`
    wins.

    Raises:
        ConfigError: If the override is malformed or no candidate exists.
    """
    env_path = os.environ.get(GENERATORS_PATH_ENV, "")
    if env_path:
        env_path = _with_slash(env_path)
        if not env_path.endswith("generators/"):
            raise ConfigError(
                f"{GENERATORS_PATH_ENV} must end with 'generators/', got: {env_path}"
            )
        if not Path(env_path).is_dir():
            raise ConfigError(
                f"{GENERATORS_PATH_ENV} environment variable points to "
                f"non-existent directory: {env_path}"
            )
        return Path(env_path)

    for candidate in GENERATOR_CANDIDATES:
        if Path(candidate).is_dir():
            return Path(candidate)

    raise ConfigError(
        f"could not find generators directory in any of: {', '.join(GENERATOR_CANDIDATES)}"
    )
