"""Write generated files while keeping hand-edited regions from the previous version.

A generated file may contain pairs of lines carrying the marker
``// EXISTING_CODE``. The text between the *i*-th opening and closing
marker is a *preservation region*. When a file is regenerated,
:func:`write_code` copies region *i* of the file on disk into region *i*
of the freshly rendered content:

* regions pair up by ordinal position, never by matching text;
* surplus regions in the new content keep their rendered text;
* surplus regions in the old file are dropped;
* marker lines themselves always come from the new content.

The merged result is compared with the file on disk and only written,
atomically, when it differs.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Optional

from tbmaker.exceptions import TemplateError, WriteError
from tbmaker.output import debug, warning

MARKER = "// EXISTING_CODE"

_DEFAULT_MODE = 0o644

ENCODING_ERRORS = "surrogateescape"
"""Undecodable bytes round-trip through reads and writes unchanged."""


def count_markers(content: str) -> int:
    """Return the number of lines in *content* that contain :data:`MARKER`."""
    return sum(1 for line in content.split("\n") if MARKER in line)


def validate_template(content: str, path: str | Path) -> None:
    """Check that *content* has an even number of ``// EXISTING_CODE`` markers.

    Raises:
        TemplateError: If the marker count is odd.
    """
    count = count_markers(content)
    if count % 2 != 0:
        raise TemplateError(
            f"template {path} has {count} '{MARKER}' markers, but must have an even number"
        )


def _split_lines(content: str) -> list[str]:
    """Split *content* on ``\\n`` only, keeping the line endings."""
    parts = content.split("\n")
    lines = [part + "\n" for part in parts[:-1]]
    if parts[-1]:
        lines.append(parts[-1])
    return lines


def _marker_pairs(lines: list[str]) -> list[tuple[int, int]]:
    """Return ``(open, close)`` line indexes for each marker pair in *lines*.

    Assumes an even marker count.
    """
    indexes = [i for i, line in enumerate(lines) if MARKER in line]
    return list(zip(indexes[0::2], indexes[1::2]))


def extract_regions(content: str) -> list[str]:
    """Return the text of every preservation region in *content*, in order."""
    lines = _split_lines(content)
    return ["".join(lines[start + 1 : end]) for start, end in _marker_pairs(lines)]


def merge_existing(new_content: str, existing: str) -> str:
    """Splice the preservation regions of *existing* into *new_content*.

    Both inputs must have an even marker count.
    """
    preserved = extract_regions(existing)
    lines = _split_lines(new_content)

    out: list[str] = []
    pos = 0
    for i, (start, end) in enumerate(_marker_pairs(lines)):
        out.extend(lines[pos : start + 1])
        if i < len(preserved):
            out.append(preserved[i])
        else:
            out.extend(lines[start + 1 : end])
        pos = end
    out.extend(lines[pos:])
    return "".join(out)


def write_code(destination: str | Path, new_content: str) -> bool:
    """Write *new_content* to *destination*, preserving existing regions.

    Args:
        destination: File to (re)generate. Parent folders are created as
            needed.
        new_content: Freshly rendered file contents.

    Returns:
        ``True`` if the file was written, ``False`` if the merged result
        already matched the file on disk.

    Raises:
        TemplateError: If *new_content* has an odd marker count.
        WriteError: If the existing file cannot be read or the new one
            cannot be written.
    """
    path = Path(destination)
    validate_template(new_content, path)

    existing = _read_existing(path)
    if existing is None:
        merged = new_content
    elif count_markers(existing) % 2 != 0:
        warning(
            f"{path} has {count_markers(existing)} '{MARKER}' markers, "
            "but must have an even number. Overwriting."
        )
        merged = new_content
    else:
        merged = merge_existing(new_content, existing)

    if merged == existing:
        debug(f"  Unchanged: {path}")
        return False

    try:
        _atomic_write(path, merged)
    except OSError as exc:
        raise WriteError(f"Failed to write {path}: {exc}") from exc
    debug(f"  Wrote: {path}")
    return True


def _read_existing(path: Path) -> Optional[str]:
    if not path.is_file():
        return None
    try:
        with path.open(
            "r", encoding="utf-8", errors=ENCODING_ERRORS, newline=""
        ) as f:
            return f.read()
    except OSError as exc:
        raise WriteError(f"Failed to read existing file {path}: {exc}") from exc


def _atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is an atomic rename on POSIX systems. The file keeps the
    permissions of the file it replaces. On failure the temp file is
    removed; an error while removing it propagates.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    mode = path.stat().st_mode & 0o777 if path.exists() else _DEFAULT_MODE

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
            errors=ENCODING_ERRORS,
            newline="",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None  # prevent double-close below
        os.chmod(tmp_path, mode)
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None and os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise
