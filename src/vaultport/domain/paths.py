"""Path canonicalization — archive-safe names and comparable path keys.

INVARIANT: Every archive entry name and every link target that points at
the same source file is produced by :func:`output_name` (or
:func:`sanitize_path` on the same relative path), so both are
byte-identical.
"""

from __future__ import annotations

import os
import re
from pathlib import Path, PurePath

_WHITESPACE_RUN = re.compile(r"\s+")


def to_posix(path: str | PurePath) -> str:
    """Return *path* with every backslash turned into a forward slash."""
    return str(path).replace("\\", "/")


def sanitize_segment(segment: str) -> str:
    """Replace each whitespace run in one path segment with ``_``."""
    return _WHITESPACE_RUN.sub("_", segment)


def sanitize_path(path: str | PurePath) -> str:
    """Sanitize each segment of *path* independently, keeping separators.

    Examples:
        >>> sanitize_path("My Notes/Draft  Plan.md")
        'My_Notes/Draft_Plan.md'
        >>> sanitize_path("a\\\\b c")
        'a/b_c'
    """
    return "/".join(sanitize_segment(part) for part in to_posix(path).split("/"))


def relative_posix(path: Path, root: Path) -> str | None:
    """Forward-slash path of *path* relative to *root*, or None if outside it."""
    rel = os.path.relpath(os.path.abspath(path), os.path.abspath(root))
    rel = to_posix(rel)
    if rel == ".." or rel.startswith("../"):
        return None
    return "" if rel == "." else rel


def output_name(path: Path, root: Path) -> str:
    """Sanitized archive entry name for a source file under *root*.

    Raises:
        ValueError: If *path* does not live under *root*.
    """
    rel = relative_posix(path, root)
    if rel is None:
        msg = f"Path escapes export root: {path}"
        raise ValueError(msg)
    return sanitize_path(rel)


def path_key(path: str | PurePath) -> str:
    """Case- and separator-insensitive comparison key for an absolute path."""
    return to_posix(os.path.normcase(os.path.abspath(path))).lower()


def same_path(a: str | PurePath, b: str | PurePath) -> bool:
    """True when *a* and *b* name the same location (ignoring case)."""
    return path_key(a) == path_key(b)


def container_key(directory: Path, export_root: Path) -> tuple[str, str]:
    """Memo key for a directory classification under one export root."""
    return path_key(directory), path_key(export_root)
