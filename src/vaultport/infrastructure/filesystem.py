"""Filesystem primitives — directory listings, reads, and filename search.

INVARIANT: Listings are deterministic. Within a directory, files come
before subdirectories and each group is sorted by name, so two runs over
an unchanged tree visit entries in the same order.

Listing errors propagate from :func:`list_entries`; the search helpers
treat an unreadable directory as empty.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Iterator
from pathlib import Path

from vaultport.domain.types import EntryKind, VaultEntry

logger = logging.getLogger(__name__)

EntryFilter = Callable[[VaultEntry], bool]


# ---------------------------------------------------------------------------
# Listing / reading
# ---------------------------------------------------------------------------


def list_entries(directory: Path) -> list[VaultEntry]:
    """List *directory* as :class:`VaultEntry` rows, files first, name-sorted.

    Entries that are neither regular files nor directories (sockets,
    broken symlinks) are dropped. Symlinked directories are not followed;
    symlinked files are listed as files.

    Raises:
        OSError: If the directory cannot be read.
    """
    files: list[VaultEntry] = []
    dirs: list[VaultEntry] = []
    with os.scandir(directory) as it:
        for entry in it:
            try:
                if entry.is_dir(follow_symlinks=False):
                    dirs.append(VaultEntry(Path(entry.path), EntryKind.DIRECTORY, entry.name))
                elif entry.is_file():
                    files.append(VaultEntry(Path(entry.path), EntryKind.FILE, entry.name))
                elif entry.is_symlink():
                    logger.debug("Symlink not followed: %s", entry.path)
            except OSError:
                logger.debug("Unreadable entry skipped: %s", entry.path)
    files.sort(key=lambda e: e.name)
    dirs.sort(key=lambda e: e.name)
    return files + dirs


def read_bytes(path: Path) -> bytes:
    return path.read_bytes()


def read_text(path: Path) -> str:
    """Read a document as UTF-8, replacing undecodable bytes."""
    return path.read_bytes().decode("utf-8", errors="replace")


def _safe_list(directory: Path) -> list[VaultEntry]:
    try:
        return list_entries(directory)
    except OSError:
        logger.debug("Unreadable directory skipped during search: %s", directory)
        return []


# ---------------------------------------------------------------------------
# Lookup
# ---------------------------------------------------------------------------


def probe_file(base: Path, relative: str) -> Path | None:
    """Return the file at ``base/relative``, matching each segment case-insensitively.

    An exact hit wins; otherwise every segment is matched against the
    directory listing ignoring case. ``.``/``..`` segments are only
    honoured through an exact lookup.
    """
    exact = base / relative
    if exact.is_file():
        return exact

    parts = [p for p in relative.replace("\\", "/").split("/") if p]
    if not parts or any(p in (".", "..") for p in parts):
        return None

    current = base
    for index, part in enumerate(parts):
        last = index == len(parts) - 1
        wanted = part.lower()
        match: Path | None = None
        for entry in _safe_list(current):
            if entry.name.lower() != wanted:
                continue
            if (last and entry.is_file) or (not last and entry.is_dir):
                match = entry.path
                break
        if match is None:
            return None
        current = match
    return current


def find_file(
    search_dir: Path,
    filename: str,
    *,
    max_depth: int | None = 10,
    skip: EntryFilter | None = None,
) -> Path | None:
    """Depth-first search for *filename* (case-insensitive) under *search_dir*.

    *max_depth* bounds how many directory levels are read: ``1`` reads
    only *search_dir* itself; ``None`` is unbounded. Entries for which
    *skip* returns True are neither matched nor descended into.
    """
    wanted = filename.lower()
    seen: set[str] = set()

    def walk(directory: Path, depth: int) -> Path | None:
        if max_depth is not None and depth >= max_depth:
            return None
        real = os.path.realpath(directory)
        if real in seen:
            return None
        seen.add(real)
        entries = _safe_list(directory)
        for entry in entries:
            if skip is not None and skip(entry):
                continue
            if entry.is_file and entry.name.lower() == wanted:
                return entry.path
        for entry in entries:
            if not entry.is_dir or (skip is not None and skip(entry)):
                continue
            found = walk(entry.path, depth + 1)
            if found is not None:
                return found
        return None

    if not search_dir.is_dir():
        return None
    return walk(search_dir, 0)


def iter_directories(
    root: Path,
    predicate: Callable[[VaultEntry], bool],
    *,
    max_depth: int | None = None,
    skip: EntryFilter | None = None,
) -> Iterator[Path]:
    """Yield directories under *root* (pre-order) for which *predicate* holds."""
    seen: set[str] = set()

    def walk(directory: Path, depth: int) -> Iterator[Path]:
        if max_depth is not None and depth >= max_depth:
            return
        real = os.path.realpath(directory)
        if real in seen:
            return
        seen.add(real)
        for entry in _safe_list(directory):
            if not entry.is_dir or (skip is not None and skip(entry)):
                continue
            if predicate(entry):
                yield entry.path
            yield from walk(entry.path, depth + 1)

    if root.is_dir():
        yield from walk(root, 0)
