"""Reference resolver — map a note or asset name to a file in the vault.

Resolution is an ordered list of strategies, each a function from a
:class:`LookupContext` to an optional path. They run in order and the
first hit wins:

 1. ``exact``               — ``<document dir>/<target>``
 2. ``root``                — ``<export root>/<target>``
 3. ``sibling_attachments`` — ``<document dir>/attachments/<target>``
 4. ``root_attachments``    — ``<export root>/attachments/<target>``
 5. ``nearby``              — filename search under the document dir (depth 3)
 6. ``local_attachments``   — attachments-named folders under the document dir
 7. ``root_attachment_dirs``— attachments-named folders directly under the root
 8. ``wide``                — filename search under the document dir (depth 5, 10)
 9. ``top_level``           — the document's top-level folder, recursively
10. ``any_attachments``     — every attachments-named folder in the vault
11. ``vault``               — the whole export root, unbounded

Filename searches compare names case-insensitively and never enter hidden
or excluded entries. A miss is not an error: callers still get a
best-effort link from :meth:`ReferenceResolver.link_for`.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import TYPE_CHECKING

import structlog

from vaultport.domain.links import is_external
from vaultport.domain.paths import path_key, relative_posix, sanitize_path
from vaultport.domain.types import EntryKind, ResolvedReference, VaultEntry
from vaultport.infrastructure.filesystem import (
    find_file,
    iter_directories,
    list_entries,
    probe_file,
)
from vaultport.services.hierarchy import top_level_ancestor

if TYPE_CHECKING:
    from vaultport.config.models import ResolverConfig
    from vaultport.services.filters import EntryFilter
    from vaultport.services.state import RunState

log = structlog.get_logger(__name__)

# Depth used when "recursive" search is bounded (the deepest wide depth).
_FALLBACK_DEPTH = 10


@dataclass(frozen=True)
class LookupContext:
    """Inputs shared by every strategy for one lookup."""

    target: str  # relative path as written (suffix-repaired, with extension)
    document_dir: Path
    export_root: Path

    @property
    def filename(self) -> str:
        return PurePosixPath(self.target.replace("\\", "/")).name


Strategy = Callable[[LookupContext], Path | None]


class ReferenceResolver:
    """Resolve lookup targets with an ordered, short-circuiting strategy list."""

    def __init__(
        self,
        config: ResolverConfig,
        entry_filter: EntryFilter,
        state: RunState,
    ) -> None:
        self._config = config
        self._filter = entry_filter
        self._state = state
        self.strategies: list[tuple[str, Strategy]] = [
            ("exact", self._exact),
            ("root", self._root),
            ("sibling_attachments", self._sibling_attachments),
            ("root_attachments", self._root_attachments),
            ("nearby", self._nearby),
            ("local_attachments", self._local_attachments),
            ("root_attachment_dirs", self._root_attachment_dirs),
            ("wide", self._wide),
            ("top_level", self._top_level),
            ("any_attachments", self._any_attachments),
            ("vault", self._vault),
        ]

    # ── Public API ────────────────────────────────────────────────────

    def resolve(self, target: str, document: Path, export_root: Path) -> ResolvedReference:
        """Resolve *target* as referenced from *document*.

        *target* is a relative path with an extension (callers apply
        :func:`~vaultport.domain.links.candidate_filename` first).
        """
        document_dir = document.parent
        key = (path_key(document_dir), path_key(export_root), target.lower())
        cached = self._state.resolutions.get(key)
        if cached is not None:
            return cached

        result = ResolvedReference(original_text=target, target_path=None, found=False)
        if target.strip():
            ctx = LookupContext(target=target, document_dir=document_dir, export_root=export_root)
            for name, strategy in self.strategies:
                found = strategy(ctx)
                if found is not None and self._admissible(found, export_root):
                    result = ResolvedReference(
                        original_text=target, target_path=found, found=True, strategy=name
                    )
                    break

        if result.found:
            log.debug("reference.resolved", target=target, strategy=result.strategy)
        else:
            log.info("reference.unresolved", target=target, document=str(document))
        self._state.resolutions[key] = result
        return result

    def link_for(self, resolved: ResolvedReference, document: Path, export_root: Path) -> str:
        """Sanitized link target for a resolution, found or not.

        Found files link by their export-root-relative path (identical to
        their archive entry name). Misses link to where the file would be
        relative to the document when that stays inside the root, else to
        the sanitized reference text.
        """
        if resolved.found and resolved.target_path is not None:
            rel = relative_posix(resolved.target_path, export_root)
            if rel is not None:
                return sanitize_path(rel)
            return sanitize_path(resolved.original_text)

        text = resolved.original_text
        if not is_external(text) and not Path(text).is_absolute():
            rel = relative_posix(document.parent / text, export_root)
            if rel:
                return sanitize_path(rel)
        return sanitize_path(text)

    # ── Strategy helpers ──────────────────────────────────────────────

    def _skip(self, entry: VaultEntry) -> bool:
        return self._filter.skips(entry)

    def _admissible(self, found: Path, export_root: Path) -> bool:
        """True when *found* will itself be written to the archive."""
        rel = relative_posix(found, export_root)
        if not rel:
            return False
        current = export_root
        parts = rel.split("/")
        for index, part in enumerate(parts):
            current = current / part
            kind = EntryKind.FILE if index == len(parts) - 1 else EntryKind.DIRECTORY
            entry = VaultEntry(current, kind, part)
            if self._skip(entry):
                return False
        return self._filter.should_include(VaultEntry(found, EntryKind.FILE, found.name))

    def _is_attachments(self, entry: VaultEntry) -> bool:
        return self._filter.is_attachments_dir(entry.name)

    def _search(self, directory: Path, filename: str, depth: int | None) -> Path | None:
        return find_file(directory, filename, max_depth=depth, skip=self._skip)

    def _search_each(self, directories: Iterator[Path], filename: str) -> Path | None:
        for directory in directories:
            found = self._search(directory, filename, _FALLBACK_DEPTH)
            if found is not None:
                return found
        return None

    def _probe_attachment_dirs(self, base: Path, target: str) -> Path | None:
        for name in self._config.attachment_dir_names:
            found = probe_file(base, f"{name}/{target}")
            if found is not None:
                return found
        return None

    # ── Strategies (order defined in __init__) ────────────────────────

    def _exact(self, ctx: LookupContext) -> Path | None:
        return probe_file(ctx.document_dir, ctx.target)

    def _root(self, ctx: LookupContext) -> Path | None:
        return probe_file(ctx.export_root, ctx.target)

    def _sibling_attachments(self, ctx: LookupContext) -> Path | None:
        return self._probe_attachment_dirs(ctx.document_dir, ctx.target)

    def _root_attachments(self, ctx: LookupContext) -> Path | None:
        return self._probe_attachment_dirs(ctx.export_root, ctx.target)

    def _nearby(self, ctx: LookupContext) -> Path | None:
        return self._search(ctx.document_dir, ctx.filename, self._config.shallow_depth)

    def _local_attachments(self, ctx: LookupContext) -> Path | None:
        dirs = iter_directories(
            ctx.document_dir,
            self._is_attachments,
            max_depth=self._config.attachment_scan_depth,
            skip=self._skip,
        )
        return self._search_each(dirs, ctx.filename)

    def _root_attachment_dirs(self, ctx: LookupContext) -> Path | None:
        try:
            entries = list_entries(ctx.export_root)
        except OSError:
            return None
        dirs = (
            e.path
            for e in entries
            if e.is_dir and self._is_attachments(e) and not self._skip(e)
        )
        return self._search_each(dirs, ctx.filename)

    def _wide(self, ctx: LookupContext) -> Path | None:
        for depth in self._config.wide_depths:
            found = self._search(ctx.document_dir, ctx.filename, depth)
            if found is not None:
                return found
        return None

    def _top_level(self, ctx: LookupContext) -> Path | None:
        ancestor = top_level_ancestor(ctx.document_dir, ctx.export_root)
        if ancestor is None:
            return None
        return self._search(ancestor, ctx.filename, _FALLBACK_DEPTH)

    def _any_attachments(self, ctx: LookupContext) -> Path | None:
        dirs = iter_directories(ctx.export_root, self._is_attachments, skip=self._skip)
        return self._search_each(dirs, ctx.filename)

    def _vault(self, ctx: LookupContext) -> Path | None:
        return self._search(ctx.export_root, ctx.filename, None)
