"""Hierarchy classifier — root containers, nested containers, document roles.

Rules:
- A direct child directory of the export root is a root container unless
  it is hidden, excluded, or an attachments folder.
- Every deeper directory belongs to the root container of its top-level
  ancestor (the export root's direct child on its path).
- A document directly under the export root is a ``Page`` with no set;
  a document anywhere inside a container is a ``SetLeaf`` whose set is the
  root container, never the immediate parent folder.

Classifications are memoized per (directory, export root) in the run
state, so every reference to a directory within a run sees one answer.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from vaultport.domain.exclusion import is_hidden
from vaultport.domain.paths import container_key, relative_posix, same_path, sanitize_path
from vaultport.domain.types import ContainerDescriptor, DocumentRole, EntryKind, VaultEntry
from vaultport.infrastructure.filesystem import list_entries

if TYPE_CHECKING:
    from vaultport.services.filters import EntryFilter
    from vaultport.services.state import RunState

logger = logging.getLogger(__name__)


def top_level_ancestor(path: Path, export_root: Path) -> Path | None:
    """The export root's direct child on *path*'s ancestry (or *path* itself).

    Returns None for the export root itself and for paths outside it.
    """
    rel = relative_posix(path, export_root)
    if not rel:
        return None
    return export_root / rel.split("/", 1)[0]


class HierarchyClassifier:
    """Classify directories into containers and documents into roles."""

    def __init__(self, entry_filter: EntryFilter, state: RunState) -> None:
        self._filter = entry_filter
        self._state = state

    def _is_root_container_dir(self, directory: Path) -> bool:
        entry = VaultEntry(directory, EntryKind.DIRECTORY, directory.name)
        return not (
            is_hidden(directory.name)
            or self._filter.is_excluded(entry)
            or self._filter.is_attachments_dir(directory.name)
        )

    def classify_directory(self, directory: Path, export_root: Path) -> ContainerDescriptor:
        """Return the (memoized) classification of *directory*."""
        key = container_key(directory, export_root)
        cached = self._state.containers.get(key)
        if cached is not None:
            return cached

        rel = relative_posix(directory, export_root) or ""
        entry = VaultEntry(directory, EntryKind.DIRECTORY, directory.name)
        excluded = self._filter.is_excluded(entry)
        is_root_level = rel != "" and "/" not in rel

        owner: str | None = None
        is_root_container = False
        if not excluded and rel:
            ancestor = top_level_ancestor(directory, export_root)
            if ancestor is not None and self._is_root_container_dir(ancestor):
                owner = ancestor.name
                is_root_container = is_root_level

        descriptor = ContainerDescriptor(
            name=directory.name or "Root",
            source_path=directory,
            relative_path_in_output=sanitize_path(rel),
            is_root_container=is_root_container,
            owning_root_container=owner,
            excluded=excluded,
        )
        self._state.containers[key] = descriptor
        logger.debug(
            "Directory classified: %s root=%s owner=%s excluded=%s",
            rel or ".",
            is_root_container,
            owner,
            excluded,
        )
        return descriptor

    def classify_document(
        self, document: Path, export_root: Path
    ) -> tuple[DocumentRole, str | None]:
        """Return ``(role, owning root container)`` for a document."""
        parent = document.parent
        if same_path(parent, export_root):
            return DocumentRole.PAGE, None
        owner = self.classify_directory(parent, export_root).owning_root_container
        if owner is None:
            return DocumentRole.PAGE, None
        return DocumentRole.SET_LEAF, owner

    def root_containers(self, export_root: Path) -> list[ContainerDescriptor]:
        """All root containers of *export_root*, in listing order.

        Raises:
            OSError: If the export root cannot be listed.
        """
        containers: list[ContainerDescriptor] = []
        for entry in list_entries(export_root):
            if not entry.is_dir or not self._is_root_container_dir(entry.path):
                continue
            descriptor = self.classify_directory(entry.path, export_root)
            if descriptor.is_root_container:
                containers.append(descriptor)
        return containers
