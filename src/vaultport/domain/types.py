"""Entry kinds, document roles, and the value types passed between services.

None of these survive a conversion run: descriptors and references are
built during one traversal and consumed within it.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path


class EntryKind(StrEnum):
    """Filesystem node kinds returned by directory listings."""

    FILE = "file"
    DIRECTORY = "directory"


class DocumentRole(StrEnum):
    """Value written to a document's ``type`` header field."""

    PAGE = "Page"
    SET_LEAF = "SetLeaf"
    SET = "Set"


class ReferenceKind(StrEnum):
    """Markup constructs the rewriter turns into standard links."""

    NOTE = "note"  # [[Name]] / [[Name|Alias]]
    EMBED = "embed"  # ![[Name]]
    IMAGE = "image"  # ![alt](path)
    LINK = "link"  # [text](path)


@dataclass(frozen=True)
class VaultEntry:
    """A directory listing row."""

    path: Path
    kind: EntryKind
    name: str

    @property
    def is_dir(self) -> bool:
        return self.kind is EntryKind.DIRECTORY

    @property
    def is_file(self) -> bool:
        return self.kind is EntryKind.FILE


@dataclass(frozen=True)
class ContainerDescriptor:
    """Classification of one source directory.

    ``owning_root_container`` is the name of the export root's direct child
    that transitively contains this directory, or None when the directory
    is excluded or sits under a non-container (attachments) folder.
    """

    name: str
    source_path: Path
    relative_path_in_output: str
    is_root_container: bool
    owning_root_container: str | None
    excluded: bool = False


@dataclass(frozen=True)
class ResolvedReference:
    """Outcome of resolving one link/embed occurrence."""

    original_text: str
    target_path: Path | None
    found: bool
    strategy: str | None = None
