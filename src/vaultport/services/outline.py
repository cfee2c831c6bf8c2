"""Container index builder — navigable outlines of containers.

An outline mirrors directory nesting: each folder becomes a heading whose
level is ``base_level + depth - 1`` (depth counted from the index root,
capped at ``max_heading_level``) and each document becomes a list item
linking to its archive entry name. Within a folder, documents are listed
before subfolder headings so every item sits under its own folder's
heading. Attachments folders are not outlined.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path, PurePath
from typing import TYPE_CHECKING

from ruamel.yaml.comments import CommentedMap

from vaultport.domain.frontmatter import render_frontmatter
from vaultport.domain.paths import output_name, relative_posix
from vaultport.domain.types import DocumentRole
from vaultport.infrastructure.filesystem import list_entries

if TYPE_CHECKING:
    from vaultport.config.models import ConvertConfig, OutlineConfig
    from vaultport.domain.types import ContainerDescriptor
    from vaultport.services.filters import EntryFilter

logger = logging.getLogger(__name__)


@dataclass
class Outline:
    lines: list[str] = field(default_factory=list)
    link_count: int = 0

    def extend(self, other: Outline) -> None:
        self.lines.extend(other.lines)
        self.link_count += other.link_count


@dataclass(frozen=True)
class Placeholder:
    """Synthesized document for a root container with nothing to link."""

    container: str
    entry_name: str
    text: str


@dataclass(frozen=True)
class IndexPage:
    entry_name: str
    text: str
    placeholders: list[Placeholder]


class ContainerIndexBuilder:
    """Render container outlines and the top-level vault index."""

    def __init__(
        self,
        outline_config: OutlineConfig,
        convert_config: ConvertConfig,
        entry_filter: EntryFilter,
    ) -> None:
        self._outline = outline_config
        self._convert = convert_config
        self._filter = entry_filter

    def heading_level(self, directory: Path, index_root: Path) -> int:
        rel = relative_posix(directory, index_root) or ""
        depth = len([p for p in rel.split("/") if p])
        level = self._outline.base_level + depth - 1
        return max(1, min(level, self._outline.max_heading_level))

    def build_outline(
        self,
        directory: Path,
        index_root: Path,
        export_root: Path,
        *,
        _depth: int = 0,
    ) -> Outline:
        """Outline the contents of *directory* (its own heading excluded)."""
        outline = Outline()
        if _depth >= self._outline.max_depth:
            return outline
        try:
            entries = list_entries(directory)
        except OSError:
            logger.warning("Unreadable directory left out of outline: %s", directory)
            return outline

        visible = [e for e in entries if not self._filter.skips(e)]
        for entry in visible:
            if not entry.is_file or not self._filter.is_document(entry.name):
                continue
            if not self._filter.should_include(entry):
                continue
            link = output_name(entry.path, export_root)
            outline.lines.append(f"- [{PurePath(entry.name).stem}]({link})")
            outline.link_count += 1
        if outline.lines:
            outline.lines.append("")

        for entry in visible:
            if not entry.is_dir or self._filter.is_attachments_dir(entry.name):
                continue
            heading = "#" * self.heading_level(entry.path, index_root)
            outline.lines.extend([f"{heading} {entry.name}", ""])
            outline.extend(
                self.build_outline(entry.path, index_root, export_root, _depth=_depth + 1)
            )
        return outline

    def build_index(
        self, export_root: Path, containers: list[ContainerDescriptor]
    ) -> IndexPage:
        """Render the top-level index enumerating every root container.

        Root containers without any linkable document get a placeholder
        page, linked from the index like any other document.
        """
        title = self._convert.index_title
        lines = [f"# {title}", ""]
        placeholders: list[Placeholder] = []

        for container in containers:
            heading = "#" * self.heading_level(container.source_path, export_root)
            lines.extend([f"{heading} {container.name}", ""])
            outline = self.build_outline(container.source_path, export_root, export_root)
            if outline.link_count == 0:
                placeholder = self.placeholder_for(container, export_root)
                placeholders.append(placeholder)
                lines.extend([f"- [{container.name}]({placeholder.entry_name})", ""])
            lines.extend(outline.lines)

        if not containers:
            lines.extend(["*No root folders found.*", ""])

        header = CommentedMap()
        header["type"] = DocumentRole.SET.value
        header["name"] = title
        body = "\n".join(lines).rstrip("\n") + "\n"
        return IndexPage(
            entry_name=self._convert.index_name,
            text=render_frontmatter(header, body),
            placeholders=placeholders,
        )

    def placeholder_for(self, container: ContainerDescriptor, export_root: Path) -> Placeholder:
        name = container.name
        entry_name = output_name(container.source_path / f"{name}.md", export_root)
        header = CommentedMap()
        header["type"] = DocumentRole.SET_LEAF.value
        header["set"] = name
        body = f"# {name}\n\nThis is the root folder: **{name}**\n"
        return Placeholder(
            container=name,
            entry_name=entry_name,
            text=render_frontmatter(header, body),
        )
