"""ConvertService — walk a vault once and write the flattened archive.

Traversal is single-threaded and depth-first. Within each directory files
are handled before subdirectories, both in name order, so an unchanged
tree always produces the same archive.

Error policy:
- Missing or unreadable export root → fatal, nothing is written.
- Unreadable file/directory, broken reference, name collision → warning,
  the entry is skipped (or the link is kept best-effort) and the run goes on.
- Archive writer failure → fatal; the partial archive is removed.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from vaultport.config.models import VaultportConfig
from vaultport.domain.exclusion import is_hidden
from vaultport.domain.frontmatter import merge_metadata, split_header
from vaultport.domain.paths import output_name, path_key, relative_posix
from vaultport.domain.tags import extract_tags
from vaultport.domain.types import VaultEntry
from vaultport.infrastructure.archive import ArchiveError, ArchiveWriter
from vaultport.infrastructure.filesystem import list_entries, read_bytes, read_text
from vaultport.services.base import BaseService
from vaultport.services.filters import EntryFilter
from vaultport.services.hierarchy import HierarchyClassifier
from vaultport.services.outline import ContainerIndexBuilder
from vaultport.services.resolve import ReferenceResolver
from vaultport.services.result import ServiceResult
from vaultport.services.rewrite import DocumentRewriter
from vaultport.services.state import RunState

DEFAULT_VAULT_PATH = Path("./vault")
DEFAULT_OUTPUT_PATH = Path("./anytype_export.zip")


@dataclass
class _Run:
    """Per-invocation handles threaded through the traversal."""

    export_root: Path
    archive: ArchiveWriter
    output_key: str
    warnings: list[str]


class ConvertService(BaseService):
    """Convert a vault directory into a zip of sets and pages."""

    def __init__(
        self,
        config: VaultportConfig | None = None,
        state: RunState | None = None,
    ) -> None:
        super().__init__(config, state)
        self.filter = EntryFilter(self._config, self._state)
        self.classifier = HierarchyClassifier(self.filter, self._state)
        self.resolver = ReferenceResolver(self._config.resolver, self.filter, self._state)
        self.rewriter = DocumentRewriter(self.resolver)
        self.index_builder = ContainerIndexBuilder(
            self._config.outline, self._config.convert, self.filter
        )

    # ── Public API ────────────────────────────────────────────────────

    def convert(
        self,
        vault_path: Path = DEFAULT_VAULT_PATH,
        output_path: Path = DEFAULT_OUTPUT_PATH,
    ) -> ServiceResult:
        """Convert *vault_path* (the export root) into the archive at *output_path*."""
        op = "convert"
        started = time.perf_counter()
        export_root = vault_path.absolute()

        if not export_root.exists():
            return ServiceResult.failure(
                op,
                "VAULT_NOT_FOUND",
                f"Vault path does not exist: {vault_path}",
                vault_path=str(vault_path),
            )
        if not export_root.is_dir():
            return ServiceResult.failure(
                op,
                "NOT_A_DIRECTORY",
                f"Vault path is not a directory: {vault_path}",
                vault_path=str(vault_path),
            )
        try:
            containers = self.classifier.root_containers(export_root)
        except OSError as exc:
            return ServiceResult.failure(
                op,
                "VAULT_UNREADABLE",
                f"Cannot read vault directory: {exc}",
                vault_path=str(vault_path),
            )

        self._log.info(
            "convert.start",
            vault=str(export_root),
            output=str(output_path),
            root_containers=[c.name for c in containers],
        )
        index = self.index_builder.build_index(export_root, containers)
        warnings: list[str] = []
        archive = ArchiveWriter(
            output_path, compression_level=self._config.convert.compression_level
        )
        try:
            with archive:
                run = _Run(
                    export_root=export_root,
                    archive=archive,
                    output_key=path_key(output_path),
                    warnings=warnings,
                )
                self._write(run, index.entry_name, index.text, kind="index")
                for placeholder in index.placeholders:
                    written = self._write(
                        run, placeholder.entry_name, placeholder.text, kind="placeholder"
                    )
                    if written:
                        self._state.counts["placeholders"] += 1
                self._process_directory(run, export_root)
        except ArchiveError as exc:
            if output_path.is_file():
                output_path.unlink()
            self._log.error("convert.archive_failed", error=str(exc))
            return ServiceResult.failure(
                op,
                "ARCHIVE_WRITE_FAILED",
                str(exc),
                output_path=str(output_path),
            )

        counts = self._state.counts
        data: dict[str, Any] = {
            "vault_path": str(export_root),
            "output_path": str(output_path),
            "index_entry": index.entry_name,
            "containers": len(containers),
            "folders": counts["folders"],
            "documents": counts["documents"],
            "attachments": counts["attachments"],
            "placeholders": counts["placeholders"],
            "excluded": counts["excluded"],
            "skipped": counts["skipped"],
            "resolved": counts["resolved"],
            "unresolved_count": counts["unresolved"],
            "unresolved": list(self._state.unresolved),
            "archive_bytes": archive.size,
        }
        self._log.info(
            "convert.complete",
            documents=data["documents"],
            attachments=data["attachments"],
            unresolved=data["unresolved_count"],
            archive_bytes=archive.size,
        )
        return ServiceResult(
            ok=True,
            op=op,
            data=data,
            warnings=warnings,
            meta={"duration_ms": round((time.perf_counter() - started) * 1000, 2)},
        )

    # ── Traversal ─────────────────────────────────────────────────────

    def _process_directory(self, run: _Run, directory: Path) -> None:
        try:
            entries = list_entries(directory)
        except OSError as exc:
            self._state.counts["skipped"] += 1
            self._warn(
                run.warnings,
                "Unreadable directory skipped",
                path=str(directory),
                error=str(exc),
            )
            return

        if directory != run.export_root:
            self._state.counts["folders"] += 1
            descriptor = self.classifier.classify_directory(directory, run.export_root)
            self._log.debug(
                "folder.enter",
                path=descriptor.relative_path_in_output,
                set=descriptor.owning_root_container,
            )

        kept: list[VaultEntry] = []
        for entry in entries:
            if is_hidden(entry.name) or path_key(entry.path) == run.output_key:
                continue
            if self.filter.is_excluded(entry):
                self._state.counts["excluded"] += 1
                self._log.debug("entry.excluded", path=str(entry.path))
                continue
            kept.append(entry)

        for entry in kept:
            if entry.is_file and self.filter.should_include(entry):
                self._process_file(run, entry)
        for entry in kept:
            if entry.is_dir:
                self._process_directory(run, entry.path)

    def _process_file(self, run: _Run, entry: VaultEntry) -> None:
        name = output_name(entry.path, run.export_root)
        try:
            if self.filter.is_document(entry.name):
                payload: bytes | str = self._convert_document(run, entry)
                kind = "document"
            else:
                payload = read_bytes(entry.path)
                kind = "attachment"
        except OSError as exc:
            self._state.counts["skipped"] += 1
            self._warn(
                run.warnings,
                "Unreadable file skipped",
                path=str(entry.path),
                error=str(exc),
            )
            return
        if self._write(run, name, payload, kind=kind):
            self._state.counts[f"{kind}s"] += 1

    def _convert_document(self, run: _Run, entry: VaultEntry) -> str:
        """Rewrite links and merge metadata for one document."""
        content = read_text(entry.path)
        header_text, body = split_header(content)

        outcome = self.rewriter.rewrite(body, entry.path, run.export_root)
        self._state.counts["resolved"] += outcome.resolved
        document = relative_posix(entry.path, run.export_root) or entry.name
        for reference in outcome.unresolved:
            self._state.record_unresolved(document, reference)

        role, owner = self.classifier.classify_document(entry.path, run.export_root)
        tags = extract_tags(body)
        if header_text is not None:
            content = f"---\n{header_text}\n---\n{outcome.text}"
        else:
            content = outcome.text
        return merge_metadata(content, role.value, owner, tags)

    def _write(self, run: _Run, name: str, payload: bytes | str, *, kind: str) -> bool:
        """Append one entry unless its name was already written."""
        if name in self._state.written:
            self._state.counts["skipped"] += 1
            self._warn(run.warnings, "Duplicate archive entry skipped", entry=name, kind=kind)
            return False
        run.archive.append(name, payload)
        self._state.written.add(name)
        self._log.debug(f"{kind}.written", entry=name)
        return True
