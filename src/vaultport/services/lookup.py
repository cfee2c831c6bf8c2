"""LookupService — resolve a single reference the way a conversion would.

Diagnostic companion to :class:`~vaultport.services.convert.ConvertService`:
reports which strategy matched and the exact link the converter would
emit, without writing an archive.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from vaultport.domain.links import REFERENCE_PATTERN, match_reference
from vaultport.domain.paths import relative_posix
from vaultport.services.base import BaseService
from vaultport.services.filters import EntryFilter
from vaultport.services.hierarchy import HierarchyClassifier
from vaultport.services.resolve import ReferenceResolver
from vaultport.services.result import ServiceResult
from vaultport.services.rewrite import DocumentRewriter


class LookupService(BaseService):
    """Resolve one reference as seen from one document."""

    def lookup(self, vault_path: Path, document: str, reference: str) -> ServiceResult:
        """Resolve *reference* (markup or a bare note name) from *document*.

        *document* is relative to *vault_path*; it need not exist, only its
        folder matters for resolution.
        """
        op = "resolve"
        export_root = vault_path.absolute()
        if not export_root.is_dir():
            return ServiceResult.failure(
                op,
                "VAULT_NOT_FOUND",
                f"Vault path is not a directory: {vault_path}",
                vault_path=str(vault_path),
            )

        document_path = export_root / document
        if relative_posix(document_path, export_root) is None:
            return ServiceResult.failure(
                op,
                "DOCUMENT_NOT_FOUND",
                f"Document is outside the vault: {document}",
                document=document,
            )

        markup = reference if REFERENCE_PATTERN.search(reference) else f"[[{reference}]]"
        match = REFERENCE_PATTERN.search(markup)
        if match is None:
            return ServiceResult.failure(
                op,
                "INVALID_REFERENCE",
                f"Not a link or note name: {reference}",
                reference=reference,
            )

        entry_filter = EntryFilter(self._config, self._state)
        resolver = ReferenceResolver(self._config.resolver, entry_filter, self._state)
        rendered = DocumentRewriter(resolver).render(
            match_reference(match), document_path, export_root
        )
        role, owner = HierarchyClassifier(entry_filter, self._state).classify_document(
            document_path, export_root
        )

        data: dict[str, Any] = {
            "document": document,
            "reference": reference,
            "role": role.value,
            "set": owner,
        }
        warnings: list[str] = []
        if rendered.resolution is None:
            data.update({"found": False, "rewritten": match.group(0), "strategy": None})
            warnings.append("Reference is external or not a file link; left unchanged")
        else:
            resolution = rendered.resolution
            target = resolution.target_path
            data.update(
                {
                    "found": resolution.found,
                    "strategy": resolution.strategy,
                    "target": relative_posix(target, export_root) if target else None,
                    "rewritten": rendered.text,
                }
            )
            if not resolution.found:
                warnings.append(f"Unresolved reference: {resolution.original_text}")
        return ServiceResult(ok=True, op=op, data=data, warnings=warnings)
