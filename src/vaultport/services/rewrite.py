"""Document rewriter — turn wiki links, embeds and local links into standard links.

Only non-literal spans are rewritten; fenced blocks and inline code are
copied through untouched. Each construct is resolved through the
:class:`~vaultport.services.resolve.ReferenceResolver`:

- ``[[Name]]`` / ``[[Name|Alias]]`` → ``[Alias](path)``
- ``![[file.png]]``                 → ``![file](path)``
- ``![alt](path)``                  → ``![alt](resolved path)``
- ``[text](file.ext)``              → ``[text](resolved path)``

URLs, data URIs and in-page anchors are left alone, as are markdown links
whose target has no recognized file extension.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import TYPE_CHECKING

from vaultport.domain.links import (
    REFERENCE_PATTERN,
    ReferenceMatch,
    candidate_filename,
    has_known_extension,
    is_external,
    match_reference,
    parse_markdown_target,
    repair_suffix,
    strip_anchor,
)
from vaultport.domain.tags import partition_literal_spans
from vaultport.domain.types import ReferenceKind, ResolvedReference

if TYPE_CHECKING:
    from vaultport.services.resolve import ReferenceResolver


@dataclass
class RewriteOutcome:
    """Rewritten text plus per-document resolution tallies."""

    text: str
    resolved: int = 0
    unresolved: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class RenderedReference:
    text: str
    resolution: ResolvedReference | None = None  # None when left untouched


class DocumentRewriter:
    """Rewrite link constructs in a document body."""

    def __init__(self, resolver: ReferenceResolver) -> None:
        self._resolver = resolver

    def rewrite(self, body: str, document: Path, export_root: Path) -> RewriteOutcome:
        outcome = RewriteOutcome(text="")

        def replace(match: re.Match[str]) -> str:
            rendered = self.render(match_reference(match), document, export_root)
            if rendered.resolution is None:
                return match.group(0)
            if rendered.resolution.found:
                outcome.resolved += 1
            else:
                outcome.unresolved.append(rendered.resolution.original_text)
            return rendered.text

        parts: list[str] = []
        for span in partition_literal_spans(body):
            if span.literal:
                parts.append(span.text)
            else:
                parts.append(REFERENCE_PATTERN.sub(replace, span.text))
        outcome.text = "".join(parts)
        return outcome

    def render(
        self, ref: ReferenceMatch, document: Path, export_root: Path
    ) -> RenderedReference:
        """Render one construct; ``resolution`` is None when it is kept verbatim."""
        if ref.kind in (ReferenceKind.NOTE, ReferenceKind.EMBED):
            key = strip_anchor(ref.target)
            if not key:
                return RenderedReference(text="")
            lookup = candidate_filename(repair_suffix(key))
        else:
            if is_external(ref.target):
                return RenderedReference(text="")
            path = repair_suffix(parse_markdown_target(ref.target))
            if ref.kind is ReferenceKind.LINK and not has_known_extension(path):
                return RenderedReference(text="")
            lookup = path

        resolution = self._resolver.resolve(lookup, document, export_root)
        link = self._resolver.link_for(resolution, document, export_root)

        match ref.kind:
            case ReferenceKind.NOTE:
                text = f"[{ref.display or ref.target}]({link})"
            case ReferenceKind.EMBED:
                name = PurePosixPath(key.replace("\\", "/")).name
                alt = PurePosixPath(name).stem if resolution.found else name
                text = f"![{alt}]({link})"
            case ReferenceKind.IMAGE:
                text = f"![{ref.display or ''}]({link})"
            case _:
                text = f"[{ref.display or ''}]({link})"
        return RenderedReference(text=text, resolution=resolution)
