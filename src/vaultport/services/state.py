"""Per-run mutable state shared by the conversion components.

One :class:`RunState` is created by the orchestrator for each conversion
and passed by reference to the classifier, filter and resolver. The memo
maps are purely additive and keyed by canonical path keys.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field

from vaultport.domain.types import ContainerDescriptor, ResolvedReference


@dataclass
class RunState:
    """Caches and tallies for one conversion run."""

    # (directory key, export root key) -> classification
    containers: dict[tuple[str, str], ContainerDescriptor] = field(default_factory=dict)
    # (document dir key, export root key, lookup target lower) -> resolution
    resolutions: dict[tuple[str, str, str], ResolvedReference] = field(default_factory=dict)
    # document path key -> header declares deleted/trashed
    declared_deleted: dict[str, bool] = field(default_factory=dict)
    # archive entry names already written
    written: set[str] = field(default_factory=set)
    unresolved: list[dict[str, str]] = field(default_factory=list)
    counts: Counter[str] = field(default_factory=Counter)

    def record_unresolved(self, document: str, reference: str) -> None:
        self.unresolved.append({"document": document, "reference": reference})
        self.counts["unresolved"] += 1
