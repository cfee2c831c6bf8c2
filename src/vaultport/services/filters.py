"""Entry filter — applies exclusion rules to live directory entries.

Name-based rules come from :mod:`vaultport.domain.exclusion`; the
declared-status rule needs to read a document's header, so results are
memoized in the run state.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from vaultport.domain import exclusion
from vaultport.domain.frontmatter import parse_frontmatter
from vaultport.domain.paths import path_key
from vaultport.infrastructure.filesystem import read_text

if TYPE_CHECKING:
    from vaultport.config.models import VaultportConfig
    from vaultport.domain.types import VaultEntry
    from vaultport.services.state import RunState

logger = logging.getLogger(__name__)


class EntryFilter:
    """Decide which vault entries take part in a run."""

    def __init__(self, config: VaultportConfig, state: RunState) -> None:
        self._config = config
        self._state = state

    def is_document(self, name: str) -> bool:
        return exclusion.is_document(name, self._config.convert.document_extensions)

    def is_attachments_dir(self, name: str) -> bool:
        resolver = self._config.resolver
        return exclusion.is_attachments_dir(
            name, resolver.attachment_dir_names, resolver.attachment_dir_prefixes
        )

    def is_excluded(self, entry: VaultEntry) -> bool:
        """True for deletion-marked names, non-content folders, deleted documents."""
        rules = self._config.exclusion
        if exclusion.has_exclusion_marker(entry.name, rules.markers):
            return True
        if entry.is_dir:
            return exclusion.is_skip_dir(entry.name, rules.skip_dirs)
        if self.is_document(entry.name):
            return self._declares_deleted(entry)
        return False

    def should_include(self, entry: VaultEntry) -> bool:
        """True when a non-excluded file belongs in the archive."""
        return exclusion.should_include_file(
            entry.name,
            deny_names=self._config.exclusion.deny_names,
            document_extensions=self._config.convert.document_extensions,
        )

    def skips(self, entry: VaultEntry) -> bool:
        """Traversal/search predicate: hidden or excluded entries are skipped."""
        return exclusion.is_hidden(entry.name) or self.is_excluded(entry)

    def _declares_deleted(self, entry: VaultEntry) -> bool:
        key = path_key(entry.path)
        cached = self._state.declared_deleted.get(key)
        if cached is not None:
            return cached
        try:
            header, _body = parse_frontmatter(read_text(entry.path))
        except OSError:
            logger.debug("Header unreadable, treating as not deleted: %s", entry.path)
            header = None
        deleted = header is not None and exclusion.declares_deleted(header)
        self._state.declared_deleted[key] = deleted
        return deleted
