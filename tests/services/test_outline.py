"""Tests for container outlines, the vault index and placeholders."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from vaultport.config.models import OutlineConfig, VaultportConfig
from vaultport.domain.frontmatter import parse_frontmatter
from vaultport.services.filters import EntryFilter
from vaultport.services.hierarchy import HierarchyClassifier
from vaultport.services.outline import ContainerIndexBuilder, IndexPage
from vaultport.services.state import RunState


def _index(root: Path, config: VaultportConfig | None = None) -> IndexPage:
    config = config or VaultportConfig()
    state = RunState()
    entry_filter = EntryFilter(config, state)
    builder = ContainerIndexBuilder(config.outline, config.convert, entry_filter)
    containers = HierarchyClassifier(entry_filter, state).root_containers(root)
    return builder.build_index(root, containers)


class TestIndex:
    def test_nested_outline(self, make_vault: Callable[..., Path]) -> None:
        root = make_vault(
            {
                "Notes/Note1.md": "",
                "Notes/Sub Folder/Deep.md": "",
                "Notes/pic.png": b"",
                "Notes/attachments/a.md": "",
            }
        )
        index = _index(root)
        header, body = parse_frontmatter(index.text)
        assert index.entry_name == "vault.set.md"
        assert header == {"type": "Set", "name": "vault"}
        assert body == (
            "# vault\n"
            "\n"
            "## Notes\n"
            "\n"
            "- [Note1](Notes/Note1.md)\n"
            "\n"
            "### Sub Folder\n"
            "\n"
            "- [Deep](Notes/Sub_Folder/Deep.md)\n"
        )
        assert index.placeholders == []

    def test_root_documents_and_attachments_not_listed(
        self, make_vault: Callable[..., Path]
    ) -> None:
        root = make_vault({"loose.md": "", "attachments/a.md": "", "Notes/n.md": ""})
        _, body = parse_frontmatter(_index(root).text)
        assert "loose" not in body
        assert "## attachments" not in body
        assert "## Notes" in body

    def test_excluded_and_hidden_entries_skipped(self, make_vault: Callable[..., Path]) -> None:
        root = make_vault(
            {
                "Notes/keep.md": "",
                "Notes/.draft.md": "",
                "Notes/deleted_old.md": "",
                "Notes/gone.md": "---\ndeleted: true\n---\n",
                "Notes/Trash/t.md": "",
            }
        )
        _, body = parse_frontmatter(_index(root).text)
        assert "keep" in body
        for name in ("draft", "deleted_old", "gone", "Trash"):
            assert name not in body

    def test_empty_vault(self, vault_root: Path) -> None:
        _, body = parse_frontmatter(_index(vault_root).text)
        assert body == "# vault\n\n*No root folders found.*\n"

    def test_heading_level_capped(self, make_vault: Callable[..., Path]) -> None:
        root = make_vault({"A/b/c/d/e/f/g/x.md": ""})
        _, body = parse_frontmatter(_index(root).text)
        assert "\n###### f\n" in body
        assert "\n###### g\n" in body
        assert "#######" not in body

    def test_outline_depth_limit(self, make_vault: Callable[..., Path]) -> None:
        root = make_vault({"A/b/c/x.md": ""})
        config = VaultportConfig(outline=OutlineConfig(max_depth=2))
        _, body = parse_frontmatter(_index(root, config).text)
        assert "### b" in body
        assert "#### c" in body
        assert "x.md" not in body


class TestPlaceholders:
    def test_empty_root_container_gets_placeholder(
        self, make_vault: Callable[..., Path]
    ) -> None:
        root = make_vault({"Empty Folder/attachments/pic.png": b"", "Notes/n.md": ""})
        index = _index(root)
        [placeholder] = index.placeholders
        assert placeholder.container == "Empty Folder"
        assert placeholder.entry_name == "Empty_Folder/Empty_Folder.md"
        assert placeholder.text == (
            "---\n"
            "type: SetLeaf\n"
            "set: Empty Folder\n"
            "---\n"
            "\n"
            "# Empty Folder\n"
            "\n"
            "This is the root folder: **Empty Folder**\n"
        )
        assert "- [Empty Folder](Empty_Folder/Empty_Folder.md)" in index.text

    def test_subfolders_without_documents_still_placeholder(
        self, make_vault: Callable[..., Path]
    ) -> None:
        root = make_vault({"Projects/2024": None})
        index = _index(root)
        assert [p.container for p in index.placeholders] == ["Projects"]
        assert "### 2024" in index.text
