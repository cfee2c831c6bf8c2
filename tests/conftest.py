"""Shared pytest fixtures and test helpers for vaultport tests."""

from __future__ import annotations

import zipfile
from collections.abc import Callable
from pathlib import Path

import pytest
from click.testing import CliRunner

from vaultport.config.models import VaultportConfig
from vaultport.services.convert import ConvertService
from vaultport.services.result import ServiceResult

# relative path -> file content (str or bytes); None creates a directory
Layout = dict[str, str | bytes | None]


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def vault_root(tmp_path: Path) -> Path:
    """Empty vault directory, separate from where archives are written."""
    root = tmp_path / "vault"
    root.mkdir()
    return root


@pytest.fixture
def make_vault(vault_root: Path) -> Callable[[Layout], Path]:
    """Populate the vault from a ``{relative path: content}`` layout."""

    def build(layout: Layout) -> Path:
        for rel, content in layout.items():
            path = vault_root / rel
            if content is None:
                path.mkdir(parents=True, exist_ok=True)
                continue
            path.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                path.write_bytes(content)
            else:
                path.write_text(content, encoding="utf-8")
        return vault_root

    return build


@pytest.fixture
def _isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run from a temp directory with no vaultport.toml or env overrides."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("VAULTPORT_CONFIG", raising=False)


# ---------------------------------------------------------------------------
# Shared test helpers (used across service and command test modules)
# ---------------------------------------------------------------------------


def read_archive(path: Path) -> dict[str, str]:
    """Map every archive entry name to its text (UTF-8, replaced)."""
    with zipfile.ZipFile(path) as zf:
        return {
            name: zf.read(name).decode("utf-8", errors="replace") for name in zf.namelist()
        }


def run_convert(
    vault: Path,
    output: Path,
    config: VaultportConfig | None = None,
) -> tuple[ServiceResult, dict[str, str]]:
    """Convert *vault* into *output*, asserting success; return result and entries."""
    result = ConvertService(config).convert(vault, output)
    assert result.ok, result.error
    return result, read_archive(output)
