"""Tests for the resolve CLI command."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path

import pytest
from click.testing import CliRunner

from vaultport.cli import cli


@pytest.fixture
def vault(make_vault: Callable[..., Path]) -> Path:
    return make_vault({"A/B/x.md": "", "A/Draft Plan.md": ""})


@pytest.mark.usefixtures("_isolated_cwd")
class TestResolveCommand:
    def test_human_output(self, cli_runner: CliRunner, vault: Path) -> None:
        result = cli_runner.invoke(cli, ["resolve", str(vault), "A/B/x.md", "Draft Plan|Plan"])
        assert result.exit_code == 0
        assert "top_level" in result.stdout
        assert "[Plan](A/Draft_Plan.md)" in result.stdout

    def test_json_output(self, cli_runner: CliRunner, vault: Path) -> None:
        result = cli_runner.invoke(
            cli, ["--json", "resolve", str(vault), "A/B/x.md", "[[Draft Plan]]"]
        )
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["op"] == "resolve"
        assert data["data"]["found"] is True
        assert data["data"]["target"] == "A/Draft Plan.md"

    def test_unresolved_warns_on_stderr(self, cli_runner: CliRunner, vault: Path) -> None:
        result = cli_runner.invoke(cli, ["resolve", str(vault), "A/B/x.md", "Ghost"])
        assert result.exit_code == 0
        assert "WARNING: Unresolved reference: Ghost.md" in result.stderr

    def test_document_outside_vault(self, cli_runner: CliRunner, vault: Path) -> None:
        result = cli_runner.invoke(cli, ["resolve", str(vault), "../x.md", "Ghost"])
        assert result.exit_code == 1
        assert "DOCUMENT_NOT_FOUND" in result.stderr

    def test_unparseable_reference(self, cli_runner: CliRunner, vault: Path) -> None:
        result = cli_runner.invoke(cli, ["resolve", str(vault), "A/B/x.md", "a]b"])
        assert result.exit_code == 1
        assert result.exception is None or isinstance(result.exception, SystemExit)
        assert "INVALID_REFERENCE" in result.stderr

    def test_missing_arguments(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["resolve"])
        assert result.exit_code == 2
