"""AppContext — shared Click context for all commands.

Created once by the root CLI group and passed to subcommands via
``@click.pass_obj``. Owns logging setup, per-vault config discovery and
result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from vaultport.config.logging import configure_logging
from vaultport.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from pathlib import Path

    from vaultport.config.models import VaultportConfig
    from vaultport.config.settings import VaultportSettings
    from vaultport.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy."""

    def __init__(self, settings: VaultportSettings, *, explicit_config: bool = False) -> None:
        self.settings = settings
        self.explicit_config = explicit_config
        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    def config_for(self, vault_path: Path) -> VaultportConfig:
        """Conversion config for *vault_path*.

        Without ``--config``, ``vaultport.toml`` is looked up from the vault
        directory upward, so a vault can carry its own settings.
        """
        if self.explicit_config or not vault_path.is_dir():
            return self.settings.to_config()

        from vaultport.config.settings import VaultportSettings

        return VaultportSettings.from_cli(search_from=vault_path).to_config()

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success: stdout, warnings on stderr (outside JSON mode).
        * Failure: stderr, exit code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if not result.ok:
            click.echo(output, err=True)
            raise SystemExit(1)

        click.echo(output)
        if not settings.json_output:
            for warning in result.warnings:
                click.echo(f"WARNING: {warning}", err=True)
