"""Root CLI group for vaultport with global flags and command registration."""

from __future__ import annotations

import click

from vaultport import __version__
from vaultport.commands import register_commands
from vaultport.commands._base import VaultportGroup
from vaultport.commands._context import AppContext
from vaultport.config.settings import VaultportSettings


@click.group(cls=VaultportGroup, invoke_without_command=True)
@click.version_option(version=__version__, prog_name="vaultport")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug logging.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
) -> None:
    """vaultport — convert a Markdown vault into an Anytype import archive."""
    settings = VaultportSettings.from_cli(
        config_path=config_path,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
    )
    ctx.obj = AppContext(settings, explicit_config=config_path is not None)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
