"""Command: convert a vault directory into an importable archive."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from vaultport.commands._base import VaultportCommand
from vaultport.services.convert import DEFAULT_OUTPUT_PATH, DEFAULT_VAULT_PATH

if TYPE_CHECKING:
    from vaultport.commands._context import AppContext


@click.command(
    cls=VaultportCommand,
    examples="""\
  vaultport convert
  vaultport convert ~/Notes
  vaultport convert ~/Notes notes.zip
  vaultport --json convert ~/Notes notes.zip
  vaultport -q convert ~/Notes   # prints only the archive path""",
)
@click.argument(
    "vault_path",
    required=False,
    default=str(DEFAULT_VAULT_PATH),
    type=click.Path(path_type=Path),
)
@click.argument(
    "output_path",
    required=False,
    default=str(DEFAULT_OUTPUT_PATH),
    type=click.Path(dir_okay=False, path_type=Path),
)
@click.pass_obj
def convert(app: AppContext, vault_path: Path, output_path: Path) -> None:
    """Convert VAULT_PATH into the zip archive OUTPUT_PATH.

    Top-level folders become sets, notes inside them set leaves, and
    loose notes pages. A ``vault.set.md`` index lists every set.
    """
    from vaultport.services.convert import ConvertService

    svc = ConvertService(app.config_for(vault_path))
    app.emit(svc.convert(vault_path, output_path))
