"""Command: explain how one reference resolves."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from vaultport.commands._base import VaultportCommand

if TYPE_CHECKING:
    from vaultport.commands._context import AppContext


@click.command(
    cls=VaultportCommand,
    examples="""\
  vaultport resolve ~/Notes Projects/plan.md "Meeting Notes"
  vaultport resolve ~/Notes Projects/plan.md "![[diagram.png]]"
  vaultport resolve ~/Notes index.md "[paper](docs/paper.pdf)"
  vaultport --json resolve ~/Notes Projects/plan.md '[[Roadmap|the roadmap]]'""",
)
@click.argument("vault_path", type=click.Path(path_type=Path))
@click.argument("document")
@click.argument("reference")
@click.pass_obj
def resolve(app: AppContext, vault_path: Path, document: str, reference: str) -> None:
    """Resolve REFERENCE as written in DOCUMENT (relative to VAULT_PATH).

    REFERENCE is link markup or a bare note name. Reports the lookup
    strategy that matched and the link a conversion would emit.
    """
    from vaultport.services.lookup import LookupService

    svc = LookupService(app.config_for(vault_path))
    app.emit(svc.lookup(vault_path, document, reference))
