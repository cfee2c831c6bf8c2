"""Subcommand modules for vaultport.

register_commands() imports each command lazily so ``vaultport --help``
stays fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Attach every standalone command to the root CLI group."""
    from vaultport.commands.convert import convert
    from vaultport.commands.resolve import resolve

    cli.add_command(convert)
    cli.add_command(resolve)
