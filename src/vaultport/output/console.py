"""Rich Console factory and theme for vaultport output.

Consoles render into a StringIO buffer so formatting stays a pure
``ServiceResult -> str`` step. Outside a terminal (tests, pipes) Rich
drops color codes on its own.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

VAULTPORT_THEME = Theme(
    {
        "vp.ok": "bold green",
        "vp.error": "bold red",
        "vp.warning": "bold yellow",
        "vp.op": "bold cyan",
        "vp.key": "dim",
        "vp.path": "blue",
        "vp.count": "magenta",
        "vp.role.page": "green",
        "vp.role.setleaf": "cyan",
    }
)

_ROLE_STYLES: dict[str, str] = {
    "Page": "vp.role.page",
    "SetLeaf": "vp.role.setleaf",
}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer."""
    return Console(
        file=StringIO(),
        theme=VAULTPORT_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_role(role: str) -> str:
    return _ROLE_STYLES.get(role, "")
