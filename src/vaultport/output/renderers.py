"""Operation-specific Rich renderers for ServiceResult.

Renderers are dispatched by ``result.op``; unknown ops fall back to a
key-value listing.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from vaultport.output.console import create_console, get_output, style_for_role

if TYPE_CHECKING:
    from rich.console import Console

    from vaultport.services.result import ServiceResult

# Unresolved references listed before truncating (non-verbose).
_UNRESOLVED_PREVIEW = 10


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich."""
    console = create_console()
    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)
    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} - {msg}"
    if result.op == "convert":
        return str(result.data.get("output_path", ""))
    if result.op == "resolve":
        return str(result.data.get("rewritten", ""))
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text("OK", style="vp.ok"), Text(f"  {result.op}", style="vp.op"))


def _field(console: Console, key: str, value: Any) -> None:
    style = "vp.path" if key.endswith(("path", "entry", "target")) else ""
    console.print(Text.assemble((f"  {key}: ", "vp.key"), (str(value), style)))


def _render_meta(console: Console, result: ServiceResult) -> None:
    if not result.meta:
        return
    console.print(Text("  meta:", style="dim"))
    for key, value in result.meta.items():
        console.print(Text(f"    {key}: {value}"))


# ── Renderers ─────────────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)
    if verbose:
        _render_meta(console, result)


def _render_convert(result: ServiceResult, console: Console, *, verbose: bool) -> None:
    data = result.data
    _status_line(console, result)
    _field(console, "vault_path", data.get("vault_path", ""))
    _field(console, "output_path", data.get("output_path", ""))

    table = Table(show_header=True, header_style="bold", box=None, padding=(0, 2))
    table.add_column("item")
    table.add_column("count", justify="right", style="vp.count")
    for key in (
        "containers",
        "folders",
        "documents",
        "attachments",
        "placeholders",
        "excluded",
        "skipped",
        "resolved",
        "unresolved_count",
    ):
        table.add_row(key.replace("_count", ""), str(data.get(key, 0)))
    table.add_row("archive bytes", f"{data.get('archive_bytes', 0):,}")
    console.print(table)

    unresolved: list[dict[str, str]] = data.get("unresolved", [])
    if unresolved:
        shown = unresolved if verbose else unresolved[:_UNRESOLVED_PREVIEW]
        console.print(Text("  unresolved references:", style="vp.warning"))
        for item in shown:
            console.print(Text(f"    {item['document']}: {item['reference']}"))
        if len(shown) < len(unresolved):
            console.print(Text(f"    … {len(unresolved) - len(shown)} more (use -v)"))
    if verbose:
        _render_meta(console, result)


def _render_resolve(result: ServiceResult, console: Console, *, verbose: bool) -> None:
    data = result.data
    _status_line(console, result)
    role = str(data.get("role", ""))
    console.print(Text.assemble(("  role: ", "vp.key"), (role, style_for_role(role))))
    for key in ("set", "found", "strategy", "target", "rewritten"):
        if data.get(key) is not None:
            _field(console, key, data[key])


def _render_error(result: ServiceResult, console: Console, *, verbose: bool) -> None:
    err = result.error
    code = err.code if err else "UNKNOWN"
    message = err.message if err else "Unknown error"
    console.print(
        Text("ERROR", style="vp.error"),
        Text(f"  {result.op}", style="vp.op"),
        Text(f"  [{code}] {message}"),
    )
    if verbose and err and err.detail:
        for key, value in err.detail.items():
            _field(console, key, value)


_OP_RENDERERS: dict[str, Callable[..., None]] = {
    "convert": _render_convert,
    "resolve": _render_resolve,
}
