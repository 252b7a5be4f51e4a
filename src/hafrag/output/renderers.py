"""Operation-specific Rich renderers for ServiceResult.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from hafrag.output.console import create_console, get_output

if TYPE_CHECKING:
    from collections.abc import Callable

    from rich.console import Console

    from hafrag.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


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
    """Render minimal output for ``--quiet`` mode: one path or id per line."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    files = result.data.get("files")
    if isinstance(files, list):
        return "\n".join(str(f.get("path", "")) for f in files)
    items = result.data.get("items")
    if isinstance(items, list):
        return "\n".join(f"{i.get('listening_service')}/{i.get('name')}" for i in items)
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text("OK", style="hafrag.ok"), Text(f"  {result.op}", style="hafrag.op"))


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    style = "hafrag.path" if key in ("path", "source") else ""
    if isinstance(value, (dict, list)):
        value = json.dumps(value, separators=(",", ":"))
    console.print(Text(f"  {key}: ", style="hafrag.key"), Text(str(value), style=style))


# ── Operation renderers ───────────────────────────────────────────────


def _render_assemble(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    d = result.data
    _field(console, "source", d.get("source", ""))
    _field(console, "fragments", d.get("fragment_count", 0))
    _field(console, "collected", d.get("collected", 0))

    table = Table(show_header=True, pad_edge=False, expand=False)
    table.add_column("File", style="hafrag.path", no_wrap=True)
    table.add_column("Fragments", style="hafrag.count", justify="right")
    table.add_column("Written")
    for entry in d.get("files", []):
        table.add_row(
            str(entry.get("path", "")),
            str(entry.get("fragments", 0)),
            "yes" if entry.get("written") else "no",
        )
    console.print(table)

    for entry in d.get("files", []):
        content = entry.get("content")
        if content is not None:
            console.print()
            console.print(Text(f"# {entry.get('path', '')}", style="hafrag.key"))
            console.print(Text(content.rstrip("\n")))


def _render_member_list(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    _status_line(console, result)
    items = result.data.get("items", [])
    if not items:
        _field(console, "count", 0)
        return
    table = Table(show_header=True, pad_edge=False, expand=False)
    table.add_column("Section", style="hafrag.section")
    table.add_column("Member")
    table.add_column("Host", style="dim")
    if verbose:
        table.add_column("Declared", style="dim")
    for item in items:
        row = [item["listening_service"], item["name"], item["host"]]
        if verbose:
            row.append(item["declared_at"])
        table.add_row(*row)
    console.print(table)


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    code = f" [{err.code}]" if err else ""
    console.print(
        Text("ERROR", style="hafrag.error"),
        Text(f"  {result.op}{code}", style="hafrag.op"),
        Text(" — "),
        Text(msg),
        sep="",
    )
    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Callable[..., None]] = {
    "assemble": _render_assemble,
    "list_members": _render_member_list,
}
