"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO). Renderers
are dispatched by ``result.op`` in :func:`render_result`; unknown ops
fall through to a generic key-value renderer.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from sankeyctl.output.console import create_console, get_output, style_for_category

if TYPE_CHECKING:
    from rich.console import Console

    from sankeyctl.services.result import ServiceResult


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
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    if "content" in result.data:
        return str(result.data["content"]).rstrip("\n")

    nodes = result.data.get("nodes")
    if nodes and isinstance(nodes, list):
        return "\n".join(str(n.get("name", "")) for n in nodes)

    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text("OK", style="sk.ok"), Text(f"  {result.op}", style="sk.op"))


def _field(console: Console, key: str, value: Any) -> None:
    console.print(Text.assemble((f"  {key}: ", "sk.key"), str(value)))


def _num(value: Any) -> str:
    return f"{value:,.0f}" if isinstance(value, int | float) else str(value)


def _px(value: Any) -> str:
    return f"{value:.1f}" if isinstance(value, int | float) else str(value)


def _render_counts(console: Console, result: ServiceResult) -> None:
    _status_line(console, result)
    for key in ("node_count", "link_count"):
        if key in result.data:
            _field(console, key, result.data[key])
    if result.meta and "source" in result.meta:
        _field(console, "source", result.meta["source"])


def _render_meta(console: Console, result: ServiceResult) -> None:
    if not result.meta:
        return
    console.print(Text("  meta:", style="dim"))
    for k, v in result.meta.items():
        console.print(f"    {k}: {v}", markup=False)


# ── Operation renderers ───────────────────────────────────────────────


def _render_build(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _render_counts(console, result)

    nodes = Table(title="Nodes", title_justify="left")
    nodes.add_column("Name", style="sk.id")
    nodes.add_column("Category")
    nodes.add_column("Title", style="sk.title")
    nodes.add_column("Value", justify="right", style="sk.value")
    for n in result.data.get("nodes", []):
        nodes.add_row(
            n["name"],
            Text(n["category"], style=style_for_category(n["category"])),
            Text(n["title"]),
            _num(n["value"]),
        )
    console.print(nodes)

    links = Table(title="Links", title_justify="left")
    links.add_column("Source", style="sk.id")
    links.add_column("Target", style="sk.id")
    links.add_column("Value", justify="right", style="sk.value")
    for lk in result.data.get("links", []):
        links.add_row(lk["source"], lk["target"], _num(lk["value"]))
    console.print(links)

    if verbose:
        _render_meta(console, result)


def _render_layout(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _render_counts(console, result)

    nodes = Table(title="Nodes", title_justify="left")
    nodes.add_column("Name", style="sk.id")
    nodes.add_column("Title", style="sk.title")
    nodes.add_column("Value", justify="right", style="sk.value")
    for col in ("x0", "x1", "y0", "y1"):
        nodes.add_column(col, justify="right")
    for n in result.data.get("nodes", []):
        nodes.add_row(
            Text(n["name"], style=style_for_category(n["category"])),
            Text(n["title"]),
            _num(n["value"]),
            *(_px(n[col]) for col in ("x0", "x1", "y0", "y1")),
        )
    console.print(nodes)

    links = Table(title="Links", title_justify="left")
    links.add_column("#", justify="right")
    links.add_column("Source", style="sk.id")
    links.add_column("Target", style="sk.id")
    links.add_column("Value", justify="right", style="sk.value")
    links.add_column("Width", justify="right")
    for lk in result.data.get("links", []):
        links.add_row(
            str(lk["index"]),
            lk["source"],
            lk["target"],
            _num(lk["value"]),
            _px(lk["stroke_width"]),
        )
    console.print(links)

    if verbose:
        _render_meta(console, result)


def _render_export(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    console.print(str(result.data.get("content", "")), markup=False, emoji=False, end="", soft_wrap=True)


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)
    if verbose:
        _render_meta(console, result)


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    msg = result.error.message if result.error else "Unknown error"
    console.print(
        Text("ERROR", style="sk.error"),
        Text(f"  {result.op}", style="sk.op"),
        Text(f" — {msg}"),
    )
    if result.error is None:
        return
    _field(console, "code", result.error.code)
    if verbose:
        for key, value in result.error.detail.items():
            _field(console, key, value)


_OP_RENDERERS: dict[str, Callable[..., None]] = {
    "build_graph": _render_build,
    "layout_graph": _render_layout,
    "export_graph": _render_export,
}
