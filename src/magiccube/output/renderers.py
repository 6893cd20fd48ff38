"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a StringIO-backed Console. Renderers are dispatched
by ``result.op`` in :func:`render_result`; unknown ops fall through to a
generic key-value renderer.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from magiccube.output.console import cell_style, create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from magiccube.services.result import ServiceResult


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

    data = result.data
    if result.op == "expand":
        return str(data.get("leaf_count", ""))
    if result.op == "project":
        return str(data.get("projected_leaves", ""))
    if "matrix" in data:
        return str(data["matrix"])
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text("OK", style="cube.ok"), Text(f"  {result.op}", style="cube.op"))


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="cube.key")
    if key == "matrix":
        v = Text(str(value), style="cube.matrix")
    elif key.endswith("count") or key.endswith("leaves"):
        v = Text(f"{value:,}" if isinstance(value, int) else str(value), style="cube.count")
    elif isinstance(value, (dict, list)):
        v = Text(json.dumps(value, separators=(",", ":")))
    else:
        v = Text(str(value))
    console.print(Text.assemble(k, v))


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print meta block including the telemetry span tree (verbose only)."""
    if not result.meta:
        return
    console.print()
    console.print(Text("  meta:", style="dim"))
    for k, v in result.meta.items():
        if k == "telemetry":
            _render_telemetry_tree(console, v, indent=4)
        else:
            console.print(f"    {k}: {v}")


def _render_telemetry_tree(console: Console, span_data: dict[str, Any], indent: int = 4) -> None:
    prefix = " " * indent
    name = span_data.get("name", "?")
    duration = span_data.get("duration_ms", 0.0)

    if duration > 1000:
        style = "bold red"
    elif duration > 100:
        style = "yellow"
    else:
        style = "dim"

    line = f"{prefix}[{style}]{duration:>8.2f}ms[/{style}]  {name}"
    rate = span_data.get("leaves_per_s")
    if rate is not None:
        line += f"  [cube.count]{rate:,} leaves/s[/cube.count]"
    annotations = span_data.get("annotations") or {}
    if annotations:
        line += "  (" + ", ".join(f"{k}={v}" for k, v in annotations.items()) + ")"
    console.print(line)

    for child in span_data.get("children", []):
        _render_telemetry_tree(console, child, indent=indent + 4)


def _matrix_table(rows: list[list[int]]) -> Table:
    """Grid view of a (possibly jagged) rule matrix; missing cells are blank."""
    width = max((len(r) for r in rows), default=0)
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("row", style="cube.key", justify="right")
    for j in range(width):
        table.add_column(str(j), justify="right")
    for i, row in enumerate(rows):
        cells = [Text(str(v), style=cell_style(v)) for v in row]
        cells.extend(Text("") for _ in range(width - len(row)))
        table.add_row(str(i), *cells)
    return table


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    console.print(
        Text("ERROR", style="cube.error"),
        Text(f"  {result.op}", style="cube.op"),
        Text(" — "),
        msg,
    )
    if err and err.code == "EXPANSION_TOO_LARGE":
        console.print("  Lower the depth or use a smaller rule matrix.")
    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


# ── Operation renderers ───────────────────────────────────────────────


def _render_expand(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    d = result.data
    for key in ("matrix", "depth", "leaf_count", "sink"):
        if key in d:
            _field(console, key, d[key])
    if "min_scale" in d:
        _field(console, "leaf_scale", d["min_scale"])
    bounds = d.get("bounds")
    if bounds:
        lo = ", ".join(f"{v:g}" for v in bounds["min"])
        hi = ", ".join(f"{v:g}" for v in bounds["max"])
        _field(console, "bounds", f"({lo}) .. ({hi})")
    if verbose:
        for key in ("dimension", "branching_factor", "vertices"):
            if key in d:
                _field(console, key, d[key])
        _render_meta(console, result)


def _render_project(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    d = result.data
    for key in ("matrix", "depth", "branching_factor", "projected_leaves", "leaf_scale"):
        if key in d:
            _field(console, key, d[key])
    if d.get("fits") is False:
        console.print(
            f"  [cube.warning]exceeds ceiling[/cube.warning] of {d.get('max_leaves'):,} leaves"
        )
    if verbose:
        _render_meta(console, result)


def _render_matrix(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    d = result.data
    _field(console, "matrix", d.get("matrix", ""))
    for key in ("dimension", "square", "branching_factor", "depth"):
        if key in d:
            _field(console, key, d[key])
    rows = d.get("rows")
    if rows:
        console.print(_matrix_table(rows))
    if verbose:
        _render_meta(console, result)


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)
    if verbose:
        _render_meta(console, result)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    "expand": _render_expand,
    "project": _render_project,
    "decode_matrix": _render_matrix,
    "encode_matrix": _render_matrix,
    "set_matrix": _render_generic,
    "set_depth": _render_generic,
}
