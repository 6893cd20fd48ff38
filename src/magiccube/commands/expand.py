"""Command: expand the current fractal into a sink."""

from __future__ import annotations

import math
from typing import IO, TYPE_CHECKING

import click

from magiccube.commands._base import CubeCommand, depth_option, matrix_option

if TYPE_CHECKING:
    from magiccube.commands._context import AppContext

# Sinks that summarise in memory instead of writing to --output.
IN_MEMORY_SINKS = frozenset({"count", "collect"})


@click.command(
    cls=CubeCommand,
    examples="""\
  magiccube expand
  magiccube expand --depth 3 --matrix "1,0,2|0,2,1|2,1,0"
  magiccube expand -d 4 --sink obj -o sponge.obj
  magiccube expand -d 2 --sink jsonl | jq .scale
  magiccube --json expand -d 1 --sink collect""",
)
@depth_option
@matrix_option
@click.option(
    "--sink",
    "sink_name",
    default=None,
    help="Sink name: count, collect, obj, jsonl, or a plugin sink.",
)
@click.option(
    "-o",
    "--output",
    type=click.File("w", encoding="utf-8", lazy=True),
    default="-",
    show_default=True,
    help="Destination for streaming sinks (obj, jsonl).",
)
@click.option("--scale", type=float, default=None, help="Edge length of the root cube.")
@click.pass_obj
def expand(
    app: AppContext,
    depth: int | None,
    matrix_text: str | None,
    sink_name: str | None,
    output: IO[str],
    scale: float | None,
) -> None:
    """Expand the fractal and deliver every leaf cube to a sink."""
    if scale is not None and not (math.isfinite(scale) and scale > 0):
        raise click.BadParameter("must be positive and finite", param_hint="--scale")

    svc = app.service(base_scale=scale)
    app.apply_edits(svc, depth=depth, matrix_text=matrix_text)

    name = sink_name or app.settings.output.default_sink
    streaming = name not in IN_MEMORY_SINKS
    result = svc.expand(sink_name=name, stream=output if streaming else None)
    # Geometry on stdout: keep the summary out of the way.
    writes_stdout = streaming and getattr(output, "name", "-") in ("-", "<stdout>")
    app.emit(result, to_stderr=writes_stdout)
