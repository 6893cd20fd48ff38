"""Command: project the leaf count without expanding."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from magiccube.commands._base import CubeCommand, depth_option, matrix_option

if TYPE_CHECKING:
    from magiccube.commands._context import AppContext


@click.command(
    cls=CubeCommand,
    examples="""\
  magiccube count
  magiccube count --depth 8 --matrix "1,0,1,0|0,1,0,1|1,0,1,0|0,1,0,1"
  magiccube -q count -d 5""",
)
@depth_option
@matrix_option
@click.pass_obj
def count(app: AppContext, depth: int | None, matrix_text: str | None) -> None:
    """Show how many leaf cubes an expansion would produce."""
    svc = app.service()
    app.apply_edits(svc, depth=depth, matrix_text=matrix_text)
    app.emit(svc.project())
