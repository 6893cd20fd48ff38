"""Command group: rule matrix text (decode, encode)."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from magiccube.commands._base import CubeGroup

if TYPE_CHECKING:
    from magiccube.commands._context import AppContext

_MATRIX_EXAMPLES = """\
  magiccube matrix decode "1,0,2|0,2,1|2,1,0"
  magiccube matrix decode "1, x, 2 | 3,,4"
  magiccube matrix encode
  magiccube --json matrix decode "1,0|0,1\""""


@click.group(cls=CubeGroup, examples=_MATRIX_EXAMPLES)
def matrix() -> None:
    """Inspect rule matrix text."""


@matrix.command(
    examples="""\
  magiccube matrix decode "1,0|0,1"
  magiccube matrix decode "1,x,2|3,,4\""""
)
@click.argument("text")
@click.pass_obj
def decode(app: AppContext, text: str) -> None:
    """Decode TEXT and show the normalized matrix (unparseable tokens are dropped)."""
    app.emit(app.service().decode_matrix(text))


@matrix.command(examples="  magiccube matrix encode")
@click.pass_obj
def encode(app: AppContext) -> None:
    """Show the configured rule matrix as text."""
    app.emit(app.service().encode_matrix())
