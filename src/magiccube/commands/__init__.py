"""Subcommand modules for magiccube.

register_commands() uses deferred imports so ``magiccube --help`` stays fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register the matrix group and the standalone commands on the root group."""
    from magiccube.commands.count import count
    from magiccube.commands.expand import expand
    from magiccube.commands.matrix import matrix

    cli.add_command(matrix)
    cli.add_command(expand)
    cli.add_command(count)
