"""Click base classes with --examples support.

CubeCommand and CubeGroup accept an ``examples`` parameter. Passing
``--examples`` prints them and exits, which keeps ``--help`` short.
"""

from __future__ import annotations

from typing import Any

import click


def _add_examples_option(cmd: click.Command, examples: str) -> None:
    """Attach an eager ``--examples`` flag to a Click command or group."""

    def show_examples(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(examples)
        ctx.exit(0)

    cmd.params.append(
        click.Option(
            ["--examples"],
            is_flag=True,
            expose_value=False,
            is_eager=True,
            callback=show_examples,
            help="Show usage examples.",
        )
    )


class CubeCommand(click.Command):
    """Click Command that supports an ``--examples`` flag."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            _add_examples_option(self, examples)


class CubeGroup(click.Group):
    """Click Group whose subcommands default to :class:`CubeCommand`."""

    command_class = CubeCommand

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            _add_examples_option(self, examples)


# Shared definition-edit options for commands that read the current fractal.
depth_option = click.option(
    "-d",
    "--depth",
    type=int,
    default=None,
    help="Expansion depth (overrides [fractal] depth).",
)
matrix_option = click.option(
    "-m",
    "--matrix",
    "matrix_text",
    default=None,
    help='Rule matrix text, e.g. "1,0|0,1" (overrides [fractal] matrix).',
)
