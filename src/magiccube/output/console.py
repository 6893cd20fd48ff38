"""Rich Console factory and theme for magiccube output.

Consoles render to a StringIO buffer so renderers keep a
``render_result() -> str`` contract. In non-TTY environments (tests, pipes)
Rich drops color codes on its own.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

CUBE_THEME = Theme(
    {
        "cube.ok": "bold green",
        "cube.error": "bold red",
        "cube.warning": "bold yellow",
        "cube.op": "bold cyan",
        "cube.key": "dim",
        "cube.count": "bold magenta",
        "cube.matrix": "bold blue",
        "cube.cell": "cyan",
        "cube.cell.zero": "dim",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer."""
    return Console(
        file=StringIO(),
        theme=CUBE_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def cell_style(value: int) -> str:
    """Style for one rule-matrix cell; zero offsets are dimmed."""
    return "cube.cell.zero" if value == 0 else "cube.cell"
