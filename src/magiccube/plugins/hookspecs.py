"""Pluggy hook specifications for magiccube.

Two notification hooks fire after the core finishes work, and one
setup-time hook lets plugins contribute named expansion sinks (for example
a sink that instantiates real scene geometry).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from magiccube.domain.sinks import SinkFactory

hookspec = pluggy.HookspecMarker("magiccube")


class MagicCubeHookSpec:
    """Hook specifications for the magiccube plugin system."""

    @hookspec
    def post_expand(
        self,
        leaf_count: int,
        depth: int,
        dimension: int,
        sink: str,
    ) -> None:
        """Called after a complete expansion has been delivered to a sink."""

    @hookspec
    def post_definition_change(
        self,
        matrix_text: str,
        depth: int,
        version: int,
    ) -> None:
        """Called after the current fractal definition is replaced."""

    @hookspec
    def register_sinks(self) -> dict[str, SinkFactory] | None:
        """Return name -> sink factory mappings to extend SINK_REGISTRY."""
