"""Expansion sinks — consumers of leaf placements.

A sink has one operation, ``receive(placement)``, called once per leaf in
expansion order. The core makes no assumption about what a sink does: the
built-ins collect, count, or serialize placements, and plugins can add
sinks that build real scene geometry.

Sinks are looked up by name through :data:`SINK_REGISTRY`. Built-in names
are reserved; plugins register extra names via the ``register_sinks`` hook.
"""

from __future__ import annotations

import json
import math
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Protocol, TextIO, runtime_checkable

from magiccube.domain.placement import LeafPlacement, Vec3


@runtime_checkable
class ExpansionSink(Protocol):
    """Anything that accepts leaf placements."""

    def receive(self, placement: LeafPlacement) -> None: ...


@dataclass
class CollectingSink:
    """Keeps every placement in memory, in order."""

    placements: list[LeafPlacement] = field(default_factory=list)

    def receive(self, placement: LeafPlacement) -> None:
        self.placements.append(placement)

    def summary(self) -> dict[str, Any]:
        return {"placements": [p.to_dict() for p in self.placements]}


@dataclass
class CountingSink:
    """Counts placements and tracks scale range and bounding box.

    The bounding box covers the cubes themselves (position ± scale/2), not
    only their anchors.
    """

    count: int = 0
    min_scale: float = math.inf
    max_scale: float = 0.0
    _lo: list[float] = field(default_factory=lambda: [math.inf] * 3)
    _hi: list[float] = field(default_factory=lambda: [-math.inf] * 3)

    def receive(self, placement: LeafPlacement) -> None:
        self.count += 1
        s = placement.scale
        self.min_scale = min(self.min_scale, s)
        self.max_scale = max(self.max_scale, s)
        half = s / 2
        for axis, value in enumerate(placement.position.as_tuple()):
            self._lo[axis] = min(self._lo[axis], value - half)
            self._hi[axis] = max(self._hi[axis], value + half)

    @property
    def bounds(self) -> tuple[Vec3, Vec3] | None:
        """``(min_corner, max_corner)``, or None when nothing was received."""
        if self.count == 0:
            return None
        return Vec3(*self._lo), Vec3(*self._hi)

    def summary(self) -> dict[str, Any]:
        result: dict[str, Any] = {"leaf_count": self.count}
        bounds = self.bounds
        if bounds is not None:
            result["min_scale"] = self.min_scale
            result["max_scale"] = self.max_scale
            result["bounds"] = {
                "min": list(bounds[0].as_tuple()),
                "max": list(bounds[1].as_tuple()),
            }
        return result


# Unit cube corners centred on the origin, and its faces (1-based, CCW from outside).
_CUBE_CORNERS: tuple[tuple[float, float, float], ...] = (
    (-0.5, -0.5, -0.5),
    (0.5, -0.5, -0.5),
    (0.5, 0.5, -0.5),
    (-0.5, 0.5, -0.5),
    (-0.5, -0.5, 0.5),
    (0.5, -0.5, 0.5),
    (0.5, 0.5, 0.5),
    (-0.5, 0.5, 0.5),
)
_CUBE_FACES: tuple[tuple[int, int, int, int], ...] = (
    (1, 4, 3, 2),
    (5, 6, 7, 8),
    (1, 2, 6, 5),
    (2, 3, 7, 6),
    (3, 4, 8, 7),
    (4, 1, 5, 8),
)


class ObjSink:
    """Writes each leaf as a cube to a Wavefront OBJ stream.

    The cube is centred on the placement position with edge length equal to
    the placement scale.
    """

    def __init__(self, stream: TextIO, *, precision: int = 6) -> None:
        self._stream = stream
        self._precision = precision
        self.count = 0

    def receive(self, placement: LeafPlacement) -> None:
        p = placement.position
        s = placement.scale
        fmt = f"{{:.{self._precision}f}}"
        lines = [f"o cube_{self.count}"]
        for cx, cy, cz in _CUBE_CORNERS:
            coords = (p.x + cx * s, p.y + cy * s, p.z + cz * s)
            lines.append("v " + " ".join(fmt.format(c) for c in coords))
        base = self.count * len(_CUBE_CORNERS)
        for face in _CUBE_FACES:
            lines.append("f " + " ".join(str(base + idx) for idx in face))
        self._stream.write("\n".join(lines) + "\n")
        self.count += 1

    def summary(self) -> dict[str, Any]:
        return {"leaf_count": self.count, "vertices": self.count * len(_CUBE_CORNERS)}


class JsonLinesSink:
    """Writes one JSON object per placement."""

    def __init__(self, stream: TextIO) -> None:
        self._stream = stream
        self.count = 0

    def receive(self, placement: LeafPlacement) -> None:
        self._stream.write(json.dumps(placement.to_dict(), separators=(",", ":")) + "\n")
        self.count += 1

    def summary(self) -> dict[str, Any]:
        return {"leaf_count": self.count}


# ---------------------------------------------------------------------------
# Sink registry
# ---------------------------------------------------------------------------

# A factory takes the output stream (None for in-memory sinks) plus keyword options.
SinkFactory = Callable[..., ExpansionSink]


def _collect_factory(stream: TextIO | None = None, **_opts: Any) -> ExpansionSink:
    return CollectingSink()


def _count_factory(stream: TextIO | None = None, **_opts: Any) -> ExpansionSink:
    return CountingSink()


def _require_stream(name: str, stream: TextIO | None) -> TextIO:
    if stream is None:
        msg = f"Sink {name!r} needs an output stream"
        raise ValueError(msg)
    return stream


def _obj_factory(stream: TextIO | None = None, **opts: Any) -> ExpansionSink:
    return ObjSink(_require_stream("obj", stream), precision=int(opts.get("precision", 6)))


def _jsonl_factory(stream: TextIO | None = None, **_opts: Any) -> ExpansionSink:
    return JsonLinesSink(_require_stream("jsonl", stream))


_BUILTIN_SINKS: dict[str, SinkFactory] = {
    "collect": _collect_factory,
    "count": _count_factory,
    "obj": _obj_factory,
    "jsonl": _jsonl_factory,
}

SINK_REGISTRY: dict[str, SinkFactory] = dict(_BUILTIN_SINKS)


def get_sink_factory(name: str) -> SinkFactory:
    """Look up a sink factory by name.

    Raises:
        KeyError: If no sink is registered under *name*.
    """
    try:
        return SINK_REGISTRY[name]
    except KeyError:
        msg = f"No sink registered as {name!r}"
        raise KeyError(msg) from None


def register_sink(name: str, factory: SinkFactory) -> None:
    """Register a plugin-provided sink factory.

    Built-in names are reserved and cannot be overridden.
    """
    normalized = name.strip()
    if not normalized:
        msg = "Sink name must not be empty"
        raise ValueError(msg)
    if not callable(factory):
        msg = f"Sink factory {normalized!r} must be callable"
        raise TypeError(msg)
    if normalized in _BUILTIN_SINKS:
        msg = f"Sink {normalized!r} conflicts with a built-in sink"
        raise ValueError(msg)
    existing = SINK_REGISTRY.get(normalized)
    if existing is not None and existing is not factory:
        msg = f"Sink {normalized!r} is already registered"
        raise ValueError(msg)
    SINK_REGISTRY[normalized] = factory


def list_sinks() -> list[str]:
    return sorted(SINK_REGISTRY)
