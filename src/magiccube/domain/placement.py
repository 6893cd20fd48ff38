"""Leaf placement value types.

Placements are transient: the expander produces them and hands each one to
a sink. Nothing in the core retains them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class Vec3:
    """A 3D point or offset."""

    x: float
    y: float
    z: float

    def __add__(self, other: Vec3) -> Vec3:
        return Vec3(self.x + other.x, self.y + other.y, self.z + other.z)

    def scaled(self, k: float) -> Vec3:
        return Vec3(self.x * k, self.y * k, self.z * k)

    def as_tuple(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)


ORIGIN = Vec3(0.0, 0.0, 0.0)


@dataclass(frozen=True, slots=True)
class LeafPlacement:
    """One terminal cube: edge length and anchor position."""

    scale: float
    position: Vec3

    def to_dict(self) -> dict[str, Any]:
        return {"scale": self.scale, "position": list(self.position.as_tuple())}
