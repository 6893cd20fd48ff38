"""FractalExpander — recursive cube subdivision.

Pure functions of ``(matrix, depth, base_scale, base_position)``. Each step
divides the current cube's edge by the matrix dimension and, for every cell
``(i, j)`` of the rule matrix, recurses into a sub-cube offset by
``(i, j, matrix[i][j])`` sub-cube edges. At depth 0 the cube is a leaf.

The outer loop runs over the row count and the inner loop over *that row's*
length, so a jagged matrix has a per-row branching factor. Leaves come out
in recursive pre-order: row index outer, element index inner.

Leaf count grows as ``branching_factor ** depth`` (``(N*N) ** depth`` for a
square matrix), so every entry point projects the count analytically and
refuses to start when it exceeds the ceiling.
"""

from __future__ import annotations

import math
from collections.abc import Iterator
from typing import TYPE_CHECKING

from magiccube.domain.errors import (
    EmptyRuleMatrix,
    ExpansionTooLarge,
    InvalidDepth,
    InvalidMatrix,
)
from magiccube.domain.placement import ORIGIN, LeafPlacement, Vec3

if TYPE_CHECKING:
    from magiccube.domain.matrix import RuleMatrix
    from magiccube.domain.sinks import ExpansionSink

DEFAULT_MAX_LEAVES = 1_000_000


def project_leaf_count(matrix: RuleMatrix, depth: int) -> int:
    """Exact number of leaves :func:`expand` would produce.

    Every node sees the same matrix, so each level multiplies the count by
    the matrix's branching factor.
    """
    if depth < 0:
        msg = f"Depth must be non-negative, got {depth}"
        raise InvalidDepth(msg)
    return matrix.branching_factor() ** depth


def _preflight(
    matrix: RuleMatrix,
    depth: int,
    base_scale: float,
    max_leaves: int | None,
) -> int:
    if matrix.dimension() == 0:
        msg = "Cannot expand a rule matrix with no rows"
        raise EmptyRuleMatrix(msg)
    if not math.isfinite(base_scale) or base_scale <= 0:
        msg = f"Base scale must be positive and finite, got {base_scale}"
        raise ValueError(msg)
    projected = project_leaf_count(matrix, depth)
    if max_leaves is not None and projected > max_leaves:
        raise ExpansionTooLarge(projected, max_leaves)
    if depth > 0:
        _check_offsets(matrix, depth, base_scale)
    return projected


def _check_offsets(matrix: RuleMatrix, depth: int, base_scale: float) -> None:
    """Reject entries whose offsets cannot be represented as finite floats.

    Each level adds at most ``cell * scale`` along z, and the scale never
    grows, so ``max_cell * base_scale * depth`` bounds every coordinate.
    """
    largest = max((cell for row in matrix.rows for cell in row), default=0)
    try:
        reach = float(largest) * base_scale * depth
    except OverflowError:
        reach = math.inf
    if not math.isfinite(reach):
        msg = (
            f"Matrix entry of {largest.bit_length()} bits is too large to place"
            f" at scale {base_scale} and depth {depth}"
        )
        raise InvalidMatrix(msg)


def _walk(
    rows: tuple[tuple[int, ...], ...],
    scale: float,
    position: Vec3,
    depth: int,
) -> Iterator[LeafPlacement]:
    # Explicit stack instead of recursion: depth is bounded by configuration,
    # not by the interpreter's recursion limit. Children are pushed reversed
    # so they pop in (row, element) order.
    dimension = len(rows)
    stack: list[tuple[float, Vec3, int]] = [(scale, position, depth)]
    while stack:
        scale, position, remaining = stack.pop()
        if remaining == 0:
            yield LeafPlacement(scale=scale, position=position)
            continue
        new_scale = scale / dimension
        children = [
            (
                new_scale,
                position + Vec3(i * new_scale, j * new_scale, cell * new_scale),
                remaining - 1,
            )
            for i, row in enumerate(rows)
            for j, cell in enumerate(row)
        ]
        stack.extend(reversed(children))


def expand(
    matrix: RuleMatrix,
    depth: int,
    *,
    base_scale: float = 1.0,
    base_position: Vec3 = ORIGIN,
    max_leaves: int | None = DEFAULT_MAX_LEAVES,
) -> Iterator[LeafPlacement]:
    """Return a lazy iterator over every leaf placement.

    All validation happens before this function returns, so a failing call
    never yields a partial sequence. Iterating the result twice requires
    calling ``expand`` again.

    Raises:
        EmptyRuleMatrix: If the matrix has no rows.
        InvalidDepth: If *depth* is negative.
        ExpansionTooLarge: If the projected leaf count exceeds *max_leaves*
            (``None`` disables the ceiling).
        InvalidMatrix: If an entry is too large for its offsets to be
            finite floats.
        ValueError: If *base_scale* is not positive and finite.
    """
    _preflight(matrix, depth, base_scale, max_leaves)
    return _walk(matrix.rows, float(base_scale), base_position, depth)


def expand_all(
    matrix: RuleMatrix,
    depth: int,
    *,
    base_scale: float = 1.0,
    base_position: Vec3 = ORIGIN,
    max_leaves: int | None = DEFAULT_MAX_LEAVES,
) -> list[LeafPlacement]:
    """Eager form of :func:`expand`."""
    return list(
        expand(
            matrix,
            depth,
            base_scale=base_scale,
            base_position=base_position,
            max_leaves=max_leaves,
        )
    )


def expand_into(
    sink: ExpansionSink,
    matrix: RuleMatrix,
    depth: int,
    *,
    base_scale: float = 1.0,
    base_position: Vec3 = ORIGIN,
    max_leaves: int | None = DEFAULT_MAX_LEAVES,
) -> int:
    """Deliver every leaf to ``sink.receive`` in order; return the count."""
    count = 0
    for placement in expand(
        matrix,
        depth,
        base_scale=base_scale,
        base_position=base_position,
        max_leaves=max_leaves,
    ):
        sink.receive(placement)
        count += 1
    return count
