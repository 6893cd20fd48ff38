"""RuleMatrix — the subdivision rule.

A rule matrix is an ordered sequence of rows of non-negative integers. The
row count is the matrix *dimension*: it fixes how many sub-cells each axis is
split into. Each entry is the out-of-plane (z) offset of the sub-cube at that
cell, measured in sub-cube edge lengths.

Rows need not be equal length. A jagged row changes the branching factor of
that row only; see :func:`magiccube.domain.expander.expand`.

INVARIANT: A RuleMatrix is never mutated. Edits produce a fresh instance.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from magiccube.domain.errors import IndexOutOfRange, InvalidMatrix

Row = tuple[int, ...]


@dataclass(frozen=True)
class RuleMatrix:
    """Immutable rule matrix value.

    Raises:
        InvalidMatrix: On construction from zero rows, or with an entry
            that is not a non-negative integer.
    """

    rows: tuple[Row, ...]

    def __post_init__(self) -> None:
        rows = tuple(tuple(r) for r in self.rows)
        if not rows:
            msg = "Rule matrix must have at least one row"
            raise InvalidMatrix(msg)
        for i, row in enumerate(rows):
            for j, cell in enumerate(row):
                if isinstance(cell, bool) or not isinstance(cell, int):
                    msg = f"Entry ({i}, {j}) must be an integer, got {cell!r}"
                    raise InvalidMatrix(msg)
                if cell < 0:
                    msg = f"Entry ({i}, {j}) must be non-negative, got {cell}"
                    raise InvalidMatrix(msg)
        object.__setattr__(self, "rows", rows)

    @classmethod
    def from_rows(cls, rows: Iterable[Iterable[int]]) -> RuleMatrix:
        """Build a matrix from any nested iterable of integers."""
        return cls(rows=tuple(tuple(r) for r in rows))

    @classmethod
    def unchecked(cls, rows: Iterable[Iterable[int]]) -> RuleMatrix:
        """Build a matrix without validation.

        Only for exercising the expander's own guards; normal callers use
        :meth:`from_rows`.
        """
        matrix = object.__new__(cls)
        object.__setattr__(matrix, "rows", tuple(tuple(r) for r in rows))
        return matrix

    def dimension(self) -> int:
        """Row count."""
        return len(self.rows)

    def row(self, i: int) -> Row:
        """Return the elements of row *i*.

        Raises:
            IndexOutOfRange: If *i* is not in ``[0, dimension())``.
        """
        if i < 0 or i >= len(self.rows):
            msg = f"Row index {i} out of range for dimension {len(self.rows)}"
            raise IndexOutOfRange(msg)
        return self.rows[i]

    def is_square(self) -> bool:
        """True when every row is exactly ``dimension()`` long."""
        n = len(self.rows)
        return all(len(r) == n for r in self.rows)

    def branching_factor(self) -> int:
        """Children produced by one subdivision step (sum of row lengths)."""
        return sum(len(r) for r in self.rows)

    def to_lists(self) -> list[list[int]]:
        return [list(r) for r in self.rows]


DEFAULT_MATRIX = RuleMatrix(rows=((1, 0), (0, 1)))
DEFAULT_DEPTH = 0
