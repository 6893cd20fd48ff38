"""Error taxonomy for the fractal core.

Every failure is recoverable by correcting the input: callers surface these
as a rejected edit and keep the prior definition in effect.

Each error also derives from the builtin it refines, so callers that only
care about "bad value" can catch ``ValueError``.
"""

from __future__ import annotations


class FractalError(Exception):
    """Base class for all magiccube domain errors."""

    code: str = "FRACTAL_ERROR"


class InvalidMatrix(FractalError, ValueError):
    """Decode or construction produced zero rows (or a negative entry)."""

    code = "INVALID_MATRIX"


class IndexOutOfRange(FractalError, IndexError):
    """A row index outside ``[0, dimension)`` was requested."""

    code = "INDEX_OUT_OF_RANGE"


class EmptyRuleMatrix(FractalError, ValueError):
    """Expansion was attempted against a zero-dimension matrix."""

    code = "EMPTY_RULE_MATRIX"


class ExpansionTooLarge(FractalError, ValueError):
    """Projected leaf count exceeds the configured ceiling."""

    code = "EXPANSION_TOO_LARGE"

    def __init__(self, projected: int, ceiling: int) -> None:
        self.projected = projected
        self.ceiling = ceiling
        super().__init__(
            f"Expansion would produce {projected} leaves, exceeding the ceiling of {ceiling}"
        )


class InvalidDepth(FractalError, ValueError):
    """Depth outside the accepted range."""

    code = "INVALID_DEPTH"
