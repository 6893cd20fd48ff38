"""Tests for the RuleMatrix value type."""

from __future__ import annotations

import pytest

from magiccube.domain.errors import IndexOutOfRange, InvalidMatrix
from magiccube.domain.matrix import DEFAULT_DEPTH, DEFAULT_MATRIX, RuleMatrix


class TestConstruction:
    def test_from_rows(self) -> None:
        m = RuleMatrix.from_rows([[1, 0], [0, 1]])
        assert m.rows == ((1, 0), (0, 1))

    def test_lists_are_normalized_to_tuples(self) -> None:
        m = RuleMatrix(rows=[[2, 3]])  # type: ignore[arg-type]
        assert m.rows == ((2, 3),)

    def test_empty_rows_rejected(self) -> None:
        with pytest.raises(InvalidMatrix):
            RuleMatrix.from_rows([])

    def test_invalid_matrix_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            RuleMatrix(rows=())

    def test_negative_entry_rejected(self) -> None:
        with pytest.raises(InvalidMatrix, match="non-negative"):
            RuleMatrix.from_rows([[1, -1]])

    @pytest.mark.parametrize("bad", [1.5, "2", True, None])
    def test_non_integer_entry_rejected(self, bad: object) -> None:
        with pytest.raises(InvalidMatrix):
            RuleMatrix.from_rows([[1, bad]])  # type: ignore[list-item]

    def test_jagged_and_empty_rows_allowed(self) -> None:
        m = RuleMatrix.from_rows([[1, 2, 3], [], [4]])
        assert m.dimension() == 3
        assert m.row(1) == ()

    def test_large_values_allowed(self) -> None:
        m = RuleMatrix.from_rows([[10**30]])
        assert m.row(0) == (10**30,)

    def test_unchecked_skips_validation(self) -> None:
        m = RuleMatrix.unchecked([])
        assert m.dimension() == 0


class TestImmutability:
    def test_frozen(self) -> None:
        m = RuleMatrix.from_rows([[1]])
        with pytest.raises(AttributeError):
            m.rows = ((2,),)  # type: ignore[misc]

    def test_structural_equality_and_hash(self) -> None:
        a = RuleMatrix.from_rows([[1, 0], [0, 1]])
        b = RuleMatrix.from_rows(([1, 0], [0, 1]))
        assert a == b
        assert hash(a) == hash(b)
        assert a == DEFAULT_MATRIX


class TestAccessors:
    def test_dimension(self) -> None:
        assert RuleMatrix.from_rows([[0], [0], [0]]).dimension() == 3

    def test_row(self) -> None:
        m = RuleMatrix.from_rows([[1, 0, 2], [0, 2, 1]])
        assert m.row(1) == (0, 2, 1)

    @pytest.mark.parametrize("index", [2, 5, -1])
    def test_row_out_of_range(self, index: int) -> None:
        m = RuleMatrix.from_rows([[1], [2]])
        with pytest.raises(IndexOutOfRange):
            m.row(index)

    def test_row_out_of_range_is_index_error(self) -> None:
        with pytest.raises(IndexError):
            RuleMatrix.from_rows([[1]]).row(1)

    def test_is_square(self) -> None:
        assert RuleMatrix.from_rows([[1, 0], [0, 1]]).is_square()
        assert not RuleMatrix.from_rows([[1, 0, 0], [0, 1]]).is_square()
        assert not RuleMatrix.from_rows([[1, 0, 0], [0, 1, 0]]).is_square()

    def test_branching_factor(self) -> None:
        assert RuleMatrix.from_rows([[1, 0], [0, 1]]).branching_factor() == 4
        assert RuleMatrix.from_rows([[1, 2, 3], [], [4]]).branching_factor() == 4

    def test_to_lists(self) -> None:
        assert RuleMatrix.from_rows([[1], [2, 3]]).to_lists() == [[1], [2, 3]]


def test_defaults() -> None:
    assert DEFAULT_MATRIX.rows == ((1, 0), (0, 1))
    assert DEFAULT_DEPTH == 0
