"""MatrixCodec — compact text form of a RuleMatrix.

Format: rows joined by ``|``, elements within a row joined by ``,``::

    1,0,2|0,2,1|2,1,0

Decoding is lenient. Whitespace around a token is trimmed, and a token that
does not parse as a non-negative integer is dropped (no placeholder zero).
A row whose every token is dropped becomes an empty row. Only input that
yields no rows at all is rejected.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from magiccube.domain.errors import InvalidMatrix
from magiccube.domain.matrix import RuleMatrix

ROW_SEPARATOR = "|"
ELEMENT_SEPARATOR = ","

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DecodeReport:
    """A decoded matrix plus the raw tokens that were dropped."""

    matrix: RuleMatrix
    dropped: tuple[str, ...] = field(default_factory=tuple)

    def warnings(self) -> list[str]:
        """One user-facing line per dropped token; long tokens are shortened."""
        return [
            f"Dropped unparseable token {_shorten(token)!r}" for token in self.dropped
        ]


def _shorten(token: str, limit: int = 32) -> str:
    return token if len(token) <= limit else f"{token[: limit - 3]}..."


def _parse_token(token: str) -> int | None:
    text = token.strip()
    # An unsigned parse: optional "+", then ASCII digits only (int() alone
    # would also take "-3", "1_000" and non-ASCII digits).
    digits = text[1:] if text.startswith("+") else text
    if not digits.isascii() or not digits.isdigit():
        return None
    try:
        return int(digits)
    except ValueError:
        # Past the interpreter's int-string conversion limit.
        return None


def _decode(text: str) -> tuple[list[list[int]], list[str]]:
    rows: list[list[int]] = []
    dropped: list[str] = []
    for raw_row in text.split(ROW_SEPARATOR):
        row: list[int] = []
        for token in raw_row.split(ELEMENT_SEPARATOR):
            value = _parse_token(token)
            if value is None:
                # Empty tokens ("1,,2", "1|") are dropped without being reported.
                if token.strip():
                    dropped.append(token.strip())
            else:
                row.append(value)
        rows.append(row)
    return rows, dropped


def decode_rows(text: str) -> list[list[int]]:
    """Split and parse *text* into rows without building a RuleMatrix."""
    if not text.strip():
        return []
    rows, _dropped = _decode(text)
    return rows


def decode_report(text: str) -> DecodeReport:
    """Decode *text* and report which tokens were dropped.

    Raises:
        InvalidMatrix: If *text* is blank (structurally empty).
    """
    if not text.strip():
        msg = "Matrix text is empty"
        raise InvalidMatrix(msg)
    rows, dropped = _decode(text)
    if dropped:
        logger.debug(
            "Dropped %d unparseable matrix token(s): %s",
            len(dropped),
            ", ".join(repr(_shorten(token)) for token in dropped),
        )
    return DecodeReport(matrix=RuleMatrix.from_rows(rows), dropped=tuple(dropped))


def decode(text: str) -> RuleMatrix:
    """Decode *text* into a RuleMatrix.

    >>> decode("1,x,2|3,,4").rows
    ((1, 2), (3, 4))
    """
    return decode_report(text).matrix


def encode(matrix: RuleMatrix) -> str:
    """Encode *matrix* as text.

    Inverse of :func:`decode` for every matrix except a lone empty row,
    which encodes to blank text.
    """
    return ROW_SEPARATOR.join(
        ELEMENT_SEPARATOR.join(str(cell) for cell in row) for row in matrix.rows
    )
