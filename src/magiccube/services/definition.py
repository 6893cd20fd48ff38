"""The current fractal definition and its editing surface.

A :class:`DefinitionSlot` owns exactly one :class:`FractalDefinition`
(matrix + depth). Every edit builds a fresh definition and swaps it in whole;
a rejected edit leaves the prior definition in effect. Subscribers are told
after each successful swap so a host can discard and rebuild its scene.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass, replace

from magiccube.domain.codec import decode_report, encode
from magiccube.domain.errors import InvalidDepth, InvalidMatrix
from magiccube.domain.matrix import DEFAULT_DEPTH, DEFAULT_MATRIX, RuleMatrix
from magiccube.services.result import ServiceError, ServiceResult

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 8

Subscriber = Callable[["FractalDefinition", int], None]


@dataclass(frozen=True)
class FractalDefinition:
    """Immutable pair of rule matrix and expansion depth."""

    matrix: RuleMatrix = DEFAULT_MATRIX
    depth: int = DEFAULT_DEPTH

    @property
    def matrix_text(self) -> str:
        return encode(self.matrix)


class DefinitionSlot:
    """Single-writer holder of the current fractal definition.

    Args:
        initial: Starting definition (defaults to the stock 2x2 rule, depth 0).
        max_depth: Inclusive upper bound accepted by :meth:`set_depth`.
    """

    def __init__(
        self,
        initial: FractalDefinition | None = None,
        *,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ) -> None:
        self._max_depth = max_depth
        self._lock = threading.Lock()
        self._subscribers: list[Subscriber] = []
        start = initial or FractalDefinition()
        self._check_depth(start.depth)
        self._current = start
        self._version = 0

    @property
    def current(self) -> FractalDefinition:
        return self._current

    @property
    def version(self) -> int:
        """Incremented on every successful replacement."""
        return self._version

    @property
    def max_depth(self) -> int:
        return self._max_depth

    def subscribe(self, callback: Subscriber) -> None:
        """Call *callback(definition, version)* after each replacement."""
        self._subscribers.append(callback)

    # ------------------------------------------------------------------
    # Editing surface
    # ------------------------------------------------------------------

    def set_depth(self, depth: int) -> ServiceResult:
        """Replace the depth, keeping the current matrix."""
        op = "set_depth"
        try:
            self._check_depth(depth)
        except InvalidDepth as exc:
            return ServiceResult.failure(op, ServiceError.from_exception(exc))
        with self._lock:
            definition = replace(self._current, depth=depth)
            version = self._swap(definition)
        self._notify(definition, version)
        return ServiceResult(ok=True, op=op, data={"depth": depth, "version": version})

    def set_matrix_from_text(self, text: str) -> ServiceResult:
        """Decode *text* and replace the matrix, keeping the current depth.

        Dropped tokens are reported as warnings, not errors.
        """
        op = "set_matrix"
        try:
            report = decode_report(text)
        except InvalidMatrix as exc:
            return ServiceResult.failure(op, ServiceError.from_exception(exc))
        with self._lock:
            definition = replace(self._current, matrix=report.matrix)
            version = self._swap(definition)
        self._notify(definition, version)
        warnings = report.warnings()
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "matrix": encode(report.matrix),
                "dimension": report.matrix.dimension(),
                "version": version,
            },
            warnings=warnings,
        )

    def compare_and_swap(self, expected_version: int, definition: FractalDefinition) -> bool:
        """Replace the definition only if nobody replaced it since *expected_version*.

        Raises:
            InvalidDepth: If *definition* carries an out-of-range depth.
        """
        self._check_depth(definition.depth)
        with self._lock:
            if self._version != expected_version:
                return False
            version = self._swap(definition)
        self._notify(definition, version)
        return True

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _check_depth(self, depth: int) -> None:
        if isinstance(depth, bool) or not isinstance(depth, int):
            msg = f"Depth must be an integer, got {depth!r}"
            raise InvalidDepth(msg)
        if not 0 <= depth <= self._max_depth:
            msg = f"Depth must be between 0 and {self._max_depth}, got {depth}"
            raise InvalidDepth(msg)

    def _swap(self, definition: FractalDefinition) -> int:
        # Caller holds self._lock.
        self._current = definition
        self._version += 1
        logger.debug(
            "Definition replaced",
            extra={
                "matrix": definition.matrix_text,
                "depth": definition.depth,
                "version": self._version,
            },
        )
        return self._version

    def _notify(self, definition: FractalDefinition, version: int) -> None:
        for callback in list(self._subscribers):
            callback(definition, version)
