"""FractalService — expansion, projection, and matrix text operations.

Pipeline for ``expand``: READ DEFINITION → PREFLIGHT → EMIT → EVENT → RESPOND.
Preflight failures (empty matrix, projected leaf count over the ceiling,
entries too large to place) return before the sink sees a single placement.
A sink that raises while receiving ends the run with ``SINK_FAILED``.
"""

from __future__ import annotations

import logging
from typing import IO, TYPE_CHECKING, Any

from magiccube.domain import expander
from magiccube.domain.codec import decode_report, encode
from magiccube.domain.errors import FractalError, InvalidMatrix
from magiccube.domain.placement import ORIGIN, Vec3
from magiccube.domain.sinks import get_sink_factory
from magiccube.services.base import BaseService
from magiccube.services.result import ServiceError, ServiceResult
from magiccube.services.telemetry import trace_span, traced

if TYPE_CHECKING:
    from magiccube.domain.sinks import ExpansionSink
    from magiccube.plugins.manager import PluginManager
    from magiccube.services.definition import DefinitionSlot

logger = logging.getLogger(__name__)


class FractalService(BaseService):
    """Operations on the slot's current fractal definition.

    Args:
        slot: Owner of the current definition.
        plugins: Optional plugin manager for lifecycle events.
        base_scale: Edge length of the root cube.
        base_position: Anchor of the root cube.
        max_leaves: Ceiling on the projected leaf count (None disables it).
        obj_precision: Decimal places for OBJ vertex coordinates.
    """

    def __init__(
        self,
        slot: DefinitionSlot,
        plugins: PluginManager | None = None,
        *,
        base_scale: float = 4.0,
        base_position: Vec3 = ORIGIN,
        max_leaves: int | None = expander.DEFAULT_MAX_LEAVES,
        obj_precision: int = 6,
    ) -> None:
        super().__init__(slot, plugins)
        self._base_scale = base_scale
        self._base_position = base_position
        self._max_leaves = max_leaves
        self._obj_precision = obj_precision

    # ------------------------------------------------------------------
    # Editing (delegates to the slot, then notifies plugins)
    # ------------------------------------------------------------------

    def set_depth(self, depth: int) -> ServiceResult:
        result = self._slot.set_depth(depth)
        return self._after_edit(result)

    def set_matrix(self, text: str) -> ServiceResult:
        result = self._slot.set_matrix_from_text(text)
        return self._after_edit(result)

    def _after_edit(self, result: ServiceResult) -> ServiceResult:
        if not result.ok:
            return result
        warnings = list(result.warnings)
        definition = self._slot.current
        self._dispatch_event(
            "post_definition_change",
            {
                "matrix_text": definition.matrix_text,
                "depth": definition.depth,
                "version": self._slot.version,
            },
            warnings,
        )
        return result.model_copy(update={"warnings": warnings})

    # ------------------------------------------------------------------
    # Expansion
    # ------------------------------------------------------------------

    @traced
    def expand(
        self,
        sink: ExpansionSink | None = None,
        *,
        sink_name: str = "count",
        stream: IO[str] | None = None,
    ) -> ServiceResult:
        """Expand the current definition into *sink*.

        When *sink* is None a sink is built from the registry by *sink_name*,
        writing to *stream* for streaming sinks.
        """
        op = "expand"
        definition = self._slot.current

        if sink is None:
            try:
                factory = get_sink_factory(sink_name)
            except KeyError as exc:
                return ServiceResult.failure(
                    op,
                    ServiceError(
                        code="UNKNOWN_SINK",
                        message=str(exc.args[0]),
                        detail={"sink": sink_name},
                    ),
                )
            try:
                sink = factory(stream, precision=self._obj_precision)
            except (TypeError, ValueError) as exc:
                return ServiceResult.failure(
                    op,
                    ServiceError(code="SINK_FAILED", message=str(exc), detail={"sink": sink_name}),
                )
        else:
            sink_name = type(sink).__name__

        try:
            leaves = expander.expand(
                definition.matrix,
                definition.depth,
                base_scale=self._base_scale,
                base_position=self._base_position,
                max_leaves=self._max_leaves,
            )
        except FractalError as exc:
            return ServiceResult.failure(op, ServiceError.from_exception(exc))

        with trace_span("emit") as span:
            count = 0
            for placement in leaves:
                try:
                    sink.receive(placement)
                except Exception as exc:
                    logger.debug("Sink %s failed after %d leaves", sink_name, count, exc_info=True)
                    return ServiceResult.failure(
                        op,
                        ServiceError(
                            code="SINK_FAILED",
                            message=f"Sink {sink_name!r} failed: {exc}",
                            detail={"sink": sink_name, "delivered": count},
                        ),
                    )
                count += 1
            if span is not None:
                span.annotate("leaf_count", count)
                span.annotate("depth", definition.depth)

        data: dict[str, Any] = {
            "sink": sink_name,
            "leaf_count": count,
            "depth": definition.depth,
            "matrix": definition.matrix_text,
            "dimension": definition.matrix.dimension(),
            "branching_factor": definition.matrix.branching_factor(),
        }
        summary = getattr(sink, "summary", None)
        if callable(summary):
            for key, value in summary().items():
                data.setdefault(key, value)

        warnings: list[str] = []
        if not definition.matrix.is_square():
            warnings.append(
                "Rule matrix is jagged: each row's length sets that row's branching"
            )
        self._dispatch_event(
            "post_expand",
            {
                "leaf_count": count,
                "depth": definition.depth,
                "dimension": definition.matrix.dimension(),
                "sink": sink_name,
            },
            warnings,
        )
        return ServiceResult(ok=True, op=op, data=data, warnings=warnings)

    @traced
    def project(self) -> ServiceResult:
        """Report the leaf count an expansion would produce, without expanding."""
        op = "project"
        definition = self._slot.current
        matrix = definition.matrix
        if matrix.dimension() == 0:
            return ServiceResult.failure(
                op,
                ServiceError(code="EMPTY_RULE_MATRIX", message="Rule matrix has no rows"),
            )
        projected = expander.project_leaf_count(matrix, definition.depth)
        fits = self._max_leaves is None or projected <= self._max_leaves
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "matrix": definition.matrix_text,
                "depth": definition.depth,
                "dimension": matrix.dimension(),
                "branching_factor": matrix.branching_factor(),
                "projected_leaves": projected,
                "max_leaves": self._max_leaves,
                "fits": fits,
                "leaf_scale": self._base_scale / matrix.dimension() ** definition.depth,
            },
        )

    # ------------------------------------------------------------------
    # Matrix text
    # ------------------------------------------------------------------

    def decode_matrix(self, text: str) -> ServiceResult:
        """Decode *text* without touching the current definition."""
        op = "decode_matrix"
        try:
            report = decode_report(text)
        except InvalidMatrix as exc:
            return ServiceResult.failure(op, ServiceError.from_exception(exc))
        matrix = report.matrix
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "rows": matrix.to_lists(),
                "matrix": encode(matrix),
                "dimension": matrix.dimension(),
                "square": matrix.is_square(),
                "branching_factor": matrix.branching_factor(),
            },
            warnings=report.warnings(),
        )

    def encode_matrix(self) -> ServiceResult:
        """Return the current matrix as text."""
        definition = self._slot.current
        return ServiceResult(
            ok=True,
            op="encode_matrix",
            data={
                "matrix": definition.matrix_text,
                "rows": definition.matrix.to_lists(),
                "depth": definition.depth,
            },
        )
