"""Tests for the per-operation Rich renderers."""

from __future__ import annotations

from magiccube.output.renderers import render_quiet, render_result
from magiccube.services.result import ServiceError, ServiceResult


def _failure(code: str, message: str, **detail: object) -> ServiceResult:
    return ServiceResult.failure(
        "expand", ServiceError(code=code, message=message, detail=dict(detail))
    )


class TestRenderError:
    def test_error_line(self) -> None:
        out = render_result(_failure("EMPTY_RULE_MATRIX", "Rule matrix has no rows"))
        assert "ERROR" in out
        assert "expand" in out
        assert "Rule matrix has no rows" in out

    def test_too_large_hint(self) -> None:
        out = render_result(_failure("EXPANSION_TOO_LARGE", "too many", projected=10, ceiling=5))
        assert "Lower the depth" in out

    def test_detail_only_when_verbose(self) -> None:
        result = _failure("EXPANSION_TOO_LARGE", "too many", projected=10, ceiling=5)
        assert "projected: 10" not in render_result(result)
        assert "projected: 10" in render_result(result, verbose=True)


class TestRenderExpand:
    def test_fields_and_bounds(self) -> None:
        result = ServiceResult(
            ok=True,
            op="expand",
            data={
                "sink": "count",
                "leaf_count": 1024,
                "depth": 5,
                "matrix": "1,0|0,1",
                "dimension": 2,
                "branching_factor": 4,
                "min_scale": 0.125,
                "max_scale": 0.125,
                "bounds": {"min": [-0.0625, -0.0625, -0.0625], "max": [3.9375, 3.9375, 1.9375]},
            },
        )
        out = render_result(result)
        assert out.startswith("OK")
        assert "leaf_count: 1,024" in out
        assert "matrix: 1,0|0,1" in out
        assert "leaf_scale: 0.125" in out
        assert "bounds: (-0.0625, -0.0625, -0.0625) .. (3.9375, 3.9375, 1.9375)" in out
        assert "branching_factor" not in out

    def test_verbose_adds_shape_fields(self) -> None:
        result = ServiceResult(
            ok=True,
            op="expand",
            data={"leaf_count": 4, "dimension": 2, "branching_factor": 4},
        )
        out = render_result(result, verbose=True)
        assert "dimension: 2" in out
        assert "branching_factor: 4" in out

    def test_telemetry_tree(self) -> None:
        result = ServiceResult(
            ok=True,
            op="expand",
            data={"leaf_count": 4},
            meta={
                "telemetry": {
                    "name": "FractalService.expand",
                    "duration_ms": 1.5,
                    "children": [
                        {
                            "name": "emit",
                            "duration_ms": 1.0,
                            "leaves_per_s": 4000,
                            "annotations": {"leaf_count": 4},
                        }
                    ],
                }
            },
        )
        out = render_result(result, verbose=True)
        assert "FractalService.expand" in out
        assert "emit" in out
        assert "leaf_count=4" in out
        assert "4,000 leaves/s" in out


class TestRenderProject:
    def test_exceeds_ceiling(self) -> None:
        result = ServiceResult(
            ok=True,
            op="project",
            data={
                "matrix": "1,1|1,1",
                "depth": 8,
                "branching_factor": 4,
                "projected_leaves": 65536,
                "max_leaves": 1000,
                "fits": False,
                "leaf_scale": 0.015625,
            },
        )
        out = render_result(result)
        assert "projected_leaves: 65,536" in out
        assert "exceeds ceiling" in out
        assert "1,000" in out

    def test_fits_has_no_warning(self) -> None:
        result = ServiceResult(
            ok=True,
            op="project",
            data={"projected_leaves": 4, "max_leaves": 1000, "fits": True},
        )
        assert "exceeds ceiling" not in render_result(result)


class TestRenderMatrix:
    def test_table_of_cells(self) -> None:
        result = ServiceResult(
            ok=True,
            op="decode_matrix",
            data={
                "rows": [[1, 0, 2], [0, 2]],
                "matrix": "1,0,2|0,2",
                "dimension": 2,
                "square": False,
                "branching_factor": 5,
            },
        )
        out = render_result(result)
        assert "matrix: 1,0,2|0,2" in out
        assert "square: False" in out
        assert "row" in out

    def test_generic_fallback(self) -> None:
        result = ServiceResult(ok=True, op="set_depth", data={"depth": 3, "version": 1})
        out = render_result(result)
        assert "set_depth" in out
        assert "depth: 3" in out
        assert "version: 1" in out


class TestRenderQuiet:
    def test_expand(self) -> None:
        result = ServiceResult(ok=True, op="expand", data={"leaf_count": 64})
        assert render_quiet(result) == "64"

    def test_project(self) -> None:
        result = ServiceResult(ok=True, op="project", data={"projected_leaves": 81})
        assert render_quiet(result) == "81"

    def test_matrix(self) -> None:
        result = ServiceResult(ok=True, op="encode_matrix", data={"matrix": "1,0|0,1"})
        assert render_quiet(result) == "1,0|0,1"

    def test_plain_ok(self) -> None:
        result = ServiceResult(ok=True, op="set_depth", data={"depth": 1})
        assert render_quiet(result) == "OK: set_depth"

    def test_failure(self) -> None:
        result = _failure("UNKNOWN_SINK", "No sink registered as 'x'")
        assert render_quiet(result) == "ERROR: expand — No sink registered as 'x'"
