"""Shared pytest fixtures for magiccube tests."""

from __future__ import annotations

from collections.abc import Generator
from pathlib import Path

import pytest
from click.testing import CliRunner

from magiccube.domain import sinks
from magiccube.domain.codec import decode
from magiccube.domain.matrix import RuleMatrix
from magiccube.services.definition import DefinitionSlot, FractalDefinition
from magiccube.services.fractal import FractalService
from magiccube.services.telemetry import disable_telemetry


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def identity2() -> RuleMatrix:
    """The stock 2x2 rule: ``1,0|0,1``."""
    return RuleMatrix.from_rows([[1, 0], [0, 1]])


@pytest.fixture
def slot() -> DefinitionSlot:
    """A definition slot holding the stock rule at depth 0."""
    return DefinitionSlot()


@pytest.fixture
def service(slot: DefinitionSlot) -> FractalService:
    """A FractalService over *slot* with no plugins and the default ceiling."""
    return FractalService(slot, base_scale=4.0)


def make_service(text: str, depth: int, **kwargs: object) -> FractalService:
    """Build a service whose slot holds the decoded *text* at *depth*."""
    slot = DefinitionSlot(FractalDefinition(matrix=decode(text), depth=depth))
    return FractalService(slot, **kwargs)  # type: ignore[arg-type]


@pytest.fixture
def service_factory():  # noqa: ANN201
    """Factory fixture wrapping :func:`make_service`."""
    return make_service


@pytest.fixture
def _restore_sink_registry() -> Generator[None]:
    """Undo plugin sink registrations made by a test."""
    saved = dict(sinks.SINK_REGISTRY)
    yield
    sinks.SINK_REGISTRY.clear()
    sinks.SINK_REGISTRY.update(saved)


@pytest.fixture
def _isolated_project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run the CLI from an empty temp directory with no config overrides.

    Use via ``@pytest.mark.usefixtures("_isolated_project")``.
    """
    for var in ("MAGICCUBE_CONFIG", "MAGICCUBE_FRACTAL__DEPTH", "MAGICCUBE_FRACTAL__MATRIX"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture(autouse=True)
def _reset_telemetry() -> Generator[None]:
    """``-v`` turns telemetry on for the whole context; turn it off again."""
    yield
    disable_telemetry()
