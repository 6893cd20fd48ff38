"""Timing spans for service calls (``--verbose``).

A ``@traced`` service method opens a root span; ``trace_span`` opens child
spans beneath it. Expansion annotates its ``emit`` span with the leaf count,
so the finished tree reports throughput in leaves per second alongside the
wall time. When telemetry is off every entry point is a single
ContextVar lookup.
"""

from __future__ import annotations

import functools
import time
from collections.abc import Callable, Generator
from contextlib import contextmanager
from contextvars import ContextVar, Token
from dataclasses import dataclass, field
from typing import Any, ParamSpec, TypeVar

import structlog

from magiccube.services.result import ServiceResult

_enabled: ContextVar[bool] = ContextVar("_enabled", default=False)
_active: ContextVar[Span | None] = ContextVar("_active", default=None)

log = structlog.get_logger("magiccube.telemetry")


@dataclass
class Span:
    """One timed step; ``children`` are the steps it opened."""

    name: str
    children: list[Span] = field(default_factory=list)
    annotations: dict[str, Any] = field(default_factory=dict)
    started: float = field(default_factory=time.perf_counter)
    finished: float | None = None

    @property
    def duration_ms(self) -> float:
        if self.finished is None:
            return 0.0
        return (self.finished - self.started) * 1000

    def annotate(self, key: str, value: Any) -> None:
        self.annotations[key] = value

    def leaves_per_second(self) -> float | None:
        """Throughput for spans annotated with ``leaf_count``."""
        leaves = self.annotations.get("leaf_count")
        if not isinstance(leaves, int) or self.duration_ms <= 0:
            return None
        return leaves / (self.duration_ms / 1000)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"name": self.name, "duration_ms": round(self.duration_ms, 2)}
        rate = self.leaves_per_second()
        if rate is not None:
            data["leaves_per_s"] = round(rate)
        if self.annotations:
            data["annotations"] = self.annotations
        if self.children:
            data["children"] = [child.to_dict() for child in self.children]
        return data


def _close(span: Span, token: Token[Span | None]) -> None:
    span.finished = time.perf_counter()
    _active.reset(token)


@contextmanager
def trace_span(name: str) -> Generator[Span | None]:
    """Open a child of the active span.

    Yields None when telemetry is off or no ``@traced`` call is running.
    """
    parent = _active.get() if _enabled.get() else None
    if parent is None:
        yield None
        return

    child = Span(name=name)
    parent.children.append(child)
    token = _active.set(child)
    try:
        yield child
    finally:
        _close(child, token)


_P = ParamSpec("_P")
_R = TypeVar("_R")


def traced(func: Callable[_P, _R]) -> Callable[_P, _R]:  # noqa: UP047
    """Time a service method and attach its span tree to ``result.meta``.

    The root span records the outcome: ``ok`` and, on failure, the error code.
    """

    @functools.wraps(func)
    def wrapper(*args: _P.args, **kwargs: _P.kwargs) -> _R:
        if not _enabled.get():
            return func(*args, **kwargs)

        span = Span(name=func.__qualname__)
        token = _active.set(span)
        try:
            result = func(*args, **kwargs)
        except Exception:
            _close(span, token)
            span.annotate("ok", False)
            log.debug("span.complete", **_log_fields(span))
            raise
        _close(span, token)

        if not isinstance(result, ServiceResult):
            log.debug("span.complete", **_log_fields(span))
            return result
        span.annotate("ok", result.ok)
        if result.error is not None:
            span.annotate("error", result.error.code)
        log.debug("span.complete", **_log_fields(span))
        meta = {**(result.meta or {}), "telemetry": span.to_dict()}
        return result.model_copy(update={"meta": meta})  # type: ignore[return-value]

    return wrapper


def _log_fields(span: Span) -> dict[str, Any]:
    fields: dict[str, Any] = {
        "span_name": span.name,
        "duration_ms": round(span.duration_ms, 2),
        **span.annotations,
    }
    for child in span.children:
        fields.update({f"{child.name}.{k}": v for k, v in child.annotations.items()})
    return fields


def enable_telemetry() -> None:
    """Turn spans on for the current context (AppContext does this for -v)."""
    _enabled.set(True)


def disable_telemetry() -> None:
    _enabled.set(False)
