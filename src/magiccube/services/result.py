"""ServiceResult and ServiceError — the service contract.

INVARIANT: Service methods report user-input failures as ServiceResult,
never as raised exceptions. The CLI and any embedding host consume this type.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from magiccube.domain.errors import ExpansionTooLarge, FractalError


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_exception(cls, exc: FractalError) -> ServiceError:
        """Map a domain error onto its error code."""
        detail: dict[str, Any] = {}
        if isinstance(exc, ExpansionTooLarge):
            detail = {"projected": exc.projected, "ceiling": exc.ceiling}
        return cls(code=exc.code, message=str(exc), detail=detail)


class ServiceResult(BaseModel):
    """Return type for all service operations.

    Attributes:
        ok: Whether the operation succeeded.
        op: Name of the operation (e.g. ``"expand"``).
        data: Operation-specific payload on success.
        warnings: Non-fatal issues (dropped tokens, plugin failures).
        error: Structured error if ``ok`` is False.
        meta: Optional metadata (timing spans).
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

    @classmethod
    def failure(cls, op: str, error: ServiceError, **kwargs: Any) -> ServiceResult:
        return cls(ok=False, op=op, error=error, **kwargs)
