"""ServiceResult and ServiceError — the universal service contract.

INVARIANT: All service-layer methods return ServiceResult. Core components
raise :class:`~hafrag.domain.errors.HafragError`; services translate at
their boundary via :meth:`ServiceResult.failure`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from hafrag.domain.errors import HafragError


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_exception(cls, exc: HafragError) -> ServiceError:
        return cls(code=exc.kind.value, message=exc.message, detail=exc.detail)


class ServiceResult(BaseModel):
    """Universal return type for all service operations.

    Attributes:
        ok: Whether the operation succeeded.
        op: Name of the operation (e.g. ``"assemble"``).
        data: Operation-specific payload on success.
        warnings: Non-fatal issues encountered during the operation.
        error: Structured error if ``ok`` is False.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None

    @classmethod
    def failure(
        cls,
        op: str,
        exc: HafragError,
        *,
        warnings: list[str] | None = None,
    ) -> ServiceResult:
        """Failed result carrying *exc*'s kind, message and detail."""
        return cls(
            ok=False,
            op=op,
            warnings=list(warnings or []),
            error=ServiceError.from_exception(exc),
        )
