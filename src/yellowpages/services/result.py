"""ServiceResult — what every catalog operation hands back to the CLI.

A result is either a success carrying an operation-specific ``data``
payload, or a failure carrying a :class:`ServiceError` whose ``code`` is
one of :class:`ErrorCode`. ``yp --json`` serializes results unchanged,
so field names and codes here are part of the command-line contract.

INVARIANT: Services report failures as results; they do not raise.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field


class ErrorCode(StrEnum):
    """Machine-readable failure codes."""

    NOT_INITIALIZED = "NOT_INITIALIZED"  # no .yellowpages/ above cwd
    NOT_FOUND = "NOT_FOUND"  # id or name resolves to no record
    INVALID_RECORD = "INVALID_RECORD"  # record file is not valid JSON / schema
    INVALID_DIRECTION = "INVALID_DIRECTION"
    INVALID_FORMAT = "INVALID_FORMAT"
    MISSING_ARGUMENT = "MISSING_ARGUMENT"
    NO_SOURCE = "NO_SOURCE"  # discover without --dir or --github-org
    GITHUB_ERROR = "GITHUB_ERROR"


class ServiceError(BaseModel):
    """Why an operation failed. ``detail`` echoes the offending input."""

    model_config = {"frozen": True}

    code: ErrorCode
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Outcome of one catalog operation.

    Attributes:
        ok: False only when ``error`` is set. Lint reports failing checks
            with ``ok=True`` and ``data["success"] = False``.
        op: Operation name, e.g. ``"add_service"`` or ``"deps"``.
        data: Operation payload: the record, the tree, the findings.
        warnings: Non-fatal issues such as unresolved references.
        error: Set on failure.
        meta: Telemetry spans when ``yp -v`` is on, else None.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

    @classmethod
    def failure(cls, op: str, code: ErrorCode, message: str, **detail: Any) -> ServiceResult:
        """A failed result for *op*; keyword arguments become ``error.detail``."""
        return cls(ok=False, op=op, error=ServiceError(code=code, message=message, detail=detail))
