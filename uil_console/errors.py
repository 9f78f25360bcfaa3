"""
Error taxonomy and the result envelope returned by every API operation.

The client raises ``NetworkFailure`` / ``ApplicationFailure`` internally and
converts them into a failed ``ApiResult`` before returning to callers.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


class UILError(Exception):
    """Base exception for UIL API errors."""

    kind = "error"

    def __init__(self, message: str, status_code: int = 0, response_body: str = ""):
        self.status_code = status_code
        self.response_body = response_body
        super().__init__(message)


class NetworkFailure(UILError):
    """Transport error, timeout, or a response that could not be parsed."""

    kind = "network"


class ApplicationFailure(UILError):
    """The server answered with ``success: false`` (or an HTTP error status)."""

    kind = "application"


@dataclass
class ApiResult:
    """Outcome of one API operation."""
    ok: bool
    data: Any = None
    error: Optional[str] = None
    failure: Optional[UILError] = None
    status_code: int = 0
    response_time_ms: float = 0.0

    def __bool__(self) -> bool:
        return self.ok

    @property
    def failure_kind(self) -> Optional[str]:
        return self.failure.kind if self.failure is not None else None

    @classmethod
    def success(cls, data: Any, status_code: int = 200, response_time_ms: float = 0.0) -> ApiResult:
        return cls(ok=True, data=data, status_code=status_code,
                   response_time_ms=round(response_time_ms, 2))

    @classmethod
    def failed(cls, failure: UILError, response_time_ms: float = 0.0) -> ApiResult:
        return cls(
            ok=False,
            error=str(failure),
            failure=failure,
            status_code=failure.status_code,
            response_time_ms=round(response_time_ms, 2),
        )
