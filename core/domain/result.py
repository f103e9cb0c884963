"""
Typed operation outcome.

Settlement services return an Outcome instead of raising for business
failures. Callers branch on ``error`` (an ErrorKind), never on message text.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Generic, Optional, TypeVar

T = TypeVar("T")


class ErrorKind(str, Enum):
    """Failure taxonomy shared by every settlement operation."""

    VALIDATION = "validation"
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"
    EXTERNAL = "external"
    COMPENSATION = "compensation"


DEFAULT_STATUS: Dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.CONFLICT: 409,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.EXTERNAL: 502,
    ErrorKind.COMPENSATION: 409,
}


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """
    Result of a settlement operation.

    Attributes:
        value: Payload on success (may also be set on some failures for context)
        error: ErrorKind on failure, None on success
        message: Human-readable message
        status: HTTP-style status code
        details: Extra structured feedback (e.g. allowed next statuses)
    """

    value: Optional[T] = None
    error: Optional[ErrorKind] = None
    message: str = ""
    status: int = 200
    details: Dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: Optional[T] = None, message: str = "") -> "Outcome[T]":
        return cls(value=value, message=message)

    @classmethod
    def failure(
        cls,
        kind: ErrorKind,
        message: str,
        status: Optional[int] = None,
        **details: Any,
    ) -> "Outcome[T]":
        return cls(
            error=kind,
            message=message,
            status=status if status is not None else DEFAULT_STATUS[kind],
            details=details,
        )

    def cast(self) -> "Outcome[Any]":
        """Re-wrap a failure so it can be returned from an operation with another payload type."""
        return Outcome(
            error=self.error,
            message=self.message,
            status=self.status,
            details=dict(self.details),
        )
