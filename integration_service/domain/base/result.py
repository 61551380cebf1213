"""Result type for operations whose failures are expected outcomes.

Handlers and the integration client return a ``Result`` instead of raising
for anticipated failures (validation, remote errors, transport errors).
Callers branch on ``is_success`` before touching ``value``.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

from .exceptions import InvalidResultStateError

T = TypeVar("T")


class ErrorKind(str, Enum):
    """Category of a failed result, used by boundaries to pick a response."""

    VALIDATION = "validation"
    EXTERNAL_SERVICE = "external_service"
    NETWORK = "network"
    NOT_FOUND = "not_found"
    INTERNAL = "internal"


@dataclass(frozen=True)
class Result(Generic[T]):
    """Success carrying an optional value, or failure carrying an error message.

    Contradictory combinations are rejected when the instance is built:
    a success may not carry an error message or kind, and a failure must
    carry a non-empty message.
    """

    is_success: bool
    _value: Optional[T] = None
    error: Optional[str] = None
    error_kind: Optional[ErrorKind] = None

    def __post_init__(self):
        if self.is_success:
            if self.error:
                raise InvalidResultStateError("Success result cannot have an error")
            if self.error_kind is not None:
                raise InvalidResultStateError("Success result cannot have an error kind")
        else:
            if not self.error:
                raise InvalidResultStateError("Failure result must have an error message")
            if self._value is not None:
                raise InvalidResultStateError("Failure result cannot carry a value")
            if self.error_kind is None:
                object.__setattr__(self, "error_kind", ErrorKind.INTERNAL)

    @classmethod
    def success(cls, value: Optional[T] = None) -> "Result[T]":
        """Build a successful result."""
        return cls(True, value)

    @classmethod
    def failure(cls, error: str, kind: ErrorKind = ErrorKind.INTERNAL) -> "Result[T]":
        """Build a failed result with a human-readable message."""
        return cls(False, None, error, kind)

    @property
    def is_failure(self) -> bool:
        return not self.is_success

    @property
    def value(self) -> Optional[T]:
        """Payload of a successful result.

        Raises:
            InvalidResultStateError: if the result is a failure
        """
        if not self.is_success:
            raise InvalidResultStateError(f"Cannot read value of a failed result: {self.error}")
        return self._value

    def propagate(self) -> "Result":
        """Re-type a failure so it can be propagated from another operation."""
        if self.is_success:
            raise InvalidResultStateError("Only failures can be propagated")
        return Result.failure(self.error, self.error_kind)
