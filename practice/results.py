"""
Explicit success/failure results returned by the practice service.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

from practice.errors import (
    InvalidInputError,
    NotAuthenticatedError,
    ReviewStateMissingError,
)


T = TypeVar("T")


class ErrorKind(str, Enum):
    AUTH = "auth"
    MISSING_STATE = "missing_state"
    STORE = "store"
    INVALID_INPUT = "invalid_input"


@dataclass(frozen=True)
class Result(Generic[T]):
    """
    Outcome of a service call.

    Exactly one of data/error is meaningful, selected by ok.
    """
    ok: bool
    data: Optional[T] = None
    error: Optional[str] = None
    kind: Optional[ErrorKind] = None

    @classmethod
    def success(cls, data: T) -> "Result[T]":
        return cls(ok=True, data=data)

    @classmethod
    def failure(cls, error: str, kind: ErrorKind) -> "Result[T]":
        return cls(ok=False, error=error, kind=kind)

    @classmethod
    def from_exception(cls, exc: Exception) -> "Result[T]":
        """Map a practice error (or any store exception) to a failed result."""
        if isinstance(exc, NotAuthenticatedError):
            kind = ErrorKind.AUTH
        elif isinstance(exc, ReviewStateMissingError):
            kind = ErrorKind.MISSING_STATE
        elif isinstance(exc, InvalidInputError):
            kind = ErrorKind.INVALID_INPUT
        else:
            kind = ErrorKind.STORE
        return cls.failure(str(exc), kind)
