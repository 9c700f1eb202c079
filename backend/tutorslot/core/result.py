# backend/tutorslot/core/result.py
"""
Explicit success/failure values for reservation operations.

Expected outcomes (slot already taken, quota exceeded, forbidden, ...) come
back as ``Err`` instead of propagating as exceptions, so callers handle them
next to the happy path and apart from storage failures (``err.retryable``).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, NoReturn, TypeVar, Union

from .exceptions import DomainException, ReservationErrorKind

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def is_ok(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Err:
    error: DomainException

    @property
    def is_ok(self) -> bool:
        return False

    @property
    def kind(self) -> ReservationErrorKind:
        return self.error.kind

    @property
    def retryable(self) -> bool:
        return self.error.retryable

    @property
    def user_message(self) -> str:
        return self.error.user_message

    def unwrap(self) -> NoReturn:
        raise self.error


Result = Union[Ok[T], Err]
