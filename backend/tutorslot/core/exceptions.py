# backend/tutorslot/core/exceptions.py
"""
Domain-specific exceptions for the tutoring reservation backend.

Every exception carries two messages:
- ``message``: internal diagnostic text, logged but never returned to clients
- ``user_message``: short localized text that is safe to show end users

``kind`` classifies the failure for callers handling ``Err`` results, and
``retryable`` tells them whether re-invoking the operation can succeed.
"""

from enum import Enum
from typing import Any, Dict, Optional

from fastapi import HTTPException, status

from .messages import get_user_message

HTTP_422_UNPROCESSABLE: int = getattr(status, "HTTP_422_UNPROCESSABLE_CONTENT", 422)


class ReservationErrorKind(str, Enum):
    """Failure classes surfaced by reservation operations."""

    VALIDATION = "validation"
    QUOTA_EXCEEDED = "quota_exceeded"
    SLOT_TAKEN = "slot_taken"
    PERMISSION = "permission"
    INVALID_STATE = "invalid_state"
    NOT_FOUND = "not_found"
    STORAGE = "storage"


class DomainException(Exception):
    """Base exception for all domain-specific errors."""

    kind: ReservationErrorKind = ReservationErrorKind.VALIDATION
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    retryable: bool = False
    user_message_key: str = "SYSTEM_ERROR"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        user_message: Optional[str] = None,
    ) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}
        self._user_message = user_message
        super().__init__(self.message)

    @property
    def user_message(self) -> str:
        if self._user_message is not None:
            return self._user_message
        return get_user_message(self.user_message_key, **self.details)

    def to_http_exception(self) -> HTTPException:
        headers = {"Retry-After": "2"} if self.retryable else None
        return HTTPException(
            status_code=self.status_code,
            detail={
                "message": self.user_message,
                "code": self.code,
                "details": self.details,
            },
            headers=headers,
        )


class ValidationException(DomainException):
    """Raised when business validation fails."""

    kind = ReservationErrorKind.VALIDATION
    status_code = status.HTTP_400_BAD_REQUEST
    user_message_key = "VALIDATION_ERROR"


class QuotaExceededException(DomainException):
    """Raised when a booking would exceed the student's monthly hours."""

    kind = ReservationErrorKind.QUOTA_EXCEEDED
    status_code = HTTP_422_UNPROCESSABLE
    user_message_key = "QUOTA_EXCEEDED"

    def __init__(
        self,
        requested_hours: float,
        remaining_hours: float,
        user_message: Optional[str] = None,
    ):
        super().__init__(
            message=(
                f"Requested {requested_hours}h exceeds remaining monthly quota of "
                f"{remaining_hours}h"
            ),
            code="QUOTA_EXCEEDED",
            details={
                "requested_hours": requested_hours,
                "remaining_hours": remaining_hours,
                "max_allowed_hours": remaining_hours,
            },
            user_message=user_message,
        )


class NotFoundException(DomainException):
    """Raised when a requested resource is not found."""

    kind = ReservationErrorKind.NOT_FOUND
    status_code = status.HTTP_404_NOT_FOUND
    user_message_key = "NOT_FOUND"


class ForbiddenException(DomainException):
    """Raised when user lacks permission for an action."""

    kind = ReservationErrorKind.PERMISSION
    status_code = status.HTTP_403_FORBIDDEN
    user_message_key = "PERMISSION_DENIED"


class ConflictException(DomainException):
    """Raised when there's a conflict with existing data."""

    kind = ReservationErrorKind.VALIDATION
    status_code = status.HTTP_409_CONFLICT
    user_message_key = "VALIDATION_ERROR"


class SlotUnavailableException(ConflictException):
    """Raised when a requested time overlaps a confirmed reservation."""

    kind = ReservationErrorKind.SLOT_TAKEN
    user_message_key = "SLOT_TAKEN"

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message or "This time slot conflicts with an existing reservation",
            code="SLOT_TAKEN",
            details=details or {},
        )


class InvalidStateException(ConflictException):
    """Raised when a status transition is not allowed."""

    kind = ReservationErrorKind.INVALID_STATE
    user_message_key = "INVALID_STATE"

    def __init__(self, reservation_id: str, current_status: str, requested_status: str):
        super().__init__(
            message=(
                f"Reservation {reservation_id} cannot move from "
                f"{current_status} to {requested_status}"
            ),
            code="INVALID_STATE",
            details={
                "reservation_id": reservation_id,
                "current_status": current_status,
                "requested_status": requested_status,
            },
        )


class StorageException(DomainException):
    """Raised when the underlying store fails; callers may retry."""

    kind = ReservationErrorKind.STORAGE
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    retryable = True
    user_message_key = "STORAGE_ERROR"

    def __init__(
        self,
        message: str,
        *,
        operation: str,
        entity_id: Optional[str] = None,
    ):
        details: Dict[str, Any] = {"operation": operation}
        if entity_id is not None:
            details["entity_id"] = entity_id
        super().__init__(message=message, code="STORAGE_ERROR", details=details)


class RepositoryException(Exception):
    """
    Exception raised for repository layer errors.

    This exception is used when data access operations fail,
    such as database connection issues, query failures, or
    constraint violations.
    """
