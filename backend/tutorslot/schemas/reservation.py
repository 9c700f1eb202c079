# backend/tutorslot/schemas/reservation.py
"""
Reservation schemas for the tutoring reservation backend.

Times travel as ``HH:mm`` strings on the slot grid; dates as ``YYYY-MM-DD``.
The calendar day is exposed as ``date`` on the wire.
"""

from datetime import date, datetime
from typing import List, Literal, Optional

from pydantic import Field

from ..core.constants import MAX_NOTES_LENGTH
from ..models.reservation import Reservation
from ..services.time_slots import format_hhmm
from ._strict_base import StrictModel, StrictRequestModel

HHMM_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class ReservationCreate(StrictRequestModel):
    """
    Book a lesson.

    ``student_id`` defaults to the caller; only administrators may book for
    someone else.
    """

    student_id: Optional[str] = Field(None, description="Student to book for (defaults to caller)")
    teacher_id: str = Field(..., min_length=1, description="Teacher giving the lesson")
    course_id: str = Field(..., min_length=1, max_length=64, description="Course plan id")
    reservation_date: date = Field(..., alias="date", description="Lesson day")
    start_time: str = Field(..., pattern=HHMM_PATTERN, description="Start time (HH:mm)")
    end_time: str = Field(..., pattern=HHMM_PATTERN, description="End time (HH:mm)")
    notes: Optional[str] = Field(None, max_length=MAX_NOTES_LENGTH)


class ReservationTimeUpdate(StrictRequestModel):
    """Move a reservation; omitted fields keep their value."""

    reservation_date: Optional[date] = Field(None, alias="date")
    start_time: Optional[str] = Field(None, pattern=HHMM_PATTERN)
    end_time: Optional[str] = Field(None, pattern=HHMM_PATTERN)


class ReservationStatusUpdate(StrictRequestModel):
    status: Literal["confirmed", "cancelled", "completed"]
    notes: Optional[str] = Field(None, max_length=MAX_NOTES_LENGTH)


class ReservationResponse(StrictModel):
    id: str
    student_id: str
    teacher_id: str
    course_id: str
    reservation_date: date = Field(..., alias="date")
    start_time: str
    end_time: str
    status: str
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    cancelled_at: Optional[datetime] = None
    cancelled_by_id: Optional[str] = None
    completed_at: Optional[datetime] = None

    @classmethod
    def from_reservation(cls, reservation: Reservation) -> "ReservationResponse":
        return cls(
            id=reservation.id,
            student_id=reservation.student_id,
            teacher_id=reservation.teacher_id,
            course_id=reservation.course_id,
            reservation_date=reservation.reservation_date,
            start_time=format_hhmm(reservation.start_time),
            end_time=format_hhmm(reservation.end_time),
            status=reservation.status,
            notes=reservation.notes,
            created_at=reservation.created_at,
            updated_at=reservation.updated_at,
            cancelled_at=reservation.cancelled_at,
            cancelled_by_id=reservation.cancelled_by_id,
            completed_at=reservation.completed_at,
        )


class ReservationListResponse(StrictModel):
    items: List[ReservationResponse]
    total: int

    @classmethod
    def from_reservations(cls, reservations: List[Reservation]) -> "ReservationListResponse":
        items = [ReservationResponse.from_reservation(r) for r in reservations]
        return cls(items=items, total=len(items))
