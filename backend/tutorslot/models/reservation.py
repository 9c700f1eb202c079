# backend/tutorslot/models/reservation.py
"""
Reservation model for the tutoring reservation backend.

A reservation is created ``confirmed`` and ends ``cancelled`` or
``completed``. Rows are never deleted; cancellation is a status change so
history is preserved.

While a reservation is confirmed it holds one ``ReservationSlotClaim`` per
grid slot it covers. The unique constraint on claims is what guarantees at
most one confirmed reservation per teacher, day and slot, even when two
sessions race to book the same time.
"""

from datetime import datetime, timezone
from enum import Enum
import logging
from typing import Optional

from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    Time,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from ..core.constants import MINUTES_PER_HOUR
from ..core.ulid_helper import generate_ulid
from ..database import Base

logger = logging.getLogger(__name__)

SLOT_CLAIM_CONSTRAINT = "uq_reservation_slot_claims_teacher_slot"


class ReservationStatus(str, Enum):
    """Reservation lifecycle statuses."""

    CONFIRMED = "confirmed"  # Initial - reservations are instant
    CANCELLED = "cancelled"  # Terminal
    COMPLETED = "completed"  # Terminal - lesson given

    @property
    def is_terminal(self) -> bool:
        return self is not ReservationStatus.CONFIRMED


# Allowed status moves; terminal statuses have none.
ALLOWED_TRANSITIONS: dict[ReservationStatus, frozenset[ReservationStatus]] = {
    ReservationStatus.CONFIRMED: frozenset(
        {ReservationStatus.CANCELLED, ReservationStatus.COMPLETED}
    ),
    ReservationStatus.CANCELLED: frozenset(),
    ReservationStatus.COMPLETED: frozenset(),
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Reservation(Base):
    """
    A tutoring session booked by a student with a teacher.

    ``reservation_date`` holds the calendar day only; ``start_time`` and
    ``end_time`` are wall-clock times on that day aligned to the slot grid.
    """

    __tablename__ = "reservations"

    id = Column(String(26), primary_key=True, index=True, default=generate_ulid)

    student_id = Column(String(26), ForeignKey("users.id"), nullable=False, index=True)
    teacher_id = Column(String(26), ForeignKey("users.id"), nullable=False, index=True)
    course_id = Column(String(64), nullable=False)

    reservation_date = Column(Date, nullable=False, index=True)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)

    status = Column(String(20), nullable=False, default=ReservationStatus.CONFIRMED.value)
    notes = Column(Text, nullable=True)

    # Timestamps are set by the service so that created_at == updated_at on insert
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    cancelled_at = Column(DateTime(timezone=True), nullable=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    cancelled_by_id = Column(String(26), ForeignKey("users.id"), nullable=True)

    student = relationship("User", foreign_keys=[student_id])
    teacher = relationship("User", foreign_keys=[teacher_id])

    __table_args__ = (
        CheckConstraint("start_time < end_time", name="ck_reservations_time_order"),
        CheckConstraint(
            "status IN ('confirmed', 'cancelled', 'completed')",
            name="ck_reservations_status",
        ),
        Index("ix_reservations_teacher_date_status", "teacher_id", "reservation_date", "status"),
        Index("ix_reservations_student_date", "student_id", "reservation_date"),
    )

    @property
    def status_enum(self) -> ReservationStatus:
        return ReservationStatus(self.status)

    @property
    def is_confirmed(self) -> bool:
        return self.status == ReservationStatus.CONFIRMED.value

    @property
    def duration_minutes(self) -> int:
        start = self.start_time.hour * MINUTES_PER_HOUR + self.start_time.minute
        end = self.end_time.hour * MINUTES_PER_HOUR + self.end_time.minute
        return end - start

    @property
    def duration_hours(self) -> float:
        return self.duration_minutes / MINUTES_PER_HOUR

    def can_transition_to(self, new_status: ReservationStatus) -> bool:
        return new_status in ALLOWED_TRANSITIONS[self.status_enum]

    def cancel(self, cancelled_by_id: str, at: Optional[datetime] = None) -> None:
        moment = at or _utcnow()
        self.status = ReservationStatus.CANCELLED.value
        self.cancelled_at = moment
        self.cancelled_by_id = cancelled_by_id
        self.updated_at = moment

    def complete(self, at: Optional[datetime] = None) -> None:
        moment = at or _utcnow()
        self.status = ReservationStatus.COMPLETED.value
        self.completed_at = moment
        self.updated_at = moment

    def __repr__(self) -> str:
        return (
            f"<Reservation {self.id} {self.reservation_date} "
            f"{self.start_time}-{self.end_time} {self.status}>"
        )


class ReservationSlotClaim(Base):
    """
    One grid slot held by a confirmed reservation.

    Unique per (teacher, day, slot start); inserting a claim for a slot that
    another confirmed reservation holds fails with an IntegrityError.
    """

    __tablename__ = "reservation_slot_claims"

    id = Column(Integer, primary_key=True, autoincrement=True)
    reservation_id = Column(
        String(26), ForeignKey("reservations.id", ondelete="CASCADE"), nullable=False, index=True
    )
    teacher_id = Column(String(26), nullable=False)
    reservation_date = Column(Date, nullable=False)
    slot_start = Column(Time, nullable=False)

    __table_args__ = (
        UniqueConstraint(
            "teacher_id",
            "reservation_date",
            "slot_start",
            name=SLOT_CLAIM_CONSTRAINT,
        ),
    )
