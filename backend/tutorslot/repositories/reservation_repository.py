# backend/tutorslot/repositories/reservation_repository.py
"""
Reservation Repository for the tutoring reservation backend.

Data access for reservations and the slot claims that back the
no-double-booking guarantee. Teacher schedules are not a separate entity;
they are the reservations filtered by teacher and day.
"""

from datetime import date, time
import logging
from typing import Iterable, List, Optional

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException
from ..models.reservation import Reservation, ReservationSlotClaim, ReservationStatus
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class ReservationRepository(BaseRepository[Reservation]):
    """Repository for reservation data access."""

    def __init__(self, db: Session):
        """Initialize with Reservation model."""
        super().__init__(db, Reservation)
        self.logger = logging.getLogger(__name__)

    def get_for_update(self, reservation_id: str) -> Optional[Reservation]:
        """
        Load a reservation and lock its row until the transaction ends.

        Row locks are PostgreSQL-only; other dialects fall back to a plain read.
        """
        try:
            query = self.db.query(Reservation).filter(Reservation.id == reservation_id)
            if self.dialect_name == "postgresql":
                query = query.with_for_update()
            return query.first()
        except SQLAlchemyError as e:
            self.logger.error(f"Error locking reservation {reservation_id}: {str(e)}")
            raise RepositoryException(f"Failed to load reservation: {str(e)}")

    def get_student_reservations(self, student_id: str) -> List[Reservation]:
        """All reservations of a student, newest day first."""
        try:
            return (
                self.db.query(Reservation)
                .filter(Reservation.student_id == student_id)
                .order_by(Reservation.reservation_date.desc(), Reservation.start_time.desc())
                .all()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting reservations for student {student_id}: {str(e)}")
            raise RepositoryException(f"Failed to get student reservations: {str(e)}")

    def get_confirmed_for_teacher_on_date(
        self,
        teacher_id: str,
        target_date: date,
        exclude_reservation_id: Optional[str] = None,
    ) -> List[Reservation]:
        """
        Confirmed reservations of a teacher on one day, ordered by start time.

        Args:
            teacher_id: The teacher whose schedule is read
            target_date: The calendar day
            exclude_reservation_id: Reservation to leave out (when moving it)
        """
        try:
            query = self.db.query(Reservation).filter(
                Reservation.teacher_id == teacher_id,
                Reservation.reservation_date == target_date,
                Reservation.status == ReservationStatus.CONFIRMED.value,
            )
            if exclude_reservation_id:
                query = query.filter(Reservation.id != exclude_reservation_id)
            return query.order_by(Reservation.start_time).all()
        except SQLAlchemyError as e:
            self.logger.error(
                f"Error getting reservations for teacher {teacher_id} on {target_date}: {str(e)}"
            )
            raise RepositoryException(f"Failed to get teacher reservations: {str(e)}")

    def get_confirmed_for_student_between(
        self, student_id: str, start_date: date, end_date: date
    ) -> List[Reservation]:
        """Confirmed reservations of a student with start_date <= day < end_date."""
        try:
            return (
                self.db.query(Reservation)
                .filter(
                    Reservation.student_id == student_id,
                    Reservation.status == ReservationStatus.CONFIRMED.value,
                    Reservation.reservation_date >= start_date,
                    Reservation.reservation_date < end_date,
                )
                .all()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting monthly reservations for {student_id}: {str(e)}")
            raise RepositoryException(f"Failed to get monthly reservations: {str(e)}")

    def lock_teacher_day(self, teacher_id: str, target_date: date) -> None:
        """
        Serialize bookings for one teacher and day within the current transaction.

        PostgreSQL takes a transaction-scoped advisory lock. SQLite already
        serializes writers, and the slot claim constraint rejects any booking
        that slips past the overlap check.
        """
        if self.dialect_name != "postgresql":
            return
        try:
            lock_key = f"reservation:{teacher_id}:{target_date.isoformat()}"
            self.db.execute(
                text("SELECT pg_advisory_xact_lock(hashtext(:lock_key))"),
                {"lock_key": lock_key},
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error locking schedule of {teacher_id} on {target_date}: {str(e)}")
            raise RepositoryException(f"Failed to lock teacher schedule: {str(e)}")

    def add_slot_claims(self, reservation: Reservation, slot_starts: Iterable[time]) -> None:
        """
        Claim grid slots for a confirmed reservation.

        Raises:
            IntegrityError: If another confirmed reservation holds one of the slots
        """
        for slot_start in slot_starts:
            self.db.add(
                ReservationSlotClaim(
                    reservation_id=reservation.id,
                    teacher_id=reservation.teacher_id,
                    reservation_date=reservation.reservation_date,
                    slot_start=slot_start,
                )
            )
        self.db.flush()

    def release_slot_claims(self, reservation_id: str) -> int:
        """Drop every slot claim of a reservation; returns the number removed."""
        try:
            removed = (
                self.db.query(ReservationSlotClaim)
                .filter(ReservationSlotClaim.reservation_id == reservation_id)
                .delete(synchronize_session="fetch")
            )
            self.db.flush()
            return int(removed)
        except SQLAlchemyError as e:
            self.logger.error(f"Error releasing slot claims of {reservation_id}: {str(e)}")
            raise RepositoryException(f"Failed to release slot claims: {str(e)}")

