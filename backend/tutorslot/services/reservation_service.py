# backend/tutorslot/services/reservation_service.py
"""
Reservation Service for the tutoring reservation backend.

Handles the reservation lifecycle:
- Creating reservations (authorization, grid and date checks, quota,
  conflict check and insert in one transaction)
- Cancelling and completing
- Moving a reservation to another time
- Listing a student's reservations and a teacher's day

Public operations return ``Ok``/``Err`` instead of raising for expected
failures. Helpers raise domain exceptions; ``_as_result`` is the only place
where they become ``Err`` values.

No double booking: every confirmed reservation holds one slot claim per grid
cell it covers, under a unique constraint. The overlap check inside the
transaction catches ordinary conflicts; the constraint catches two sessions
that both passed the check at the same moment.
"""

from datetime import date, datetime, time, timezone
import logging
from typing import Any, Callable, Dict, List, Optional, Tuple, TypeVar

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core import permissions
from ..core.constants import MAX_NOTES_LENGTH
from ..core.enums import RoleName
from ..core.exceptions import (
    DomainException,
    ForbiddenException,
    InvalidStateException,
    NotFoundException,
    RepositoryException,
    SlotUnavailableException,
    StorageException,
    ValidationException,
)
from ..core.messages import get_user_message
from ..core.result import Err, Ok, Result
from ..core.ulid_helper import is_valid_ulid
from ..models.reservation import SLOT_CLAIM_CONSTRAINT, Reservation, ReservationStatus
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..principal import Actor
from ..repositories.factory import RepositoryFactory
from .base import BaseService
from .quota_service import QuotaService
from .time_slots import (
    TimeLike,
    calculate_duration_minutes,
    covered_slot_starts,
    format_hhmm,
    is_aligned_to_grid,
    is_reservable_date,
    is_time_overlapping,
    parse_hhmm,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _is_slot_claim_violation(exc: IntegrityError) -> bool:
    # PostgreSQL names the constraint; SQLite names the table and columns
    text = str(exc.orig)
    return SLOT_CLAIM_CONSTRAINT in text or "reservation_slot_claims" in text


class ReservationService(BaseService):
    """
    Service layer for reservation operations.

    Every public method takes the acting identity explicitly; nothing is
    read from ambient request state.
    """

    def __init__(
        self,
        db: Session,
        quota_service: Optional[QuotaService] = None,
    ):
        super().__init__(db)
        self.repository = RepositoryFactory.create_reservation_repository(db)
        self.user_repository = RepositoryFactory.create_user_repository(db)
        self.quota_service = quota_service or QuotaService(db)

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    @BaseService.measure_operation("create_reservation")
    def create_reservation(
        self,
        actor: Actor,
        student_id: str,
        teacher_id: str,
        course_id: str,
        reservation_date: date,
        start_time: TimeLike,
        end_time: TimeLike,
        notes: Optional[str] = None,
        today: Optional[date] = None,
    ) -> Result[Reservation]:
        """
        Book a lesson.

        Args:
            actor: Who is booking
            student_id: Student the lesson is for
            teacher_id: Teacher giving the lesson
            course_id: Course plan the lesson belongs to
            reservation_date: Calendar day of the lesson
            start_time: Start (``HH:mm`` or ``time``), on the slot grid
            end_time: End (``HH:mm`` or ``time``), on the slot grid
            notes: Optional free text
            today: Reference day for date checks (defaults to the local date)

        Returns:
            Ok(reservation) or Err with kind PERMISSION, VALIDATION,
            NOT_FOUND, QUOTA_EXCEEDED, SLOT_TAKEN or STORAGE
        """
        return self._as_result(
            "create_reservation",
            None,
            lambda: self._create(
                actor,
                student_id,
                teacher_id,
                course_id,
                reservation_date,
                start_time,
                end_time,
                notes,
                today or date.today(),
            ),
        )

    @BaseService.measure_operation("cancel_reservation")
    def cancel_reservation(self, actor: Actor, reservation_id: str) -> Result[Reservation]:
        """
        Cancel a confirmed reservation and free its slots.

        Allowed for the reservation's student, its teacher, or an admin.
        Cancelling an already cancelled or completed reservation is an
        INVALID_STATE error and leaves the record untouched.
        """
        return self._as_result(
            "cancel_reservation",
            reservation_id,
            lambda: self._change_status(actor, reservation_id, ReservationStatus.CANCELLED),
        )

    @BaseService.measure_operation("complete_reservation")
    def complete_reservation(self, actor: Actor, reservation_id: str) -> Result[Reservation]:
        """Mark a lesson as given. Its teacher or an admin only."""
        return self._as_result(
            "complete_reservation",
            reservation_id,
            lambda: self._change_status(actor, reservation_id, ReservationStatus.COMPLETED),
        )

    @BaseService.measure_operation("update_status")
    def update_status(
        self,
        actor: Actor,
        reservation_id: str,
        new_status: str,
        notes: Optional[str] = None,
    ) -> Result[Reservation]:
        """
        Generic status change, authorized against the stored reservation.

        The record is re-read inside the transaction, so a student id sent by
        the caller never decides who may change it.
        """

        def run() -> Reservation:
            try:
                target = ReservationStatus(new_status)
            except ValueError:
                raise ValidationException(
                    f"Unknown reservation status: {new_status!r}",
                    code="INVALID_STATUS",
                    details={"status": new_status},
                )
            return self._change_status(actor, reservation_id, target, notes=notes)

        return self._as_result("update_status", reservation_id, run)

    @BaseService.measure_operation("update_time")
    def update_time(
        self,
        actor: Actor,
        reservation_id: str,
        reservation_date: Optional[date] = None,
        start_time: Optional[TimeLike] = None,
        end_time: Optional[TimeLike] = None,
        today: Optional[date] = None,
    ) -> Result[Reservation]:
        """
        Move a confirmed reservation. Omitted fields keep their current value.

        The new time is checked like a new booking (grid, date, overlap with
        other reservations, quota) and the slot claims are swapped in the
        same transaction.
        """
        return self._as_result(
            "update_time",
            reservation_id,
            lambda: self._move(
                actor,
                reservation_id,
                reservation_date,
                start_time,
                end_time,
                today or date.today(),
            ),
        )

    @BaseService.measure_operation("list_reservations")
    def list_reservations(self, actor: Actor, user_id: str) -> Result[List[Reservation]]:
        """All reservations of a student, latest day first. Self or admin."""

        def run() -> List[Reservation]:
            if not permissions.can_access_user_data(actor, user_id):
                self._deny(actor, "list_reservations", target_user_id=user_id)
            return self.repository.get_student_reservations(user_id)

        return self._as_result("list_reservations", user_id, run)

    @BaseService.measure_operation("list_for_teacher_on_date")
    def list_for_teacher_on_date(
        self, actor: Actor, teacher_id: str, target_date: date
    ) -> Result[List[Reservation]]:
        """A teacher's confirmed reservations for one day. Staff only."""

        def run() -> List[Reservation]:
            if not permissions.can_view_teacher_schedule(actor):
                self._deny(actor, "list_for_teacher_on_date", teacher_id=teacher_id)
            return self.repository.get_confirmed_for_teacher_on_date(teacher_id, target_date)

        return self._as_result("list_for_teacher_on_date", teacher_id, run)

    @BaseService.measure_operation("get_reservation")
    def get_reservation(self, actor: Actor, reservation_id: str) -> Result[Reservation]:
        def run() -> Reservation:
            reservation = self._get_or_raise(reservation_id)
            self._authorize_access(actor, reservation, "get_reservation")
            return reservation

        return self._as_result("get_reservation", reservation_id, run)

    # ------------------------------------------------------------------
    # Implementation
    # ------------------------------------------------------------------

    def _create(
        self,
        actor: Actor,
        student_id: str,
        teacher_id: str,
        course_id: str,
        reservation_date: date,
        start_time: TimeLike,
        end_time: TimeLike,
        notes: Optional[str],
        today: date,
    ) -> Reservation:
        if not permissions.can_create_for(actor, student_id):
            self._deny(actor, "create_reservation", student_id=student_id)

        start, end = self._validate_slot(reservation_date, start_time, end_time, today)
        self._validate_notes(notes)
        self._ensure_user(student_id)
        self._ensure_teacher(teacher_id)

        duration_hours = calculate_duration_minutes(start, end) / 60

        with self.transaction("create_reservation"):
            self.repository.lock_teacher_day(teacher_id, reservation_date)

            if not permissions.is_quota_exempt(actor, student_id):
                self.quota_service.ensure_within_quota(student_id, duration_hours, today)

            self._check_conflicts(teacher_id, reservation_date, start, end)

            now = _utcnow()
            try:
                reservation = self.repository.create(
                    student_id=student_id,
                    teacher_id=teacher_id,
                    course_id=course_id,
                    reservation_date=reservation_date,
                    start_time=start,
                    end_time=end,
                    status=ReservationStatus.CONFIRMED.value,
                    notes=notes,
                    created_at=now,
                    updated_at=now,
                )
                self.repository.add_slot_claims(reservation, covered_slot_starts(start, end))
            except IntegrityError as exc:
                if not _is_slot_claim_violation(exc):
                    raise
                prometheus_metrics.record_slot_conflict("claim_constraint")
                self.logger.warning(
                    "Slot claim race lost",
                    extra={
                        "teacher_id": teacher_id,
                        "date": reservation_date.isoformat(),
                        "start_time": format_hhmm(start),
                    },
                )
                raise SlotUnavailableException(
                    f"Slot claimed concurrently for teacher {teacher_id} on {reservation_date}",
                    details=self._slot_details(reservation_date, start, end),
                ) from exc

        self.log_operation(
            "create_reservation",
            security_event="reservation_created",
            actor_id=actor.uid,
            reservation_id=reservation.id,
            student_id=student_id,
            teacher_id=teacher_id,
        )
        return reservation

    def _change_status(
        self,
        actor: Actor,
        reservation_id: str,
        target: ReservationStatus,
        notes: Optional[str] = None,
    ) -> Reservation:
        operation = f"set_status_{target.value}"
        with self.transaction(operation, reservation_id):
            reservation = self._get_or_raise(reservation_id, for_update=True)

            if target is ReservationStatus.COMPLETED:
                if not permissions.can_complete_reservation(actor, reservation.teacher_id):
                    self._deny(actor, operation, reservation_id=reservation_id)
            else:
                self._authorize_access(actor, reservation, operation)

            if not reservation.can_transition_to(target):
                raise InvalidStateException(reservation.id, reservation.status, target.value)

            if notes is not None:
                self._validate_notes(notes)
                reservation.notes = notes

            if target is ReservationStatus.CANCELLED:
                reservation.cancel(cancelled_by_id=actor.uid)
            else:
                reservation.complete()
            self.repository.release_slot_claims(reservation.id)

        self.log_operation(
            operation,
            security_event="reservation_status_changed",
            actor_id=actor.uid,
            reservation_id=reservation.id,
            status=reservation.status,
        )
        return reservation

    def _move(
        self,
        actor: Actor,
        reservation_id: str,
        reservation_date: Optional[date],
        start_time: Optional[TimeLike],
        end_time: Optional[TimeLike],
        today: date,
    ) -> Reservation:
        with self.transaction("update_time", reservation_id):
            reservation = self._get_or_raise(reservation_id, for_update=True)
            self._authorize_access(actor, reservation, "update_time")

            if not reservation.is_confirmed:
                raise InvalidStateException(
                    reservation.id, reservation.status, ReservationStatus.CONFIRMED.value
                )

            new_date = reservation_date or reservation.reservation_date
            start, end = self._validate_slot(
                new_date,
                start_time if start_time is not None else reservation.start_time,
                end_time if end_time is not None else reservation.end_time,
                today,
            )

            self.repository.lock_teacher_day(reservation.teacher_id, new_date)

            if not permissions.is_quota_exempt(actor, reservation.student_id):
                old_day = reservation.reservation_date
                counted_now = (old_day.year, old_day.month) == (today.year, today.month)
                self.quota_service.ensure_within_quota(
                    reservation.student_id,
                    calculate_duration_minutes(start, end) / 60,
                    today,
                    released_hours=reservation.duration_hours if counted_now else 0.0,
                )

            self._check_conflicts(
                reservation.teacher_id, new_date, start, end, exclude_reservation_id=reservation.id
            )

            self.repository.release_slot_claims(reservation.id)
            reservation.reservation_date = new_date
            reservation.start_time = start
            reservation.end_time = end
            reservation.updated_at = _utcnow()
            try:
                self.repository.add_slot_claims(reservation, covered_slot_starts(start, end))
            except IntegrityError as exc:
                if not _is_slot_claim_violation(exc):
                    raise
                prometheus_metrics.record_slot_conflict("claim_constraint")
                raise SlotUnavailableException(
                    f"Slot claimed concurrently while moving reservation {reservation_id}",
                    details=self._slot_details(new_date, start, end),
                ) from exc

        self.log_operation(
            "update_time",
            security_event="reservation_updated",
            actor_id=actor.uid,
            reservation_id=reservation.id,
        )
        return reservation

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _as_result(
        self, operation: str, entity_id: Optional[str], func: Callable[[], T]
    ) -> Result[T]:
        try:
            value = func()
        except RepositoryException as exc:
            self.logger.error(f"Repository failure during {operation}: {str(exc)}")
            error: DomainException = StorageException(
                str(exc), operation=operation, entity_id=entity_id
            )
        except DomainException as exc:
            error = exc
        else:
            prometheus_metrics.record_reservation_outcome(operation, "ok")
            return Ok(value)

        prometheus_metrics.record_reservation_outcome(operation, error.kind.value)
        self.logger.info(
            f"{operation} failed: {error.message}",
            extra={"operation": operation, "code": error.code, "kind": error.kind.value},
        )
        return Err(error)

    def _deny(self, actor: Actor, operation: str, **context: Any) -> None:
        self.logger.warning(
            f"Permission denied for {operation}",
            extra={
                "security_event": "access_denied",
                "operation": operation,
                "actor_id": actor.uid,
                "actor_role": actor.role.value,
                **context,
            },
        )
        raise ForbiddenException(
            f"{actor.role.value} {actor.uid} may not {operation}",
            code="PERMISSION_DENIED",
        )

    def _authorize_access(self, actor: Actor, reservation: Reservation, operation: str) -> None:
        if not permissions.can_access_reservation(
            actor, reservation.student_id, reservation.teacher_id
        ):
            self._deny(actor, operation, reservation_id=reservation.id)

    def _get_or_raise(self, reservation_id: str, for_update: bool = False) -> Reservation:
        if not is_valid_ulid(reservation_id):
            reservation = None
        elif for_update:
            reservation = self.repository.get_for_update(reservation_id)
        else:
            reservation = self.repository.get_by_id(reservation_id)
        if reservation is None:
            raise NotFoundException(
                f"Reservation {reservation_id} not found",
                code="RESERVATION_NOT_FOUND",
                details={"reservation_id": reservation_id},
            )
        return reservation

    def _ensure_user(self, user_id: str) -> RoleName:
        role = self.user_repository.get_role(user_id)
        if role is None:
            raise NotFoundException(
                f"User {user_id} not found",
                code="USER_NOT_FOUND",
                user_message=get_user_message("USER_NOT_FOUND"),
            )
        return role

    def _ensure_teacher(self, teacher_id: str) -> None:
        if self._ensure_user(teacher_id) is not RoleName.TEACHER:
            raise ValidationException(
                f"User {teacher_id} is not a teacher",
                code="NOT_A_TEACHER",
                details={"teacher_id": teacher_id},
            )

    def _validate_slot(
        self, reservation_date: date, start_time: TimeLike, end_time: TimeLike, today: date
    ) -> Tuple[time, time]:
        start = parse_hhmm(start_time)
        end = parse_hhmm(end_time)
        if start >= end:
            raise ValidationException(
                f"End time {format_hhmm(end)} is not after start time {format_hhmm(start)}",
                code="INVALID_TIME_RANGE",
                user_message=get_user_message("INVALID_TIME_RANGE"),
            )
        if not is_aligned_to_grid(start, end):
            raise ValidationException(
                f"{format_hhmm(start)}-{format_hhmm(end)} is not on the slot grid",
                code="OFF_GRID_TIME",
                user_message=get_user_message("OFF_GRID_TIME"),
            )
        if not is_reservable_date(reservation_date, today):
            raise ValidationException(
                f"{reservation_date} is not a reservable day",
                code="DATE_NOT_RESERVABLE",
                user_message=get_user_message("DATE_NOT_RESERVABLE"),
            )
        return start, end

    def _validate_notes(self, notes: Optional[str]) -> None:
        if notes is not None and len(notes) > MAX_NOTES_LENGTH:
            raise ValidationException(
                f"Notes exceed {MAX_NOTES_LENGTH} characters",
                code="NOTES_TOO_LONG",
                details={"max_length": MAX_NOTES_LENGTH},
            )

    def _check_conflicts(
        self,
        teacher_id: str,
        reservation_date: date,
        start: time,
        end: time,
        exclude_reservation_id: Optional[str] = None,
    ) -> None:
        existing = self.repository.get_confirmed_for_teacher_on_date(
            teacher_id, reservation_date, exclude_reservation_id=exclude_reservation_id
        )
        for other in existing:
            if is_time_overlapping(start, end, other.start_time, other.end_time):
                prometheus_metrics.record_slot_conflict("overlap_check")
                raise SlotUnavailableException(
                    f"Teacher {teacher_id} already booked {other.start_time}-{other.end_time} "
                    f"on {reservation_date} (reservation {other.id})",
                    details=self._slot_details(reservation_date, start, end),
                )

    @staticmethod
    def _slot_details(reservation_date: date, start: time, end: time) -> Dict[str, str]:
        return {
            "date": reservation_date.isoformat(),
            "start_time": format_hhmm(start),
            "end_time": format_hhmm(end),
        }
