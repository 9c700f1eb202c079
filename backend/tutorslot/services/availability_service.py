# backend/tutorslot/services/availability_service.py
"""
Availability Service for the tutoring reservation backend.

Combines the slot grid with a teacher's confirmed reservations for a day.
Booked slots are flagged, never dropped: the calendar renders them
disabled so the grid keeps its shape.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
import logging
from typing import TYPE_CHECKING, Iterable, List, Optional, Sequence

from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException, StorageException, ValidationException
from ..models.reservation import Reservation, ReservationStatus
from ..principal import Actor
from ..repositories.factory import RepositoryFactory
from .base import BaseService
from .time_slots import TimeSlot, generate_time_slots, is_time_overlapping

if TYPE_CHECKING:
    from ..repositories.reservation_repository import ReservationRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SlotAvailability:
    slot: TimeSlot
    booked: bool


def mark_slot_availability(
    slots: Sequence[TimeSlot], reservations: Iterable[Reservation]
) -> List[SlotAvailability]:
    """
    Flag every slot that overlaps a confirmed reservation.

    Reservations in any other status are ignored. O(slots x reservations).
    """
    blocking = [r for r in reservations if r.status == ReservationStatus.CONFIRMED.value]
    return [
        SlotAvailability(
            slot=slot,
            booked=any(
                is_time_overlapping(slot.start_time, slot.end_time, r.start_time, r.end_time)
                for r in blocking
            ),
        )
        for slot in slots
    ]


def toggle_slot_selection(
    current: Optional[TimeSlot],
    chosen: TimeSlot,
    availability: Optional[Sequence[SlotAvailability]] = None,
) -> Optional[TimeSlot]:
    """
    Single-slot selection.

    Choosing the current selection clears it; choosing another slot
    replaces it. A slot flagged booked in ``availability`` cannot be chosen.
    """
    if availability is not None:
        for entry in availability:
            if entry.slot == chosen and entry.booked:
                raise ValidationException(
                    f"Slot {chosen.label} is already booked",
                    code="SLOT_ALREADY_BOOKED",
                    details={"start_time": chosen.start_time, "end_time": chosen.end_time},
                )
    if current is not None and current.start_time == chosen.start_time:
        return None
    return chosen


class AvailabilityService(BaseService):
    """Slot availability for one teacher and day."""

    repository: "ReservationRepository"

    def __init__(self, db: Session, repository: Optional["ReservationRepository"] = None):
        super().__init__(db)
        self.repository = repository or RepositoryFactory.create_reservation_repository(db)

    @BaseService.measure_operation("available_slots")
    def available_slots(
        self,
        actor: Actor,
        target_date: date,
        teacher_id: str,
        all_slots: Optional[Sequence[TimeSlot]] = None,
    ) -> List[SlotAvailability]:
        """
        Grid slots for ``target_date`` with the teacher's bookings flagged.

        Any signed-in user may ask; only booked flags leave this method,
        never the reservations behind them.

        Args:
            actor: The caller (logged for auditing)
            target_date: Calendar day
            teacher_id: Teacher whose grid is shown
            all_slots: Grid to evaluate (defaults to the configured grid)
        """
        slots = list(all_slots) if all_slots is not None else generate_time_slots()
        try:
            reservations = self.repository.get_confirmed_for_teacher_on_date(teacher_id, target_date)
        except RepositoryException as exc:
            raise StorageException(str(exc), operation="available_slots", entity_id=teacher_id) from exc
        result = mark_slot_availability(slots, reservations)

        self.logger.debug(
            "Computed availability",
            extra={
                "actor_id": actor.uid,
                "teacher_id": teacher_id,
                "date": target_date.isoformat(),
                "booked": sum(1 for entry in result if entry.booked),
                "total": len(result),
            },
        )
        return result
