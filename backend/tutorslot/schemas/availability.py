# backend/tutorslot/schemas/availability.py
from datetime import date
from typing import List

from pydantic import Field

from ..services.availability_service import SlotAvailability
from ..services.time_slots import TimeSlot
from ._strict_base import StrictModel


class TimeSlotResponse(StrictModel):
    start_time: str
    end_time: str
    label: str

    @classmethod
    def from_slot(cls, slot: TimeSlot) -> "TimeSlotResponse":
        return cls(start_time=slot.start_time, end_time=slot.end_time, label=slot.label)


class SlotAvailabilityResponse(StrictModel):
    slot: TimeSlotResponse
    booked: bool


class DayAvailabilityResponse(StrictModel):
    """Every grid slot of one day with its booked flag."""

    teacher_id: str
    availability_date: date = Field(..., alias="date")
    slots: List[SlotAvailabilityResponse]

    @classmethod
    def build(
        cls, teacher_id: str, target_date: date, entries: List[SlotAvailability]
    ) -> "DayAvailabilityResponse":
        return cls(
            teacher_id=teacher_id,
            availability_date=target_date,
            slots=[
                SlotAvailabilityResponse(
                    slot=TimeSlotResponse.from_slot(entry.slot), booked=entry.booked
                )
                for entry in entries
            ],
        )


class TimeSlotGridResponse(StrictModel):
    open: str
    close: str
    duration_minutes: int
    slots: List[TimeSlotResponse]
