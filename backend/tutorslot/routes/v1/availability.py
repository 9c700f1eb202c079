# backend/tutorslot/routes/v1/availability.py
"""
Availability routes - API v1

Endpoints:
    GET /time-slots                      → The configured slot grid
    GET /slots?date&teacher_id           → Grid for one teacher and day with booked flags
"""

import asyncio
from datetime import date
import logging

from fastapi import APIRouter, Depends, Query

from ...api.dependencies.auth import get_current_actor
from ...api.dependencies.services import get_availability_service
from ...core.exceptions import DomainException
from ...errors import handle_domain_exception
from ...principal import Actor
from ...schemas.availability import (
    DayAvailabilityResponse,
    TimeSlotGridResponse,
    TimeSlotResponse,
)
from ...services.availability_service import AvailabilityService
from ...services.time_slots import (
    configured_business_hours,
    configured_lesson_duration,
    generate_time_slots,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["availability-v1"])


@router.get("/time-slots", response_model=TimeSlotGridResponse)
async def get_time_slots() -> TimeSlotGridResponse:
    hours = configured_business_hours()
    duration = configured_lesson_duration()
    try:
        slots = generate_time_slots(hours, duration)
    except DomainException as e:
        handle_domain_exception(e)
    return TimeSlotGridResponse(
        open=hours.open,
        close=hours.close,
        duration_minutes=duration,
        slots=[TimeSlotResponse.from_slot(slot) for slot in slots],
    )


@router.get("/slots", response_model=DayAvailabilityResponse)
async def get_day_availability(
    target_date: date = Query(..., alias="date", description="Day to show (YYYY-MM-DD)"),
    teacher_id: str = Query(..., min_length=1),
    actor: Actor = Depends(get_current_actor),
    availability_service: AvailabilityService = Depends(get_availability_service),
) -> DayAvailabilityResponse:
    try:
        entries = await asyncio.to_thread(
            availability_service.available_slots, actor, target_date, teacher_id
        )
    except DomainException as e:
        handle_domain_exception(e)
    return DayAvailabilityResponse.build(teacher_id, target_date, entries)
