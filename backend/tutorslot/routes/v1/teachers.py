# backend/tutorslot/routes/v1/teachers.py
"""
Teacher schedule routes - API v1

Endpoints:
    GET /{teacher_id}/reservations?date= → Confirmed reservations of one day (staff)
"""

import asyncio
from datetime import date
import logging

from fastapi import APIRouter, Depends, Query

from ...api.dependencies.auth import get_current_actor
from ...api.dependencies.services import get_reservation_service
from ...errors import unwrap_or_raise
from ...principal import Actor
from ...schemas.reservation import ReservationListResponse
from ...services.reservation_service import ReservationService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["teachers-v1"])


@router.get("/{teacher_id}/reservations", response_model=ReservationListResponse)
async def list_teacher_reservations(
    teacher_id: str,
    target_date: date = Query(..., alias="date"),
    actor: Actor = Depends(get_current_actor),
    reservation_service: ReservationService = Depends(get_reservation_service),
) -> ReservationListResponse:
    result = await asyncio.to_thread(
        reservation_service.list_for_teacher_on_date, actor, teacher_id, target_date
    )
    return ReservationListResponse.from_reservations(unwrap_or_raise(result))
