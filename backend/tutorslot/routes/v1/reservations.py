# backend/tutorslot/routes/v1/reservations.py
"""
Reservation routes - API v1

Versioned reservation endpoints under /api/v1/reservations.
All business logic delegated to ReservationService; its ``Err`` results are
mapped to HTTP errors here.

Endpoints:
    POST /                               → Book a lesson
    GET /?user_id=                       → A student's reservations
    GET /{reservation_id}                → One reservation
    POST /{reservation_id}/cancel        → Cancel
    POST /{reservation_id}/complete      → Mark completed (teacher/admin)
    PATCH /{reservation_id}/time         → Move to another time
    PATCH /{reservation_id}/status       → Generic status change
"""

import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from ...api.dependencies.auth import get_current_actor
from ...api.dependencies.services import get_reservation_service
from ...errors import unwrap_or_raise
from ...principal import Actor
from ...schemas.reservation import (
    ReservationCreate,
    ReservationListResponse,
    ReservationResponse,
    ReservationStatusUpdate,
    ReservationTimeUpdate,
)
from ...services.reservation_service import ReservationService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["reservations-v1"])


@router.post("", response_model=ReservationResponse, status_code=status.HTTP_201_CREATED)
async def create_reservation(
    payload: ReservationCreate,
    actor: Actor = Depends(get_current_actor),
    reservation_service: ReservationService = Depends(get_reservation_service),
) -> ReservationResponse:
    result = await asyncio.to_thread(
        reservation_service.create_reservation,
        actor,
        payload.student_id or actor.uid,
        payload.teacher_id,
        payload.course_id,
        payload.reservation_date,
        payload.start_time,
        payload.end_time,
        payload.notes,
    )
    return ReservationResponse.from_reservation(unwrap_or_raise(result))


@router.get("", response_model=ReservationListResponse)
async def list_reservations(
    user_id: Optional[str] = Query(None, description="Student whose reservations to list"),
    actor: Actor = Depends(get_current_actor),
    reservation_service: ReservationService = Depends(get_reservation_service),
) -> ReservationListResponse:
    """Newest day first. Defaults to the caller's own reservations."""
    result = await asyncio.to_thread(
        reservation_service.list_reservations, actor, user_id or actor.uid
    )
    return ReservationListResponse.from_reservations(unwrap_or_raise(result))


@router.get("/{reservation_id}", response_model=ReservationResponse)
async def get_reservation(
    reservation_id: str,
    actor: Actor = Depends(get_current_actor),
    reservation_service: ReservationService = Depends(get_reservation_service),
) -> ReservationResponse:
    result = await asyncio.to_thread(reservation_service.get_reservation, actor, reservation_id)
    return ReservationResponse.from_reservation(unwrap_or_raise(result))


@router.post("/{reservation_id}/cancel", response_model=ReservationResponse)
async def cancel_reservation(
    reservation_id: str,
    actor: Actor = Depends(get_current_actor),
    reservation_service: ReservationService = Depends(get_reservation_service),
) -> ReservationResponse:
    result = await asyncio.to_thread(
        reservation_service.cancel_reservation, actor, reservation_id
    )
    return ReservationResponse.from_reservation(unwrap_or_raise(result))


@router.post("/{reservation_id}/complete", response_model=ReservationResponse)
async def complete_reservation(
    reservation_id: str,
    actor: Actor = Depends(get_current_actor),
    reservation_service: ReservationService = Depends(get_reservation_service),
) -> ReservationResponse:
    result = await asyncio.to_thread(
        reservation_service.complete_reservation, actor, reservation_id
    )
    return ReservationResponse.from_reservation(unwrap_or_raise(result))


@router.patch("/{reservation_id}/time", response_model=ReservationResponse)
async def update_reservation_time(
    reservation_id: str,
    payload: ReservationTimeUpdate,
    actor: Actor = Depends(get_current_actor),
    reservation_service: ReservationService = Depends(get_reservation_service),
) -> ReservationResponse:
    result = await asyncio.to_thread(
        reservation_service.update_time,
        actor,
        reservation_id,
        payload.reservation_date,
        payload.start_time,
        payload.end_time,
    )
    return ReservationResponse.from_reservation(unwrap_or_raise(result))


@router.patch("/{reservation_id}/status", response_model=ReservationResponse)
async def update_reservation_status(
    reservation_id: str,
    payload: ReservationStatusUpdate,
    actor: Actor = Depends(get_current_actor),
    reservation_service: ReservationService = Depends(get_reservation_service),
) -> ReservationResponse:
    result = await asyncio.to_thread(
        reservation_service.update_status, actor, reservation_id, payload.status, payload.notes
    )
    return ReservationResponse.from_reservation(unwrap_or_raise(result))
