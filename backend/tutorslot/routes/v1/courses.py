# backend/tutorslot/routes/v1/courses.py
"""
Course plan routes - API v1

Endpoints:
    GET /                                → Plan catalogue
    GET /usage                           → Caller's hours this month
    POST /validate                       → Check a lesson length against the quota
"""

import asyncio
from datetime import date
import logging
from typing import List

from fastapi import APIRouter, Depends

from ...api.dependencies.auth import get_current_actor
from ...api.dependencies.services import get_quota_service
from ...core.exceptions import DomainException
from ...errors import handle_domain_exception
from ...principal import Actor
from ...schemas.course import (
    CoursePlanResponse,
    CourseUsageResponse,
    QuotaCheckRequest,
    QuotaValidationResponse,
)
from ...services.quota_service import QuotaService, get_all_plans

logger = logging.getLogger(__name__)

router = APIRouter(tags=["courses-v1"])


@router.get("", response_model=List[CoursePlanResponse])
async def list_course_plans() -> List[CoursePlanResponse]:
    return [CoursePlanResponse.from_plan(plan) for plan in get_all_plans()]


@router.get("/usage", response_model=CourseUsageResponse)
async def get_course_usage(
    actor: Actor = Depends(get_current_actor),
    quota_service: QuotaService = Depends(get_quota_service),
) -> CourseUsageResponse:
    """Usage of the caller's plan in the current month."""
    try:
        plan = await asyncio.to_thread(quota_service.get_plan_for_student, actor.uid)
        usage = await asyncio.to_thread(quota_service.get_usage, actor.uid, date.today())
    except DomainException as e:
        handle_domain_exception(e)
    return CourseUsageResponse.build(plan, usage)


@router.post("/validate", response_model=QuotaValidationResponse)
async def validate_reservation_hours(
    payload: QuotaCheckRequest,
    actor: Actor = Depends(get_current_actor),
    quota_service: QuotaService = Depends(get_quota_service),
) -> QuotaValidationResponse:
    """Always 200; ``is_valid`` and ``message`` carry the outcome."""
    try:
        validation = await asyncio.to_thread(
            quota_service.check, actor.uid, payload.requested_hours, date.today()
        )
    except DomainException as e:
        handle_domain_exception(e)
    return QuotaValidationResponse.from_validation(validation)
