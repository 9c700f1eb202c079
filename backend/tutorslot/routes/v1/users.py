# backend/tutorslot/routes/v1/users.py
"""
User profile routes - API v1

Endpoints:
    GET /me/profile                      → Own profile with completeness
    PATCH /me/profile                    → Update name and course plan
    PATCH /{user_id}/role                → Change a user's role (admin)
"""

import asyncio
import logging

from fastapi import APIRouter, Depends

from ...api.dependencies.auth import get_current_actor
from ...api.dependencies.services import get_user_service
from ...core.exceptions import DomainException
from ...errors import handle_domain_exception
from ...principal import Actor
from ...schemas.user import ProfileResponse, ProfileUpdate, RoleUpdate, UserResponse
from ...services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["users-v1"])


@router.get("/me/profile", response_model=ProfileResponse)
async def get_my_profile(
    actor: Actor = Depends(get_current_actor),
    user_service: UserService = Depends(get_user_service),
) -> ProfileResponse:
    try:
        user = await asyncio.to_thread(user_service.get_profile, actor, actor.uid)
    except DomainException as e:
        handle_domain_exception(e)
    return ProfileResponse.from_user(user)


@router.patch("/me/profile", response_model=ProfileResponse)
async def update_my_profile(
    payload: ProfileUpdate,
    actor: Actor = Depends(get_current_actor),
    user_service: UserService = Depends(get_user_service),
) -> ProfileResponse:
    try:
        user = await asyncio.to_thread(
            user_service.update_profile,
            actor,
            actor.uid,
            name=payload.name,
            selected_course=payload.selected_course,
        )
    except DomainException as e:
        handle_domain_exception(e)
    return ProfileResponse.from_user(user)


@router.patch("/{user_id}/role", response_model=UserResponse)
async def change_user_role(
    user_id: str,
    payload: RoleUpdate,
    actor: Actor = Depends(get_current_actor),
    user_service: UserService = Depends(get_user_service),
) -> UserResponse:
    try:
        user = await asyncio.to_thread(user_service.change_role, actor, user_id, payload.role)
    except DomainException as e:
        handle_domain_exception(e)
    return UserResponse.from_user(user)
