# backend/tutorslot/schemas/user.py
"""Account, authentication and profile schemas."""

from datetime import datetime
from typing import List, Optional

from pydantic import EmailStr, Field

from ..core.enums import PlanId, RoleName
from ..models.user import User
from ._strict_base import StrictModel, StrictRequestModel


class UserCreate(StrictRequestModel):
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=72)
    name: str = Field("", max_length=100)
    role: RoleName = RoleName.STUDENT


class Token(StrictModel):
    access_token: str
    token_type: str = "bearer"


class UserResponse(StrictModel):
    id: str
    email: str
    name: str
    role: RoleName
    selected_course: Optional[PlanId] = None
    is_active: bool
    created_at: Optional[datetime] = None

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            email=user.email,
            name=user.name or "",
            role=RoleName(user.role),
            selected_course=user.plan_id,
            is_active=bool(user.is_active),
            created_at=user.created_at,
        )


class ProfileResponse(UserResponse):
    is_profile_complete: bool
    missing_fields: List[str]

    @classmethod
    def from_user(cls, user: User) -> "ProfileResponse":
        base = UserResponse.from_user(user).model_dump()
        return cls(
            **base,
            is_profile_complete=user.is_profile_complete,
            missing_fields=user.missing_profile_fields,
        )


class ProfileUpdate(StrictRequestModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    selected_course: Optional[PlanId] = None


class RoleUpdate(StrictRequestModel):
    role: RoleName
