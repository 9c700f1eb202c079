# backend/tutorslot/models/user.py
"""
User model for the tutoring reservation backend.

Students, parents, teachers and administrators share one table and are
differentiated by ``role``. Students additionally carry the course plan
they subscribed to.
"""

import logging
from typing import Optional

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, String
from sqlalchemy.sql import func

from ..core.enums import PlanId, RoleName
from ..core.ulid_helper import generate_ulid
from ..database import Base

logger = logging.getLogger(__name__)


class User(Base):
    """
    User account and profile.

    Attributes:
        id: ULID primary key
        email: Unique email address used for login
        hashed_password: Bcrypt hashed password
        name: Display name, blank until profile setup
        role: One of RoleName
        selected_course: PlanId of the subscribed course plan (students)
        is_active: Whether the account may sign in
    """

    __tablename__ = "users"

    id = Column(String(26), primary_key=True, index=True, default=generate_ulid)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    name = Column(String(100), nullable=False, default="")
    role = Column(String(20), nullable=False, default=RoleName.STUDENT.value, index=True)
    selected_course = Column(String(20), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=func.now())

    __table_args__ = (
        CheckConstraint(
            "role IN ('student', 'parent', 'teacher', 'admin')",
            name="ck_users_role",
        ),
        CheckConstraint(
            "selected_course IS NULL OR selected_course IN ('light', 'half', 'free')",
            name="ck_users_selected_course",
        ),
    )

    @property
    def role_name(self) -> RoleName:
        return RoleName(self.role)

    @property
    def plan_id(self) -> Optional[PlanId]:
        if not self.selected_course:
            return None
        return PlanId(self.selected_course)

    @property
    def is_profile_complete(self) -> bool:
        """A profile is complete once it has a non-blank name and a valid plan."""
        has_name = bool(self.name and self.name.strip())
        has_course = self.selected_course in {plan.value for plan in PlanId}
        return has_name and has_course

    @property
    def missing_profile_fields(self) -> list[str]:
        missing = []
        if not (self.name and self.name.strip()):
            missing.append("name")
        if self.selected_course not in {plan.value for plan in PlanId}:
            missing.append("selected_course")
        return missing

    def __repr__(self) -> str:
        return f"<User {self.email} role={self.role}>"
