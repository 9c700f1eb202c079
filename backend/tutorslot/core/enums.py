# backend/tutorslot/core/enums.py
"""
Core enums for the tutoring reservation backend.

Roles are a closed set. Authorization predicates in
``core/permissions.py`` branch on every member explicitly, so adding a role
forces a decision in each predicate.
"""

from enum import Enum


class RoleName(str, Enum):
    """Roles a user account can hold."""

    STUDENT = "student"
    PARENT = "parent"
    TEACHER = "teacher"
    ADMIN = "admin"

    @property
    def is_staff(self) -> bool:
        """Teachers and administrators."""
        return self in (RoleName.TEACHER, RoleName.ADMIN)

    @property
    def is_admin(self) -> bool:
        return self is RoleName.ADMIN


# Roles anyone may pick when signing up.
SELF_REGISTRATION_ROLES = (RoleName.STUDENT, RoleName.PARENT)


class PlanId(str, Enum):
    """Course plans a student can subscribe to."""

    LIGHT = "light"
    HALF = "half"
    FREE = "free"
