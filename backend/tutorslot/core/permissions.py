# backend/tutorslot/core/permissions.py
"""
Authorization predicates for reservation operations.

Each predicate decides for every role explicitly and ends with an error for
an unknown role, so a role added to ``RoleName`` cannot silently inherit
access. Predicates are pure; callers pass the *stored* reservation owners,
never ids taken from a request payload.
"""

from typing import Optional

from ..principal import Actor
from .enums import RoleName


def _unknown_role(role: RoleName) -> bool:
    raise ValueError(f"Unhandled role: {role!r}")


def can_create_for(actor: Actor, student_id: str) -> bool:
    """Students and parents book for themselves; admins for anyone."""
    role = actor.role
    if role is RoleName.ADMIN:
        return True
    if role in (RoleName.STUDENT, RoleName.PARENT, RoleName.TEACHER):
        return actor.uid == student_id
    return _unknown_role(role)


def can_access_reservation(actor: Actor, student_id: str, teacher_id: Optional[str]) -> bool:
    """The reservation's student, its teacher, or an admin."""
    role = actor.role
    if role is RoleName.ADMIN:
        return True
    if role in (RoleName.STUDENT, RoleName.PARENT, RoleName.TEACHER):
        return actor.uid == student_id or (teacher_id is not None and actor.uid == teacher_id)
    return _unknown_role(role)


def can_complete_reservation(actor: Actor, teacher_id: str) -> bool:
    """Only the teacher who gave the lesson, or an admin, marks it completed."""
    role = actor.role
    if role is RoleName.ADMIN:
        return True
    if role is RoleName.TEACHER:
        return actor.uid == teacher_id
    if role in (RoleName.STUDENT, RoleName.PARENT):
        return False
    return _unknown_role(role)


def can_access_user_data(actor: Actor, target_user_id: str) -> bool:
    """Self or admin."""
    role = actor.role
    if role is RoleName.ADMIN:
        return True
    if role in (RoleName.STUDENT, RoleName.PARENT, RoleName.TEACHER):
        return actor.uid == target_user_id
    return _unknown_role(role)


def can_view_teacher_schedule(actor: Actor) -> bool:
    """Staff only."""
    role = actor.role
    if role in (RoleName.TEACHER, RoleName.ADMIN):
        return True
    if role in (RoleName.STUDENT, RoleName.PARENT):
        return False
    return _unknown_role(role)


def is_quota_exempt(actor: Actor, student_id: str) -> bool:
    """Admins booking on behalf of another user bypass the monthly quota."""
    role = actor.role
    if role is RoleName.ADMIN:
        return actor.uid != student_id
    if role in (RoleName.STUDENT, RoleName.PARENT, RoleName.TEACHER):
        return False
    return _unknown_role(role)


def can_manage_roles(actor: Actor) -> bool:
    role = actor.role
    if role is RoleName.ADMIN:
        return True
    if role in (RoleName.STUDENT, RoleName.PARENT, RoleName.TEACHER):
        return False
    return _unknown_role(role)
