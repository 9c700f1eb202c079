# backend/tests/unit/test_permissions.py
from tutorslot.core import permissions
from tutorslot.core.enums import RoleName
from tutorslot.principal import Actor

STUDENT = Actor(uid="s1", email="s1@example.com", role=RoleName.STUDENT)
PARENT = Actor(uid="p1", email="p1@example.com", role=RoleName.PARENT)
TEACHER = Actor(uid="t1", email="t1@example.com", role=RoleName.TEACHER)
ADMIN = Actor(uid="a1", email="a1@example.com", role=RoleName.ADMIN)


def test_create_for_self_only_unless_admin():
    assert permissions.can_create_for(STUDENT, "s1")
    assert not permissions.can_create_for(STUDENT, "s2")
    assert permissions.can_create_for(PARENT, "p1")
    assert not permissions.can_create_for(TEACHER, "s1")
    assert permissions.can_create_for(ADMIN, "s1")


def test_access_reservation():
    assert permissions.can_access_reservation(STUDENT, "s1", "t1")
    assert not permissions.can_access_reservation(STUDENT, "s2", "t1")
    assert permissions.can_access_reservation(TEACHER, "s1", "t1")
    assert not permissions.can_access_reservation(TEACHER, "s1", "t2")
    assert permissions.can_access_reservation(ADMIN, "s2", "t2")


def test_complete_reservation_is_teacher_or_admin():
    assert permissions.can_complete_reservation(TEACHER, "t1")
    assert not permissions.can_complete_reservation(TEACHER, "t2")
    assert not permissions.can_complete_reservation(STUDENT, "t1")
    assert not permissions.can_complete_reservation(PARENT, "t1")
    assert permissions.can_complete_reservation(ADMIN, "t1")


def test_user_data_is_self_or_admin():
    assert permissions.can_access_user_data(STUDENT, "s1")
    assert not permissions.can_access_user_data(STUDENT, "s2")
    assert not permissions.can_access_user_data(TEACHER, "s1")
    assert permissions.can_access_user_data(ADMIN, "s1")


def test_teacher_schedule_is_staff_only():
    assert permissions.can_view_teacher_schedule(TEACHER)
    assert permissions.can_view_teacher_schedule(ADMIN)
    assert not permissions.can_view_teacher_schedule(STUDENT)
    assert not permissions.can_view_teacher_schedule(PARENT)


def test_quota_exemption_only_for_admin_booking_for_others():
    assert permissions.is_quota_exempt(ADMIN, "s1")
    assert not permissions.is_quota_exempt(ADMIN, "a1")
    assert not permissions.is_quota_exempt(STUDENT, "s1")


def test_only_admin_manages_roles():
    assert permissions.can_manage_roles(ADMIN)
    for actor in (STUDENT, PARENT, TEACHER):
        assert not permissions.can_manage_roles(actor)
