# backend/tests/services/test_user_service.py
import pytest

from tutorslot.core.enums import PlanId, RoleName
from tutorslot.core.exceptions import ForbiddenException, ValidationException
from tutorslot.principal import Actor
from tutorslot.services.user_service import UserService


@pytest.fixture
def user_service(db) -> UserService:
    return UserService(db)


def test_new_account_profile_is_incomplete(user_service, create_account):
    user = create_account("fresh@example.com")

    profile = user_service.get_profile(Actor.from_user(user), user.id)

    assert not profile.is_profile_complete
    assert profile.missing_profile_fields == ["name", "selected_course"]


def test_update_profile_completes_it(user_service, create_account):
    user = create_account("fresh@example.com")
    actor = Actor.from_user(user)

    updated = user_service.update_profile(actor, user.id, name="  Ren  ", selected_course=PlanId.HALF)

    assert updated.name == "Ren"
    assert updated.selected_course == "half"
    assert updated.is_profile_complete
    assert updated.missing_profile_fields == []


def test_blank_name_is_rejected(user_service, student_actor):
    with pytest.raises(ValidationException) as exc_info:
        user_service.update_profile(student_actor, student_actor.uid, name="   ")

    assert exc_info.value.code == "INVALID_NAME"


def test_cannot_read_or_update_someone_else(user_service, student_actor, other_student):
    with pytest.raises(ForbiddenException):
        user_service.get_profile(student_actor, other_student.id)
    with pytest.raises(ForbiddenException):
        user_service.update_profile(student_actor, other_student.id, name="Hacked")


def test_admin_changes_role(user_service, admin_actor, other_student):
    updated = user_service.change_role(admin_actor, other_student.id, RoleName.TEACHER)

    assert updated.role == "teacher"


@pytest.mark.parametrize("actor_fixture", ["student_actor", "teacher_actor"])
def test_non_admin_cannot_change_roles(request, user_service, other_student, actor_fixture):
    actor = request.getfixturevalue(actor_fixture)

    with pytest.raises(ForbiddenException):
        user_service.change_role(actor, other_student.id, RoleName.ADMIN)
