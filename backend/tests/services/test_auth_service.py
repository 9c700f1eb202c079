# backend/tests/services/test_auth_service.py
import pytest

from tutorslot.auth import verify_password
from tutorslot.core.enums import RoleName
from tutorslot.core.exceptions import ConflictException, ForbiddenException, NotFoundException
from tutorslot.services.auth_service import AuthService, allowed_registration_roles


@pytest.fixture
def auth_service(db) -> AuthService:
    return AuthService(db)


def test_register_student(auth_service):
    user = auth_service.register_user("New.Student@Example.com", "Secret123!", name=" Aiko ")

    assert user.id
    assert user.email == "new.student@example.com"
    assert user.name == "Aiko"
    assert user.role == RoleName.STUDENT.value
    assert user.selected_course is None
    assert verify_password("Secret123!", user.hashed_password)


def test_register_parent(auth_service):
    user = auth_service.register_user("mum@example.com", "Secret123!", role=RoleName.PARENT)

    assert user.role == "parent"


@pytest.mark.parametrize("role", [RoleName.TEACHER, RoleName.ADMIN])
def test_staff_roles_cannot_be_self_assigned(auth_service, role):
    with pytest.raises(ForbiddenException) as exc_info:
        auth_service.register_user("someone@example.com", "Secret123!", role=role)

    assert exc_info.value.code == "ROLE_NOT_ALLOWED"


def test_initial_admin_email_may_take_staff_roles(auth_service):
    assert RoleName.ADMIN in allowed_registration_roles("Owner@Example.com")

    user = auth_service.register_user("owner@example.com", "Secret123!", role=RoleName.ADMIN)

    assert user.role == "admin"


def test_duplicate_email_is_conflict(auth_service, test_student):
    with pytest.raises(ConflictException) as exc_info:
        auth_service.register_user("STUDENT@example.com", "Secret123!")

    assert exc_info.value.code == "EMAIL_TAKEN"


def test_authenticate(auth_service, test_student, test_password):
    assert auth_service.authenticate_user("student@example.com", test_password).id == test_student.id
    assert auth_service.authenticate_user("student@example.com", "wrong-password") is None
    assert auth_service.authenticate_user("nobody@example.com", test_password) is None


def test_deactivated_user_cannot_authenticate(db, auth_service, test_student, test_password):
    test_student.is_active = False
    db.commit()

    assert auth_service.authenticate_user("student@example.com", test_password) is None


def test_get_current_user(auth_service, test_teacher):
    assert auth_service.get_current_user("teacher@example.com").id == test_teacher.id

    with pytest.raises(NotFoundException):
        auth_service.get_current_user("ghost@example.com")
