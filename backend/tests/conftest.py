# backend/tests/conftest.py
"""
Pytest configuration.

Every test gets a fresh in-memory SQLite database shared across threads
through StaticPool, so routes running services in worker threads see the
same data as the test body.
"""

import os

# Set testing mode BEFORE any app imports!
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["INITIAL_ADMIN_EMAIL"] = "owner@example.com"
os.environ["DEFAULT_LOCALE"] = "ja"

from datetime import date, time, timedelta

from fastapi.testclient import TestClient
import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from tutorslot.api.dependencies.database import get_db
from tutorslot.auth import create_access_token, get_password_hash
from tutorslot.core.config import settings
from tutorslot.core.enums import PlanId, RoleName
from tutorslot.database import Base
from tutorslot.main import app
from tutorslot.models.reservation import Reservation, ReservationStatus
from tutorslot.models.user import User
from tutorslot.principal import Actor

settings.is_testing = True

TEST_PASSWORD = "TestPassword123!"
# Hash once; bcrypt is deliberately slow
TEST_PASSWORD_HASH = get_password_hash(TEST_PASSWORD)

test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


@event.listens_for(test_engine, "connect")
def _enable_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


TestSessionLocal = sessionmaker(
    autocommit=False, autoflush=False, bind=test_engine, expire_on_commit=False
)


def upcoming_weekday(days_ahead: int = 7) -> date:
    """A weekday at least ``days_ahead`` days from the real today."""
    day = date.today() + timedelta(days=days_ahead)
    while day.weekday() >= 5:
        day += timedelta(days=1)
    return day


def make_user(
    db: Session,
    email: str,
    role: RoleName = RoleName.STUDENT,
    name: str = "",
    plan: PlanId | None = None,
) -> User:
    user = User(
        email=email,
        hashed_password=TEST_PASSWORD_HASH,
        name=name,
        role=role.value,
        selected_course=plan.value if plan else None,
        is_active=True,
    )
    db.add(user)
    db.commit()
    return user


def insert_confirmed(
    db: Session, student: User, teacher: User, day: date, start: time, end: time
) -> Reservation:
    """Store a confirmed reservation directly, bypassing the service checks."""
    reservation = Reservation(
        student_id=student.id,
        teacher_id=teacher.id,
        course_id="light",
        reservation_date=day,
        start_time=start,
        end_time=end,
        status=ReservationStatus.CONFIRMED.value,
    )
    db.add(reservation)
    db.commit()
    return reservation


def auth_headers_for(user: User) -> dict:
    token = create_access_token(data={"sub": user.email})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture(scope="function")
def db():
    """Create a new database session for each test."""
    Base.metadata.create_all(bind=test_engine)
    session = TestSessionLocal()

    yield session

    session.rollback()
    session.close()
    Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def client(db: Session):
    """Create a test client with the test database."""

    def override_get_db():
        try:
            yield db
            db.commit()
        except Exception:
            db.rollback()
            raise

    app.dependency_overrides[get_db] = override_get_db

    test_client = TestClient(app)

    yield test_client

    app.dependency_overrides.clear()
    test_client.close()


@pytest.fixture
def test_password() -> str:
    return TEST_PASSWORD


@pytest.fixture
def test_student(db: Session) -> User:
    return make_user(db, "student@example.com", RoleName.STUDENT, "Hanako", PlanId.LIGHT)


@pytest.fixture
def other_student(db: Session) -> User:
    return make_user(db, "other.student@example.com", RoleName.STUDENT, "Taro", PlanId.HALF)


@pytest.fixture
def test_parent(db: Session) -> User:
    return make_user(db, "parent@example.com", RoleName.PARENT, "Parent", PlanId.FREE)


@pytest.fixture
def test_teacher(db: Session) -> User:
    return make_user(db, "teacher@example.com", RoleName.TEACHER, "Sensei")


@pytest.fixture
def second_teacher(db: Session) -> User:
    return make_user(db, "teacher2@example.com", RoleName.TEACHER, "Sensei Two")


@pytest.fixture
def test_admin(db: Session) -> User:
    return make_user(db, "admin@example.com", RoleName.ADMIN, "Admin")


@pytest.fixture
def student_actor(test_student: User) -> Actor:
    return Actor.from_user(test_student)


@pytest.fixture
def other_student_actor(other_student: User) -> Actor:
    return Actor.from_user(other_student)


@pytest.fixture
def teacher_actor(test_teacher: User) -> Actor:
    return Actor.from_user(test_teacher)


@pytest.fixture
def admin_actor(test_admin: User) -> Actor:
    return Actor.from_user(test_admin)


@pytest.fixture
def auth_headers_student(test_student: User) -> dict:
    return auth_headers_for(test_student)


@pytest.fixture
def auth_headers_other_student(other_student: User) -> dict:
    return auth_headers_for(other_student)


@pytest.fixture
def auth_headers_teacher(test_teacher: User) -> dict:
    return auth_headers_for(test_teacher)


@pytest.fixture
def auth_headers_admin(test_admin: User) -> dict:
    return auth_headers_for(test_admin)


@pytest.fixture
def next_weekday() -> date:
    """A bookable day for route tests, which check against the real today."""
    return upcoming_weekday()


@pytest.fixture
def book_directly(db: Session):
    def _book(student: User, teacher: User, day: date, start: time, end: time) -> Reservation:
        return insert_confirmed(db, student, teacher, day, start, end)

    return _book


@pytest.fixture
def create_account(db: Session):
    def _create(email: str, role: RoleName = RoleName.STUDENT, name: str = "", plan=None) -> User:
        return make_user(db, email, role, name, plan)

    return _create
