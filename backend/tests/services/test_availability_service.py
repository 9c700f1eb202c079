# backend/tests/services/test_availability_service.py
from datetime import date, time
from unittest.mock import patch

import pytest

from tutorslot.core.exceptions import RepositoryException, StorageException
from tutorslot.services.availability_service import AvailabilityService

LESSON_DAY = date(2030, 1, 9)


@pytest.fixture
def availability_service(db) -> AvailabilityService:
    return AvailabilityService(db)


def _booked(entries):
    return [entry.slot.start_time for entry in entries if entry.booked]


def test_booked_slots_for_teacher_and_day(
    db, availability_service, book_directly, student_actor, test_student, test_teacher, second_teacher
):
    book_directly(test_student, test_teacher, LESSON_DAY, time(10, 0), time(12, 0))
    book_directly(test_student, second_teacher, LESSON_DAY, time(15, 0), time(16, 0))
    book_directly(test_student, test_teacher, date(2030, 1, 10), time(9, 0), time(10, 0))
    cancelled = book_directly(test_student, test_teacher, LESSON_DAY, time(16, 0), time(17, 0))
    cancelled.status = "cancelled"
    db.commit()

    entries = availability_service.available_slots(student_actor, LESSON_DAY, test_teacher.id)

    assert len(entries) == 9
    assert _booked(entries) == ["10:00", "11:00"]


def test_free_day(availability_service, student_actor, test_teacher):
    entries = availability_service.available_slots(student_actor, LESSON_DAY, test_teacher.id)

    assert _booked(entries) == []


def test_storage_failure(availability_service, student_actor, test_teacher):
    with patch.object(
        availability_service.repository,
        "get_confirmed_for_teacher_on_date",
        side_effect=RepositoryException("boom"),
    ):
        with pytest.raises(StorageException) as exc_info:
            availability_service.available_slots(student_actor, LESSON_DAY, test_teacher.id)

    assert exc_info.value.retryable
