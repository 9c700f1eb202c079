# backend/tests/routes/test_availability_routes.py
from datetime import time


def test_time_slot_grid(client):
    response = client.get("/api/v1/availability/time-slots")

    assert response.status_code == 200
    data = response.json()
    assert data["open"] == "09:00"
    assert data["close"] == "18:00"
    assert data["duration_minutes"] == 60
    assert len(data["slots"]) == 9
    assert data["slots"][-1] == {"start_time": "17:00", "end_time": "18:00", "label": "17:00 - 18:00"}


def test_day_availability_flags_booked_slots(
    client, auth_headers_other_student, test_student, test_teacher, book_directly, next_weekday
):
    book_directly(test_student, test_teacher, next_weekday, time(13, 0), time(14, 0))

    response = client.get(
        "/api/v1/availability/slots",
        params={"date": next_weekday.isoformat(), "teacher_id": test_teacher.id},
        headers=auth_headers_other_student,
    )

    assert response.status_code == 200
    data = response.json()
    assert data["date"] == next_weekday.isoformat()
    assert [s["slot"]["start_time"] for s in data["slots"] if s["booked"]] == ["13:00"]
    assert len(data["slots"]) == 9


def test_day_availability_requires_login(client, test_teacher, next_weekday):
    response = client.get(
        "/api/v1/availability/slots",
        params={"date": next_weekday.isoformat(), "teacher_id": test_teacher.id},
    )

    assert response.status_code == 401


def test_day_availability_requires_date(client, auth_headers_student, test_teacher):
    response = client.get(
        "/api/v1/availability/slots",
        params={"teacher_id": test_teacher.id},
        headers=auth_headers_student,
    )

    assert response.status_code == 400
