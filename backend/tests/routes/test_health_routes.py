# backend/tests/routes/test_health_routes.py


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_metrics_exposition(client, auth_headers_student, test_teacher, next_weekday):
    client.post(
        "/api/v1/reservations",
        json={
            "teacher_id": test_teacher.id,
            "course_id": "light",
            "date": next_weekday.isoformat(),
            "start_time": "09:00",
            "end_time": "10:00",
        },
        headers=auth_headers_student,
    )

    response = client.get("/metrics")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/plain")
    assert "tutorslot_service_operations_total" in response.text
    assert "tutorslot_reservation_outcomes_total" in response.text
    assert "tutorslot_slot_conflicts_total" in response.text
