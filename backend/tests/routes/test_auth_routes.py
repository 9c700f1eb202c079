# backend/tests/routes/test_auth_routes.py
from tutorslot.auth import create_access_token


def test_register(client):
    response = client.post(
        "/api/v1/auth/register",
        json={"email": "new@example.com", "password": "Secret123!", "name": "New"},
    )

    assert response.status_code == 201
    data = response.json()
    assert data["email"] == "new@example.com"
    assert data["role"] == "student"
    assert "hashed_password" not in data


def test_register_duplicate_email(client, test_student):
    response = client.post(
        "/api/v1/auth/register",
        json={"email": "student@example.com", "password": "Secret123!"},
    )

    assert response.status_code == 409
    assert response.json()["code"] == "EMAIL_TAKEN"


def test_register_teacher_is_forbidden(client):
    response = client.post(
        "/api/v1/auth/register",
        json={"email": "wannabe@example.com", "password": "Secret123!", "role": "teacher"},
    )

    assert response.status_code == 403


def test_register_invalid_email(client):
    response = client.post(
        "/api/v1/auth/register", json={"email": "not-an-email", "password": "Secret123!"}
    )

    assert response.status_code == 400


def test_login_and_me(client, test_student, test_password):
    response = client.post(
        "/api/v1/auth/login",
        data={"username": "student@example.com", "password": test_password},
    )

    assert response.status_code == 200
    token = response.json()["access_token"]

    me = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert me.status_code == 200
    assert me.json()["id"] == test_student.id
    assert me.json()["selected_course"] == "light"


def test_login_wrong_password(client, test_student):
    response = client.post(
        "/api/v1/auth/login",
        data={"username": "student@example.com", "password": "wrong-password"},
    )

    assert response.status_code == 401
    assert response.json()["code"] == "INVALID_CREDENTIALS"


def test_invalid_token(client):
    response = client.get("/api/v1/auth/me", headers={"Authorization": "Bearer not-a-token"})

    assert response.status_code == 401


def test_token_for_deleted_account(client):
    token = create_access_token(data={"sub": "ghost@example.com"})

    response = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401


def test_deactivated_account_is_rejected(client, db, test_student, auth_headers_student):
    test_student.is_active = False
    db.commit()

    response = client.get("/api/v1/auth/me", headers=auth_headers_student)

    assert response.status_code == 401
