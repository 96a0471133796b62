"""Tests for registration, login and profile endpoints."""
from datetime import datetime, timedelta

from jose import jwt

from conftest import auth, register
from medconnect import models
from medconnect.security import verify_token


def test_register_returns_public_user_and_token(client, db_session):
    body = register(client, "John Doe", "John.Doe@Example.com", phone="9876543220")

    assert body["name"] == "John Doe"
    assert body["email"] == "john.doe@example.com"
    assert body["phoneNumber"] == "9876543220"
    assert body["isDoctor"] is False
    assert body["isAdmin"] is False
    assert "password" not in body and "passwordHash" not in body

    assert verify_token(body["token"]) == body["id"]
    exp = datetime.utcfromtimestamp(jwt.get_unverified_claims(body["token"])["exp"])
    assert exp - datetime.utcnow() > timedelta(days=29)

    row = db_session.get(models.User, body["id"])
    assert row.password_hash != "secret123"


def test_register_doctor_flag(client):
    body = register(client, "Dr. Priya Patel", "priya.patel@example.com", is_doctor=True)
    assert body["isDoctor"] is True


def test_register_duplicate_email_keeps_single_record(client, db_session):
    register(client, "John Doe", "john.doe@example.com")

    resp = client.post("/api/users", json={"name": "Johnny", "email": "john.doe@example.com", "password": "x"})

    assert resp.status_code == 400
    assert resp.json() == {"success": False, "message": "User already exists"}
    assert db_session.query(models.User).filter_by(email="john.doe@example.com").count() == 1


def test_register_missing_fields(client):
    resp = client.post("/api/users", json={"email": "a@example.com"})

    assert resp.status_code == 400
    assert resp.json()["success"] is False


def test_register_blank_name_rejected(client):
    resp = client.post("/api/users", json={"name": "   ", "email": "a@example.com", "password": "pw"})

    assert resp.status_code == 400
    assert resp.json()["message"] == "Please provide name, email and password"


def test_login_success(client, patient):
    resp = client.post("/api/users/login", json={"email": "john.doe@example.com", "password": "secret123"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["id"] == patient["id"]
    assert verify_token(body["token"]) == patient["id"]


def test_login_failures_share_one_message(client, patient):
    wrong_password = client.post("/api/users/login", json={"email": "john.doe@example.com", "password": "nope"})
    unknown_email = client.post("/api/users/login", json={"email": "ghost@example.com", "password": "secret123"})

    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json() == {"success": False, "message": "Invalid email or password"}


def test_profile_requires_token(client):
    resp = client.get("/api/users/profile")

    assert resp.status_code == 401
    assert resp.json()["success"] is False


def test_profile_rejects_bad_token(client, patient):
    resp = client.get("/api/users/profile", headers=auth(patient["token"] + "x"))
    assert resp.status_code == 401


def test_get_profile(client, patient):
    resp = client.get("/api/users/profile", headers=auth(patient["token"]))

    assert resp.status_code == 200
    assert resp.json()["email"] == "john.doe@example.com"
    assert "token" not in resp.json()


def test_update_profile_rehashes_password_and_issues_token(client, patient):
    resp = client.put("/api/users/profile", headers=auth(patient["token"]), json={
        "name": "John Q. Doe",
        "password": "new-secret",
    })

    assert resp.status_code == 200
    body = resp.json()
    assert body["name"] == "John Q. Doe"
    assert body["email"] == "john.doe@example.com"
    assert verify_token(body["token"]) == patient["id"]

    old = client.post("/api/users/login", json={"email": "john.doe@example.com", "password": "secret123"})
    new = client.post("/api/users/login", json={"email": "john.doe@example.com", "password": "new-secret"})
    assert old.status_code == 401
    assert new.status_code == 200


def test_update_profile_to_taken_email(client, patient, other_patient):
    resp = client.put("/api/users/profile", headers=auth(patient["token"]), json={"email": "jane.smith@example.com"})

    assert resp.status_code == 400
    assert resp.json()["message"] == "User already exists"


def test_health_and_root(client):
    assert client.get("/health").json() == {"status": "ok"}
    assert client.get("/").json()["apiEndpoints"]["doctors"] == "/api/doctors"


def test_unknown_route_uses_error_envelope(client):
    resp = client.get("/api/nothing-here")

    assert resp.status_code == 404
    assert resp.json()["success"] is False
