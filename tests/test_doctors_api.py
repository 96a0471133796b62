"""Tests for the doctor directory endpoints."""
import pytest
from sqlalchemy import text

from conftest import auth, register
from medconnect import models
from medconnect.schedule import DAYS, default_schedule

FULL_WEEK = [
    {"day": "Monday", "startTime": "10:00", "endTime": "18:00", "isAvailable": True},
    {"day": "Tuesday", "startTime": "10:00", "endTime": "18:00", "isAvailable": False},
    {"day": "Wednesday", "startTime": "10:00", "endTime": "18:00", "isAvailable": True},
    {"day": "Thursday", "startTime": "10:00", "endTime": "18:00", "isAvailable": False},
    {"day": "Friday", "startTime": "10:00", "endTime": "18:00", "isAvailable": True},
    {"day": "Saturday", "startTime": "10:00", "endTime": "13:00", "isAvailable": True},
    {"day": "Sunday", "startTime": "10:00", "endTime": "13:00", "isAvailable": False},
]


def _create(client, admin, user, **fields):
    body = {"user": user["id"], "specialization": "Cardiology", **fields}
    return client.post("/api/doctors", headers=auth(admin["token"]), json=body)


def test_create_profile_defaults(client, doctor, doctor_user):
    assert doctor["name"] == "Dr. Rajesh Sharma"
    assert doctor["user"] == {"id": doctor_user["id"], "name": "Dr. Rajesh Sharma", "email": "rajesh.sharma@example.com"}
    assert doctor["fees"] == 1800
    assert doctor["rating"] == 0
    assert doctor["numReviews"] == 0
    assert doctor["image"] == "/images/doctor.jpg"
    assert doctor["timings"] == default_schedule()
    assert doctor["availableDays"] == ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday"]


def test_create_requires_admin(client, doctor_user):
    resp = client.post("/api/doctors", headers=auth(doctor_user["token"]), json={"specialization": "Cardiology"})

    assert resp.status_code == 403
    assert resp.json()["success"] is False


def test_create_requires_token(client):
    resp = client.post("/api/doctors", json={"specialization": "Cardiology"})
    assert resp.status_code == 401


def test_create_for_non_doctor_user_rejected(client, admin, patient):
    resp = _create(client, admin, patient)

    assert resp.status_code == 400
    assert resp.json()["message"] == "User is not registered as a doctor"


def test_second_profile_for_same_user_rejected(client, admin, doctor, doctor_user, db_session):
    resp = _create(client, admin, doctor_user, specialization="Neurology")

    assert resp.status_code == 400
    assert db_session.query(models.Doctor).filter_by(user_id=doctor_user["id"]).count() == 1


def test_structured_schedule_round_trips(client, admin, doctor_user):
    created = _create(client, admin, doctor_user, timings=FULL_WEEK)
    assert created.status_code == 201

    fetched = client.get(f"/api/doctors/{created.json()['id']}").json()

    assert fetched["timings"] == FULL_WEEK
    assert fetched["availableDays"] == ["Monday", "Wednesday", "Friday", "Saturday"]


def test_legacy_pair_schedule_is_expanded(client, admin, doctor_user):
    resp = _create(client, admin, doctor_user, timings=["10:00", "18:00"])

    timings = resp.json()["timings"]
    assert [t["day"] for t in timings] == DAYS
    assert {(t["startTime"], t["endTime"]) for t in timings} == {("10:00", "18:00")}


def test_badly_formatted_time_rejected(client, admin, doctor_user):
    resp = _create(client, admin, doctor_user, timings=[{"day": "Monday", "startTime": "9am"}])

    assert resp.status_code == 400
    assert resp.json()["success"] is False


def test_negative_fees_rejected(client, admin, doctor_user):
    resp = _create(client, admin, doctor_user, fees=-1)
    assert resp.status_code == 400


def test_get_unknown_doctor(client):
    resp = client.get("/api/doctors/999")

    assert resp.status_code == 404
    assert resp.json() == {"success": False, "message": "Doctor not found"}


@pytest.fixture
def directory(client, admin):
    people = [
        ("Dr. Rajesh Sharma", "rajesh@example.com", "Cardiology"),
        ("Dr. Sunil Verma", "sunil@example.com", "Cardiology"),
        ("Dr. Sunita Sharma", "sunita@example.com", "ENT"),
        ("Dr. Priya Patel", "priya@example.com", "Dermatology"),
        ("Dr. Kavya Iyer", "kavya@example.com", "cardiology"),
    ]
    for name, email, specialty in people:
        user = register(client, name, email, is_doctor=True)
        assert _create(client, admin, user, specialization=specialty).status_code == 201


def test_list_filters_by_exact_specialization(client, directory):
    doctors = client.get("/api/doctors", params={"specialization": "Cardiology"}).json()

    assert sorted(d["name"] for d in doctors) == ["Dr. Rajesh Sharma", "Dr. Sunil Verma"]
    assert all(d["specialization"] == "Cardiology" for d in doctors)


def test_list_search_is_case_insensitive_substring(client, directory):
    doctors = client.get("/api/doctors", params={"search": "sharma"}).json()
    assert sorted(d["name"] for d in doctors) == ["Dr. Rajesh Sharma", "Dr. Sunita Sharma"]

    doctors = client.get("/api/doctors", params={"search": "SUN"}).json()
    assert sorted(d["name"] for d in doctors) == ["Dr. Sunil Verma", "Dr. Sunita Sharma"]


def test_list_limit(client, directory):
    assert len(client.get("/api/doctors").json()) == 5
    assert len(client.get("/api/doctors", params={"limit": 2}).json()) == 2


def test_list_normalizes_legacy_stored_schedule(client, doctor, db_session):
    # raw SQL so the column type does not normalize on the way in
    db_session.execute(
        text("UPDATE doctors SET timings = :timings WHERE id = :id"),
        {"timings": '["10:00", "18:00"]', "id": doctor["id"]},
    )
    db_session.commit()

    timings = client.get("/api/doctors").json()[0]["timings"]

    assert [t["day"] for t in timings] == DAYS
    assert {(t["startTime"], t["endTime"]) for t in timings} == {("10:00", "18:00")}


def test_owner_updates_only_sent_fields(client, doctor, doctor_user):
    resp = client.put(f"/api/doctors/{doctor['id']}", headers=auth(doctor_user["token"]), json={"fees": 2000})

    assert resp.status_code == 200
    body = resp.json()
    assert body["fees"] == 2000
    assert body["specialization"] == "Cardiology"
    assert body["address"] == "Sharma Heart Clinic, 123 Gandhi Road, Mumbai"
    assert body["timings"] == doctor["timings"]


def test_update_schedule_recomputes_available_days(client, doctor, doctor_user):
    resp = client.put(f"/api/doctors/{doctor['id']}", headers=auth(doctor_user["token"]), json={
        "timings": [{"day": "Monday", "isAvailable": False}, {"day": "Sunday", "isAvailable": True}],
    })

    body = resp.json()
    assert len(body["timings"]) == 7
    assert body["availableDays"] == ["Tuesday", "Wednesday", "Thursday", "Friday", "Sunday"]


def test_admin_may_update_any_profile(client, doctor, admin):
    resp = client.put(f"/api/doctors/{doctor['id']}", headers=auth(admin["token"]), json={"rating": 4.5, "numReviews": 3})

    assert resp.status_code == 200
    assert resp.json()["rating"] == 4.5
    assert resp.json()["numReviews"] == 3


def test_stranger_cannot_update_profile(client, doctor, patient):
    resp = client.put(f"/api/doctors/{doctor['id']}", headers=auth(patient["token"]), json={"fees": 1})

    assert resp.status_code == 403
    assert client.get(f"/api/doctors/{doctor['id']}").json()["fees"] == 1800


def test_update_unknown_doctor(client, admin):
    resp = client.put("/api/doctors/999", headers=auth(admin["token"]), json={"fees": 1})
    assert resp.status_code == 404


def test_legacy_stored_schedule_keeps_stored_open_days(client, doctor, db_session):
    db_session.execute(
        text("UPDATE doctors SET timings = :timings, available_days = :days WHERE id = :id"),
        {"timings": '["10:00", "18:00"]', "days": '["Tuesday", "Thursday", "Saturday"]', "id": doctor["id"]},
    )
    db_session.commit()

    fetched = client.get(f"/api/doctors/{doctor['id']}").json()

    open_days = [t["day"] for t in fetched["timings"] if t["isAvailable"]]
    assert open_days == ["Tuesday", "Thursday", "Saturday"]
    assert fetched["availableDays"] == open_days
    assert {(t["startTime"], t["endTime"]) for t in fetched["timings"]} == {("10:00", "18:00")}


def test_owner_cannot_change_rating_or_review_count(client, doctor, doctor_user):
    resp = client.put(f"/api/doctors/{doctor['id']}", headers=auth(doctor_user["token"]), json={
        "rating": 5,
        "numReviews": 9999,
        "bio": "Interventional cardiologist",
    })

    assert resp.status_code == 200
    body = resp.json()
    assert body["rating"] == 0
    assert body["numReviews"] == 0
    assert body["bio"] == "Interventional cardiologist"
