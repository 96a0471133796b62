"""Pytest configuration and fixtures."""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from main import app
from medconnect import database, models

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db_session():
    database.Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        database.Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db_session):
    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[database.get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def auth(token):
    return {"Authorization": f"Bearer {token}"}


def register(client, name, email, password="secret123", is_doctor=False, phone="9876500000"):
    resp = client.post("/api/users", json={
        "name": name,
        "email": email,
        "password": password,
        "isDoctor": is_doctor,
        "phoneNumber": phone,
    })
    assert resp.status_code == 201, resp.text
    return resp.json()


@pytest.fixture
def patient(client):
    return register(client, "John Doe", "john.doe@example.com")


@pytest.fixture
def other_patient(client):
    return register(client, "Jane Smith", "jane.smith@example.com")


@pytest.fixture
def admin(client, db_session):
    user = register(client, "Admin User", "admin@example.com")
    row = db_session.get(models.User, user["id"])
    row.is_admin = True
    db_session.commit()
    return user


@pytest.fixture
def doctor_user(client):
    return register(client, "Dr. Rajesh Sharma", "rajesh.sharma@example.com", is_doctor=True)


@pytest.fixture
def doctor(client, admin, doctor_user):
    resp = client.post("/api/doctors", headers=auth(admin["token"]), json={
        "user": doctor_user["id"],
        "specialization": "Cardiology",
        "experience": 15,
        "fees": 1800,
        "phone": "9876543201",
        "address": "Sharma Heart Clinic, 123 Gandhi Road, Mumbai",
    })
    assert resp.status_code == 201, resp.text
    return resp.json()


@pytest.fixture
def appointment(client, patient, doctor):
    resp = client.post("/api/appointments", headers=auth(patient["token"]), json={
        "doctor": doctor["id"],
        "appointmentDate": "2026-11-02",
        "timeSlot": "10:00 AM",
        "reason": "Chest pain on exertion",
    })
    assert resp.status_code == 201, resp.text
    return resp.json()
