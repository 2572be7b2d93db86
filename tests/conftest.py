import os

# Set testing environment before the app is imported
os.environ["TESTING"] = "1"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.api.deps import get_storage
from app.core.config import settings
from app.core.database import get_db, init_db
from app.services.storage import MemStorage
from app.services.sql_storage import SqlStorage

@pytest.fixture
def storage():
    """Fresh seeded in-memory store for each test."""
    return MemStorage()

@pytest.fixture
def sql_engine():
    """Private in-memory SQLite database, without tables."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    yield engine
    engine.dispose()

@pytest.fixture
def sql_storage(sql_engine):
    """Seeded SqlStorage over the private database."""
    init_db(bind=sql_engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=sql_engine)
    db = TestingSessionLocal()
    store = SqlStorage(db)
    store.seed()
    try:
        yield store
    finally:
        db.close()

@pytest.fixture(params=["memory", "database"])
def any_storage(request):
    """Run a test against both backends."""
    if request.param == "memory":
        return request.getfixturevalue("storage")
    return request.getfixturevalue("sql_storage")

@pytest.fixture
def client(storage):
    app.dependency_overrides[get_storage] = lambda: storage
    with TestClient(app, base_url="http://testserver") as test_client:
        yield test_client
    app.dependency_overrides.clear()

@pytest.fixture(params=["memory", "database"])
def backend_client(request, monkeypatch):
    """Client running against either backend.

    The database run goes through the real get_storage dependency with the
    request session replaced by one bound to the private database.
    """
    if request.param == "memory":
        yield request.getfixturevalue("client")
        return

    store = request.getfixturevalue("sql_storage")

    def override_get_db():
        yield store.db

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app, base_url="http://testserver") as test_client:
        # Switch after startup so the app does not touch the default database
        monkeypatch.setattr(settings, "STORAGE_BACKEND", "database")
        yield test_client
    app.dependency_overrides.clear()

# Test data
patient_data = {
    "email": "patient@example.com",
    "password": "TestPassword123",
    "firstName": "Test",
    "lastName": "Patient",
    "phone": "555-0199",
    "role": "patient"
}

doctor_data = {
    "email": "new.doctor@example.com",
    "password": "TestPassword123",
    "firstName": "Grace",
    "lastName": "Hopper",
    "phone": "555-0150",
    "role": "doctor",
    "specialization": "Neurologist",
    "experience": "10"
}

@pytest.fixture
def registered_patient(client):
    response = client.post("/api/auth/register", json=patient_data)
    assert response.status_code == 200
    return response.json()["user"]

@pytest.fixture
def seeded_doctor(client):
    return client.get("/api/doctors").json()[0]

@pytest.fixture
def booking(registered_patient, seeded_doctor):
    return {
        "patientId": registered_patient["id"],
        "doctorId": seeded_doctor["id"],
        "date": "2025-03-14",
        "time": "10:30 AM",
        "reason": "Annual checkup",
        "type": "in-person"
    }

@pytest.fixture
def patient_payload():
    return dict(patient_data)

@pytest.fixture
def doctor_payload():
    return dict(doctor_data)
