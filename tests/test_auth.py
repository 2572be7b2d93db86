import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.api.deps import get_storage

class TestAuthentication:

    def test_register_user(self, client, patient_payload):
        """Test user registration."""
        response = client.post("/api/auth/register", json=patient_payload)
        assert response.status_code == 200

        user = response.json()["user"]
        assert user["email"] == patient_payload["email"]
        assert user["role"] == "patient"
        assert user["firstName"] == "Test"
        assert "id" in user
        assert "createdAt" in user
        assert "password" not in user

    def test_register_accepts_snake_case(self, client, patient_payload):
        """Test registration with snake_case field names."""
        payload = patient_payload.copy()
        payload["first_name"] = payload.pop("firstName")
        payload["last_name"] = payload.pop("lastName")

        response = client.post("/api/auth/register", json=payload)
        assert response.status_code == 200
        assert response.json()["user"]["lastName"] == "Patient"

    def test_register_duplicate_email(self, client, storage, patient_payload):
        """Test registration with duplicate email."""
        client.post("/api/auth/register", json=patient_payload)

        response = client.post("/api/auth/register", json=patient_payload)
        assert response.status_code == 400
        assert response.json() == {"message": "User already exists"}

        matches = [u for u in storage.users.values() if u.email == patient_payload["email"]]
        assert len(matches) == 1

    def test_register_missing_fields(self, client):
        """Test registration with missing fields."""
        response = client.post("/api/auth/register", json={"email": "a@example.com"})
        assert response.status_code == 400
        assert response.json() == {"message": "Invalid data"}

    def test_register_invalid_role(self, client, patient_payload):
        """Test registration with an unknown role."""
        patient_payload["role"] = "admin"
        response = client.post("/api/auth/register", json=patient_payload)
        assert response.status_code == 400

    def test_register_doctor_creates_profile(self, client, storage, doctor_payload):
        """Test doctor registration also creates a doctor profile."""
        response = client.post("/api/auth/register", json=doctor_payload)
        assert response.status_code == 200
        user_id = response.json()["user"]["id"]

        doctor = storage.get_doctor_by_user_id(user_id)
        assert doctor is not None
        assert doctor.specialization == "Neurologist"
        assert doctor.experience == 10
        assert doctor.rating == "4.0"
        assert doctor.review_count == 0
        assert doctor.available is True

    def test_register_doctor_with_zero_experience(self, client, storage, doctor_payload):
        """Test a doctor with no experience yet still gets a profile."""
        doctor_payload["experience"] = 0
        response = client.post("/api/auth/register", json=doctor_payload)
        assert response.status_code == 200

        doctor = storage.get_doctor_by_user_id(response.json()["user"]["id"])
        assert doctor is not None
        assert doctor.experience == 0

    def test_register_doctor_without_specialization(self, client, storage, doctor_payload):
        """Test doctor registration without profile fields creates only the user."""
        del doctor_payload["specialization"]
        response = client.post("/api/auth/register", json=doctor_payload)
        assert response.status_code == 200

        user_id = response.json()["user"]["id"]
        assert storage.get_doctor_by_user_id(user_id) is None

    def test_register_patient_ignores_doctor_fields(self, client, storage, patient_payload):
        """Test patients never get a doctor profile."""
        patient_payload["specialization"] = "Cardiologist"
        patient_payload["experience"] = 3
        response = client.post("/api/auth/register", json=patient_payload)

        user_id = response.json()["user"]["id"]
        assert storage.get_doctor_by_user_id(user_id) is None

    def test_register_rolls_back_user_when_profile_fails(self, storage, doctor_payload, monkeypatch):
        """Test a failing doctor profile does not leave an orphaned user."""
        def broken_create_doctor(doctor_data):
            raise RuntimeError("doctor table unavailable")

        monkeypatch.setattr(storage, "create_doctor", broken_create_doctor)
        app.dependency_overrides[get_storage] = lambda: storage
        try:
            with TestClient(app, raise_server_exceptions=False) as test_client:
                response = test_client.post("/api/auth/register", json=doctor_payload)
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 500
        assert "message" in response.json()
        assert storage.get_user_by_email(doctor_payload["email"]) is None

    def test_password_is_stored_hashed(self, client, storage, patient_payload):
        """Test the stored password is not the plain text."""
        client.post("/api/auth/register", json=patient_payload)

        user = storage.get_user_by_email(patient_payload["email"])
        assert user.password != patient_payload["password"]

    def test_login_success(self, client, patient_payload):
        """Test successful login."""
        client.post("/api/auth/register", json=patient_payload)

        response = client.post("/api/auth/login", json={
            "email": patient_payload["email"],
            "password": patient_payload["password"]
        })
        assert response.status_code == 200

        user = response.json()["user"]
        assert user["email"] == patient_payload["email"]
        assert "password" not in user

    def test_login_seeded_doctor(self, client):
        """Test the demo doctors can log in."""
        response = client.post("/api/auth/login", json={
            "email": "sarah.johnson@medicare.com",
            "password": "password123"
        })
        assert response.status_code == 200
        assert response.json()["user"]["role"] == "doctor"

    def test_login_invalid_credentials(self, client):
        """Test login with unknown email."""
        response = client.post("/api/auth/login", json={
            "email": "nonexistent@example.com",
            "password": "wrongpassword"
        })
        assert response.status_code == 401
        assert response.json() == {"message": "Invalid credentials"}

    def test_login_wrong_password(self, client, patient_payload):
        """Test login with wrong password."""
        client.post("/api/auth/register", json=patient_payload)

        response = client.post("/api/auth/login", json={
            "email": patient_payload["email"],
            "password": "wrongpassword"
        })
        assert response.status_code == 401

    @pytest.mark.parametrize("body", [
        {"email": "not-an-email", "password": "secret"},
        {"email": "patient@example.com", "password": ""},
        {"email": "patient@example.com"},
    ])
    def test_login_malformed(self, client, body):
        """Test login with malformed body."""
        response = client.post("/api/auth/login", json=body)
        assert response.status_code == 400
        assert response.json() == {"message": "Invalid data"}
