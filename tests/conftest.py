import os
from datetime import datetime, timedelta

import pytest

# Configure the app for tests before it is imported
os.environ["TESTING"] = "1"
os.environ.setdefault("TEST_DATABASE_URL", "sqlite:///./test.db")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("ENVIRONMENT", "test")

from fastapi.testclient import TestClient

from docbook.main import app
from docbook.core.database import Base, engine
from docbook.core.rate_limit import get_rate_limit_store

API = "/api/v1"


@pytest.fixture(scope="function")
def test_db():
    # Create tables
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def reset_rate_limits():
    get_rate_limit_store().reset()
    yield
    get_rate_limit_store().reset()


@pytest.fixture
def client(test_db):
    with TestClient(app, base_url="http://testserver") as test_client:
        yield test_client


def patient_data(**overrides):
    data = {
        "name": "Test Patient",
        "email": "patient@example.com",
        "password": "password123",
        "photo_url": "https://example.com/patient.jpg",
    }
    data.update(overrides)
    return data


def doctor_data(**overrides):
    data = {
        "name": "Dr. Test Doctor",
        "email": "doctor@example.com",
        "password": "password123",
        "specialization": "Cardiology",
        "photo_url": "https://example.com/doctor.jpg",
    }
    data.update(overrides)
    return data


def register_and_login(client, role, data):
    response = client.post(f"{API}/auth/register/{role}", json=data)
    assert response.status_code == 201, response.text

    login_response = client.post(
        f"{API}/auth/login",
        json={"email": data["email"], "password": data["password"]},
    )
    assert login_response.status_code == 200, login_response.text
    body = login_response.json()["data"]
    return {
        "id": body["user"]["id"],
        "token": body["token"],
        "headers": {"Authorization": f"Bearer {body['token']}"},
    }


@pytest.fixture
def patient(client):
    return register_and_login(client, "patient", patient_data())


@pytest.fixture
def other_patient(client):
    return register_and_login(client, "patient", patient_data(name="Other Patient", email="other.patient@example.com"))


@pytest.fixture
def doctor(client):
    return register_and_login(client, "doctor", doctor_data())


@pytest.fixture
def other_doctor(client):
    return register_and_login(
        client, "doctor", doctor_data(name="Dr. Other", email="other.doctor@example.com", specialization="Neurology")
    )


def days_from_now(days, hour=10):
    moment = datetime.now() + timedelta(days=days)
    return moment.replace(hour=hour, minute=0, second=0, microsecond=0).isoformat()
