from docbook.core.database import SessionLocal
from docbook.core.security import UserRole, verify_password
from docbook.models.appointment import Appointment, AppointmentStatus
from docbook.models.user import User
from docbook.services.seed_service import SEED_PASSWORD, seed_database


def test_seed_populates_empty_database(test_db):
    db = SessionLocal()
    try:
        assert seed_database(db) is True

        assert db.query(User).filter(User.role == UserRole.DOCTOR).count() == 5
        assert db.query(User).filter(User.role == UserRole.PATIENT).count() == 5

        statuses = sorted(a.status.value for a in db.query(Appointment).all())
        assert statuses == ["COMPLETED", "PENDING", "PENDING"]

        doctor = db.query(User).filter(User.email == "john.smith@example.com").one()
        assert doctor.specialization == "Cardiology"
        assert verify_password(SEED_PASSWORD, doctor.password_hash)
    finally:
        db.close()


def test_seed_is_skipped_when_users_exist(test_db):
    db = SessionLocal()
    try:
        seed_database(db)
        assert seed_database(db) is False
        assert db.query(User).count() == 10
        assert db.query(Appointment).filter(Appointment.status == AppointmentStatus.PENDING).count() == 2
    finally:
        db.close()


def test_seeded_users_can_log_in(client):
    db = SessionLocal()
    try:
        seed_database(db)
    finally:
        db.close()

    response = client.post(
        "/api/v1/auth/login",
        json={"email": "alice.johnson@example.com", "password": SEED_PASSWORD},
    )
    assert response.status_code == 200
    assert response.json()["data"]["user"]["role"] == "PATIENT"
