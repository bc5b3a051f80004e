from datetime import datetime, timedelta
from sqlalchemy.orm import Session
import logging

from ..models.appointment import Appointment, AppointmentStatus
from ..models.user import User
from ..core.security import UserRole, get_password_hash

logger = logging.getLogger(__name__)

SEED_PASSWORD = "password123"

SEED_DOCTORS = [
    ("Dr. John Smith", "john.smith@example.com", "Cardiology"),
    ("Dr. Sarah Johnson", "sarah.johnson@example.com", "Dermatology"),
    ("Dr. Michael Brown", "michael.brown@example.com", "Neurology"),
    ("Dr. Emily Davis", "emily.davis@example.com", "Pediatrics"),
    ("Dr. Robert Wilson", "robert.wilson@example.com", "Orthopedics"),
]

SEED_PATIENTS = [
    ("Alice Johnson", "alice.johnson@example.com"),
    ("Bob Smith", "bob.smith@example.com"),
    ("Carol Davis", "carol.davis@example.com"),
    ("David Wilson", "david.wilson@example.com"),
    ("Eva Brown", "eva.brown@example.com"),
]


def seed_database(db: Session) -> bool:
    """Populate an empty database with sample doctors, patients and appointments.

    Returns False without touching anything when users already exist.
    """
    if db.query(User).count() > 0:
        logger.info("Database already seeded")
        return False

    password_hash = get_password_hash(SEED_PASSWORD)

    doctors = [
        User(
            name=name,
            email=email,
            password_hash=password_hash,
            role=UserRole.DOCTOR,
            specialization=specialization,
            photo_url=f"https://example.com/doctor{index}.jpg",
        )
        for index, (name, email, specialization) in enumerate(SEED_DOCTORS, start=1)
    ]
    patients = [
        User(
            name=name,
            email=email,
            password_hash=password_hash,
            role=UserRole.PATIENT,
            photo_url=f"https://example.com/patient{index}.jpg",
        )
        for index, (name, email) in enumerate(SEED_PATIENTS, start=1)
    ]
    db.add_all(doctors + patients)
    db.flush()

    now = datetime.now()
    bookings = [
        (doctors[0], patients[0], now + timedelta(days=1), AppointmentStatus.PENDING),
        (doctors[1], patients[1], now + timedelta(days=2), AppointmentStatus.PENDING),
        (doctors[2], patients[2], now - timedelta(days=1), AppointmentStatus.COMPLETED),
    ]
    db.add_all([
        Appointment(
            doctor_id=doctor.id,
            patient_id=patient.id,
            date=date,
            appointment_day=date.date(),
            status=appointment_status,
        )
        for doctor, patient, date, appointment_status in bookings
    ])
    db.commit()

    logger.info(f"Created {len(doctors)} doctors, {len(patients)} patients and {len(bookings)} appointments")
    return True
