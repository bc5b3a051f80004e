from sqlalchemy import Column, String, ForeignKey, DateTime, Date, Index, Enum as SQLEnum, text
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
import enum

from ..core.database import Base
from .user import generate_uuid


class AppointmentStatus(str, enum.Enum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


# Statuses that occupy a doctor's day
ACTIVE_STATUSES = (AppointmentStatus.PENDING, AppointmentStatus.COMPLETED)


class Appointment(Base):
    __tablename__ = "appointments"

    id = Column(String(36), primary_key=True, default=generate_uuid)

    # Relationships
    doctor_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    patient_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)

    # Appointment details
    date = Column(DateTime, nullable=False, index=True)
    appointment_day = Column(Date, nullable=False)
    status = Column(
        SQLEnum(AppointmentStatus, name="appointment_status"),
        nullable=False,
        default=AppointmentStatus.PENDING,
    )

    # Tracking
    created_at = Column(DateTime, server_default=func.now())

    # Relationships
    doctor = relationship("User", foreign_keys=[doctor_id], back_populates="doctor_appointments")
    patient = relationship("User", foreign_keys=[patient_id], back_populates="patient_appointments")

    __table_args__ = (
        # One active booking per doctor per day; cancelled rows free the day
        Index(
            "uq_appointments_doctor_active_day",
            "doctor_id",
            "appointment_day",
            unique=True,
            postgresql_where=text("status <> 'CANCELLED'"),
            sqlite_where=text("status <> 'CANCELLED'"),
        ),
    )

    def __repr__(self):
        return f"<Appointment(id={self.id}, patient_id={self.patient_id}, doctor_id={self.doctor_id}, date='{self.date}')>"
