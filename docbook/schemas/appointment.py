from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..models.appointment import AppointmentStatus
from .common import parse_datetime
from .user import DoctorSummary, PatientSummary


class AppointmentCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    doctor_id: str = Field(..., alias="doctorId", min_length=1)
    date: str

    @field_validator("date")
    @classmethod
    def date_must_parse(cls, value: str) -> str:
        try:
            parse_datetime(value)
        except ValueError:
            raise ValueError("Invalid date format. Please provide a valid date.")
        return value


class AppointmentStatusUpdate(BaseModel):
    appointment_id: str = Field(..., min_length=1)
    status: AppointmentStatus


class AppointmentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: str
    doctor_id: str = Field(serialization_alias="doctorId")
    patient_id: str = Field(serialization_alias="patientId")
    date: datetime
    status: AppointmentStatus
    created_at: Optional[datetime] = Field(default=None, serialization_alias="createdAt")
    doctor: Optional[DoctorSummary] = None
    patient: Optional[PatientSummary] = None
