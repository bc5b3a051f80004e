from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class DoctorSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str
    specialization: Optional[str] = None
    photo_url: Optional[str] = None


class PatientSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str
    photo_url: Optional[str] = None


class DoctorListItem(DoctorSummary):
    created_at: Optional[datetime] = Field(default=None, serialization_alias="createdAt")


class PatientListItem(PatientSummary):
    created_at: Optional[datetime] = Field(default=None, serialization_alias="createdAt")
