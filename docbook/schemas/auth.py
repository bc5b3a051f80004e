from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field

from ..core.security import UserRole


class PatientRegister(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    photo_url: Optional[str] = None


class DoctorRegister(PatientRegister):
    # Checked by AuthService so the missing case gets its own message
    specialization: Optional[str] = None


class UserLogin(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class UserResponse(BaseModel):
    """Public projection of a user; never carries the password hash."""
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: str
    name: str
    email: str
    role: UserRole
    specialization: Optional[str] = None
    photo_url: Optional[str] = None
    created_at: Optional[datetime] = Field(default=None, serialization_alias="createdAt")


class LoginResponse(BaseModel):
    user: UserResponse
    token: str
