from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ...core.database import get_db
from ...core.responses import send_response
from ...core.security import AuthContext, UserRole
from ...api.deps import get_auth_context
from ...services.auth_service import AuthService
from ...schemas.auth import DoctorRegister, PatientRegister, UserLogin

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/register/patient", status_code=status.HTTP_201_CREATED)
def register_patient(
    user_data: PatientRegister,
    db: Session = Depends(get_db),
):
    """Register a new patient."""
    auth_service = AuthService(db)
    user = auth_service.register_user(
        name=user_data.name,
        email=user_data.email,
        password=user_data.password,
        role=UserRole.PATIENT,
        photo_url=user_data.photo_url,
    )

    return send_response(status.HTTP_201_CREATED, "Patient registered successfully", user)


@router.post("/register/doctor", status_code=status.HTTP_201_CREATED)
def register_doctor(
    user_data: DoctorRegister,
    db: Session = Depends(get_db),
):
    """Register a new doctor; specialization is mandatory."""
    auth_service = AuthService(db)
    user = auth_service.register_user(
        name=user_data.name,
        email=user_data.email,
        password=user_data.password,
        role=UserRole.DOCTOR,
        specialization=user_data.specialization,
        photo_url=user_data.photo_url,
    )

    return send_response(status.HTTP_201_CREATED, "Doctor registered successfully", user)


@router.post("/login")
def login(
    login_data: UserLogin,
    db: Session = Depends(get_db),
):
    """Authenticate user and return a bearer token."""
    auth_service = AuthService(db)
    result = auth_service.authenticate_user(login_data.email, login_data.password)

    return send_response(status.HTTP_200_OK, "User logged in successfully", result)


@router.get("/me")
def get_current_user_info(
    actor: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    """Get current user information."""
    user = AuthService(db).get_profile(actor)
    return send_response(status.HTTP_200_OK, "User retrieved successfully", user)
