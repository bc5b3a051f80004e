from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional

from ...core.database import get_db
from ...core.rate_limit import appointment_rate_limit
from ...core.responses import send_response
from ...core.security import AuthContext
from ...api.deps import Pagination, get_auth_context, get_doctor, get_doctor_or_patient, get_patient
from ...services.appointment_service import AppointmentService
from ...schemas.appointment import AppointmentCreate, AppointmentStatusUpdate

router = APIRouter(
    prefix="/appointments",
    tags=["Appointments"],
    dependencies=[Depends(appointment_rate_limit)],
)


@router.post("", status_code=status.HTTP_201_CREATED)
def create_appointment(
    appointment_data: AppointmentCreate,
    actor: AuthContext = Depends(get_patient),
    db: Session = Depends(get_db),
):
    """Book an appointment with a doctor for the calling patient."""
    appointment = AppointmentService(db).create_appointment(
        doctor_id=appointment_data.doctor_id,
        patient_id=actor.user_id,
        date=appointment_data.date,
    )
    return send_response(status.HTTP_201_CREATED, "Appointment created successfully", appointment)


@router.get("/patient")
def list_patient_appointments(
    status_filter: Optional[str] = Query(None, alias="status"),
    pagination: Pagination = Depends(),
    actor: AuthContext = Depends(get_patient),
    db: Session = Depends(get_db),
):
    appointments, meta = AppointmentService(db).list_patient_appointments(
        patient_id=actor.user_id,
        status=status_filter,
        page=pagination.page,
        limit=pagination.limit,
    )
    return send_response(status.HTTP_200_OK, "Patient appointments retrieved successfully", appointments, meta)


@router.get("/doctor")
def list_doctor_appointments(
    status_filter: Optional[str] = Query(None, alias="status"),
    date: Optional[str] = None,
    pagination: Pagination = Depends(),
    actor: AuthContext = Depends(get_doctor),
    db: Session = Depends(get_db),
):
    appointments, meta = AppointmentService(db).list_doctor_appointments(
        doctor_id=actor.user_id,
        status=status_filter,
        date=date,
        page=pagination.page,
        limit=pagination.limit,
    )
    return send_response(status.HTTP_200_OK, "Doctor appointments retrieved successfully", appointments, meta)


@router.patch("/update-status")
def update_appointment_status(
    update_data: AppointmentStatusUpdate,
    actor: AuthContext = Depends(get_doctor_or_patient),
    db: Session = Depends(get_db),
):
    """Change the status of an appointment the caller is a party to."""
    appointment = AppointmentService(db).update_status(
        appointment_id=update_data.appointment_id,
        status=update_data.status,
        actor=actor,
    )
    return send_response(status.HTTP_200_OK, "Appointment status updated successfully", appointment)


@router.get("/{appointment_id}")
def get_appointment(
    appointment_id: str,
    actor: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    appointment = AppointmentService(db).get_appointment(appointment_id, actor)
    return send_response(status.HTTP_200_OK, "Appointment retrieved successfully", appointment)
