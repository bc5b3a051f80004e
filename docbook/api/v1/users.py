from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import Optional

from ...core.database import get_db
from ...core.responses import send_response
from ...core.security import AuthContext
from ...api.deps import Pagination, get_doctor
from ...services.directory_service import DirectoryService

router = APIRouter(tags=["Directory"])


@router.get("/doctors")
def list_doctors(
    specialization: Optional[str] = None,
    search: Optional[str] = None,
    pagination: Pagination = Depends(),
    db: Session = Depends(get_db),
):
    """List doctors with optional specialization filter and search."""
    doctors, meta = DirectoryService(db).list_doctors(
        specialization=specialization,
        search=search,
        page=pagination.page,
        limit=pagination.limit,
    )
    return send_response(status.HTTP_200_OK, "Doctors retrieved successfully", doctors, meta)


@router.get("/patients")
def list_patients(
    pagination: Pagination = Depends(),
    actor: AuthContext = Depends(get_doctor),
    db: Session = Depends(get_db),
):
    """List patients (doctors only)."""
    patients, meta = DirectoryService(db).list_patients(pagination.page, pagination.limit)
    return send_response(status.HTTP_200_OK, "Patients retrieved successfully", patients, meta)


@router.get("/specializations")
def list_specializations():
    return send_response(
        status.HTTP_200_OK,
        "Specializations retrieved successfully",
        DirectoryService.list_specializations(),
    )
