from sqlalchemy import or_
from sqlalchemy.orm import Session
from typing import List, Optional, Tuple

from ..models.user import User
from ..core.security import UserRole
from ..schemas.common import PageMeta, like_pattern, page_offset
from ..schemas.user import DoctorListItem, PatientListItem

SPECIALIZATIONS = (
    "Cardiology",
    "Dermatology",
    "Endocrinology",
    "Gastroenterology",
    "Neurology",
    "Oncology",
    "Orthopedics",
    "Pediatrics",
    "Psychiatry",
    "Radiology",
)


class DirectoryService:
    def __init__(self, db: Session):
        self.db = db

    def list_doctors(
        self,
        specialization: Optional[str] = None,
        search: Optional[str] = None,
        page: int = 1,
        limit: int = 10,
    ) -> Tuple[List[DoctorListItem], PageMeta]:
        """List doctors, optionally by specialization or a name/specialization search."""
        query = self.db.query(User).filter(User.role == UserRole.DOCTOR)

        if specialization:
            query = query.filter(User.specialization == specialization)

        if search:
            pattern = like_pattern(search)
            query = query.filter(or_(
                User.name.ilike(pattern, escape="\\"),
                User.specialization.ilike(pattern, escape="\\"),
            ))

        total = query.count()
        doctors = (
            query.order_by(User.name.asc())
            .offset(page_offset(page, limit))
            .limit(limit)
            .all()
        )

        return (
            [DoctorListItem.model_validate(doctor) for doctor in doctors],
            PageMeta.build(page, limit, total),
        )

    def list_patients(self, page: int = 1, limit: int = 10) -> Tuple[List[PatientListItem], PageMeta]:
        query = self.db.query(User).filter(User.role == UserRole.PATIENT)

        total = query.count()
        patients = (
            query.order_by(User.name.asc())
            .offset(page_offset(page, limit))
            .limit(limit)
            .all()
        )

        return (
            [PatientListItem.model_validate(patient) for patient in patients],
            PageMeta.build(page, limit, total),
        )

    @staticmethod
    def list_specializations() -> List[str]:
        """The fixed catalogue of specializations, independent of stored data."""
        return list(SPECIALIZATIONS)
