from datetime import datetime, time
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload
from typing import List, Optional, Tuple, Union
import logging

from ..models.appointment import ACTIVE_STATUSES, Appointment, AppointmentStatus
from ..models.user import User
from ..core.exceptions import BadRequestError, ConflictError, NotFoundError
from ..core.security import AuthContext, UserRole, ensure_owner
from ..schemas.appointment import AppointmentResponse
from ..schemas.common import PageMeta, page_offset, parse_datetime

logger = logging.getLogger(__name__)

DOCTOR_UNAVAILABLE = "Doctor is not available at this time"
INVALID_STATUS = "Invalid status. Must be one of: PENDING, CANCELLED, COMPLETED"


def day_window(moment: datetime) -> Tuple[datetime, datetime]:
    """Inclusive bounds of the local calendar day containing moment."""
    day = moment.date()
    return datetime.combine(day, time.min), datetime.combine(day, time.max)


def coerce_status(value: Union[str, AppointmentStatus, None]) -> Optional[AppointmentStatus]:
    if value is None or value == "":
        return None
    try:
        return AppointmentStatus(value)
    except ValueError:
        raise BadRequestError(INVALID_STATUS)


def coerce_date(value: Union[str, datetime]) -> datetime:
    try:
        return parse_datetime(value)
    except (TypeError, ValueError):
        raise BadRequestError("Invalid date format")


class AppointmentService:
    def __init__(self, db: Session):
        self.db = db

    def _query(self):
        return self.db.query(Appointment).options(
            joinedload(Appointment.doctor),
            joinedload(Appointment.patient),
        )

    def _get_user(self, user_id: str, role: UserRole) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id, User.role == role).first()

    def _get_appointment(self, appointment_id: str) -> Appointment:
        appointment = self._query().filter(Appointment.id == appointment_id).first()
        if not appointment:
            raise NotFoundError("Appointment not found")
        return appointment

    def _commit_booking(self):
        """Commit, mapping a hit on the one-active-booking-per-day index to a conflict."""
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConflictError(DOCTOR_UNAVAILABLE)

    def create_appointment(
        self,
        doctor_id: str,
        patient_id: str,
        date: Union[str, datetime],
    ) -> AppointmentResponse:
        """Book a doctor for a patient; a doctor takes one active booking per day."""
        if not self._get_user(doctor_id, UserRole.DOCTOR):
            raise NotFoundError("Doctor not found")

        if not self._get_user(patient_id, UserRole.PATIENT):
            raise NotFoundError("Patient not found")

        appointment_date = coerce_date(date)
        start_of_day, end_of_day = day_window(appointment_date)

        conflicting = self.db.query(Appointment).filter(
            Appointment.doctor_id == doctor_id,
            Appointment.date >= start_of_day,
            Appointment.date <= end_of_day,
            Appointment.status.in_(ACTIVE_STATUSES),
        ).first()

        if conflicting:
            logger.warning(f"Doctor {doctor_id} already booked on {appointment_date.date()}")
            raise ConflictError(DOCTOR_UNAVAILABLE)

        appointment = Appointment(
            doctor_id=doctor_id,
            patient_id=patient_id,
            date=appointment_date,
            appointment_day=appointment_date.date(),
            status=AppointmentStatus.PENDING,
        )
        self.db.add(appointment)
        self._commit_booking()

        logger.info(f"Appointment {appointment.id} booked with doctor {doctor_id} on {appointment_date.date()}")
        return AppointmentResponse.model_validate(self._get_appointment(appointment.id))

    def list_patient_appointments(
        self,
        patient_id: str,
        status: Optional[str] = None,
        page: int = 1,
        limit: int = 10,
    ) -> Tuple[List[AppointmentResponse], PageMeta]:
        query = self._query().filter(Appointment.patient_id == patient_id)

        status_filter = coerce_status(status)
        if status_filter:
            query = query.filter(Appointment.status == status_filter)

        return self._paginate(query, page, limit)

    def list_doctor_appointments(
        self,
        doctor_id: str,
        status: Optional[str] = None,
        date: Optional[Union[str, datetime]] = None,
        page: int = 1,
        limit: int = 10,
    ) -> Tuple[List[AppointmentResponse], PageMeta]:
        query = self._query().filter(Appointment.doctor_id == doctor_id)

        status_filter = coerce_status(status)
        if status_filter:
            query = query.filter(Appointment.status == status_filter)

        if date:
            start_of_day, end_of_day = day_window(coerce_date(date))
            query = query.filter(Appointment.date.between(start_of_day, end_of_day))

        return self._paginate(query, page, limit)

    def _paginate(self, query, page: int, limit: int) -> Tuple[List[AppointmentResponse], PageMeta]:
        total = query.order_by(None).count()
        appointments = (
            query.order_by(Appointment.date.asc())
            .offset(page_offset(page, limit))
            .limit(limit)
            .all()
        )
        return (
            [AppointmentResponse.model_validate(appointment) for appointment in appointments],
            PageMeta.build(page, limit, total),
        )

    def get_appointment(self, appointment_id: str, actor: AuthContext) -> AppointmentResponse:
        """Fetch one appointment for its doctor or patient."""
        appointment = self._get_appointment(appointment_id)
        ensure_owner(appointment_owner(appointment, actor), actor, "You can only access your own appointments")
        return AppointmentResponse.model_validate(appointment)

    def update_status(
        self,
        appointment_id: str,
        status: Union[str, AppointmentStatus],
        actor: AuthContext,
    ) -> AppointmentResponse:
        """Set any status on an appointment the actor is a party to."""
        appointment = self._get_appointment(appointment_id)
        ensure_owner(appointment_owner(appointment, actor), actor, "You can only update your own appointments")

        new_status = coerce_status(status)
        if new_status is None:
            raise BadRequestError(INVALID_STATUS)

        previous = appointment.status
        appointment.status = new_status
        self._commit_booking()

        logger.info(f"Appointment {appointment_id} status {previous.value} -> {new_status.value} by {actor.user_id}")
        return AppointmentResponse.model_validate(self._get_appointment(appointment_id))


def appointment_owner(appointment: Appointment, actor: AuthContext) -> Optional[str]:
    """The party id the actor must match: the patient for patients, the doctor for doctors."""
    if actor.role == UserRole.PATIENT:
        return appointment.patient_id
    if actor.role == UserRole.DOCTOR:
        return appointment.doctor_id
    return None
