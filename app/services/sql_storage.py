from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from typing import List, Optional

from .storage import Storage
from ..models import user as user_models
from ..models import doctor as doctor_models
from ..models import appointment as appointment_models
from ..models.appointment import AppointmentStatus
from ..schemas.appointment import Appointment
from ..schemas.doctor import Doctor
from ..schemas.user import User

UserRow = user_models.User
DoctorRow = doctor_models.Doctor
AppointmentRow = appointment_models.Appointment

class SqlStorage(Storage):
    """Storage over SQLAlchemy tables. Each write commits immediately."""

    def __init__(self, db: Session):
        self.db = db

    def _save(self, row):
        """Add and commit a row; a failed commit is rolled back so the session stays usable."""
        try:
            self.db.add(row)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        self.db.refresh(row)
        return row

    def is_empty(self) -> bool:
        return self.db.query(DoctorRow).first() is None

    # Users
    def get_user(self, user_id: str) -> Optional[User]:
        row = self.db.query(UserRow).filter(UserRow.id == user_id).first()
        return User.model_validate(row) if row else None

    def get_user_by_email(self, email: str) -> Optional[User]:
        row = self.db.query(UserRow).filter(UserRow.email == email).first()
        return User.model_validate(row) if row else None

    def delete_user(self, user_id: str) -> bool:
        try:
            deleted = self.db.query(UserRow).filter(UserRow.id == user_id).delete()
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        return deleted > 0

    def _add_user(self, user: User) -> User:
        row = self._save(UserRow(**user.model_dump()))
        return User.model_validate(row)

    # Doctors
    def get_doctor(self, doctor_id: str) -> Optional[Doctor]:
        row = self.db.query(DoctorRow).filter(DoctorRow.id == doctor_id).first()
        return Doctor.model_validate(row) if row else None

    def get_doctor_by_user_id(self, user_id: str) -> Optional[Doctor]:
        row = self.db.query(DoctorRow).filter(DoctorRow.user_id == user_id).first()
        return Doctor.model_validate(row) if row else None

    def _add_doctor(self, doctor: Doctor) -> Doctor:
        row = self._save(DoctorRow(**doctor.model_dump()))
        return Doctor.model_validate(row)

    def _list_doctors(self) -> List[Doctor]:
        return [Doctor.model_validate(row) for row in self.db.query(DoctorRow).all()]

    # Appointments
    def get_appointment(self, appointment_id: str) -> Optional[Appointment]:
        row = self.db.query(AppointmentRow).filter(AppointmentRow.id == appointment_id).first()
        return Appointment.model_validate(row) if row else None

    def _add_appointment(self, appointment: Appointment) -> Appointment:
        row = self._save(AppointmentRow(**appointment.model_dump()))
        return Appointment.model_validate(row)

    def _find_appointments(self, patient_id=None, doctor_id=None, status=None) -> List[Appointment]:
        query = self.db.query(AppointmentRow)
        if patient_id is not None:
            query = query.filter(AppointmentRow.patient_id == patient_id)
        if doctor_id is not None:
            query = query.filter(AppointmentRow.doctor_id == doctor_id)
        if status is not None:
            query = query.filter(AppointmentRow.status == AppointmentStatus(status))
        rows = query.order_by(AppointmentRow.created_at).all()
        return [Appointment.model_validate(row) for row in rows]

    def _set_appointment_status(self, appointment_id, status) -> Optional[Appointment]:
        row = self.db.query(AppointmentRow).filter(AppointmentRow.id == appointment_id).first()
        if not row:
            return None
        row.status = status
        self._save(row)
        return Appointment.model_validate(row)
