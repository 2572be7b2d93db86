from sqlalchemy import Column, String, DateTime, Text, Enum as SQLEnum
from sqlalchemy.sql import func
import enum

from ..core.database import Base
from .user import generate_id

class AppointmentStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"

    def can_transition_to(self, target: "AppointmentStatus") -> bool:
        """Check a move against the strict lifecycle table."""
        if target == self:
            return True
        return target in ALLOWED_TRANSITIONS[self]

class AppointmentType(str, enum.Enum):
    IN_PERSON = "in-person"
    VIDEO = "video"
    PHONE = "phone"

ALLOWED_TRANSITIONS = {
    AppointmentStatus.PENDING: {AppointmentStatus.CONFIRMED, AppointmentStatus.CANCELLED},
    AppointmentStatus.CONFIRMED: {AppointmentStatus.COMPLETED, AppointmentStatus.CANCELLED},
    AppointmentStatus.CANCELLED: set(),
    AppointmentStatus.COMPLETED: set(),
}

def _enum_values(enum_cls):
    return [member.value for member in enum_cls]

class Appointment(Base):
    __tablename__ = "appointments"

    id = Column(String(36), primary_key=True, default=generate_id)

    # Plain id columns: bookings are accepted for unknown patients and doctors
    patient_id = Column(String(36), nullable=False, index=True)
    doctor_id = Column(String(36), nullable=False, index=True)

    # Appointment details, kept as the strings the client sent
    date = Column(String(50), nullable=False)
    time = Column(String(50), nullable=False)
    reason = Column(Text, nullable=False)
    type = Column(SQLEnum(AppointmentType, values_callable=_enum_values), nullable=False)
    status = Column(
        SQLEnum(AppointmentStatus, values_callable=_enum_values),
        default=AppointmentStatus.PENDING,
        nullable=False
    )
    notes = Column(Text, nullable=True)

    # Tracking
    created_at = Column(DateTime, server_default=func.now())

    def __repr__(self):
        return f"<Appointment(id={self.id}, patient_id={self.patient_id}, doctor_id={self.doctor_id}, status='{self.status}')>"
