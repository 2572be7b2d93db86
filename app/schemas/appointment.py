from datetime import datetime
from typing import Optional

from .base import CamelModel
from .doctor import DoctorWithUser
from .user import UserResponse
from ..models.appointment import AppointmentStatus, AppointmentType

class AppointmentCreate(CamelModel):
    """Booking request. A ``status`` sent by the client is ignored."""
    patient_id: str
    doctor_id: str
    date: str
    time: str
    reason: str
    type: AppointmentType
    notes: Optional[str] = None

class Appointment(AppointmentCreate):
    id: str
    status: AppointmentStatus = AppointmentStatus.PENDING
    created_at: datetime

class AppointmentWithDetails(Appointment):
    doctor: DoctorWithUser
    patient: UserResponse

class AppointmentStatusUpdate(CamelModel):
    status: AppointmentStatus
