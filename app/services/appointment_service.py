from fastapi import HTTPException, status
from typing import List, Optional
import logging

from .storage import Storage
from ..models.appointment import AppointmentStatus
from ..schemas.appointment import Appointment, AppointmentCreate, AppointmentWithDetails

logger = logging.getLogger(__name__)

class AppointmentError(HTTPException):
    pass

class InvalidStatusTransition(AppointmentError):
    def __init__(self, current: AppointmentStatus, target: AppointmentStatus):
        self.current = current
        self.target = target
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Cannot change appointment status from {current.value} to {target.value}",
        )

class AppointmentService:
    def __init__(self, storage: Storage, enforce_transitions: bool = False):
        self.storage = storage
        self.enforce_transitions = enforce_transitions

    def book(self, appointment_data: AppointmentCreate) -> Appointment:
        appointment = self.storage.create_appointment(appointment_data)
        logger.info(
            f"Booked appointment {appointment.id} "
            f"for patient {appointment.patient_id} with doctor {appointment.doctor_id}"
        )
        return appointment

    def get(self, appointment_id: str) -> Appointment:
        appointment = self.storage.get_appointment(appointment_id)
        if not appointment:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Appointment not found"
            )
        return appointment

    def for_patient(
        self, patient_id: str, status_filter: Optional[AppointmentStatus] = None
    ) -> List[AppointmentWithDetails]:
        return self.storage.get_appointments_by_patient(patient_id, status_filter)

    def for_doctor(
        self, doctor_id: str, status_filter: Optional[AppointmentStatus] = None
    ) -> List[AppointmentWithDetails]:
        return self.storage.get_appointments_by_doctor(doctor_id, status_filter)

    def change_status(self, appointment_id: str, new_status: AppointmentStatus) -> Appointment:
        """Move an appointment to ``new_status``.

        Without enforcement any status may follow any other. With enforcement
        the transition table on ``AppointmentStatus`` is checked before the
        record is touched.
        """
        if self.enforce_transitions:
            current = self.get(appointment_id)
            if not current.status.can_transition_to(new_status):
                logger.warning(
                    f"Rejected status change {current.status.value} -> {new_status.value} "
                    f"for appointment {appointment_id}"
                )
                raise InvalidStatusTransition(current.status, new_status)

        appointment = self.storage.update_appointment_status(appointment_id, new_status)
        if not appointment:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Appointment not found"
            )

        logger.info(f"Appointment {appointment_id} is now {appointment.status.value}")
        return appointment
