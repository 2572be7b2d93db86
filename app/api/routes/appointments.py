from fastapi import APIRouter, Depends, HTTPException, Query, status
from typing import List, Optional
import logging

from ..deps import get_appointment_service, validation_message
from ...models.appointment import AppointmentStatus
from ...services.appointment_service import AppointmentService
from ...schemas.appointment import (
    Appointment, AppointmentCreate, AppointmentStatusUpdate, AppointmentWithDetails
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/appointments", tags=["Appointments"])

@router.post("", response_model=Appointment)
@validation_message("Invalid appointment data")
async def create_appointment(
    appointment_data: AppointmentCreate,
    service: AppointmentService = Depends(get_appointment_service)
):
    """Book an appointment. New bookings always start as pending."""
    return service.book(appointment_data)

@router.get("/patient/{patient_id}", response_model=List[AppointmentWithDetails])
async def list_patient_appointments(
    patient_id: str,
    status_filter: Optional[AppointmentStatus] = Query(None, alias="status"),
    service: AppointmentService = Depends(get_appointment_service)
):
    """List a patient's appointments with doctor and patient details."""
    try:
        return service.for_patient(patient_id, status_filter)
    except Exception as e:
        logger.error(f"Failed to fetch appointments for patient {patient_id}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch appointments"
        )

@router.get("/doctor/{doctor_id}", response_model=List[AppointmentWithDetails])
async def list_doctor_appointments(
    doctor_id: str,
    status_filter: Optional[AppointmentStatus] = Query(None, alias="status"),
    service: AppointmentService = Depends(get_appointment_service)
):
    """List a doctor's appointments with doctor and patient details."""
    try:
        return service.for_doctor(doctor_id, status_filter)
    except Exception as e:
        logger.error(f"Failed to fetch appointments for doctor {doctor_id}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch appointments"
        )

@router.get("/{appointment_id}", response_model=Appointment)
async def get_appointment(
    appointment_id: str,
    service: AppointmentService = Depends(get_appointment_service)
):
    return service.get(appointment_id)

@router.patch("/{appointment_id}/status", response_model=Appointment)
@validation_message("Invalid status")
async def update_appointment_status(
    appointment_id: str,
    status_data: AppointmentStatusUpdate,
    service: AppointmentService = Depends(get_appointment_service)
):
    """Change an appointment's status."""
    return service.change_status(appointment_id, status_data.status)
