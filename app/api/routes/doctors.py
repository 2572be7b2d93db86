from fastapi import APIRouter, Depends, HTTPException, status
from typing import List
import logging

from ..deps import get_storage
from ...services.storage import Storage
from ...schemas.doctor import Doctor, DoctorWithUser

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/doctors", tags=["Doctors"])

@router.get("", response_model=List[DoctorWithUser])
async def list_doctors(storage: Storage = Depends(get_storage)):
    """List every doctor with their user profile."""
    try:
        return storage.get_all_doctors()
    except Exception as e:
        logger.error(f"Failed to fetch doctors: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch doctors"
        )

@router.get("/user/{user_id}", response_model=Doctor)
async def get_doctor_by_user(user_id: str, storage: Storage = Depends(get_storage)):
    """Get the doctor profile owned by a user."""
    doctor = storage.get_doctor_by_user_id(user_id)
    if not doctor:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Doctor not found"
        )
    return doctor

@router.get("/{doctor_id}", response_model=DoctorWithUser)
async def get_doctor(doctor_id: str, storage: Storage = Depends(get_storage)):
    doctor = storage.get_doctor(doctor_id)
    if not doctor:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Doctor not found"
        )

    doctor_with_user = storage.get_doctor_with_user(doctor_id)
    if not doctor_with_user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Doctor user not found"
        )
    return doctor_with_user
