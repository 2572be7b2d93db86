from fastapi import HTTPException, status
import logging

from .storage import Storage
from ..core.security import verify_password, get_password_hash, UserRole
from ..schemas.doctor import DoctorCreate
from ..schemas.user import User, UserCreate, RegisterRequest, LoginRequest

logger = logging.getLogger(__name__)

class AuthService:
    def __init__(self, storage: Storage):
        self.storage = storage

    def register_user(self, user_data: RegisterRequest) -> User:
        """Register a new user, with a doctor profile when the role asks for one."""
        # Check if user already exists
        existing_user = self.storage.get_user_by_email(user_data.email)
        if existing_user:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="User already exists"
            )

        new_user = self.storage.create_user(UserCreate(
            email=user_data.email,
            password=get_password_hash(user_data.password),
            first_name=user_data.first_name,
            last_name=user_data.last_name,
            phone=user_data.phone,
            role=user_data.role,
        ))

        # experience=0 still creates a profile
        if (
            new_user.role == UserRole.DOCTOR
            and user_data.specialization
            and user_data.experience is not None
        ):
            self._create_doctor_profile(new_user, user_data)

        logger.info(f"Registered {new_user.role.value} {new_user.id}")
        return new_user

    def authenticate_user(self, login_data: LoginRequest) -> User:
        """Check credentials and return the matching user."""
        user = self.storage.get_user_by_email(login_data.email)

        if not user or not verify_password(login_data.password, user.password):
            logger.info(f"Failed login for {login_data.email}")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid credentials"
            )

        return user

    def _create_doctor_profile(self, user: User, user_data: RegisterRequest):
        """Second registration step; removes the user again if it fails."""
        try:
            self.storage.create_doctor(DoctorCreate(
                user_id=user.id,
                specialization=user_data.specialization,
                experience=user_data.experience,
            ))
        except Exception:
            logger.warning(f"Doctor profile creation failed, removing user {user.id}")
            self.storage.delete_user(user.id)
            raise
