from fastapi import Depends
from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.database import get_db
from ..services.storage import Storage, get_default_storage
from ..services.sql_storage import SqlStorage
from ..services.auth_service import AuthService
from ..services.appointment_service import AppointmentService

DEFAULT_VALIDATION_MESSAGE = "Invalid data"

def get_storage(db: Session = Depends(get_db)) -> Storage:
    """Return the configured storage backend.

    The request session is only connected when the database backend uses it.
    """
    if settings.use_database:
        return SqlStorage(db)
    return get_default_storage()

def get_auth_service(storage: Storage = Depends(get_storage)) -> AuthService:
    return AuthService(storage)

def get_appointment_service(storage: Storage = Depends(get_storage)) -> AppointmentService:
    return AppointmentService(
        storage,
        enforce_transitions=settings.ENFORCE_STATUS_TRANSITIONS
    )

# Validation error messages per endpoint
def validation_message(message: str):
    """Set the message returned when the endpoint's request fails validation."""
    def decorator(endpoint):
        endpoint.validation_message = message
        return endpoint
    return decorator

def get_validation_message(endpoint) -> str:
    return getattr(endpoint, "validation_message", DEFAULT_VALIDATION_MESSAGE)
