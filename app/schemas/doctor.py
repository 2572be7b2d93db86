from pydantic import Field

from .base import CamelModel
from .user import UserResponse

DEFAULT_RATING = "4.0"

class DoctorCreate(CamelModel):
    user_id: str
    specialization: str = Field(min_length=1)
    experience: int = Field(ge=0)

class Doctor(DoctorCreate):
    id: str
    rating: str = DEFAULT_RATING
    review_count: int = 0
    available: bool = True

class DoctorWithUser(Doctor):
    user: UserResponse
