from datetime import datetime
from typing import Optional
from pydantic import EmailStr, Field

from .base import CamelModel
from ..core.security import UserRole

class UserBase(CamelModel):
    email: EmailStr
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    phone: str = Field(min_length=1)
    role: UserRole

class UserCreate(UserBase):
    password: str = Field(min_length=1)

class User(UserBase):
    """Stored user record. ``password`` holds the hash, never the plain text."""
    id: str
    password: str
    created_at: datetime

class UserResponse(UserBase):
    id: str
    created_at: datetime

class RegisterRequest(UserCreate):
    # Only used when role is doctor
    specialization: Optional[str] = None
    experience: Optional[int] = Field(default=None, ge=0)

class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(min_length=1)

class AuthResponse(CamelModel):
    user: UserResponse
