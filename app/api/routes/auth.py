from fastapi import APIRouter, Depends

from ..deps import get_auth_service
from ...services.auth_service import AuthService
from ...schemas.user import RegisterRequest, LoginRequest, AuthResponse, UserResponse

router = APIRouter(prefix="/auth", tags=["Authentication"])

@router.post("/register", response_model=AuthResponse)
async def register(
    user_data: RegisterRequest,
    auth_service: AuthService = Depends(get_auth_service)
):
    """Register a new patient or doctor."""
    user = auth_service.register_user(user_data)
    return AuthResponse(user=UserResponse.model_validate(user))

@router.post("/login", response_model=AuthResponse)
async def login(
    login_data: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service)
):
    """Check credentials and return the user profile."""
    user = auth_service.authenticate_user(login_data)
    return AuthResponse(user=UserResponse.model_validate(user))
