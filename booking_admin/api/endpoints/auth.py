"""
Authentication endpoints.
"""

from fastapi import APIRouter, Depends

from booking_admin.api import deps
from booking_admin.models.user import User
from booking_admin.schemas.auth import LoginRequest, RefreshTokenRequest, TokenResponse
from booking_admin.schemas.user import UserResponse
from booking_admin.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/login", response_model=TokenResponse)
def login(payload: LoginRequest, auth_service: AuthService = Depends(deps.get_auth_service)):
    return auth_service.login(payload)


@router.post("/refresh", response_model=TokenResponse)
def refresh(payload: RefreshTokenRequest, auth_service: AuthService = Depends(deps.get_auth_service)):
    return auth_service.refresh(payload.refresh_token)


@router.get("/profile", response_model=UserResponse)
def profile(current_user: User = Depends(deps.get_current_user)):
    return UserResponse.model_validate(current_user)
