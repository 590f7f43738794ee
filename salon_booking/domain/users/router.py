"""Auth router - registration, login, tokens and the caller's profile"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...shared.responses import ok
from ..catalog.repository import StylistRepository
from .entities import User
from .repository import ClientRepository, RoleRepository, UserRepository
from .schemas import (
    ChangePasswordRequest,
    LoginRequest,
    RefreshTokenRequest,
    RegisterRequest,
    UpdateProfileRequest,
)
from .service import AuthService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


def get_auth_service(db: Session = Depends(get_db)) -> AuthService:
    """Dependency injection for AuthService"""
    return AuthService(UserRepository(db), RoleRepository(db), ClientRepository(db), StylistRepository(db))


@router.post("/register", status_code=201)
async def register(data: RegisterRequest, service: AuthService = Depends(get_auth_service)):
    return ok(service.register(data).model_dump(), "User registered successfully")


@router.post("/login")
async def login(data: LoginRequest, service: AuthService = Depends(get_auth_service)):
    return ok(service.login(data).model_dump(), "Login successful")


@router.post("/refresh-token")
async def refresh_token(data: RefreshTokenRequest, service: AuthService = Depends(get_auth_service)):
    return ok(service.refresh_token(data.refreshToken).model_dump(), "Token refreshed successfully")


@router.get("/profile")
async def get_profile(
    current_user: User = Depends(get_current_user),
    service: AuthService = Depends(get_auth_service),
):
    return ok(service.get_profile(current_user.id).model_dump(), "Profile retrieved successfully")


@router.put("/profile")
async def update_profile(
    data: UpdateProfileRequest,
    current_user: User = Depends(get_current_user),
    service: AuthService = Depends(get_auth_service),
):
    return ok(service.update_profile(current_user.id, data).model_dump(), "Profile updated successfully")


@router.post("/change-password")
async def change_password(
    data: ChangePasswordRequest,
    current_user: User = Depends(get_current_user),
    service: AuthService = Depends(get_auth_service),
):
    service.change_password(current_user.id, data)
    return ok(None, "Password changed successfully")


__all__ = ["router"]
