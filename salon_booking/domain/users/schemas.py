"""User domain schemas - Pydantic models for auth and profile endpoints"""

from typing import Optional

from pydantic import BaseModel, field_validator

from ...shared.validators import to_iso, validate_email, validate_password, validate_phone
from .entities import ROLE_CLIENT, ROLE_NAMES, User


class RegisterRequest(BaseModel):
    name: str
    email: str
    phone: str
    password: str
    role: str = ROLE_CLIENT

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if not v or not v.strip():
            raise ValueError("Name is required")
        if len(v) > 100:
            raise ValueError("Name cannot exceed 100 characters")
        return v.strip()

    @field_validator("email")
    @classmethod
    def validate_email_field(cls, v):
        return validate_email(v)

    @field_validator("phone")
    @classmethod
    def validate_phone_field(cls, v):
        return validate_phone(v)

    @field_validator("password")
    @classmethod
    def validate_password_field(cls, v):
        return validate_password(v)

    @field_validator("role")
    @classmethod
    def validate_role(cls, v):
        role = (v or ROLE_CLIENT).strip().upper()
        if role not in ROLE_NAMES:
            raise ValueError(f"Role must be one of: {', '.join(ROLE_NAMES)}")
        return role


class LoginRequest(BaseModel):
    email: str
    password: str


class RefreshTokenRequest(BaseModel):
    refreshToken: str


class UpdateProfileRequest(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    profilePicture: Optional[str] = None

    @field_validator("phone")
    @classmethod
    def validate_phone_field(cls, v):
        if v:
            return validate_phone(v)
        return v


class ChangePasswordRequest(BaseModel):
    currentPassword: str
    newPassword: str

    @field_validator("newPassword")
    @classmethod
    def validate_new_password(cls, v):
        return validate_password(v)


class UserResponse(BaseModel):
    id: str
    name: str
    email: str
    phone: str
    role: Optional[str] = None
    isActive: bool
    profilePicture: Optional[str] = None
    clientId: Optional[str] = None
    stylistId: Optional[str] = None
    createdAt: str

    @classmethod
    def from_entity(
        cls, user: User, client_id: Optional[str] = None, stylist_id: Optional[str] = None
    ) -> "UserResponse":
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            phone=user.phone,
            role=user.role_name,
            isActive=user.is_active,
            profilePicture=user.profile_picture,
            clientId=client_id,
            stylistId=stylist_id,
            createdAt=to_iso(user.created_at),
        )


class AuthResponse(BaseModel):
    accessToken: str
    refreshToken: str
    tokenType: str = "bearer"
    user: UserResponse


__all__ = [
    "RegisterRequest",
    "LoginRequest",
    "RefreshTokenRequest",
    "UpdateProfileRequest",
    "ChangePasswordRequest",
    "UserResponse",
    "AuthResponse",
]
