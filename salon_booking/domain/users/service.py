"""Auth service - registration, login, tokens and profile management"""

import logging
import uuid

from ...security_utils import (
    REFRESH_TOKEN_TYPE,
    create_access_token,
    create_refresh_token,
    decode_token,
    hash_password_bcrypt,
    verify_password_bcrypt,
)
from ...shared.exceptions import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from ..catalog.entities import Stylist
from ..catalog.interfaces import IStylistRepository
from .entities import ROLE_ADMIN, ROLE_CLIENT, ROLE_STYLIST, Client, User
from .interfaces import IClientRepository, IRoleRepository, IUserRepository
from .schemas import (
    AuthResponse,
    ChangePasswordRequest,
    LoginRequest,
    RegisterRequest,
    UpdateProfileRequest,
    UserResponse,
)

logger = logging.getLogger(__name__)


class AuthService:
    """Service layer for authentication and user profiles"""

    def __init__(
        self,
        users: IUserRepository,
        roles: IRoleRepository,
        clients: IClientRepository,
        stylists: IStylistRepository,
    ):
        self.users = users
        self.roles = roles
        self.clients = clients
        self.stylists = stylists

    def _to_response(self, user: User) -> UserResponse:
        client = self.clients.find_by_user_id(user.id)
        stylist = self.stylists.find_by_user_id(user.id)
        return UserResponse.from_entity(
            user, client.id if client else None, stylist.id if stylist else None
        )

    def _issue_tokens(self, user: User) -> AuthResponse:
        return AuthResponse(
            accessToken=create_access_token(user.id, user.email, user.role_name),
            refreshToken=create_refresh_token(user.id),
            user=self._to_response(user),
        )

    def _get_user(self, user_id: str) -> User:
        user = self.users.find_by_id(user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        return user

    def register(self, data: RegisterRequest) -> UserResponse:
        if data.role == ROLE_ADMIN:
            raise ForbiddenError("Administrator accounts cannot be self-registered")
        if self.users.exists_by_email(data.email):
            raise ConflictError("Email already exists")
        role = self.roles.find_by_name(data.role)
        if role is None:
            raise NotFoundError("Role", data.role)

        user = User.create(
            role_id=role.id,
            name=data.name,
            email=data.email,
            phone=data.phone,
            password_hash=hash_password_bcrypt(data.password),
            role_name=role.name,
        )
        saved = self.users.save(user)
        if role.name == ROLE_CLIENT:
            self.clients.save(Client.create(saved.id))
        elif role.name == ROLE_STYLIST:
            self.stylists.save(Stylist(id=str(uuid.uuid4()), user_id=saved.id, name=saved.name))

        logger.info(f"👤 Registered {role.name.lower()} user {saved.id}")
        return self._to_response(saved)

    def login(self, data: LoginRequest) -> AuthResponse:
        user = self.users.find_by_email(data.email)
        if user is None or not verify_password_bcrypt(data.password, user.password):
            logger.warning(f"⚠️ Failed login attempt for {data.email}")
            raise UnauthorizedError("Invalid credentials")
        if not user.is_active:
            raise UnauthorizedError("User account is inactive")
        logger.info(f"🔑 User {user.id} logged in")
        return self._issue_tokens(user)

    def refresh_token(self, refresh_token: str) -> AuthResponse:
        payload = decode_token(refresh_token, REFRESH_TOKEN_TYPE)
        if payload is None:
            raise UnauthorizedError("Invalid or expired refresh token")
        user = self.users.find_by_id(payload["sub"])
        if user is None or not user.is_active:
            raise UnauthorizedError("Invalid or expired refresh token")
        return self._issue_tokens(user)

    def get_profile(self, user_id: str) -> UserResponse:
        return self._to_response(self._get_user(user_id))

    def update_profile(self, user_id: str, data: UpdateProfileRequest) -> UserResponse:
        user = self._get_user(user_id)
        if not data.model_fields_set:
            raise ValidationError("At least one field must be provided for update")
        user.update_profile(name=data.name, phone=data.phone, profile_picture=data.profilePicture)
        return self._to_response(self.users.update(user))

    def change_password(self, user_id: str, data: ChangePasswordRequest) -> None:
        user = self._get_user(user_id)
        if not verify_password_bcrypt(data.currentPassword, user.password):
            raise UnauthorizedError("Current password is incorrect")
        if data.currentPassword == data.newPassword:
            raise ValidationError("New password must be different from the current password")
        user.change_password(hash_password_bcrypt(data.newPassword))
        self.users.update(user)
        logger.info(f"🔒 Password changed for user {user.id}")


__all__ = ["AuthService"]
