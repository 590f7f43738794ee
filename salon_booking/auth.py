import logging
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from .database import get_db
from .domain.users.entities import ROLE_ADMIN, User
from .domain.users.repository import UserRepository
from .security_utils import ACCESS_TOKEN_TYPE, decode_token
from .shared.exceptions import ForbiddenError, UnauthorizedError

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """Resolve the bearer access token to an active user"""
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError("Not authenticated. Please provide a valid Bearer token in the Authorization header.")
    payload = decode_token(credentials.credentials, ACCESS_TOKEN_TYPE)
    if payload is None:
        raise UnauthorizedError("Invalid or expired token")

    user = UserRepository(db).find_by_id(payload["sub"])
    if user is None:
        logger.warning(f"⚠️ Token subject {payload['sub']} no longer exists")
        raise UnauthorizedError("User not found")
    if not user.is_active:
        raise UnauthorizedError("User account is inactive")
    return user


def require_admin(current_user: User = Depends(get_current_user)) -> User:
    if current_user.role_name != ROLE_ADMIN:
        raise ForbiddenError("Administrator access required")
    return current_user


def is_admin(user: User) -> bool:
    return user.role_name == ROLE_ADMIN
