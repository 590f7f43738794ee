"""User, role and client entities"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from ...shared.exceptions import ValidationError
from ...shared.validators import ensure_utc, utcnow

ROLE_ADMIN = "ADMIN"
ROLE_CLIENT = "CLIENT"
ROLE_STYLIST = "STYLIST"
ROLE_NAMES = (ROLE_ADMIN, ROLE_CLIENT, ROLE_STYLIST)

ROLE_DESCRIPTIONS = {
    ROLE_ADMIN: "Salon administrator",
    ROLE_CLIENT: "Customer booking appointments",
    ROLE_STYLIST: "Stylist performing services",
}


@dataclass
class Role:
    id: str
    name: str
    description: Optional[str] = None

    def __post_init__(self):
        if self.name not in ROLE_NAMES:
            raise ValidationError(f"Invalid role: {self.name}")


@dataclass
class User:
    id: str
    role_id: str
    name: str
    email: str
    phone: str
    password: str
    is_active: bool = True
    profile_picture: Optional[str] = None
    role_name: Optional[str] = None
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    def __post_init__(self):
        self.created_at = ensure_utc(self.created_at)
        self.updated_at = ensure_utc(self.updated_at)
        if not self.name or not self.name.strip():
            raise ValidationError("Name is required")
        if len(self.name) > 100:
            raise ValidationError("Name cannot exceed 100 characters")
        if not self.email or "@" not in self.email:
            raise ValidationError("Invalid email format")
        if not self.password:
            raise ValidationError("Password is required")

    @classmethod
    def create(
        cls, role_id: str, name: str, email: str, phone: str, password_hash: str, role_name: Optional[str] = None
    ) -> "User":
        now = utcnow()
        return cls(
            id=str(uuid.uuid4()),
            role_id=role_id,
            name=name.strip(),
            email=email.strip().lower(),
            phone=phone,
            password=password_hash,
            role_name=role_name,
            created_at=now,
            updated_at=now,
        )

    def update_profile(
        self, name: Optional[str] = None, phone: Optional[str] = None, profile_picture: Optional[str] = None
    ):
        if name is not None:
            if not name.strip():
                raise ValidationError("Name is required")
            self.name = name.strip()
        if phone is not None:
            self.phone = phone
        if profile_picture is not None:
            self.profile_picture = profile_picture
        self.updated_at = utcnow()

    def change_password(self, password_hash: str):
        self.password = password_hash
        self.updated_at = utcnow()

    def to_persistence(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "role_id": self.role_id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "password": self.password,
            "is_active": self.is_active,
            "profile_picture": self.profile_picture,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


@dataclass
class Client:
    id: str
    user_id: str
    preferences: Optional[str] = None

    def __post_init__(self):
        if not self.id or not self.user_id:
            raise ValidationError("Client requires an ID and a user ID")

    @classmethod
    def create(cls, user_id: str, preferences: Optional[str] = None) -> "Client":
        return cls(id=str(uuid.uuid4()), user_id=user_id, preferences=preferences)


__all__ = ["Role", "User", "Client", "ROLE_NAMES", "ROLE_ADMIN", "ROLE_CLIENT", "ROLE_STYLIST", "ROLE_DESCRIPTIONS"]
