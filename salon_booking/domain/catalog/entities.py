"""Catalog domain entities: categories, services, stylists and their offerings.

Prices are integer cents everywhere in the domain. Conversion to a decimal
string only happens when a DTO is built.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from ...shared.exceptions import ValidationError
from ...shared.validators import ensure_utc, utcnow


def format_cents(cents: int) -> str:
    return f"{cents / 100:.2f}"


def _require_text(value: Optional[str], label: str, max_length: int):
    if value is None or not value.strip():
        raise ValidationError(f"{label} is required")
    if len(value) > max_length:
        raise ValidationError(f"{label} cannot exceed {max_length} characters")


def _require_id(value: Optional[str], label: str):
    if value is None or not str(value).strip():
        raise ValidationError(f"{label} is required")


@dataclass
class Category:
    id: str
    name: str
    description: Optional[str] = None
    is_active: bool = True
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    def __post_init__(self):
        self.created_at = ensure_utc(self.created_at)
        self.updated_at = ensure_utc(self.updated_at)
        self._validate()

    def _validate(self):
        _require_id(self.id, "Category ID")
        _require_text(self.name, "Category name", 100)
        if self.description is not None and len(self.description) > 500:
            raise ValidationError("Category description cannot exceed 500 characters")

    @classmethod
    def create(cls, name: str, description: Optional[str] = None) -> "Category":
        now = utcnow()
        return cls(
            id=str(uuid.uuid4()),
            name=name.strip() if name else name,
            description=description,
            created_at=now,
            updated_at=now,
        )

    def update_info(self, name: Optional[str] = None, description: Optional[str] = None):
        if name is not None:
            self.name = name.strip()
        if description is not None:
            self.description = description
        self._validate()
        self.updated_at = utcnow()

    def activate(self):
        self.is_active = True
        self.updated_at = utcnow()

    def deactivate(self):
        self.is_active = False
        self.updated_at = utcnow()

    def to_persistence(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "is_active": self.is_active,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_persistence(cls, data: dict[str, Any]) -> "Category":
        return cls(
            id=data["id"],
            name=data["name"],
            description=data.get("description"),
            is_active=data.get("is_active", True),
            created_at=data.get("created_at") or utcnow(),
            updated_at=data.get("updated_at") or utcnow(),
        )


@dataclass
class Service:
    """A bookable service. ``duration_variation`` widens the expected duration both ways."""

    id: str
    category_id: str
    name: str
    description: str
    duration: int
    duration_variation: int
    price: int
    is_active: bool = True
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    def __post_init__(self):
        self.created_at = ensure_utc(self.created_at)
        self.updated_at = ensure_utc(self.updated_at)
        self._validate()

    def _validate(self):
        _require_id(self.id, "Service ID")
        _require_id(self.category_id, "Category ID")
        _require_text(self.name, "Service name", 150)
        _require_text(self.description, "Service description", 1000)
        if not isinstance(self.duration, int) or self.duration < 1 or self.duration > 600:
            raise ValidationError("Service duration must be between 1 and 600 minutes")
        if not isinstance(self.duration_variation, int) or self.duration_variation < 0:
            raise ValidationError("Duration variation cannot be negative")
        if self.duration_variation > self.duration:
            raise ValidationError("Duration variation cannot exceed the service duration")
        if not isinstance(self.price, int) or self.price < 0:
            raise ValidationError("Price must be a non-negative amount in cents")

    @classmethod
    def create(
        cls,
        category_id: str,
        name: str,
        description: str,
        duration: int,
        price: int,
        duration_variation: int = 0,
    ) -> "Service":
        now = utcnow()
        return cls(
            id=str(uuid.uuid4()),
            category_id=category_id,
            name=name.strip() if name else name,
            description=description,
            duration=duration,
            duration_variation=duration_variation,
            price=price,
            created_at=now,
            updated_at=now,
        )

    def calculate_min_duration(self) -> int:
        return max(0, self.duration - self.duration_variation)

    def calculate_max_duration(self) -> int:
        return self.duration + self.duration_variation

    def get_formatted_price(self) -> str:
        return format_cents(self.price)

    def update_details(
        self,
        name: Optional[str] = None,
        description: Optional[str] = None,
        duration: Optional[int] = None,
        duration_variation: Optional[int] = None,
        price: Optional[int] = None,
    ):
        snapshot = self.to_persistence()
        if name is not None:
            self.name = name.strip()
        if description is not None:
            self.description = description
        if duration is not None:
            self.duration = duration
        if duration_variation is not None:
            self.duration_variation = duration_variation
        if price is not None:
            self.price = price
        try:
            self._validate()
        except ValidationError:
            self._restore(snapshot)
            raise
        self.updated_at = utcnow()

    def _restore(self, snapshot: dict[str, Any]):
        for key in ("name", "description", "duration", "duration_variation", "price"):
            setattr(self, key, snapshot[key])

    def update_category(self, category_id: str):
        _require_id(category_id, "Category ID")
        self.category_id = category_id
        self.updated_at = utcnow()

    def activate(self):
        self.is_active = True
        self.updated_at = utcnow()

    def deactivate(self):
        self.is_active = False
        self.updated_at = utcnow()

    def to_persistence(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "category_id": self.category_id,
            "name": self.name,
            "description": self.description,
            "duration": self.duration,
            "duration_variation": self.duration_variation,
            "price": self.price,
            "is_active": self.is_active,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_persistence(cls, data: dict[str, Any]) -> "Service":
        return cls(
            id=data["id"],
            category_id=data["category_id"],
            name=data["name"],
            description=data["description"],
            duration=data["duration"],
            duration_variation=data.get("duration_variation", 0),
            price=data["price"],
            is_active=data.get("is_active", True),
            created_at=data.get("created_at") or utcnow(),
            updated_at=data.get("updated_at") or utcnow(),
        )


@dataclass
class Stylist:
    id: str
    user_id: str
    name: Optional[str] = None

    def __post_init__(self):
        _require_id(self.id, "Stylist ID")
        _require_id(self.user_id, "User ID")


@dataclass
class StylistService:
    """A stylist's offering of a service, optionally at a custom price"""

    stylist_id: str
    service_id: str
    custom_price: Optional[int] = None
    is_offering: bool = True
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    def __post_init__(self):
        self.created_at = ensure_utc(self.created_at)
        self.updated_at = ensure_utc(self.updated_at)
        self._validate()

    def _validate(self):
        _require_id(self.stylist_id, "Stylist ID")
        _require_id(self.service_id, "Service ID")
        if self.custom_price is not None and (
            not isinstance(self.custom_price, int) or self.custom_price < 0
        ):
            raise ValidationError("Custom price must be a non-negative amount in cents")

    @classmethod
    def create(
        cls, stylist_id: str, service_id: str, custom_price: Optional[int] = None
    ) -> "StylistService":
        now = utcnow()
        return cls(
            stylist_id=stylist_id,
            service_id=service_id,
            custom_price=custom_price,
            created_at=now,
            updated_at=now,
        )

    def update_price(self, custom_price: Optional[int]):
        previous = self.custom_price
        self.custom_price = custom_price
        try:
            self._validate()
        except ValidationError:
            self.custom_price = previous
            raise
        self.updated_at = utcnow()

    def start_offering(self):
        self.is_offering = True
        self.updated_at = utcnow()

    def stop_offering(self):
        self.is_offering = False
        self.updated_at = utcnow()

    def has_custom_price(self) -> bool:
        return self.custom_price is not None

    def get_effective_price(self, base_price: int) -> int:
        return self.custom_price if self.custom_price is not None else base_price

    def get_formatted_price(self, base_price: int) -> str:
        return format_cents(self.get_effective_price(base_price))

    def to_persistence(self) -> dict[str, Any]:
        return {
            "stylist_id": self.stylist_id,
            "service_id": self.service_id,
            "custom_price": self.custom_price,
            "is_offering": self.is_offering,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_persistence(cls, data: dict[str, Any]) -> "StylistService":
        return cls(
            stylist_id=data["stylist_id"],
            service_id=data["service_id"],
            custom_price=data.get("custom_price"),
            is_offering=data.get("is_offering", True),
            created_at=data.get("created_at") or utcnow(),
            updated_at=data.get("updated_at") or utcnow(),
        )


__all__ = ["Category", "Service", "Stylist", "StylistService", "format_cents"]
