"""Shared validation utilities"""

import calendar
import re
from datetime import datetime, timezone
from typing import Optional

from .exceptions import ValidationError

# RFC 4122 shape: version 1-5, variant 8/9/a/b
UUID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[1-5][0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$", re.IGNORECASE
)
EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")
PHONE_PATTERN = re.compile(r"^\+?\d{7,15}$")
DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def validate_uuid(value: Optional[str]) -> bool:
    """Validate UUID format"""
    if not isinstance(value, str):
        return False
    return bool(UUID_PATTERN.match(value))


def require_uuid(value: Optional[str], label: str) -> str:
    """Raise ValidationError unless ``value`` is a non-blank, well-formed UUID.

    Args:
        value: Identifier supplied by the caller
        label: Human name used in the message, e.g. "Client"

    Returns:
        The stripped identifier
    """
    if value is None or not str(value).strip():
        raise ValidationError(f"{label} ID is required")
    value = str(value).strip()
    if not validate_uuid(value):
        raise ValidationError(f"{label} ID must be a valid UUID")
    return value


def validate_email(email: Optional[str]) -> Optional[str]:
    """
    Validate email format.

    Returns:
        Lowercase email address

    Raises:
        ValueError: If email format is invalid
    """
    if not email:
        return email

    email = email.strip().lower()
    if not EMAIL_PATTERN.match(email):
        raise ValueError("Invalid email format")
    return email


def validate_phone(phone: Optional[str]) -> Optional[str]:
    """Validate an international phone number: 7-15 digits with an optional leading +"""
    if not phone:
        return phone

    normalized = re.sub(r"[\s\-().]", "", phone)
    if not PHONE_PATTERN.match(normalized):
        raise ValueError("Phone number must contain 7 to 15 digits")
    return normalized


def validate_password(password: str) -> str:
    """Require at least 8 characters with upper, lower and a digit"""
    if len(password) < 8:
        raise ValueError("Password must be at least 8 characters long")
    if not re.search(r"[a-z]", password):
        raise ValueError("Password must contain a lowercase letter")
    if not re.search(r"[A-Z]", password):
        raise ValueError("Password must contain an uppercase letter")
    if not re.search(r"\d", password):
        raise ValueError("Password must contain a number")
    return password


def parse_iso_datetime(value: str) -> datetime:
    """Parse an ISO-8601 string into an aware UTC datetime.

    Naive input is treated as UTC. A trailing ``Z`` is accepted.

    Raises:
        ValidationError: If the value cannot be parsed
    """
    if not value or not isinstance(value, str):
        raise ValidationError("Invalid date format")
    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        raise ValidationError("Invalid date format")
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to naive datetimes read back from the database"""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Columns store naive UTC"""
    if value is None:
        return None
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def to_iso(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    return ensure_utc(value).isoformat().replace("+00:00", "Z")


def add_months(value: datetime, months: int) -> datetime:
    """Calendar-month addition, clamping the day to the target month's length"""
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return value.replace(year=year, month=month, day=min(value.day, last_day))


__all__ = [
    "validate_uuid",
    "require_uuid",
    "validate_email",
    "validate_phone",
    "validate_password",
    "parse_iso_datetime",
    "utcnow",
    "ensure_utc",
    "to_iso",
    "to_naive_utc",
    "add_months",
    "DATE_PATTERN",
]
