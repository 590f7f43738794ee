"""Notification entities"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from ...shared.exceptions import ValidationError
from ...shared.validators import ensure_utc, utcnow

MAX_MESSAGE_LENGTH = 1000


class NotificationType(str, Enum):
    APPOINTMENT_CONFIRMATION = "APPOINTMENT_CONFIRMATION"
    APPOINTMENT_REMINDER = "APPOINTMENT_REMINDER"
    APPOINTMENT_CANCELLATION = "APPOINTMENT_CANCELLATION"
    PROMOTIONAL = "PROMOTIONAL"
    SYSTEM = "SYSTEM"


NOTIFICATION_PENDING = "PENDING"
NOTIFICATION_SENT = "SENT"
NOTIFICATION_READ = "READ"
NOTIFICATION_FAILED = "FAILED"

NOTIFICATION_TRANSITIONS = {
    NOTIFICATION_PENDING: frozenset({NOTIFICATION_SENT, NOTIFICATION_FAILED}),
    NOTIFICATION_SENT: frozenset({NOTIFICATION_READ}),
    NOTIFICATION_READ: frozenset(),
    NOTIFICATION_FAILED: frozenset({NOTIFICATION_PENDING}),
}

NOTIFICATION_STATUS_DESCRIPTIONS = {
    NOTIFICATION_PENDING: "Waiting to be delivered",
    NOTIFICATION_SENT: "Delivered to the user",
    NOTIFICATION_READ: "Read by the user",
    NOTIFICATION_FAILED: "Delivery failed",
}


@dataclass
class NotificationStatus:
    id: str
    name: str
    description: Optional[str] = None

    def __post_init__(self):
        if self.name not in NOTIFICATION_TRANSITIONS:
            raise ValidationError(f"Invalid notification status: {self.name}")

    def can_transition_to(self, target_name: str) -> bool:
        return target_name in NOTIFICATION_TRANSITIONS[self.name]

    def is_read(self) -> bool:
        return self.name == NOTIFICATION_READ


@dataclass
class Notification:
    id: str
    type: NotificationType
    message: str
    user_id: str
    status_id: str
    status_name: Optional[str] = None
    sent_at: Optional[datetime] = None
    created_at: datetime = field(default_factory=utcnow)

    def __post_init__(self):
        if isinstance(self.type, str) and not isinstance(self.type, NotificationType):
            try:
                self.type = NotificationType(self.type)
            except ValueError:
                raise ValidationError(f"Invalid notification type: {self.type}")
        self.sent_at = ensure_utc(self.sent_at)
        self.created_at = ensure_utc(self.created_at)
        if not self.message or not self.message.strip():
            raise ValidationError("Notification message is required")
        if len(self.message) > MAX_MESSAGE_LENGTH:
            raise ValidationError(f"Notification message cannot exceed {MAX_MESSAGE_LENGTH} characters")
        if not self.user_id:
            raise ValidationError("User ID is required")
        if not self.status_id:
            raise ValidationError("Status ID is required")

    @classmethod
    def create(cls, type: NotificationType, message: str, user_id: str, pending_status_id: str) -> "Notification":
        return cls(
            id=str(uuid.uuid4()),
            type=type,
            message=message.strip() if message else message,
            user_id=user_id,
            status_id=pending_status_id,
            status_name=NOTIFICATION_PENDING,
            created_at=utcnow(),
        )

    def is_read(self) -> bool:
        return self.status_name == NOTIFICATION_READ

    def mark_as_read(self, read_status_id: str):
        self.status_id = read_status_id
        self.status_name = NOTIFICATION_READ
        if self.sent_at is None:
            self.sent_at = utcnow()

    def to_persistence(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type.value,
            "message": self.message,
            "user_id": self.user_id,
            "status_id": self.status_id,
            "sent_at": self.sent_at,
            "created_at": self.created_at,
        }


__all__ = [
    "Notification",
    "NotificationStatus",
    "NotificationType",
    "NOTIFICATION_PENDING",
    "NOTIFICATION_SENT",
    "NOTIFICATION_READ",
    "NOTIFICATION_FAILED",
    "NOTIFICATION_TRANSITIONS",
    "NOTIFICATION_STATUS_DESCRIPTIONS",
]
