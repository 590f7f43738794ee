"""Notification schemas"""

from typing import Optional

from pydantic import BaseModel, Field

from ...shared.validators import to_iso
from .entities import Notification


class NotificationCreate(BaseModel):
    type: str
    message: str
    userId: str


class MarkNotificationsReadRequest(BaseModel):
    notificationIds: list[str] = Field(default_factory=list)


class NotificationResponse(BaseModel):
    id: str
    type: str
    message: str
    userId: str
    status: Optional[str] = None
    isRead: bool
    sentAt: Optional[str] = None
    createdAt: str

    @classmethod
    def from_entity(cls, notification: Notification) -> "NotificationResponse":
        return cls(
            id=notification.id,
            type=notification.type.value,
            message=notification.message,
            userId=notification.user_id,
            status=notification.status_name,
            isRead=notification.is_read(),
            sentAt=to_iso(notification.sent_at),
            createdAt=to_iso(notification.created_at),
        )


class NotificationPage(BaseModel):
    notifications: list[NotificationResponse]
    total: int
    page: int
    limit: int
    totalPages: int
    hasNext: bool
    hasPrev: bool
    unreadCount: int


class MarkReadResult(BaseModel):
    updated: int


__all__ = [
    "NotificationCreate",
    "MarkNotificationsReadRequest",
    "NotificationResponse",
    "NotificationPage",
    "MarkReadResult",
]
