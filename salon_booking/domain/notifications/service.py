"""Notification service - Business logic for in-app notifications"""

import logging
import math
from typing import Optional

from ...shared.exceptions import AppError, BusinessRuleError, NotFoundError, ValidationError
from ...shared.validators import require_uuid
from ..users.interfaces import IClientRepository, IUserRepository
from .entities import (
    NOTIFICATION_PENDING,
    NOTIFICATION_READ,
    NOTIFICATION_SENT,
    Notification,
    NotificationType,
)
from .interfaces import INotificationRepository, INotificationStatusRepository
from .schemas import MarkReadResult, NotificationCreate, NotificationPage, NotificationResponse

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100


def parse_type(value: str) -> NotificationType:
    try:
        return NotificationType((value or "").strip().upper())
    except ValueError:
        valid = ", ".join(t.value for t in NotificationType)
        raise ValidationError(f"Notification type must be one of: {valid}")


class NotificationService:
    """Service layer for notification business logic"""

    def __init__(
        self,
        notifications: INotificationRepository,
        statuses: INotificationStatusRepository,
        users: IUserRepository,
        clients: Optional[IClientRepository] = None,
    ):
        self.repo = notifications
        self.statuses = statuses
        self.users = users
        self.clients = clients

    def _status_id(self, name: str) -> str:
        status = self.statuses.find_by_name(name)
        if status is None:
            raise NotFoundError("NotificationStatus", name)
        return status.id

    def _get_owned(self, notification_id: str, user_id: str) -> Notification:
        notification_id = require_uuid(notification_id, "Notification")
        notification = self.repo.find_by_id(notification_id)
        if notification is None:
            raise NotFoundError("Notification", notification_id)
        if notification.user_id != user_id:
            raise BusinessRuleError("You do not have permission to access this notification")
        return notification

    def create(self, data: NotificationCreate) -> NotificationResponse:
        notification_type = parse_type(data.type)
        user_id = require_uuid(data.userId, "User")
        if self.users.find_by_id(user_id) is None:
            raise NotFoundError("User", user_id)
        notification = Notification.create(
            notification_type, data.message, user_id, self._status_id(NOTIFICATION_PENDING)
        )
        saved = self.repo.save(notification)
        logger.info(f"🔔 Created {notification_type.value} notification {saved.id} for user {user_id}")
        return NotificationResponse.from_entity(saved)

    def notify_client(self, client_id: str, notification_type: NotificationType, message: str) -> None:
        """Best-effort notification to a client's user account; failures are logged, not raised"""
        if self.clients is None:
            return
        client = self.clients.find_by_id(client_id)
        if client is None:
            logger.warning(f"⚠️ Cannot notify client {client_id}: client not found")
            return
        try:
            self.create(NotificationCreate(type=notification_type.value, message=message, userId=client.user_id))
        except AppError as e:
            logger.error(f"❌ Failed to notify client {client_id}: {e.message}")

    def get_by_id(self, notification_id: str, user_id: str) -> NotificationResponse:
        return NotificationResponse.from_entity(self._get_owned(notification_id, user_id))

    def get_user_notifications(
        self,
        user_id: str,
        page: int = 1,
        limit: int = 20,
        unread_only: bool = False,
        notification_type: Optional[str] = None,
    ) -> NotificationPage:
        if page < 1:
            raise ValidationError("Page must be greater than 0")
        if limit < 1 or limit > MAX_PAGE_SIZE:
            raise ValidationError(f"Limit must be between 1 and {MAX_PAGE_SIZE}")
        type_filter = parse_type(notification_type) if notification_type else None

        items, total = self.repo.find_by_user(
            user_id, unread_only=unread_only, notification_type=type_filter, offset=(page - 1) * limit, limit=limit
        )
        total_pages = math.ceil(total / limit) if total else 0
        return NotificationPage(
            notifications=[NotificationResponse.from_entity(n) for n in items],
            total=total,
            page=page,
            limit=limit,
            totalPages=total_pages,
            hasNext=page < total_pages,
            hasPrev=page > 1,
            unreadCount=self.repo.count_unread(user_id),
        )

    def get_unread_count(self, user_id: str) -> int:
        return self.repo.count_unread(user_id)

    def _mark_read(self, notification: Notification) -> bool:
        if notification.is_read():
            return False
        status = self.statuses.find_by_id(notification.status_id)
        # In-app delivery: a pending notification counts as sent once it is read
        if status is not None and status.name == NOTIFICATION_PENDING:
            status = self.statuses.find_by_name(NOTIFICATION_SENT)
        if status is None or not status.can_transition_to(NOTIFICATION_READ):
            raise BusinessRuleError(f"Notification {notification.id} cannot be marked as read")
        notification.mark_as_read(self._status_id(NOTIFICATION_READ))
        self.repo.update(notification)
        return True

    def mark_as_read(self, notification_id: str, user_id: str) -> NotificationResponse:
        notification = self._get_owned(notification_id, user_id)
        self._mark_read(notification)
        return NotificationResponse.from_entity(notification)

    def mark_many_as_read(self, notification_ids: list[str], user_id: str) -> MarkReadResult:
        if not notification_ids:
            raise ValidationError("At least one notification ID is required")
        notifications = [self._get_owned(notification_id, user_id) for notification_id in notification_ids]
        updated = sum(1 for n in notifications if self._mark_read(n))
        return MarkReadResult(updated=updated)

    def mark_all_as_read(self, user_id: str) -> MarkReadResult:
        updated = 0
        for notification in self.repo.find_unread_by_user(user_id):
            try:
                if self._mark_read(notification):
                    updated += 1
            except BusinessRuleError:
                logger.warning(f"⚠️ Skipped notification {notification.id} while marking all as read")
        logger.info(f"📬 Marked {updated} notification(s) as read for user {user_id}")
        return MarkReadResult(updated=updated)


__all__ = ["NotificationService", "parse_type"]
