"""Notification repository - Database operations for notifications"""

from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ... import models
from ...shared.validators import to_naive_utc
from .entities import NOTIFICATION_READ, Notification, NotificationStatus, NotificationType
from .interfaces import INotificationRepository, INotificationStatusRepository


class NotificationStatusRepository(INotificationStatusRepository):
    def __init__(self, db: Session):
        self.db = db

    def find_by_id(self, status_id: str) -> Optional[NotificationStatus]:
        row = self.db.query(models.NotificationStatus).filter(models.NotificationStatus.id == status_id).first()
        return NotificationStatus(id=row.id, name=row.name, description=row.description) if row else None

    def find_by_name(self, name: str) -> Optional[NotificationStatus]:
        row = self.db.query(models.NotificationStatus).filter(models.NotificationStatus.name == name).first()
        return NotificationStatus(id=row.id, name=row.name, description=row.description) if row else None


class NotificationRepository(INotificationRepository):
    """Repository for notification database operations"""

    def __init__(self, db: Session):
        self.db = db

    @staticmethod
    def _to_domain(row: models.Notification) -> Notification:
        return Notification(
            id=row.id,
            type=row.type,
            message=row.message,
            user_id=row.user_id,
            status_id=row.status_id,
            status_name=row.status.name if row.status else None,
            sent_at=row.sent_at,
            created_at=row.created_at,
        )

    def _query(self):
        return self.db.query(models.Notification).options(joinedload(models.Notification.status))

    def _unread(self, user_id: str):
        return (
            self._query()
            .join(models.NotificationStatus, models.Notification.status_id == models.NotificationStatus.id)
            .filter(
                models.Notification.user_id == user_id,
                models.NotificationStatus.name != NOTIFICATION_READ,
            )
        )

    def find_by_id(self, notification_id: str) -> Optional[Notification]:
        row = self._query().filter(models.Notification.id == notification_id).first()
        return self._to_domain(row) if row else None

    def find_by_user(
        self,
        user_id: str,
        unread_only: bool = False,
        notification_type: Optional[NotificationType] = None,
        offset: int = 0,
        limit: int = 20,
    ) -> tuple[list[Notification], int]:
        query = self._unread(user_id) if unread_only else self._query().filter(
            models.Notification.user_id == user_id
        )
        if notification_type is not None:
            query = query.filter(models.Notification.type == notification_type.value)
        total = query.count()
        rows = query.order_by(models.Notification.created_at.desc()).offset(offset).limit(limit).all()
        return [self._to_domain(row) for row in rows], total

    def count_unread(self, user_id: str) -> int:
        return self._unread(user_id).count()

    def find_unread_by_user(self, user_id: str) -> list[Notification]:
        return [self._to_domain(row) for row in self._unread(user_id).all()]

    def save(self, notification: Notification) -> Notification:
        data = notification.to_persistence()
        data["sent_at"] = to_naive_utc(data["sent_at"])
        data["created_at"] = to_naive_utc(data["created_at"])
        self.db.add(models.Notification(**data))
        self.db.commit()
        return self.find_by_id(notification.id)

    def update(self, notification: Notification) -> Notification:
        row = self.db.query(models.Notification).filter(models.Notification.id == notification.id).first()
        row.status_id = notification.status_id
        row.sent_at = to_naive_utc(notification.sent_at)
        self.db.commit()
        return self.find_by_id(notification.id)


__all__ = ["NotificationRepository", "NotificationStatusRepository"]
