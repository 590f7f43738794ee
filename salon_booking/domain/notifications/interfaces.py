"""Repository interfaces for notifications"""

from abc import ABC, abstractmethod
from typing import Optional

from .entities import Notification, NotificationStatus, NotificationType


class INotificationStatusRepository(ABC):
    @abstractmethod
    def find_by_id(self, status_id: str) -> Optional[NotificationStatus]:
        pass

    @abstractmethod
    def find_by_name(self, name: str) -> Optional[NotificationStatus]:
        pass


class INotificationRepository(ABC):
    @abstractmethod
    def find_by_id(self, notification_id: str) -> Optional[Notification]:
        pass

    @abstractmethod
    def find_by_user(
        self,
        user_id: str,
        unread_only: bool = False,
        notification_type: Optional[NotificationType] = None,
        offset: int = 0,
        limit: int = 20,
    ) -> tuple[list[Notification], int]:
        """A page of the user's notifications, newest first, plus the total matching count"""

    @abstractmethod
    def count_unread(self, user_id: str) -> int:
        pass

    @abstractmethod
    def find_unread_by_user(self, user_id: str) -> list[Notification]:
        pass

    @abstractmethod
    def save(self, notification: Notification) -> Notification:
        pass

    @abstractmethod
    def update(self, notification: Notification) -> Notification:
        pass


__all__ = ["INotificationRepository", "INotificationStatusRepository"]
