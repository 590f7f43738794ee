"""Tests for in-app notifications."""

from __future__ import annotations

import unittest

from salon_booking.domain.notifications.entities import NotificationType
from salon_booking.domain.notifications.schemas import NotificationCreate
from salon_booking.domain.notifications.service import NotificationService
from salon_booking.domain.users.entities import Client
from salon_booking.shared.exceptions import BusinessRuleError, NotFoundError, ValidationError
from tests.fakes import (
    FakeClientRepository,
    FakeNotificationRepository,
    FakeNotificationStatusRepository,
    FakeUserRepository,
    make_user,
    new_id,
)


class NotificationServiceTests(unittest.TestCase):
    def setUp(self) -> None:
        self.users = FakeUserRepository()
        self.clients = FakeClientRepository()
        self.user = self.users.save(make_user())
        self.other = self.users.save(make_user())
        self.notifications = FakeNotificationRepository()
        self.service = NotificationService(
            self.notifications, FakeNotificationStatusRepository(), self.users, self.clients
        )

    def send(self, message: str = "Hello", type: str = "SYSTEM", user_id: str = None):
        return self.service.create(NotificationCreate(type=type, message=message, userId=user_id or self.user.id))

    def test_new_notification_is_pending_and_unread(self) -> None:
        created = self.send()
        self.assertEqual(created.status, "PENDING")
        self.assertFalse(created.isRead)
        self.assertEqual(self.service.get_unread_count(self.user.id), 1)

    def test_create_validates_input(self) -> None:
        with self.assertRaises(ValidationError):
            self.send(type="CARRIER_PIGEON")
        with self.assertRaises(ValidationError):
            self.send(message="x" * 1001)
        with self.assertRaises(NotFoundError):
            self.send(user_id=new_id())

    def test_mark_as_read(self) -> None:
        created = self.send()
        read = self.service.mark_as_read(created.id, self.user.id)
        self.assertTrue(read.isRead)
        self.assertIsNotNone(read.sentAt)
        self.assertEqual(self.service.get_unread_count(self.user.id), 0)

    def test_other_users_notifications_are_off_limits(self) -> None:
        created = self.send()
        with self.assertRaises(BusinessRuleError):
            self.service.get_by_id(created.id, self.other.id)

    def test_mark_all_as_read(self) -> None:
        for index in range(3):
            self.send(f"Message {index}")
        self.send("Not yours", user_id=self.other.id)

        result = self.service.mark_all_as_read(self.user.id)

        self.assertEqual(result.updated, 3)
        self.assertEqual(self.service.get_unread_count(self.other.id), 1)

    def test_mark_many_counts_only_changes(self) -> None:
        first = self.send("One")
        second = self.send("Two")
        self.service.mark_as_read(first.id, self.user.id)
        result = self.service.mark_many_as_read([first.id, second.id], self.user.id)
        self.assertEqual(result.updated, 1)
        with self.assertRaises(ValidationError):
            self.service.mark_many_as_read([], self.user.id)

    def test_paging_and_filters(self) -> None:
        for index in range(5):
            self.send(f"Promo {index}", type="PROMOTIONAL")
        self.send("Reminder", type="APPOINTMENT_REMINDER")

        page = self.service.get_user_notifications(self.user.id, page=2, limit=2, notification_type="promotional")

        self.assertEqual(page.total, 5)
        self.assertEqual(page.totalPages, 3)
        self.assertEqual(len(page.notifications), 2)
        self.assertTrue(page.hasNext and page.hasPrev)
        self.assertEqual(page.unreadCount, 6)

    def test_paging_bounds(self) -> None:
        with self.assertRaises(ValidationError):
            self.service.get_user_notifications(self.user.id, page=0)
        with self.assertRaises(ValidationError):
            self.service.get_user_notifications(self.user.id, limit=101)

    def test_notify_client_reaches_the_clients_user(self) -> None:
        client = self.clients.save(Client.create(self.user.id))
        self.service.notify_client(client.id, NotificationType.APPOINTMENT_REMINDER, "Tomorrow at 10:00")
        self.assertEqual(self.service.get_unread_count(self.user.id), 1)

    def test_notify_unknown_client_is_silent(self) -> None:
        self.service.notify_client(new_id(), NotificationType.SYSTEM, "Hello")
        self.assertEqual(self.notifications.items, {})


if __name__ == "__main__":
    unittest.main()
