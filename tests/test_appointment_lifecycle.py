"""Tests for confirming, cancelling, updating and progressing appointments."""

from __future__ import annotations

import unittest
from datetime import timedelta

from salon_booking.domain.appointments.schemas import (
    CancelAppointmentRequest,
    ConfirmAppointmentRequest,
    UpdateAppointmentRequest,
)
from salon_booking.domain.appointments.service import AppointmentService
from salon_booking.domain.appointments.use_cases import (
    CancelAppointment,
    ChangeAppointmentStatus,
    ConfirmAppointment,
    UpdateAppointment,
)
from salon_booking.domain.notifications.service import NotificationService
from salon_booking.shared.exceptions import (
    BusinessRuleError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from salon_booking.shared.validators import utcnow
from tests.fakes import (
    FakeNotificationRepository,
    FakeNotificationStatusRepository,
    FakeUserRepository,
    SalonFixture,
    future,
    new_id,
)


class LifecycleTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.salon = SalonFixture()
        self.users = FakeUserRepository()
        self.users.save(self.salon.client_user)
        self.notifications = FakeNotificationRepository()
        self.notifier = NotificationService(
            self.notifications, FakeNotificationStatusRepository(), self.users, self.salon.clients
        )
        self.client_user_id = self.salon.client_user.id
        self.stylist_user_id = self.salon.stylist_x_user.id

    def status_of(self, appointment_id: str) -> str:
        appointment = self.salon.appointments.find_by_id(appointment_id)
        return self.salon.statuses.find_by_id(appointment.status_id).name


class ConfirmAppointmentTests(LifecycleTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.use_case = ConfirmAppointment(
            self.salon.appointments, self.salon.statuses, self.salon.stylists, self.salon.clients, self.notifier
        )

    def test_stylist_confirms_and_client_is_notified(self) -> None:
        appointment = self.salon.book()

        confirmed = self.use_case.execute(
            appointment.id, ConfirmAppointmentRequest(notes="See you then"), self.stylist_user_id
        )

        self.assertEqual(confirmed.status, "CONFIRMED")
        self.assertIsNotNone(confirmed.confirmedAt)
        self.assertIn("[Confirmation] See you then", confirmed.notes)
        self.assertEqual(self.notifications.count_unread(self.client_user_id), 1)

    def test_notification_can_be_suppressed(self) -> None:
        appointment = self.salon.book()
        self.use_case.execute(appointment.id, ConfirmAppointmentRequest(notifyClient=False), self.client_user_id)
        self.assertEqual(self.notifications.count_unread(self.client_user_id), 0)

    def test_confirming_twice_fails(self) -> None:
        appointment = self.salon.book()
        self.use_case.execute(appointment.id, ConfirmAppointmentRequest(), self.client_user_id)
        with self.assertRaises(BusinessRuleError):
            self.use_case.execute(appointment.id, ConfirmAppointmentRequest(), self.client_user_id)

    def test_cancelled_cannot_be_confirmed(self) -> None:
        appointment = self.salon.book("CANCELLED")
        with self.assertRaises(BusinessRuleError) as ctx:
            self.use_case.execute(appointment.id, ConfirmAppointmentRequest(), self.client_user_id)
        self.assertIn("cancelled", ctx.exception.message)

    def test_stranger_is_refused_unless_admin(self) -> None:
        appointment = self.salon.book()
        with self.assertRaises(BusinessRuleError):
            self.use_case.execute(appointment.id, ConfirmAppointmentRequest(), new_id())
        confirmed = self.use_case.execute(appointment.id, ConfirmAppointmentRequest(), new_id(), is_admin=True)
        self.assertEqual(confirmed.status, "CONFIRMED")

    def test_needs_an_hour_of_lead_time(self) -> None:
        appointment = self.salon.book(date_time=utcnow() + timedelta(minutes=45))
        with self.assertRaises(BusinessRuleError):
            self.use_case.execute(appointment.id, ConfirmAppointmentRequest(), self.client_user_id)

    def test_missing_appointment(self) -> None:
        with self.assertRaises(NotFoundError):
            self.use_case.execute(new_id(), ConfirmAppointmentRequest(), self.client_user_id)


class CancelAppointmentTests(LifecycleTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.use_case = CancelAppointment(
            self.salon.appointments, self.salon.statuses, self.salon.stylists, self.salon.clients, self.notifier
        )

    def test_client_cancels_with_reason(self) -> None:
        appointment = self.salon.book("CONFIRMED")

        cancelled = self.use_case.execute(
            appointment.id,
            CancelAppointmentRequest(reason="Feeling unwell", cancelledBy="client"),
            self.client_user_id,
        )

        self.assertEqual(cancelled.status, "CANCELLED")
        self.assertIn("[Cancellation] Feeling unwell", cancelled.notes)
        self.assertEqual(self.notifications.count_unread(self.client_user_id), 1)

    def test_terminal_appointments_cannot_be_cancelled(self) -> None:
        for status in ("CANCELLED", "COMPLETED", "NO_SHOW"):
            with self.subTest(status=status):
                appointment = self.salon.book(status, date_time=future(days=4 + len(status)))
                with self.assertRaises(BusinessRuleError):
                    self.use_case.execute(appointment.id, CancelAppointmentRequest(), self.client_user_id)

    def test_needs_two_hours_of_lead_time(self) -> None:
        appointment = self.salon.book(date_time=utcnow() + timedelta(minutes=90))
        with self.assertRaises(BusinessRuleError):
            self.use_case.execute(appointment.id, CancelAppointmentRequest(), self.client_user_id)

    def test_invalid_cancelled_by(self) -> None:
        appointment = self.salon.book()
        with self.assertRaises(ValidationError):
            self.use_case.execute(appointment.id, CancelAppointmentRequest(cancelledBy="robot"), self.client_user_id)


class UpdateAppointmentTests(LifecycleTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.use_case = UpdateAppointment(
            self.salon.appointments,
            self.salon.statuses,
            self.salon.schedules,
            self.salon.stylists,
            self.salon.services,
            self.salon.clients,
        )

    def test_reschedule_pending_appointment(self) -> None:
        appointment = self.salon.book()
        target = future(days=5, hour=15)

        updated = self.use_case.execute(
            appointment.id, UpdateAppointmentRequest(dateTime=target.isoformat(), duration=90), self.client_user_id
        )

        self.assertEqual(updated.duration, 90)
        self.assertTrue(updated.dateTime.startswith(target.strftime("%Y-%m-%dT15:00")))

    def test_empty_update_is_rejected(self) -> None:
        appointment = self.salon.book()
        with self.assertRaises(ValidationError):
            self.use_case.execute(appointment.id, UpdateAppointmentRequest(), self.client_user_id)

    def test_inside_24_hours_is_locked(self) -> None:
        appointment = self.salon.book(date_time=utcnow() + timedelta(hours=20))
        with self.assertRaises(BusinessRuleError):
            self.use_case.execute(appointment.id, UpdateAppointmentRequest(duration=30), self.client_user_id)

    def test_confirmed_reschedule_needs_reason(self) -> None:
        appointment = self.salon.book()
        appointment.mark_as_confirmed(self.salon.statuses.id_of("CONFIRMED"))
        self.salon.appointments.update(appointment)
        target = future(days=6).isoformat()

        with self.assertRaises(BusinessRuleError):
            self.use_case.execute(appointment.id, UpdateAppointmentRequest(dateTime=target), self.client_user_id)

        updated = self.use_case.execute(
            appointment.id, UpdateAppointmentRequest(dateTime=target, reason="Work trip"), self.client_user_id
        )
        self.assertIn("[Change reason] Work trip", updated.notes)

    def test_terminal_status_is_locked(self) -> None:
        appointment = self.salon.book("COMPLETED")
        with self.assertRaises(BusinessRuleError):
            self.use_case.execute(appointment.id, UpdateAppointmentRequest(duration=30), self.client_user_id)

    def test_moving_onto_another_booking_conflicts(self) -> None:
        first = self.salon.book(date_time=future(days=3, hour=10))
        second = self.salon.book(date_time=future(days=3, hour=12))

        with self.assertRaises(ConflictError):
            self.use_case.execute(
                second.id, UpdateAppointmentRequest(dateTime=first.date_time.isoformat()), self.client_user_id
            )

    def test_resizing_in_place_does_not_conflict_with_itself(self) -> None:
        appointment = self.salon.book()
        updated = self.use_case.execute(appointment.id, UpdateAppointmentRequest(duration=120), self.client_user_id)
        self.assertEqual(updated.duration, 120)

    def test_explicit_null_stylist_unassigns(self) -> None:
        appointment = self.salon.book()
        updated = self.use_case.execute(
            appointment.id, UpdateAppointmentRequest(stylistId=None), self.client_user_id
        )
        self.assertIsNone(updated.stylistId)

    def test_stranger_cannot_update(self) -> None:
        appointment = self.salon.book()
        with self.assertRaises(BusinessRuleError):
            self.use_case.execute(appointment.id, UpdateAppointmentRequest(duration=30), new_id())


class ChangeStatusTests(LifecycleTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.use_case = ChangeAppointmentStatus(
            self.salon.appointments, self.salon.statuses, self.salon.stylists, self.salon.clients
        )

    def test_stylist_walks_through_the_visit(self) -> None:
        appointment = self.salon.book("CONFIRMED")

        self.use_case.execute(appointment.id, "in_progress", self.stylist_user_id)
        done = self.use_case.execute(appointment.id, "COMPLETED", self.stylist_user_id)

        self.assertEqual(done.status, "COMPLETED")
        self.assertEqual(self.status_of(appointment.id), "COMPLETED")

    def test_pending_cannot_jump_to_completed(self) -> None:
        appointment = self.salon.book()
        with self.assertRaises(BusinessRuleError) as ctx:
            self.use_case.execute(appointment.id, "COMPLETED", self.stylist_user_id)
        self.assertIn("Cannot transition from PENDING to COMPLETED", ctx.exception.message)

    def test_confirm_and_cancel_have_dedicated_operations(self) -> None:
        appointment = self.salon.book()
        with self.assertRaises(BusinessRuleError):
            self.use_case.execute(appointment.id, "CONFIRMED", self.stylist_user_id)

    def test_unknown_status_name(self) -> None:
        appointment = self.salon.book()
        with self.assertRaises(ValidationError):
            self.use_case.execute(appointment.id, "PAUSED", self.stylist_user_id)

    def test_only_stylist_or_admin(self) -> None:
        appointment = self.salon.book("CONFIRMED")
        with self.assertRaises(BusinessRuleError):
            self.use_case.execute(appointment.id, "NO_SHOW", self.client_user_id)
        marked = self.use_case.execute(appointment.id, "NO_SHOW", new_id(), is_admin=True)
        self.assertEqual(marked.status, "NO_SHOW")


class AppointmentServiceTests(LifecycleTestCase):
    def reports(self) -> AppointmentService:
        return AppointmentService(
            self.salon.appointments, self.salon.statuses, self.salon.stylists, self.salon.clients
        )

    def test_statistics_summary(self) -> None:
        self.salon.book("PENDING", future(days=2))
        self.salon.book("COMPLETED", future(days=3))
        self.salon.book("COMPLETED", future(days=4))
        self.salon.book("NO_SHOW", future(days=5))
        self.salon.book("CANCELLED", future(days=6))

        summary = self.reports().get_statistics_summary()

        self.assertEqual(summary.total, 5)
        self.assertEqual(summary.completed, 2)
        self.assertEqual(summary.completionRate, 50.0)
        self.assertEqual(summary.showRate, 66.67)

    def test_delete(self) -> None:
        service = self.reports()
        appointment = self.salon.book()
        service.delete(appointment.id)
        self.assertFalse(self.salon.appointments.exists_by_id(appointment.id))
        with self.assertRaises(NotFoundError):
            service.delete(appointment.id)

    def test_date_range_requires_ordered_bounds(self) -> None:
        service = self.reports()
        with self.assertRaises(ValidationError):
            service.get_by_date_range(future(days=5), future(days=1))
        with self.assertRaises(ValidationError):
            service.get_by_date_range(future(days=5), future(days=5))

    def test_date_range_includes_both_bounds(self) -> None:
        first = self.salon.book(date_time=future(days=2))
        last = self.salon.book(date_time=future(days=4), stylist_id=self.salon.stylist_y.id)
        self.salon.book(date_time=future(days=6))

        found = self.reports().get_by_date_range(future(days=2), future(days=4))

        self.assertEqual([a.id for a in found], [first.id, last.id])

    def test_statistics_by_date_range(self) -> None:
        self.salon.book("PENDING", future(days=2))
        self.salon.book("CONFIRMED", future(days=3))
        self.salon.book("CONFIRMED", future(days=8))

        stats = self.reports().get_statistics_by_date_range(future(days=1), future(days=3))

        self.assertEqual(stats["PENDING"], 1)
        self.assertEqual(stats["CONFIRMED"], 1)
        self.assertEqual(stats["NO_SHOW"], 0)
        with self.assertRaises(ValidationError):
            self.reports().get_statistics_by_date_range(future(days=3), future(days=3))

    def test_statistics_by_stylist(self) -> None:
        self.salon.book("CONFIRMED", future(days=2))
        self.salon.book("CANCELLED", future(days=3))
        self.salon.book("PENDING", future(days=4), stylist_id=self.salon.stylist_y.id)

        stats = self.reports().get_statistics_by_stylist(self.salon.stylist_x.id)

        self.assertEqual(stats["CONFIRMED"], 1)
        self.assertEqual(stats["CANCELLED"], 1)
        self.assertEqual(stats["PENDING"], 0)
        with self.assertRaises(NotFoundError):
            self.reports().get_statistics_by_stylist(new_id())
        with self.assertRaises(ValidationError):
            self.reports().get_statistics_by_stylist("not-a-uuid")

    def test_statistics_by_client(self) -> None:
        self.salon.book("PENDING", future(days=2))
        self.salon.book("PENDING", future(days=3), stylist_id=self.salon.stylist_y.id)

        stats = self.reports().get_statistics_by_client(self.salon.client.id)

        self.assertEqual(stats["PENDING"], 2)
        self.assertEqual(sum(stats.values()), 2)
        with self.assertRaises(NotFoundError):
            self.reports().get_statistics_by_client(new_id())


if __name__ == "__main__":
    unittest.main()
