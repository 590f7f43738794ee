"""Tests for managing the appointment status catalogue."""

from __future__ import annotations

import unittest

from salon_booking.domain.appointments.schemas import AppointmentStatusCreate, AppointmentStatusUpdate
from salon_booking.domain.appointments.service import AppointmentStatusService
from salon_booking.shared.exceptions import ConflictError, NotFoundError, ValidationError
from tests.fakes import FakeAppointmentRepository, FakeAppointmentStatusRepository, make_appointment, new_id


class AppointmentStatusServiceTests(unittest.TestCase):
    def setUp(self) -> None:
        self.statuses = FakeAppointmentStatusRepository()
        self.appointments = FakeAppointmentRepository(self.statuses)
        self.service = AppointmentStatusService(self.statuses, self.appointments)

    def test_create_custom_status(self) -> None:
        created = self.service.create(AppointmentStatusCreate(name="RESCHEDULED", description="Moved"))
        self.assertEqual(self.service.get_by_name("RESCHEDULED").id, created.id)
        self.assertEqual(len(self.service.get_all()), 7)

    def test_names_are_upper_snake_case(self) -> None:
        for name in ("", "rescheduled", "ON HOLD", "9LIVES", "X" * 51):
            with self.subTest(name=name):
                with self.assertRaises(ValidationError):
                    self.service.create(AppointmentStatusCreate(name=name))

    def test_duplicate_name_conflicts(self) -> None:
        with self.assertRaises(ConflictError):
            self.service.create(AppointmentStatusCreate(name="PENDING"))

    def test_update(self) -> None:
        created = self.service.create(AppointmentStatusCreate(name="ON_HOLD", description="Waiting"))

        renamed = self.service.update(created.id, AppointmentStatusUpdate(name="PAUSED"))
        self.assertEqual(renamed.name, "PAUSED")
        self.assertEqual(renamed.description, "Waiting")

        cleared = self.service.update(created.id, AppointmentStatusUpdate(description=None))
        self.assertIsNone(cleared.description)

        with self.assertRaises(ConflictError):
            self.service.update(created.id, AppointmentStatusUpdate(name="CONFIRMED"))
        with self.assertRaises(NotFoundError):
            self.service.update(new_id(), AppointmentStatusUpdate(name="OTHER"))

    def test_system_statuses_cannot_be_deleted(self) -> None:
        with self.assertRaises(ValidationError):
            self.service.delete(self.statuses.id_of("PENDING"))

    def test_status_in_use_cannot_be_deleted(self) -> None:
        created = self.service.create(AppointmentStatusCreate(name="ON_HOLD"))
        self.appointments.save(make_appointment(created.id))

        with self.assertRaises(ConflictError):
            self.service.delete(created.id)

    def test_delete_unused_custom_status(self) -> None:
        created = self.service.create(AppointmentStatusCreate(name="ON_HOLD"))
        self.service.delete(created.id)
        with self.assertRaises(NotFoundError):
            self.service.get_by_id(created.id)

    def test_terminal_and_active_statuses(self) -> None:
        terminal = {s.name for s in self.service.get_terminal_statuses()}
        active = {s.name for s in self.service.get_active_statuses()}
        self.assertEqual(terminal, {"COMPLETED", "CANCELLED", "NO_SHOW"})
        self.assertEqual(active, {"PENDING", "CONFIRMED", "IN_PROGRESS"})

    def test_valid_transitions(self) -> None:
        reachable = {s.name for s in self.service.get_valid_transitions(self.statuses.id_of("CONFIRMED"))}
        self.assertEqual(reachable, {"IN_PROGRESS", "CANCELLED", "NO_SHOW"})
        self.assertEqual(self.service.get_valid_transitions(self.statuses.id_of("COMPLETED")), [])
        with self.assertRaises(NotFoundError):
            self.service.get_valid_transitions(new_id())

    def test_can_transition_to(self) -> None:
        pending = self.statuses.id_of("PENDING")
        self.assertTrue(self.service.can_transition_to(pending, "CONFIRMED"))
        self.assertFalse(self.service.can_transition_to(pending, "COMPLETED"))
        self.assertFalse(self.service.can_transition_to(new_id(), "CONFIRMED"))


if __name__ == "__main__":
    unittest.main()
