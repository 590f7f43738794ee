"""Tests for weekly schedules and slot generation."""

from __future__ import annotations

import unittest

from salon_booking.domain.schedules.entities import DayOfWeek, Schedule
from salon_booking.domain.schedules.schemas import ScheduleCreate, ScheduleUpdate
from salon_booking.domain.schedules.service import ScheduleService
from salon_booking.shared.exceptions import ConflictError, NotFoundError, ValidationError
from tests.fakes import FakeScheduleRepository, new_id


class ScheduleEntityTests(unittest.TestCase):
    """Working-hours validation and slot grids."""

    def test_slots_fit_entirely_inside_hours(self) -> None:
        """A 09:00-10:00 window holds two 30-minute slots and one 45-minute slot."""
        schedule = Schedule.create(DayOfWeek.MONDAY, "09:00", "10:00")

        self.assertEqual(schedule.get_available_slots(30), ["09:00", "09:30"])
        self.assertEqual(schedule.get_available_slots(45), ["09:00"])
        self.assertEqual(schedule.get_available_slots(90), [])

    def test_slots_are_contiguous(self) -> None:
        schedule = Schedule.create(DayOfWeek.TUESDAY, "09:00", "18:00")
        slots = schedule.get_available_slots(60)
        self.assertEqual(len(slots), 9)
        self.assertEqual(slots[0], "09:00")
        self.assertEqual(slots[-1], "17:00")

    def test_default_slot_duration_is_thirty_minutes(self) -> None:
        schedule = Schedule.create(DayOfWeek.FRIDAY, "10:00", "11:00")
        self.assertEqual(schedule.get_available_slots(), ["10:00", "10:30"])

    def test_working_hours_are_inclusive(self) -> None:
        schedule = Schedule.create(DayOfWeek.MONDAY, "09:00", "18:00")
        self.assertTrue(schedule.is_within_working_hours("09:00"))
        self.assertTrue(schedule.is_within_working_hours("18:00"))
        self.assertFalse(schedule.is_within_working_hours("08:59"))
        self.assertFalse(schedule.is_within_working_hours("18:01"))

    def test_rejects_bad_times(self) -> None:
        with self.assertRaises(ValidationError):
            Schedule.create(DayOfWeek.MONDAY, "9am", "18:00")
        with self.assertRaises(ValidationError):
            Schedule.create(DayOfWeek.MONDAY, "18:00", "09:00")
        with self.assertRaises(ValidationError):
            Schedule.create(DayOfWeek.MONDAY, "09:00", "09:15")

    def test_day_name_is_case_insensitive(self) -> None:
        schedule = Schedule.create("wednesday", "09:00", "12:00")
        self.assertIs(schedule.day_of_week, DayOfWeek.WEDNESDAY)
        with self.assertRaises(ValidationError):
            Schedule.create("someday", "09:00", "12:00")

    def test_failed_update_keeps_previous_hours(self) -> None:
        schedule = Schedule.create(DayOfWeek.MONDAY, "09:00", "18:00")
        with self.assertRaises(ValidationError):
            schedule.update_schedule("19:00", "18:00")
        self.assertEqual((schedule.start_time, schedule.end_time), ("09:00", "18:00"))

    def test_duration_in_minutes(self) -> None:
        self.assertEqual(Schedule.create(DayOfWeek.SUNDAY, "09:30", "13:00").get_duration_in_minutes(), 210)


class ScheduleServiceTests(unittest.TestCase):
    """Administrative schedule management."""

    def setUp(self) -> None:
        self.repo = FakeScheduleRepository()
        self.service = ScheduleService(self.repo)

    def test_split_shifts_may_not_overlap(self) -> None:
        self.service.create(ScheduleCreate(dayOfWeek="MONDAY", startTime="09:00", endTime="13:00"))
        self.service.create(ScheduleCreate(dayOfWeek="MONDAY", startTime="14:00", endTime="18:00"))

        with self.assertRaises(ConflictError):
            self.service.create(ScheduleCreate(dayOfWeek="MONDAY", startTime="12:00", endTime="15:00"))
        self.assertEqual(len(self.service.get_by_day("monday")), 2)

    def test_update_and_delete(self) -> None:
        created = self.service.create(ScheduleCreate(dayOfWeek="SATURDAY", startTime="09:00", endTime="13:00"))
        updated = self.service.update(created.id, ScheduleUpdate(startTime="10:00", endTime="14:00"))
        self.assertEqual(updated.startTime, "10:00")

        self.service.delete(created.id)
        with self.assertRaises(NotFoundError):
            self.service.get_by_id(created.id)

    def test_holiday_must_exist(self) -> None:
        unknown = new_id()
        with self.assertRaises(NotFoundError):
            self.service.create(ScheduleCreate(dayOfWeek="FRIDAY", startTime="09:00", endTime="13:00", holidayId=unknown))
        self.assertEqual(self.repo.find_all(), [])

        self.repo.holiday_ids.add(unknown)
        created = self.service.create(
            ScheduleCreate(dayOfWeek="FRIDAY", startTime="09:00", endTime="13:00", holidayId=unknown)
        )
        self.assertEqual(created.holidayId, unknown)

    def test_holiday_id_must_be_well_formed(self) -> None:
        with self.assertRaises(ValidationError):
            self.service.create(ScheduleCreate(dayOfWeek="FRIDAY", startTime="09:00", endTime="13:00", holidayId="x"))


if __name__ == "__main__":
    unittest.main()
