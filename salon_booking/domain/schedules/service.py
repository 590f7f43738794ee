"""Schedule service - Business logic for salon working hours"""

import logging

from ...shared.exceptions import ConflictError, NotFoundError, ValidationError
from ...shared.validators import require_uuid
from .entities import DayOfWeek, Schedule
from .interfaces import IScheduleRepository
from .schemas import ScheduleCreate, ScheduleResponse, ScheduleUpdate

logger = logging.getLogger(__name__)


def parse_day(value: str) -> DayOfWeek:
    try:
        return DayOfWeek((value or "").strip().upper())
    except ValueError:
        raise ValidationError(f"Invalid day of week: {value}")


class ScheduleService:
    def __init__(self, schedules: IScheduleRepository):
        self.repo = schedules

    def _get(self, schedule_id: str) -> Schedule:
        schedule_id = require_uuid(schedule_id, "Schedule")
        schedule = self.repo.find_by_id(schedule_id)
        if schedule is None:
            raise NotFoundError("Schedule", schedule_id)
        return schedule

    def _ensure_no_overlap(self, schedule: Schedule):
        for other in self.repo.find_by_day_of_week(schedule.day_of_week):
            if other.id != schedule.id and schedule.overlaps(other):
                raise ConflictError(
                    f"Schedule overlaps existing {other.day_of_week.value} hours "
                    f"{other.start_time}-{other.end_time}"
                )

    def create(self, data: ScheduleCreate) -> ScheduleResponse:
        holiday_id = None
        if data.holidayId is not None:
            holiday_id = require_uuid(data.holidayId, "Holiday")
            if not self.repo.holiday_exists(holiday_id):
                raise NotFoundError("Holiday", holiday_id)
        schedule = Schedule.create(parse_day(data.dayOfWeek), data.startTime, data.endTime, holiday_id)
        self._ensure_no_overlap(schedule)
        self.repo.save(schedule)
        logger.info(f"🗓️ Created schedule {schedule.day_of_week.value} {schedule.start_time}-{schedule.end_time}")
        return ScheduleResponse.from_entity(schedule)

    def update(self, schedule_id: str, data: ScheduleUpdate) -> ScheduleResponse:
        schedule = self._get(schedule_id)
        previous = (schedule.start_time, schedule.end_time)
        schedule.update_schedule(data.startTime, data.endTime)
        try:
            self._ensure_no_overlap(schedule)
        except ConflictError:
            schedule.start_time, schedule.end_time = previous
            raise
        self.repo.update(schedule)
        return ScheduleResponse.from_entity(schedule)

    def delete(self, schedule_id: str) -> None:
        schedule = self._get(schedule_id)
        self.repo.delete(schedule.id)
        logger.info(f"🗑️ Deleted schedule {schedule.id}")

    def get_by_id(self, schedule_id: str) -> ScheduleResponse:
        return ScheduleResponse.from_entity(self._get(schedule_id))

    def get_all(self) -> list[ScheduleResponse]:
        return [ScheduleResponse.from_entity(s) for s in self.repo.find_all()]

    def get_by_day(self, day: str) -> list[ScheduleResponse]:
        return [ScheduleResponse.from_entity(s) for s in self.repo.find_by_day_of_week(parse_day(day))]


__all__ = ["ScheduleService", "parse_day"]
