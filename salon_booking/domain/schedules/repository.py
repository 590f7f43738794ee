"""Schedule repository - Database operations for working hours"""

from typing import Optional

from sqlalchemy.orm import Session

from ... import models
from ...shared.validators import to_naive_utc
from .entities import DayOfWeek, Schedule
from .interfaces import IScheduleRepository


class ScheduleRepository(IScheduleRepository):
    """Repository for schedule database operations"""

    def __init__(self, db: Session):
        self.db = db

    @staticmethod
    def _to_domain(row: models.Schedule) -> Schedule:
        return Schedule.from_persistence(
            {
                "id": row.id,
                "day_of_week": row.day_of_week,
                "start_time": row.start_time,
                "end_time": row.end_time,
                "holiday_id": row.holiday_id,
                "created_at": row.created_at,
                "updated_at": row.updated_at,
            }
        )

    def find_by_id(self, schedule_id: str) -> Optional[Schedule]:
        row = self.db.query(models.Schedule).filter(models.Schedule.id == schedule_id).first()
        return self._to_domain(row) if row else None

    def find_all(self) -> list[Schedule]:
        rows = self.db.query(models.Schedule).all()
        order = list(DayOfWeek)
        schedules = [self._to_domain(row) for row in rows]
        return sorted(schedules, key=lambda s: (order.index(s.day_of_week), s.start_time.zfill(5)))

    def find_by_day_of_week(self, day_of_week: DayOfWeek) -> list[Schedule]:
        rows = self.db.query(models.Schedule).filter(models.Schedule.day_of_week == day_of_week.value).all()
        return sorted((self._to_domain(row) for row in rows), key=lambda s: s.start_time.zfill(5))

    def save(self, schedule: Schedule) -> Schedule:
        data = schedule.to_persistence()
        data["created_at"] = to_naive_utc(data["created_at"])
        data["updated_at"] = to_naive_utc(data["updated_at"])
        self.db.add(models.Schedule(**data))
        self.db.commit()
        return schedule

    def update(self, schedule: Schedule) -> Schedule:
        row = self.db.query(models.Schedule).filter(models.Schedule.id == schedule.id).first()
        if row is None:
            return self.save(schedule)
        row.day_of_week = schedule.day_of_week.value
        row.start_time = schedule.start_time
        row.end_time = schedule.end_time
        row.holiday_id = schedule.holiday_id
        row.updated_at = to_naive_utc(schedule.updated_at)
        self.db.commit()
        return schedule

    def delete(self, schedule_id: str) -> None:
        row = self.db.query(models.Schedule).filter(models.Schedule.id == schedule_id).first()
        if row:
            self.db.delete(row)
            self.db.commit()

    def holiday_exists(self, holiday_id: str) -> bool:
        return self.db.query(models.Holiday.id).filter(models.Holiday.id == holiday_id).first() is not None


__all__ = ["ScheduleRepository"]
