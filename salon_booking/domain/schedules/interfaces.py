"""Repository interface for working-hour schedules"""

from abc import ABC, abstractmethod
from typing import Optional

from .entities import DayOfWeek, Schedule


class IScheduleRepository(ABC):
    @abstractmethod
    def find_by_id(self, schedule_id: str) -> Optional[Schedule]:
        pass

    @abstractmethod
    def find_all(self) -> list[Schedule]:
        pass

    @abstractmethod
    def find_by_day_of_week(self, day_of_week: DayOfWeek) -> list[Schedule]:
        """Schedules for the day ordered by start time"""

    @abstractmethod
    def save(self, schedule: Schedule) -> Schedule:
        pass

    @abstractmethod
    def update(self, schedule: Schedule) -> Schedule:
        pass

    @abstractmethod
    def delete(self, schedule_id: str) -> None:
        pass

    @abstractmethod
    def holiday_exists(self, holiday_id: str) -> bool:
        pass


__all__ = ["IScheduleRepository"]
