"""Schedule schemas"""

from typing import Optional

from pydantic import BaseModel

from ...shared.validators import to_iso
from .entities import Schedule


class ScheduleCreate(BaseModel):
    dayOfWeek: str
    startTime: str
    endTime: str
    holidayId: Optional[str] = None


class ScheduleUpdate(BaseModel):
    startTime: str
    endTime: str


class ScheduleResponse(BaseModel):
    id: str
    dayOfWeek: str
    startTime: str
    endTime: str
    durationMinutes: int
    holidayId: Optional[str] = None
    createdAt: str
    updatedAt: str

    @classmethod
    def from_entity(cls, schedule: Schedule) -> "ScheduleResponse":
        return cls(
            id=schedule.id,
            dayOfWeek=schedule.day_of_week.value,
            startTime=schedule.start_time,
            endTime=schedule.end_time,
            durationMinutes=schedule.get_duration_in_minutes(),
            holidayId=schedule.holiday_id,
            createdAt=to_iso(schedule.created_at),
            updatedAt=to_iso(schedule.updated_at),
        )


__all__ = ["ScheduleCreate", "ScheduleUpdate", "ScheduleResponse"]
