"""Schedule domain entity - weekly working hours and slot generation"""

import re
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from ...shared.exceptions import ValidationError
from ...shared.validators import ensure_utc, utcnow

TIME_PATTERN = re.compile(r"^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$")
MIN_WORKING_MINUTES = 30


class DayOfWeek(str, Enum):
    MONDAY = "MONDAY"
    TUESDAY = "TUESDAY"
    WEDNESDAY = "WEDNESDAY"
    THURSDAY = "THURSDAY"
    FRIDAY = "FRIDAY"
    SATURDAY = "SATURDAY"
    SUNDAY = "SUNDAY"

    @classmethod
    def from_datetime(cls, value: datetime) -> "DayOfWeek":
        return list(cls)[value.weekday()]


def time_to_minutes(value: str) -> int:
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def minutes_to_time(total: int) -> str:
    return f"{total // 60:02d}:{total % 60:02d}"


@dataclass
class Schedule:
    """Working hours for one day of the week. Several schedules per day model split shifts."""

    id: str
    day_of_week: DayOfWeek
    start_time: str
    end_time: str
    holiday_id: Optional[str] = None
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    def __post_init__(self):
        if isinstance(self.day_of_week, str) and not isinstance(self.day_of_week, DayOfWeek):
            try:
                self.day_of_week = DayOfWeek(self.day_of_week.upper())
            except ValueError:
                raise ValidationError(f"Invalid day of week: {self.day_of_week}")
        self.created_at = ensure_utc(self.created_at)
        self.updated_at = ensure_utc(self.updated_at)
        self._validate()

    def _validate(self):
        if not self.id or not str(self.id).strip():
            raise ValidationError("Schedule ID is required")
        if not isinstance(self.day_of_week, DayOfWeek):
            raise ValidationError("Day of week is required")
        for label, value in (("Start time", self.start_time), ("End time", self.end_time)):
            if not value or not TIME_PATTERN.match(value):
                raise ValidationError(f"{label} must be in HH:MM format")
        start = time_to_minutes(self.start_time)
        end = time_to_minutes(self.end_time)
        if start >= end:
            raise ValidationError("Start time must be before end time")
        if end - start < MIN_WORKING_MINUTES:
            raise ValidationError(
                f"Schedule must cover at least {MIN_WORKING_MINUTES} minutes"
            )

    @classmethod
    def create(
        cls,
        day_of_week,
        start_time: str,
        end_time: str,
        holiday_id: Optional[str] = None,
    ) -> "Schedule":
        now = utcnow()
        return cls(
            id=str(uuid.uuid4()),
            day_of_week=day_of_week,
            start_time=start_time,
            end_time=end_time,
            holiday_id=holiday_id,
            created_at=now,
            updated_at=now,
        )

    def get_duration_in_minutes(self) -> int:
        return time_to_minutes(self.end_time) - time_to_minutes(self.start_time)

    def get_available_slots(self, slot_duration: int = 30) -> list[str]:
        """Slot start times (HH:MM) stepping by ``slot_duration``; a slot is emitted only if it fits entirely"""
        if slot_duration <= 0:
            raise ValidationError("Slot duration must be positive")
        slots = []
        current = time_to_minutes(self.start_time)
        end = time_to_minutes(self.end_time)
        while current + slot_duration <= end:
            slots.append(minutes_to_time(current))
            current += slot_duration
        return slots

    def is_within_working_hours(self, time: str) -> bool:
        """Inclusive on both ends"""
        if not time or not TIME_PATTERN.match(time):
            raise ValidationError("Time must be in HH:MM format")
        minutes = time_to_minutes(time)
        return time_to_minutes(self.start_time) <= minutes <= time_to_minutes(self.end_time)

    def overlaps(self, other: "Schedule") -> bool:
        if self.day_of_week != other.day_of_week:
            return False
        return not (
            time_to_minutes(self.end_time) <= time_to_minutes(other.start_time)
            or time_to_minutes(self.start_time) >= time_to_minutes(other.end_time)
        )

    def update_schedule(self, start_time: str, end_time: str):
        previous = (self.start_time, self.end_time)
        self.start_time = start_time
        self.end_time = end_time
        try:
            self._validate()
        except ValidationError:
            self.start_time, self.end_time = previous
            raise
        self.updated_at = utcnow()

    def to_persistence(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "day_of_week": self.day_of_week.value,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "holiday_id": self.holiday_id,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_persistence(cls, data: dict[str, Any]) -> "Schedule":
        return cls(
            id=data["id"],
            day_of_week=data["day_of_week"],
            start_time=data["start_time"],
            end_time=data["end_time"],
            holiday_id=data.get("holiday_id"),
            created_at=data.get("created_at") or utcnow(),
            updated_at=data.get("updated_at") or utcnow(),
        )


__all__ = ["Schedule", "DayOfWeek", "time_to_minutes", "minutes_to_time"]
