"""Available slots - per-day slot grid flagged against existing bookings"""

import logging
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional

from ...config import MAX_BOOKING_MONTHS_AHEAD
from ...shared.exceptions import BusinessRuleError, NotFoundError, ValidationError
from ...shared.validators import DATE_PATTERN, add_months, require_uuid, utcnow, validate_uuid
from ..catalog.interfaces import IServiceRepository
from ..schedules.entities import DayOfWeek
from ..schedules.interfaces import IScheduleRepository
from .entities import CANCELLED, DURATION_STEP, MAX_DURATION, MIN_DURATION
from .interfaces import IAppointmentRepository, IAppointmentStatusRepository
from .schemas import AvailableSlot, DayAvailabilityResponse, WorkingHours
from .use_cases import resolve_duration

logger = logging.getLogger(__name__)

DEFAULT_SLOT_DURATION = 30


class GetAvailableSlots:
    def __init__(
        self,
        appointments: IAppointmentRepository,
        schedules: IScheduleRepository,
        statuses: IAppointmentStatusRepository,
        services: Optional[IServiceRepository] = None,
    ):
        self.appointments = appointments
        self.schedules = schedules
        self.statuses = statuses
        self.services = services

    def execute(
        self,
        date_str: str,
        duration: Optional[int] = None,
        stylist_id: Optional[str] = None,
        service_ids: Optional[list[str]] = None,
    ) -> DayAvailabilityResponse:
        target = self._validate(date_str, duration, stylist_id, service_ids)
        duration = self._slot_duration(duration, service_ids)

        today = utcnow().date()
        if target < today:
            raise BusinessRuleError("Cannot check availability for past dates")
        if target > add_months(utcnow(), MAX_BOOKING_MONTHS_AHEAD).date():
            raise BusinessRuleError(
                f"Cannot check availability more than {MAX_BOOKING_MONTHS_AHEAD} months in advance"
            )

        day = DayOfWeek.from_datetime(datetime.combine(target, time.min))
        schedules = self.schedules.find_by_day_of_week(day)
        if not schedules:
            return DayAvailabilityResponse(
                date=date_str, dayOfWeek=day.value, isWorkingDay=False, totalSlots=0, availableSlots=0
            )

        cancelled = self.statuses.find_by_name(CANCELLED)
        existing = [
            a
            for a in self.appointments.find_by_date(target, stylist_id)
            if cancelled is None or a.status_id != cancelled.id
        ]

        now = utcnow()
        slots = []
        for schedule in schedules:
            for slot_time in schedule.get_available_slots(duration):
                hours, minutes = (int(part) for part in slot_time.split(":"))
                start = datetime.combine(target, time(hours, minutes), tzinfo=timezone.utc)
                end = start + timedelta(minutes=duration)
                reason = None
                if start < now:
                    reason = "Time slot has already passed"
                else:
                    for appointment in existing:
                        if not (end <= appointment.date_time or start >= appointment.get_end_time()):
                            reason = (
                                f"Conflicts with an existing appointment at "
                                f"{appointment.date_time.strftime('%H:%M')}"
                            )
                            break
                slots.append(
                    AvailableSlot(
                        time=slot_time,
                        available=reason is None,
                        duration=duration,
                        stylistId=stylist_id,
                        conflictReason=reason,
                    )
                )

        available = sum(1 for slot in slots if slot.available)
        logger.debug(f"Availability for {date_str}: {available}/{len(slots)} slots free")
        return DayAvailabilityResponse(
            date=date_str,
            dayOfWeek=day.value,
            isWorkingDay=True,
            totalSlots=len(slots),
            availableSlots=available,
            slots=slots,
            workingHours=WorkingHours(startTime=schedules[0].start_time, endTime=schedules[-1].end_time),
        )

    @staticmethod
    def _validate(
        date_str: str, duration: Optional[int], stylist_id: Optional[str], service_ids: Optional[list[str]]
    ) -> date:
        if not date_str or not date_str.strip():
            raise ValidationError("Date is required")
        if not DATE_PATTERN.match(date_str):
            raise ValidationError("Date must be in YYYY-MM-DD format")
        if stylist_id is not None:
            require_uuid(stylist_id, "Stylist")
        if service_ids and not all(validate_uuid(service_id) for service_id in service_ids):
            raise ValidationError("All service IDs must be valid UUIDs")
        if duration is not None:
            if duration < MIN_DURATION:
                raise ValidationError(f"Minimum duration is {MIN_DURATION} minutes")
            if duration > MAX_DURATION:
                raise ValidationError(f"Maximum duration is 8 hours ({MAX_DURATION} minutes)")
            if duration % DURATION_STEP != 0:
                raise ValidationError(f"Duration must be in {DURATION_STEP}-minute increments")
        try:
            return date.fromisoformat(date_str)
        except ValueError:
            raise ValidationError("Invalid date provided")

    def _slot_duration(self, duration: Optional[int], service_ids: Optional[list[str]]) -> int:
        if duration is not None:
            return duration
        if service_ids and self.services is not None:
            services = []
            for service_id in service_ids:
                service = self.services.find_by_id(service_id)
                if service is None:
                    raise NotFoundError("Service", service_id)
                services.append(service)
            return min(MAX_DURATION, resolve_duration(None, services))
        return DEFAULT_SLOT_DURATION


__all__ = ["GetAvailableSlots", "DEFAULT_SLOT_DURATION"]
