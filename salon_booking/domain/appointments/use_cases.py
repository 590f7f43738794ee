"""Appointment use-cases - booking, lifecycle transitions and queries

Each use-case is built per request with the repositories it needs and runs
synchronously against them. Failures are raised as ``AppError`` subclasses
and rendered by the application-level exception handler.
"""

import logging
import math
from datetime import datetime, timedelta
from typing import Optional

from ...config import MAX_BOOKING_MONTHS_AHEAD
from ...shared.exceptions import (
    BusinessRuleError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from ...shared.validators import add_months, parse_iso_datetime, require_uuid, utcnow, validate_uuid
from ..catalog.entities import Service
from ..catalog.interfaces import IServiceRepository, IStylistRepository
from ..notifications.entities import NotificationType
from ..schedules.entities import DayOfWeek, Schedule
from ..schedules.interfaces import IScheduleRepository
from ..users.interfaces import IClientRepository
from .entities import (
    CANCELLED,
    COMPLETED,
    CONFIRMED,
    DURATION_STEP,
    IN_PROGRESS,
    MAX_DURATION,
    MIN_DURATION,
    NO_SHOW,
    PENDING,
    STATUS_TRANSITIONS,
    Appointment,
    AppointmentStatus,
)
from .interfaces import IAppointmentRepository, IAppointmentStatusRepository
from .schemas import (
    AppointmentResponse,
    CancelAppointmentRequest,
    ConfirmAppointmentRequest,
    CreateAppointmentRequest,
    UpdateAppointmentRequest,
)

logger = logging.getLogger(__name__)

CONFIRMATION_LEAD_TIME = timedelta(hours=1)
CANCELLATION_LEAD_TIME = timedelta(hours=2)
MAX_NOTES_LENGTH = 500
MAX_REASON_LENGTH = 300
CANCELLED_BY_VALUES = ("client", "stylist", "admin", "system")


# ============================================================================
# HELPERS
# ============================================================================


def resolve_duration(explicit: Optional[int], services: list[Service]) -> int:
    """Caller-supplied duration wins; otherwise the services' total rounded up to the next 15 minutes"""
    if explicit is not None and explicit > 0:
        return explicit
    total = sum(service.duration for service in services)
    rounded = int(math.ceil(total / DURATION_STEP)) * DURATION_STEP
    return max(MIN_DURATION, rounded)


def booking_horizon(now: Optional[datetime] = None) -> datetime:
    return add_months(now or utcnow(), MAX_BOOKING_MONTHS_AHEAD)


def validate_duration_input(duration: int):
    if duration <= 0:
        raise ValidationError("Duration must be greater than 0")
    if duration < MIN_DURATION:
        raise ValidationError(f"Minimum appointment duration is {MIN_DURATION} minutes")
    if duration > MAX_DURATION:
        raise ValidationError("Maximum appointment duration is 8 hours")
    if duration % DURATION_STEP != 0:
        raise ValidationError(f"Duration must be in {DURATION_STEP}-minute increments")


def validate_optional_text(value: Optional[str], label: str, max_length: int):
    if value is None:
        return
    if not value.strip():
        raise ValidationError(f"{label} cannot be empty if provided")
    if len(value) > max_length:
        raise ValidationError(f"{label} cannot exceed {max_length} characters")


def resolve_schedule(schedules: IScheduleRepository, date_time: datetime) -> Schedule:
    """Pick the day's schedule whose hours contain the start time, falling back to the first one"""
    day = DayOfWeek.from_datetime(date_time)
    candidates = schedules.find_by_day_of_week(day)
    if not candidates:
        raise NotFoundError("Schedule", day.value)
    start = date_time.strftime("%H:%M")
    for schedule in candidates:
        if schedule.is_within_working_hours(start):
            return schedule
    return candidates[0]


def ensure_transition(
    statuses: IAppointmentStatusRepository, appointment: Appointment, target_name: str
) -> AppointmentStatus:
    """Return the target status if the state machine allows moving there from the current one"""
    current = statuses.find_by_id(appointment.status_id)
    if current is None:
        raise NotFoundError("AppointmentStatus", appointment.status_id)
    target = statuses.find_by_name(target_name)
    if target is None:
        raise NotFoundError("AppointmentStatus", target_name)
    if not current.can_transition_to(target):
        valid = ", ".join(sorted(STATUS_TRANSITIONS.get(current.name, ()))) or "none"
        raise BusinessRuleError(
            f"Cannot transition from {current.name} to {target.name}. Valid transitions: {valid}"
        )
    return target


def status_names(statuses: IAppointmentStatusRepository) -> dict[str, str]:
    return {status.id: status.name for status in statuses.find_all()}


class _AppointmentAccess:
    """Shared lookup and permission checks for use-cases acting on an existing appointment"""

    def __init__(
        self,
        appointments: IAppointmentRepository,
        statuses: IAppointmentStatusRepository,
        stylists: Optional[IStylistRepository] = None,
        clients: Optional[IClientRepository] = None,
    ):
        self.appointments = appointments
        self.statuses = statuses
        self.stylists = stylists
        self.clients = clients

    def _load(self, appointment_id: str) -> Appointment:
        appointment = self.appointments.find_by_id(appointment_id)
        if appointment is None:
            raise NotFoundError("Appointment", appointment_id)
        return appointment

    def _current_status_name(self, appointment: Appointment) -> Optional[str]:
        status = self.statuses.find_by_id(appointment.status_id)
        return status.name if status else None

    def _is_stylist_user(self, appointment: Appointment, user_id: str) -> bool:
        if not appointment.stylist_id or self.stylists is None:
            return False
        stylist = self.stylists.find_by_id(appointment.stylist_id)
        return stylist is not None and stylist.user_id == user_id

    def _is_client_user(self, appointment: Appointment, user_id: str) -> bool:
        if self.clients is None:
            return False
        client = self.clients.find_by_id(appointment.client_id)
        return client is not None and client.user_id == user_id

    def _response(self, appointment: Appointment) -> AppointmentResponse:
        return AppointmentResponse.from_entity(appointment, self._current_status_name(appointment))


# ============================================================================
# CREATE
# ============================================================================


class CreateAppointment:
    """Books an appointment after validating input, related entities and stylist availability"""

    def __init__(
        self,
        appointments: IAppointmentRepository,
        statuses: IAppointmentStatusRepository,
        schedules: IScheduleRepository,
        clients: IClientRepository,
        stylists: IStylistRepository,
        services: IServiceRepository,
    ):
        self.appointments = appointments
        self.statuses = statuses
        self.schedules = schedules
        self.clients = clients
        self.stylists = stylists
        self.services = services

    def execute(self, data: CreateAppointmentRequest, user_id: str) -> AppointmentResponse:
        self._validate_input(data, user_id)
        date_time = self._validate_date_time(data.dateTime)

        if self.clients.find_by_id(data.clientId) is None:
            raise NotFoundError("Client", data.clientId)
        if data.stylistId and self.stylists.find_by_id(data.stylistId) is None:
            raise NotFoundError("Stylist", data.stylistId)

        services = []
        for service_id in data.serviceIds:
            service = self.services.find_by_id(service_id)
            if service is None:
                raise NotFoundError("Service", service_id)
            services.append(service)

        duration = resolve_duration(data.duration, services)

        pending = self.statuses.find_by_name(PENDING)
        if pending is None:
            raise NotFoundError("AppointmentStatus", PENDING)
        schedule = resolve_schedule(self.schedules, date_time)

        # NOTE: check-then-insert without a lock; two concurrent bookings for the
        # same stylist can both pass this check
        conflicts = self.appointments.find_conflicting_appointments(date_time, duration, data.stylistId)
        if conflicts:
            logger.warning(
                f"⚠️ Booking conflict for stylist {data.stylistId} at {date_time.isoformat()}: "
                f"{len(conflicts)} overlapping appointment(s)"
            )
            raise ConflictError("There are conflicting appointments at this time")

        appointment = Appointment.create(
            date_time=date_time,
            duration=duration,
            user_id=user_id,
            client_id=data.clientId,
            schedule_id=schedule.id,
            status_id=pending.id,
            stylist_id=data.stylistId,
            service_ids=data.serviceIds,
            notes=data.notes,
        )
        saved = self.appointments.save(appointment)
        logger.info(f"📅 Created appointment {saved.id} for client {saved.client_id} at {date_time.isoformat()}")
        return AppointmentResponse.from_entity(saved, pending.name)

    @staticmethod
    def _validate_input(data: CreateAppointmentRequest, user_id: str):
        require_uuid(user_id, "User")
        require_uuid(data.clientId, "Client")
        if not data.dateTime or not data.dateTime.strip():
            raise ValidationError("Appointment date and time is required")
        if not data.serviceIds:
            raise ValidationError("At least one service must be selected")
        if data.stylistId is not None:
            require_uuid(data.stylistId, "Stylist")
        for service_id in data.serviceIds:
            if not validate_uuid(service_id):
                raise ValidationError("All service IDs must be valid UUIDs")
        if len(set(data.serviceIds)) != len(data.serviceIds):
            raise ValidationError("Duplicate services are not allowed")
        if data.duration is not None and data.duration > 0:
            validate_duration_input(data.duration)
        validate_optional_text(data.notes, "Notes", MAX_NOTES_LENGTH)

    @staticmethod
    def _validate_date_time(value: str) -> datetime:
        date_time = parse_iso_datetime(value)
        now = utcnow()
        if date_time < now:
            raise ValidationError("Appointment cannot be scheduled in the past")
        if date_time > booking_horizon(now):
            raise ValidationError(
                f"Appointment cannot be scheduled more than {MAX_BOOKING_MONTHS_AHEAD} months in advance"
            )
        return date_time


# ============================================================================
# QUERIES
# ============================================================================


class GetAppointmentById:
    def __init__(self, appointments: IAppointmentRepository, statuses: IAppointmentStatusRepository):
        self.appointments = appointments
        self.statuses = statuses

    def execute(self, appointment_id: str) -> AppointmentResponse:
        appointment_id = require_uuid(appointment_id, "Appointment")
        appointment = self.appointments.find_by_id(appointment_id)
        if appointment is None:
            raise NotFoundError("Appointment", appointment_id)
        status = self.statuses.find_by_id(appointment.status_id)
        return AppointmentResponse.from_entity(appointment, status.name if status else None)


class GetAppointmentsByClient:
    def __init__(self, appointments: IAppointmentRepository, statuses: IAppointmentStatusRepository):
        self.appointments = appointments
        self.statuses = statuses

    def execute(self, client_id: str) -> list[AppointmentResponse]:
        client_id = require_uuid(client_id, "Client")
        names = status_names(self.statuses)
        return [
            AppointmentResponse.from_entity(a, names.get(a.status_id))
            for a in self.appointments.find_by_client_id(client_id)
        ]


class GetAppointmentsByStylist:
    def __init__(self, appointments: IAppointmentRepository, statuses: IAppointmentStatusRepository):
        self.appointments = appointments
        self.statuses = statuses

    def execute(self, stylist_id: str) -> list[AppointmentResponse]:
        stylist_id = require_uuid(stylist_id, "Stylist")
        names = status_names(self.statuses)
        return [
            AppointmentResponse.from_entity(a, names.get(a.status_id))
            for a in self.appointments.find_by_stylist_id(stylist_id)
        ]


# ============================================================================
# LIFECYCLE
# ============================================================================


class ConfirmAppointment(_AppointmentAccess):
    """Moves a pending appointment to CONFIRMED and stamps the confirmation time"""

    def __init__(self, appointments, statuses, stylists=None, clients=None, notifier=None):
        super().__init__(appointments, statuses, stylists, clients)
        self.notifier = notifier

    def execute(
        self,
        appointment_id: str,
        data: ConfirmAppointmentRequest,
        requester_id: str,
        is_admin: bool = False,
    ) -> AppointmentResponse:
        appointment_id = require_uuid(appointment_id, "Appointment")
        require_uuid(requester_id, "Requester")
        validate_optional_text(data.notes, "Confirmation notes", MAX_NOTES_LENGTH)
        if data.confirmedBy is not None and not validate_uuid(data.confirmedBy):
            raise ValidationError("Confirmed by ID must be a valid UUID")

        appointment = self._load(appointment_id)
        current = self._current_status_name(appointment)
        if appointment.is_confirmed():
            raise BusinessRuleError("Appointment is already confirmed")
        if current == CANCELLED:
            raise BusinessRuleError("Cannot confirm a cancelled appointment")
        if current == COMPLETED:
            raise BusinessRuleError("Cannot confirm a completed appointment")
        if appointment.is_in_past():
            raise BusinessRuleError("Cannot confirm appointments that have already occurred")
        if not (is_admin or appointment.user_id == requester_id or self._is_stylist_user(appointment, requester_id)):
            raise BusinessRuleError("You do not have permission to confirm this appointment")
        if appointment.date_time <= utcnow() + CONFIRMATION_LEAD_TIME:
            raise BusinessRuleError(
                "Appointments can only be confirmed at least 1 hour in advance. "
                "For last-minute confirmations, please contact customer service."
            )

        confirmed = ensure_transition(self.statuses, appointment, CONFIRMED)
        appointment.mark_as_confirmed(confirmed.id)
        if data.notes:
            appointment.update_notes(_append_note(appointment.notes, "Confirmation", data.notes))

        saved = self.appointments.update(appointment)
        logger.info(f"✅ Appointment {appointment_id} confirmed by {data.confirmedBy or requester_id}")

        if data.notifyClient and self.notifier is not None:
            self.notifier.notify_client(
                saved.client_id,
                NotificationType.APPOINTMENT_CONFIRMATION,
                f"Your appointment on {saved.date_time.strftime('%Y-%m-%d at %H:%M')} UTC has been confirmed.",
            )
        return AppointmentResponse.from_entity(saved, confirmed.name)


class CancelAppointment(_AppointmentAccess):
    def __init__(self, appointments, statuses, stylists=None, clients=None, notifier=None):
        super().__init__(appointments, statuses, stylists, clients)
        self.notifier = notifier

    def execute(
        self,
        appointment_id: str,
        data: CancelAppointmentRequest,
        requester_id: str,
        is_admin: bool = False,
    ) -> AppointmentResponse:
        appointment_id = require_uuid(appointment_id, "Appointment")
        require_uuid(requester_id, "Requester")
        validate_optional_text(data.reason, "Cancellation reason", 500)
        if data.cancelledBy is not None and data.cancelledBy not in CANCELLED_BY_VALUES:
            raise ValidationError(f"Cancelled by must be one of: {', '.join(CANCELLED_BY_VALUES)}")

        appointment = self._load(appointment_id)
        current = self._current_status_name(appointment)
        if current == CANCELLED:
            raise BusinessRuleError("Appointment is already cancelled")
        if current == COMPLETED:
            raise BusinessRuleError("Cannot cancel a completed appointment")
        if appointment.is_in_past():
            raise BusinessRuleError("Cannot cancel appointments that have already occurred")
        allowed = (
            is_admin
            or appointment.user_id == requester_id
            or self._is_client_user(appointment, requester_id)
            or self._is_stylist_user(appointment, requester_id)
        )
        if not allowed:
            raise BusinessRuleError("You do not have permission to cancel this appointment")
        if appointment.date_time <= utcnow() + CANCELLATION_LEAD_TIME:
            raise BusinessRuleError(
                "Appointments can only be cancelled at least 2 hours in advance. "
                "For last-minute cancellations, please contact customer service."
            )

        cancelled = ensure_transition(self.statuses, appointment, CANCELLED)
        appointment.mark_as_cancelled(cancelled.id)
        if data.reason:
            appointment.update_notes(_append_note(appointment.notes, "Cancellation", data.reason))

        saved = self.appointments.update(appointment)
        logger.info(
            f"🚫 Appointment {appointment_id} cancelled by {data.cancelledBy or 'client'} ({requester_id})"
        )

        if data.notifyClient and self.notifier is not None:
            self.notifier.notify_client(
                saved.client_id,
                NotificationType.APPOINTMENT_CANCELLATION,
                f"Your appointment on {saved.date_time.strftime('%Y-%m-%d at %H:%M')} UTC has been cancelled.",
            )
        return AppointmentResponse.from_entity(saved, cancelled.name)


class UpdateAppointment(_AppointmentAccess):
    """Reschedules or edits an appointment that is still more than 24 hours away"""

    def __init__(self, appointments, statuses, schedules, stylists, services, clients=None):
        super().__init__(appointments, statuses, stylists, clients)
        self.schedules = schedules
        self.services = services

    def execute(
        self,
        appointment_id: str,
        data: UpdateAppointmentRequest,
        requester_id: str,
        is_admin: bool = False,
    ) -> AppointmentResponse:
        appointment_id = require_uuid(appointment_id, "Appointment")
        require_uuid(requester_id, "Requester")
        new_date_time = self._validate_input(data)
        unassign_stylist = "stylistId" in data.model_fields_set and data.stylistId is None

        appointment = self._load(appointment_id)
        if not (is_admin or appointment.user_id == requester_id or self._is_stylist_user(appointment, requester_id)):
            raise BusinessRuleError("You do not have permission to update this appointment")
        status = self.statuses.find_by_id(appointment.status_id)
        if status is not None and status.is_terminal_status():
            raise BusinessRuleError("Cannot update appointments in terminal status")
        if appointment.is_in_past():
            raise BusinessRuleError("Cannot update appointments that have already occurred")
        if not appointment.can_be_modified():
            raise BusinessRuleError(
                "Appointments can only be modified at least 24 hours in advance. "
                "For last-minute changes, please contact customer service."
            )
        if appointment.is_confirmed() and new_date_time is not None and not (data.notes or data.reason):
            raise BusinessRuleError(
                "A note or reason is required when changing the date/time of a confirmed appointment"
            )

        changes = []
        if new_date_time is not None:
            changes.append(f"dateTime {appointment.date_time.isoformat()} -> {new_date_time.isoformat()}")
            appointment.reschedule(new_date_time)
            appointment.assign_schedule(resolve_schedule(self.schedules, new_date_time).id)
        if data.duration is not None:
            changes.append(f"duration {appointment.duration} -> {data.duration}")
            appointment.update_duration(data.duration)
        if data.stylistId is not None:
            if self.stylists.find_by_id(data.stylistId) is None:
                raise NotFoundError("Stylist", data.stylistId)
            changes.append(f"stylist {appointment.stylist_id} -> {data.stylistId}")
            appointment.update_stylist(data.stylistId)
        elif unassign_stylist:
            changes.append(f"stylist {appointment.stylist_id} -> none")
            appointment.unassign_stylist()
        if data.serviceIds is not None:
            for service_id in data.serviceIds:
                if self.services.find_by_id(service_id) is None:
                    raise NotFoundError("Service", service_id)
            changes.append(f"services -> {', '.join(data.serviceIds)}")
            appointment.replace_services(data.serviceIds)
        if data.notes is not None:
            appointment.update_notes(data.notes)
        if data.reason:
            appointment.update_notes(_append_note(appointment.notes, "Change reason", data.reason))

        conflicts = self.appointments.find_conflicting_appointments(
            appointment.date_time, appointment.duration, appointment.stylist_id, appointment.id
        )
        if conflicts:
            raise ConflictError(
                f"The updated appointment conflicts with {len(conflicts)} existing appointment(s). "
                "Please choose a different time or stylist."
            )

        saved = self.appointments.update(appointment)
        logger.info(f"📝 Appointment {appointment_id} updated by {requester_id}: {'; '.join(changes) or 'notes'}")
        return self._response(saved)

    @staticmethod
    def _validate_input(data: UpdateAppointmentRequest) -> Optional[datetime]:
        provided = data.model_fields_set & {"dateTime", "duration", "stylistId", "serviceIds", "notes"}
        if not provided:
            raise ValidationError("At least one field must be provided for update")

        new_date_time = None
        if data.dateTime is not None:
            try:
                new_date_time = parse_iso_datetime(data.dateTime)
            except ValidationError:
                raise ValidationError("DateTime must be a valid ISO 8601 date")
            now = utcnow()
            if new_date_time < now:
                raise ValidationError("Appointment cannot be rescheduled to the past")
            if new_date_time > booking_horizon(now):
                raise ValidationError(
                    f"Appointment cannot be scheduled more than {MAX_BOOKING_MONTHS_AHEAD} months in advance"
                )
        if data.duration is not None:
            validate_duration_input(data.duration)
        if data.stylistId is not None and not validate_uuid(data.stylistId):
            raise ValidationError("Stylist ID must be a valid UUID")
        if data.serviceIds is not None:
            if not data.serviceIds:
                raise ValidationError("Service IDs must be a non-empty array")
            if not all(validate_uuid(service_id) for service_id in data.serviceIds):
                raise ValidationError("All service IDs must be valid UUIDs")
        validate_optional_text(data.notes, "Notes", MAX_NOTES_LENGTH)
        validate_optional_text(data.reason, "Reason", MAX_REASON_LENGTH)
        return new_date_time


class ChangeAppointmentStatus(_AppointmentAccess):
    """Drives the in-salon part of the lifecycle: IN_PROGRESS, COMPLETED and NO_SHOW"""

    MARKERS = {
        IN_PROGRESS: Appointment.mark_as_in_progress,
        COMPLETED: Appointment.mark_as_completed,
        NO_SHOW: Appointment.mark_as_no_show,
    }

    def execute(
        self, appointment_id: str, status_name: str, requester_id: str, is_admin: bool = False
    ) -> AppointmentResponse:
        appointment_id = require_uuid(appointment_id, "Appointment")
        require_uuid(requester_id, "Requester")
        target_name = (status_name or "").strip().upper()
        if target_name not in STATUS_TRANSITIONS:
            raise ValidationError(f"Unknown appointment status: {status_name}")
        if target_name not in self.MARKERS:
            raise BusinessRuleError(
                f"Status {target_name} is set through its dedicated operation, not a direct status change"
            )

        appointment = self._load(appointment_id)
        if not (is_admin or self._is_stylist_user(appointment, requester_id)):
            raise BusinessRuleError("Only the assigned stylist or an administrator can change this status")

        target = ensure_transition(self.statuses, appointment, target_name)
        self.MARKERS[target_name](appointment, target.id)
        saved = self.appointments.update(appointment)
        logger.info(f"🔄 Appointment {appointment_id} moved to {target.name} by {requester_id}")
        return AppointmentResponse.from_entity(saved, target.name)


def _append_note(existing: Optional[str], label: str, text: str) -> str:
    entry = f"[{label}] {text.strip()}"
    return f"{existing}\n{entry}" if existing else entry


__all__ = [
    "CreateAppointment",
    "GetAppointmentById",
    "GetAppointmentsByClient",
    "GetAppointmentsByStylist",
    "ConfirmAppointment",
    "CancelAppointment",
    "UpdateAppointment",
    "ChangeAppointmentStatus",
    "resolve_duration",
    "resolve_schedule",
    "ensure_transition",
    "booking_horizon",
    "validate_duration_input",
]
