"""Appointment service - reporting and administrative operations"""

import logging
import re
from datetime import datetime
from typing import Iterable, Optional

from ...shared.exceptions import ConflictError, NotFoundError, ValidationError
from ...shared.validators import require_uuid
from ..catalog.interfaces import IStylistRepository
from ..users.interfaces import IClientRepository
from .entities import (
    CANCELLED,
    COMPLETED,
    CONFIRMED,
    IN_PROGRESS,
    NO_SHOW,
    PENDING,
    STATUS_TRANSITIONS,
    Appointment,
    AppointmentStatus,
)
from .interfaces import IAppointmentRepository, IAppointmentStatusRepository
from .schemas import (
    AppointmentResponse,
    AppointmentStatisticsSummary,
    AppointmentStatusCreate,
    AppointmentStatusResponse,
    AppointmentStatusUpdate,
)
from .use_cases import status_names

logger = logging.getLogger(__name__)

STATUS_NAME_PATTERN = re.compile(r"^[A-Z_][A-Z0-9_]*$")


def _ensure_ordered(start: datetime, end: datetime):
    if start >= end:
        raise ValidationError("Start date must be before end date")


class AppointmentService:
    """Service layer for appointment listings, statistics and deletion"""

    def __init__(
        self,
        appointments: IAppointmentRepository,
        statuses: IAppointmentStatusRepository,
        stylists: IStylistRepository,
        clients: IClientRepository,
    ):
        self.appointments = appointments
        self.statuses = statuses
        self.stylists = stylists
        self.clients = clients

    def get_by_date_range(self, start: datetime, end: datetime) -> list[AppointmentResponse]:
        _ensure_ordered(start, end)
        names = status_names(self.statuses)
        return [
            AppointmentResponse.from_entity(a, names.get(a.status_id))
            for a in self.appointments.find_by_date_range(start, end)
        ]

    def delete(self, appointment_id: str) -> None:
        appointment_id = require_uuid(appointment_id, "Appointment")
        if not self.appointments.exists_by_id(appointment_id):
            raise NotFoundError("Appointment", appointment_id)
        self.appointments.delete(appointment_id)
        logger.info(f"🗑️ Deleted appointment {appointment_id}")

    def get_statistics(self) -> dict[str, int]:
        """Appointment count per status name"""
        return {status.name: self.appointments.count_by_status(status.id) for status in self.statuses.find_all()}

    def _count_by_status(self, appointments: Iterable[Appointment]) -> dict[str, int]:
        statuses = self.statuses.find_all()
        counts = {status.name: 0 for status in statuses}
        names = {status.id: status.name for status in statuses}
        for appointment in appointments:
            name = names.get(appointment.status_id)
            if name is not None:
                counts[name] += 1
        return counts

    def get_statistics_by_date_range(self, start: datetime, end: datetime) -> dict[str, int]:
        _ensure_ordered(start, end)
        return self._count_by_status(self.appointments.find_by_date_range(start, end))

    def get_statistics_by_stylist(self, stylist_id: str) -> dict[str, int]:
        stylist_id = require_uuid(stylist_id, "Stylist")
        if not self.stylists.exists_by_id(stylist_id):
            raise NotFoundError("Stylist", stylist_id)
        return self._count_by_status(self.appointments.find_by_stylist_id(stylist_id))

    def get_statistics_by_client(self, client_id: str) -> dict[str, int]:
        client_id = require_uuid(client_id, "Client")
        if self.clients.find_by_id(client_id) is None:
            raise NotFoundError("Client", client_id)
        return self._count_by_status(self.appointments.find_by_client_id(client_id))

    def get_statistics_summary(self) -> AppointmentStatisticsSummary:
        stats = self.get_statistics()
        pending = stats.get(PENDING, 0)
        confirmed = stats.get(CONFIRMED, 0)
        in_progress = stats.get(IN_PROGRESS, 0)
        completed = stats.get(COMPLETED, 0)
        cancelled = stats.get(CANCELLED, 0)
        no_show = stats.get(NO_SHOW, 0)

        finished = completed + cancelled + no_show
        showed_up = completed + in_progress
        scheduled = confirmed + completed + in_progress + no_show

        return AppointmentStatisticsSummary(
            pending=pending,
            confirmed=confirmed,
            inProgress=in_progress,
            completed=completed,
            cancelled=cancelled,
            noShow=no_show,
            total=pending + confirmed + in_progress + completed + cancelled + no_show,
            completionRate=round(completed / finished * 100, 2) if finished else 0.0,
            showRate=round(showed_up / scheduled * 100, 2) if scheduled else 0.0,
        )


class AppointmentStatusService:
    """Manages the status catalogue.

    The six lifecycle statuses are system statuses and cannot be deleted.
    Custom statuses may be added, but the transition table ignores them.
    """

    def __init__(self, statuses: IAppointmentStatusRepository, appointments: IAppointmentRepository):
        self.statuses = statuses
        self.appointments = appointments

    @staticmethod
    def _validate_name(name: Optional[str]):
        if not name or not name.strip():
            raise ValidationError("Status name is required")
        if len(name) > 50:
            raise ValidationError("Status name is too long (max 50 characters)")
        if not STATUS_NAME_PATTERN.match(name):
            raise ValidationError("Status name must be uppercase letters, numbers, and underscores only")

    def _get(self, status_id: str) -> AppointmentStatus:
        status_id = require_uuid(status_id, "AppointmentStatus")
        status = self.statuses.find_by_id(status_id)
        if status is None:
            raise NotFoundError("AppointmentStatus", status_id)
        return status

    def _ensure_name_free(self, name: str):
        if self.statuses.find_by_name(name) is not None:
            raise ConflictError(f"AppointmentStatus with name '{name}' already exists")

    def create(self, data: AppointmentStatusCreate) -> AppointmentStatusResponse:
        self._validate_name(data.name)
        self._ensure_name_free(data.name)
        status = AppointmentStatus.create(data.name, data.description)
        self.statuses.save(status)
        logger.info(f"🏷️ Created appointment status {status.name}")
        return AppointmentStatusResponse.from_entity(status)

    def update(self, status_id: str, data: AppointmentStatusUpdate) -> AppointmentStatusResponse:
        status = self._get(status_id)
        if data.name:
            self._validate_name(data.name)
            if data.name != status.name:
                self._ensure_name_free(data.name)
        description = data.description if "description" in data.model_fields_set else status.description
        status.update_info(data.name or status.name, description)
        self.statuses.update(status)
        return AppointmentStatusResponse.from_entity(status)

    def delete(self, status_id: str) -> None:
        status = self._get(status_id)
        if status.name in STATUS_TRANSITIONS:
            raise ValidationError(f"Cannot delete system status: {status.name}")
        in_use = self.appointments.count_by_status(status.id)
        if in_use > 0:
            raise ConflictError(f"Cannot delete status: {in_use} appointments are using this status")
        self.statuses.delete(status.id)
        logger.info(f"🗑️ Deleted appointment status {status.name}")

    def get_by_id(self, status_id: str) -> AppointmentStatusResponse:
        return AppointmentStatusResponse.from_entity(self._get(status_id))

    def get_by_name(self, name: str) -> AppointmentStatusResponse:
        status = self.statuses.find_by_name(name)
        if status is None:
            raise NotFoundError("AppointmentStatus", name)
        return AppointmentStatusResponse.from_entity(status)

    def get_all(self) -> list[AppointmentStatusResponse]:
        return [AppointmentStatusResponse.from_entity(s) for s in self.statuses.find_all()]

    def get_terminal_statuses(self) -> list[AppointmentStatusResponse]:
        return [AppointmentStatusResponse.from_entity(s) for s in self.statuses.find_all() if s.is_terminal_status()]

    def get_active_statuses(self) -> list[AppointmentStatusResponse]:
        return [
            AppointmentStatusResponse.from_entity(s) for s in self.statuses.find_all() if not s.is_terminal_status()
        ]

    def can_transition_to(self, from_status_id: str, to_status_name: str) -> bool:
        """False when the source status is unknown"""
        status = self.statuses.find_by_id(from_status_id)
        return status is not None and status.can_transition_to(to_status_name)

    def get_valid_transitions(self, status_id: str) -> list[AppointmentStatusResponse]:
        current = self._get(status_id)
        return [
            AppointmentStatusResponse.from_entity(s)
            for s in self.statuses.find_all()
            if current.can_transition_to(s.name)
        ]


__all__ = ["AppointmentService", "AppointmentStatusService"]
