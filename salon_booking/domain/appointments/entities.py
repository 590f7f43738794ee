"""Appointment domain entities - pure business rules, no framework dependencies"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Optional, Union

from ...shared.exceptions import ValidationError
from ...shared.validators import ensure_utc, utcnow

MIN_DURATION = 15
MAX_DURATION = 480
DURATION_STEP = 15
MODIFICATION_LEAD_TIME = timedelta(hours=24)

PENDING = "PENDING"
CONFIRMED = "CONFIRMED"
IN_PROGRESS = "IN_PROGRESS"
COMPLETED = "COMPLETED"
CANCELLED = "CANCELLED"
NO_SHOW = "NO_SHOW"

STATUS_TRANSITIONS: dict[str, frozenset] = {
    PENDING: frozenset({CONFIRMED, CANCELLED}),
    CONFIRMED: frozenset({IN_PROGRESS, CANCELLED, NO_SHOW}),
    IN_PROGRESS: frozenset({COMPLETED, CANCELLED}),
    COMPLETED: frozenset(),
    CANCELLED: frozenset(),
    NO_SHOW: frozenset(),
}
TERMINAL_STATUSES = frozenset({COMPLETED, CANCELLED, NO_SHOW})

STATUS_DESCRIPTIONS = {
    PENDING: "Appointment requested, awaiting confirmation",
    CONFIRMED: "Appointment confirmed",
    IN_PROGRESS: "Service is being performed",
    COMPLETED: "Appointment completed",
    CANCELLED: "Appointment cancelled",
    NO_SHOW: "Client did not show up",
}


@dataclass
class AppointmentStatus:
    """A named state of the appointment lifecycle.

    The name is a free-form label; only the six canonical names take part in
    the transition table. Anything else can neither transition nor be reached.
    """

    id: str
    name: str
    description: Optional[str] = None

    def __post_init__(self):
        self._validate()

    def _validate(self):
        if not self.id or not str(self.id).strip():
            raise ValidationError("Status ID is required")
        if not self.name or not self.name.strip():
            raise ValidationError("Status name is required")
        if len(self.name) > 50:
            raise ValidationError("Status name cannot exceed 50 characters")
        if self.description is not None and len(self.description) > 200:
            raise ValidationError("Status description cannot exceed 200 characters")

    @classmethod
    def create(cls, name: str, description: Optional[str] = None) -> "AppointmentStatus":
        return cls(id=str(uuid.uuid4()), name=name, description=description)

    def can_transition_to(self, target: Union["AppointmentStatus", str]) -> bool:
        target_name = target.name if isinstance(target, AppointmentStatus) else target
        return target_name in STATUS_TRANSITIONS.get(self.name, frozenset())

    def is_terminal_status(self) -> bool:
        return self.name in TERMINAL_STATUSES

    def update_info(self, name: str, description: Optional[str] = None):
        self.name = name
        self.description = description
        self._validate()

    def to_persistence(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "description": self.description}

    @classmethod
    def from_persistence(cls, data: dict[str, Any]) -> "AppointmentStatus":
        return cls(id=data["id"], name=data["name"], description=data.get("description"))


def _require_id(value: Optional[str], label: str):
    if value is None or not str(value).strip():
        raise ValidationError(f"{label} is required")


@dataclass
class Appointment:
    """A booked visit.

    Construction and every mutator revalidate the whole entity. The
    "not in the past" rule is applied by ``create`` and ``reschedule`` only,
    since stored appointments age into the past.
    """

    id: str
    date_time: datetime
    duration: int
    user_id: str
    client_id: str
    schedule_id: str
    status_id: str
    stylist_id: Optional[str] = None
    confirmed_at: Optional[datetime] = None
    service_ids: list[str] = field(default_factory=list)
    notes: Optional[str] = None
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    def __post_init__(self):
        self.date_time = ensure_utc(self.date_time)
        self.confirmed_at = ensure_utc(self.confirmed_at)
        self.created_at = ensure_utc(self.created_at)
        self.updated_at = ensure_utc(self.updated_at)
        self._validate()

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def _validate(self):
        _require_id(self.id, "Appointment ID")
        if self.date_time is None:
            raise ValidationError("Appointment date and time is required")
        self._validate_duration(self.duration)
        _require_id(self.user_id, "User ID")
        _require_id(self.client_id, "Client ID")
        _require_id(self.schedule_id, "Schedule ID")
        _require_id(self.status_id, "Status ID")
        if len(set(self.service_ids)) != len(self.service_ids):
            raise ValidationError("Duplicate services are not allowed")

    @staticmethod
    def _validate_duration(duration: int):
        if not isinstance(duration, int) or isinstance(duration, bool):
            raise ValidationError("Duration must be an integer number of minutes")
        if duration < MIN_DURATION or duration > MAX_DURATION:
            raise ValidationError(
                f"Duration must be between {MIN_DURATION} and {MAX_DURATION} minutes"
            )
        if duration % DURATION_STEP != 0:
            raise ValidationError(f"Duration must be a multiple of {DURATION_STEP} minutes")

    @staticmethod
    def _validate_not_in_past(date_time: datetime):
        if date_time < utcnow():
            raise ValidationError("Appointment date cannot be in the past")

    def _touch(self):
        self.updated_at = utcnow()

    # ------------------------------------------------------------------
    # Factory
    # ------------------------------------------------------------------

    @classmethod
    def create(
        cls,
        date_time: datetime,
        duration: int,
        user_id: str,
        client_id: str,
        schedule_id: str,
        status_id: str,
        stylist_id: Optional[str] = None,
        service_ids: Optional[list[str]] = None,
        notes: Optional[str] = None,
    ) -> "Appointment":
        if date_time is None:
            raise ValidationError("Appointment date and time is required")
        date_time = ensure_utc(date_time)
        cls._validate_not_in_past(date_time)
        now = utcnow()
        return cls(
            id=str(uuid.uuid4()),
            date_time=date_time,
            duration=duration,
            user_id=user_id,
            client_id=client_id,
            schedule_id=schedule_id,
            status_id=status_id,
            stylist_id=stylist_id,
            service_ids=list(service_ids or []),
            notes=notes,
            created_at=now,
            updated_at=now,
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_end_time(self) -> datetime:
        return self.date_time + timedelta(minutes=self.duration)

    def is_confirmed(self) -> bool:
        return self.confirmed_at is not None

    def is_in_past(self) -> bool:
        return self.date_time < utcnow()

    def can_be_modified(self) -> bool:
        """True while the start is more than 24 hours away"""
        return self.date_time - utcnow() > MODIFICATION_LEAD_TIME

    def has_conflict_with(self, other: "Appointment") -> bool:
        """Half-open interval overlap: back-to-back appointments do not conflict"""
        this_start, this_end = self.date_time, self.get_end_time()
        other_start, other_end = other.date_time, other.get_end_time()
        return not (this_end <= other_start or this_start >= other_end)

    # ------------------------------------------------------------------
    # Mutators
    # ------------------------------------------------------------------

    def confirm(self):
        if self.is_confirmed():
            raise ValidationError("Appointment is already confirmed")
        self.confirmed_at = utcnow()
        self._touch()

    def reschedule(self, new_date_time: datetime, new_duration: Optional[int] = None):
        new_date_time = ensure_utc(new_date_time)
        if new_date_time is None:
            raise ValidationError("Appointment date and time is required")
        self._validate_not_in_past(new_date_time)
        if new_duration is not None:
            self._validate_duration(new_duration)
            self.duration = new_duration
        self.date_time = new_date_time
        self._touch()
        self._validate()

    def update_duration(self, new_duration: int):
        self._validate_duration(new_duration)
        self.duration = new_duration
        self._touch()

    def add_service(self, service_id: str):
        _require_id(service_id, "Service ID")
        if service_id in self.service_ids:
            raise ValidationError("Service is already added to this appointment")
        self.service_ids.append(service_id)
        self._touch()

    def remove_service(self, service_id: str):
        if service_id not in self.service_ids:
            raise ValidationError("Service is not part of this appointment")
        self.service_ids.remove(service_id)
        self._touch()

    def replace_services(self, service_ids: list[str]):
        if len(set(service_ids)) != len(service_ids):
            raise ValidationError("Duplicate services are not allowed")
        for service_id in service_ids:
            _require_id(service_id, "Service ID")
        self.service_ids = list(service_ids)
        self._touch()

    def update_stylist(self, stylist_id: str):
        _require_id(stylist_id, "Stylist ID")
        self.stylist_id = stylist_id
        self._touch()

    def update_notes(self, notes: Optional[str]):
        self.notes = notes
        self._touch()

    def unassign_stylist(self):
        self.stylist_id = None
        self._touch()

    def assign_schedule(self, schedule_id: str):
        _require_id(schedule_id, "Schedule ID")
        self.schedule_id = schedule_id
        self._touch()

    def change_status(self, status_id: str):
        """Swap the status reference. Transition legality is checked by the caller."""
        _require_id(status_id, "Status ID")
        self.status_id = status_id
        self._touch()

    def mark_as_confirmed(self, confirmed_status_id: str):
        self.confirm()
        self.change_status(confirmed_status_id)

    def mark_as_cancelled(self, cancelled_status_id: str):
        self.change_status(cancelled_status_id)

    def mark_as_in_progress(self, in_progress_status_id: str):
        self.change_status(in_progress_status_id)

    def mark_as_completed(self, completed_status_id: str):
        self.change_status(completed_status_id)

    def mark_as_no_show(self, no_show_status_id: str):
        self.change_status(no_show_status_id)

    # ------------------------------------------------------------------
    # Persistence mapping
    # ------------------------------------------------------------------

    def to_persistence(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "date_time": self.date_time,
            "duration": self.duration,
            "user_id": self.user_id,
            "client_id": self.client_id,
            "stylist_id": self.stylist_id,
            "schedule_id": self.schedule_id,
            "status_id": self.status_id,
            "confirmed_at": self.confirmed_at,
            "service_ids": list(self.service_ids),
            "notes": self.notes,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_persistence(cls, data: dict[str, Any]) -> "Appointment":
        return cls(
            id=data["id"],
            date_time=data["date_time"],
            duration=data["duration"],
            user_id=data["user_id"],
            client_id=data["client_id"],
            stylist_id=data.get("stylist_id"),
            schedule_id=data["schedule_id"],
            status_id=data["status_id"],
            confirmed_at=data.get("confirmed_at"),
            service_ids=list(data.get("service_ids") or []),
            notes=data.get("notes"),
            created_at=data.get("created_at") or utcnow(),
            updated_at=data.get("updated_at") or utcnow(),
        )


__all__ = [
    "Appointment",
    "AppointmentStatus",
    "STATUS_TRANSITIONS",
    "TERMINAL_STATUSES",
    "STATUS_DESCRIPTIONS",
    "PENDING",
    "CONFIRMED",
    "IN_PROGRESS",
    "COMPLETED",
    "CANCELLED",
    "NO_SHOW",
]
