"""Appointment domain schemas - Pydantic models for requests and responses

Request models are deliberately loose: the use-cases own the business
validation so that every rule produces the same error envelope whether the
call comes over HTTP or from code.
"""

from typing import Optional

from pydantic import BaseModel, Field

from ...shared.validators import to_iso
from .entities import Appointment, AppointmentStatus


class CreateAppointmentRequest(BaseModel):
    """Schema for booking a new appointment"""

    dateTime: Optional[str] = None
    clientId: Optional[str] = None
    stylistId: Optional[str] = None
    serviceIds: list[str] = Field(default_factory=list)
    duration: Optional[int] = None
    notes: Optional[str] = None


class UpdateAppointmentRequest(BaseModel):
    """Partial update. An explicit ``stylistId: null`` unassigns the stylist."""

    dateTime: Optional[str] = None
    duration: Optional[int] = None
    stylistId: Optional[str] = None
    serviceIds: Optional[list[str]] = None
    notes: Optional[str] = None
    reason: Optional[str] = None


class ConfirmAppointmentRequest(BaseModel):
    notes: Optional[str] = None
    confirmedBy: Optional[str] = None
    notifyClient: bool = True


class CancelAppointmentRequest(BaseModel):
    reason: Optional[str] = None
    cancelledBy: Optional[str] = None
    notifyClient: bool = True


class ChangeStatusRequest(BaseModel):
    status: str


class AppointmentResponse(BaseModel):
    """Outbound appointment. Absent optional fields are dropped when serialized."""

    id: str
    dateTime: str
    endTime: str
    duration: int
    userId: str
    clientId: str
    stylistId: Optional[str] = None
    scheduleId: str
    statusId: str
    status: Optional[str] = None
    confirmedAt: Optional[str] = None
    serviceIds: list[str]
    notes: Optional[str] = None
    createdAt: str
    updatedAt: str

    @classmethod
    def from_entity(cls, appointment: Appointment, status_name: Optional[str] = None) -> "AppointmentResponse":
        return cls(
            id=appointment.id,
            dateTime=to_iso(appointment.date_time),
            endTime=to_iso(appointment.get_end_time()),
            duration=appointment.duration,
            userId=appointment.user_id,
            clientId=appointment.client_id,
            stylistId=appointment.stylist_id,
            scheduleId=appointment.schedule_id,
            statusId=appointment.status_id,
            status=status_name,
            confirmedAt=to_iso(appointment.confirmed_at),
            serviceIds=list(appointment.service_ids),
            notes=appointment.notes,
            createdAt=to_iso(appointment.created_at),
            updatedAt=to_iso(appointment.updated_at),
        )

    def to_dict(self) -> dict:
        return self.model_dump(exclude_none=True)


class AvailableSlot(BaseModel):
    time: str
    available: bool
    duration: int
    stylistId: Optional[str] = None
    conflictReason: Optional[str] = None


class WorkingHours(BaseModel):
    startTime: str
    endTime: str


class DayAvailabilityResponse(BaseModel):
    date: str
    dayOfWeek: str
    isWorkingDay: bool
    totalSlots: int
    availableSlots: int
    slots: list[AvailableSlot] = Field(default_factory=list)
    workingHours: Optional[WorkingHours] = None


class AppointmentStatisticsSummary(BaseModel):
    pending: int
    confirmed: int
    inProgress: int
    completed: int
    cancelled: int
    noShow: int
    total: int
    completionRate: float
    showRate: float


class AppointmentStatusCreate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None


class AppointmentStatusUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None


class AppointmentStatusResponse(BaseModel):
    id: str
    name: str
    description: Optional[str] = None

    @classmethod
    def from_entity(cls, status: AppointmentStatus) -> "AppointmentStatusResponse":
        return cls(id=status.id, name=status.name, description=status.description)


__all__ = [
    "CreateAppointmentRequest",
    "UpdateAppointmentRequest",
    "ConfirmAppointmentRequest",
    "CancelAppointmentRequest",
    "ChangeStatusRequest",
    "AppointmentResponse",
    "AvailableSlot",
    "WorkingHours",
    "DayAvailabilityResponse",
    "AppointmentStatisticsSummary",
    "AppointmentStatusCreate",
    "AppointmentStatusUpdate",
    "AppointmentStatusResponse",
]
