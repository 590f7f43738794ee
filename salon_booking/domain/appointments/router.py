"""Appointment router - FastAPI endpoints for booking and the appointment lifecycle"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user, is_admin, require_admin
from ...database import get_db
from ...shared.responses import ok
from ...shared.validators import parse_iso_datetime
from ..catalog.repository import ServiceRepository, StylistRepository
from ..notifications.repository import NotificationRepository, NotificationStatusRepository
from ..notifications.service import NotificationService
from ..schedules.repository import ScheduleRepository
from ..users.entities import User
from ..users.repository import ClientRepository, UserRepository
from .availability import GetAvailableSlots
from .repository import AppointmentRepository, AppointmentStatusRepository
from .schemas import (
    AppointmentStatusCreate,
    AppointmentStatusUpdate,
    CancelAppointmentRequest,
    ChangeStatusRequest,
    ConfirmAppointmentRequest,
    CreateAppointmentRequest,
    UpdateAppointmentRequest,
)
from .service import AppointmentService, AppointmentStatusService
from .use_cases import (
    CancelAppointment,
    ChangeAppointmentStatus,
    ConfirmAppointment,
    CreateAppointment,
    GetAppointmentById,
    GetAppointmentsByClient,
    GetAppointmentsByStylist,
    UpdateAppointment,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/appointments", tags=["Appointments"])
status_router = APIRouter(prefix="/appointment-statuses", tags=["Appointment Statuses"])


# ============================================================================
# DEPENDENCIES
# ============================================================================


def get_notifier(db: Session = Depends(get_db)) -> NotificationService:
    return NotificationService(
        NotificationRepository(db), NotificationStatusRepository(db), UserRepository(db), ClientRepository(db)
    )


def get_create_appointment(db: Session = Depends(get_db)) -> CreateAppointment:
    """Dependency injection for CreateAppointment"""
    return CreateAppointment(
        AppointmentRepository(db),
        AppointmentStatusRepository(db),
        ScheduleRepository(db),
        ClientRepository(db),
        StylistRepository(db),
        ServiceRepository(db),
    )


def get_appointment_by_id(db: Session = Depends(get_db)) -> GetAppointmentById:
    return GetAppointmentById(AppointmentRepository(db), AppointmentStatusRepository(db))


def get_appointments_by_client(db: Session = Depends(get_db)) -> GetAppointmentsByClient:
    return GetAppointmentsByClient(AppointmentRepository(db), AppointmentStatusRepository(db))


def get_appointments_by_stylist(db: Session = Depends(get_db)) -> GetAppointmentsByStylist:
    return GetAppointmentsByStylist(AppointmentRepository(db), AppointmentStatusRepository(db))


def get_confirm_appointment(
    db: Session = Depends(get_db), notifier: NotificationService = Depends(get_notifier)
) -> ConfirmAppointment:
    return ConfirmAppointment(
        AppointmentRepository(db),
        AppointmentStatusRepository(db),
        StylistRepository(db),
        ClientRepository(db),
        notifier,
    )


def get_cancel_appointment(
    db: Session = Depends(get_db), notifier: NotificationService = Depends(get_notifier)
) -> CancelAppointment:
    return CancelAppointment(
        AppointmentRepository(db),
        AppointmentStatusRepository(db),
        StylistRepository(db),
        ClientRepository(db),
        notifier,
    )


def get_update_appointment(db: Session = Depends(get_db)) -> UpdateAppointment:
    return UpdateAppointment(
        AppointmentRepository(db),
        AppointmentStatusRepository(db),
        ScheduleRepository(db),
        StylistRepository(db),
        ServiceRepository(db),
        ClientRepository(db),
    )


def get_change_status(db: Session = Depends(get_db)) -> ChangeAppointmentStatus:
    return ChangeAppointmentStatus(
        AppointmentRepository(db), AppointmentStatusRepository(db), StylistRepository(db), ClientRepository(db)
    )


def get_available_slots(db: Session = Depends(get_db)) -> GetAvailableSlots:
    return GetAvailableSlots(
        AppointmentRepository(db), ScheduleRepository(db), AppointmentStatusRepository(db), ServiceRepository(db)
    )


def get_appointment_service(db: Session = Depends(get_db)) -> AppointmentService:
    return AppointmentService(
        AppointmentRepository(db), AppointmentStatusRepository(db), StylistRepository(db), ClientRepository(db)
    )


def get_appointment_status_service(db: Session = Depends(get_db)) -> AppointmentStatusService:
    return AppointmentStatusService(AppointmentStatusRepository(db), AppointmentRepository(db))


# ============================================================================
# AVAILABILITY & REPORTING
# ============================================================================


@router.get("/available-slots")
async def available_slots(
    date: str = Query(..., description="YYYY-MM-DD"),
    duration: Optional[int] = Query(None),
    stylistId: Optional[str] = Query(None),
    serviceIds: Optional[list[str]] = Query(None),
    use_case: GetAvailableSlots = Depends(get_available_slots),
):
    """Slot grid for a day, each slot flagged available or conflicting"""
    result = use_case.execute(date, duration, stylistId, serviceIds)
    return ok(result.model_dump(), "Available slots retrieved successfully")


@router.get("/date-range")
async def appointments_in_range(
    startDate: str = Query(...),
    endDate: str = Query(...),
    current_user: User = Depends(get_current_user),
    service: AppointmentService = Depends(get_appointment_service),
):
    appointments = service.get_by_date_range(parse_iso_datetime(startDate), parse_iso_datetime(endDate))
    return ok([a.to_dict() for a in appointments], "Appointments retrieved successfully")


@router.get("/statistics")
async def appointment_statistics(
    current_user: User = Depends(require_admin),
    service: AppointmentService = Depends(get_appointment_service),
):
    return ok(service.get_statistics(), "Statistics retrieved successfully")


@router.get("/statistics/summary")
async def appointment_statistics_summary(
    current_user: User = Depends(require_admin),
    service: AppointmentService = Depends(get_appointment_service),
):
    return ok(service.get_statistics_summary().model_dump(), "Statistics retrieved successfully")


@router.get("/statistics/date-range")
async def appointment_statistics_in_range(
    startDate: str = Query(...),
    endDate: str = Query(...),
    current_user: User = Depends(require_admin),
    service: AppointmentService = Depends(get_appointment_service),
):
    stats = service.get_statistics_by_date_range(parse_iso_datetime(startDate), parse_iso_datetime(endDate))
    return ok(stats, "Statistics retrieved successfully")


@router.get("/statistics/stylist/{stylist_id}")
async def appointment_statistics_for_stylist(
    stylist_id: str,
    current_user: User = Depends(require_admin),
    service: AppointmentService = Depends(get_appointment_service),
):
    return ok(service.get_statistics_by_stylist(stylist_id), "Statistics retrieved successfully")


@router.get("/statistics/client/{client_id}")
async def appointment_statistics_for_client(
    client_id: str,
    current_user: User = Depends(require_admin),
    service: AppointmentService = Depends(get_appointment_service),
):
    return ok(service.get_statistics_by_client(client_id), "Statistics retrieved successfully")


# ============================================================================
# CORE OPERATIONS
# ============================================================================


@router.post("", status_code=201)
async def create_appointment(
    data: CreateAppointmentRequest,
    current_user: User = Depends(get_current_user),
    use_case: CreateAppointment = Depends(get_create_appointment),
):
    appointment = use_case.execute(data, current_user.id)
    return ok(appointment.to_dict(), "Appointment created successfully")


@router.get("/client/{client_id}")
async def appointments_by_client(
    client_id: str,
    current_user: User = Depends(get_current_user),
    use_case: GetAppointmentsByClient = Depends(get_appointments_by_client),
):
    return ok([a.to_dict() for a in use_case.execute(client_id)], "Appointments retrieved successfully")


@router.get("/stylist/{stylist_id}")
async def appointments_by_stylist(
    stylist_id: str,
    current_user: User = Depends(get_current_user),
    use_case: GetAppointmentsByStylist = Depends(get_appointments_by_stylist),
):
    return ok([a.to_dict() for a in use_case.execute(stylist_id)], "Appointments retrieved successfully")


@router.get("/{appointment_id}")
async def get_appointment(
    appointment_id: str,
    current_user: User = Depends(get_current_user),
    use_case: GetAppointmentById = Depends(get_appointment_by_id),
):
    return ok(use_case.execute(appointment_id).to_dict(), "Appointment retrieved successfully")


@router.put("/{appointment_id}")
async def update_appointment(
    appointment_id: str,
    data: UpdateAppointmentRequest,
    current_user: User = Depends(get_current_user),
    use_case: UpdateAppointment = Depends(get_update_appointment),
):
    appointment = use_case.execute(appointment_id, data, current_user.id, is_admin(current_user))
    return ok(appointment.to_dict(), "Appointment updated successfully")


@router.delete("/{appointment_id}")
async def delete_appointment(
    appointment_id: str,
    current_user: User = Depends(require_admin),
    service: AppointmentService = Depends(get_appointment_service),
):
    service.delete(appointment_id)
    return ok(None, "Appointment deleted successfully")


# ============================================================================
# LIFECYCLE
# ============================================================================


@router.patch("/{appointment_id}/confirm")
async def confirm_appointment(
    appointment_id: str,
    data: Optional[ConfirmAppointmentRequest] = None,
    current_user: User = Depends(get_current_user),
    use_case: ConfirmAppointment = Depends(get_confirm_appointment),
):
    data = data or ConfirmAppointmentRequest()
    appointment = use_case.execute(appointment_id, data, current_user.id, is_admin(current_user))
    return ok(appointment.to_dict(), "Appointment confirmed successfully")


@router.patch("/{appointment_id}/cancel")
async def cancel_appointment(
    appointment_id: str,
    data: Optional[CancelAppointmentRequest] = None,
    current_user: User = Depends(get_current_user),
    use_case: CancelAppointment = Depends(get_cancel_appointment),
):
    data = data or CancelAppointmentRequest()
    appointment = use_case.execute(appointment_id, data, current_user.id, is_admin(current_user))
    return ok(appointment.to_dict(), "Appointment cancelled successfully")


@router.patch("/{appointment_id}/status")
async def change_appointment_status(
    appointment_id: str,
    data: ChangeStatusRequest,
    current_user: User = Depends(get_current_user),
    use_case: ChangeAppointmentStatus = Depends(get_change_status),
):
    appointment = use_case.execute(appointment_id, data.status, current_user.id, is_admin(current_user))
    return ok(appointment.to_dict(), "Appointment status updated successfully")


# ============================================================================
# STATUS CATALOGUE
# ============================================================================


@status_router.get("")
async def list_statuses(service: AppointmentStatusService = Depends(get_appointment_status_service)):
    return ok([s.model_dump() for s in service.get_all()], "Statuses retrieved successfully")


@status_router.get("/terminal")
async def list_terminal_statuses(service: AppointmentStatusService = Depends(get_appointment_status_service)):
    return ok([s.model_dump() for s in service.get_terminal_statuses()], "Statuses retrieved successfully")


@status_router.get("/active")
async def list_active_statuses(service: AppointmentStatusService = Depends(get_appointment_status_service)):
    return ok([s.model_dump() for s in service.get_active_statuses()], "Statuses retrieved successfully")


@status_router.get("/name/{name}")
async def get_status_by_name(name: str, service: AppointmentStatusService = Depends(get_appointment_status_service)):
    return ok(service.get_by_name(name).model_dump(), "Status retrieved successfully")


@status_router.post("", status_code=201)
async def create_status(
    data: AppointmentStatusCreate,
    current_user: User = Depends(require_admin),
    service: AppointmentStatusService = Depends(get_appointment_status_service),
):
    return ok(service.create(data).model_dump(), "Status created successfully")


@status_router.get("/{status_id}")
async def get_status(status_id: str, service: AppointmentStatusService = Depends(get_appointment_status_service)):
    return ok(service.get_by_id(status_id).model_dump(), "Status retrieved successfully")


@status_router.get("/{status_id}/transitions")
async def get_status_transitions(
    status_id: str, service: AppointmentStatusService = Depends(get_appointment_status_service)
):
    """Statuses reachable from this one"""
    return ok([s.model_dump() for s in service.get_valid_transitions(status_id)], "Transitions retrieved successfully")


@status_router.put("/{status_id}")
async def update_status(
    status_id: str,
    data: AppointmentStatusUpdate,
    current_user: User = Depends(require_admin),
    service: AppointmentStatusService = Depends(get_appointment_status_service),
):
    return ok(service.update(status_id, data).model_dump(), "Status updated successfully")


@status_router.delete("/{status_id}")
async def delete_status(
    status_id: str,
    current_user: User = Depends(require_admin),
    service: AppointmentStatusService = Depends(get_appointment_status_service),
):
    service.delete(status_id)
    return ok(None, "Status deleted successfully")


__all__ = ["router", "status_router"]
