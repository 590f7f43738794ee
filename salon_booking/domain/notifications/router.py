"""Notification router - the caller's in-app notifications"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user, require_admin
from ...database import get_db
from ...shared.responses import ok
from ..users.entities import User
from ..users.repository import ClientRepository, UserRepository
from .repository import NotificationRepository, NotificationStatusRepository
from .schemas import MarkNotificationsReadRequest, NotificationCreate
from .service import NotificationService

router = APIRouter(prefix="/notifications", tags=["Notifications"])


def get_notification_service(db: Session = Depends(get_db)) -> NotificationService:
    """Dependency injection for NotificationService"""
    return NotificationService(
        NotificationRepository(db), NotificationStatusRepository(db), UserRepository(db), ClientRepository(db)
    )


@router.get("")
async def list_notifications(
    page: int = Query(1),
    limit: int = Query(20),
    unreadOnly: bool = Query(False),
    type: Optional[str] = Query(None),
    current_user: User = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service),
):
    result = service.get_user_notifications(current_user.id, page, limit, unreadOnly, type)
    return ok(result.model_dump(), "Notifications retrieved successfully")


@router.post("", status_code=201)
async def create_notification(
    data: NotificationCreate,
    current_user: User = Depends(require_admin),
    service: NotificationService = Depends(get_notification_service),
):
    return ok(service.create(data).model_dump(), "Notification created successfully")


@router.get("/unread-count")
async def unread_count(
    current_user: User = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service),
):
    return ok({"unreadCount": service.get_unread_count(current_user.id)}, "Unread count retrieved successfully")


@router.patch("/mark-read")
async def mark_read(
    data: MarkNotificationsReadRequest,
    current_user: User = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service),
):
    result = service.mark_many_as_read(data.notificationIds, current_user.id)
    return ok(result.model_dump(), "Notifications marked as read")


@router.patch("/mark-all-read")
async def mark_all_read(
    current_user: User = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service),
):
    return ok(service.mark_all_as_read(current_user.id).model_dump(), "All notifications marked as read")


@router.get("/{notification_id}")
async def get_notification(
    notification_id: str,
    current_user: User = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service),
):
    return ok(service.get_by_id(notification_id, current_user.id).model_dump(), "Notification retrieved successfully")


@router.patch("/{notification_id}/read")
async def mark_notification_read(
    notification_id: str,
    current_user: User = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service),
):
    return ok(service.mark_as_read(notification_id, current_user.id).model_dump(), "Notification marked as read")


__all__ = ["router"]
