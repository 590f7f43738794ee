"""Schedule router - FastAPI endpoints for salon working hours"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import require_admin
from ...database import get_db
from ...shared.responses import ok
from ..users.entities import User
from .repository import ScheduleRepository
from .schemas import ScheduleCreate, ScheduleUpdate
from .service import ScheduleService

router = APIRouter(prefix="/schedules", tags=["Schedules"])


def get_schedule_service(db: Session = Depends(get_db)) -> ScheduleService:
    """Dependency injection for ScheduleService"""
    return ScheduleService(ScheduleRepository(db))


@router.get("")
async def list_schedules(service: ScheduleService = Depends(get_schedule_service)):
    return ok([s.model_dump() for s in service.get_all()], "Schedules retrieved successfully")


@router.get("/day/{day_of_week}")
async def list_schedules_for_day(day_of_week: str, service: ScheduleService = Depends(get_schedule_service)):
    return ok([s.model_dump() for s in service.get_by_day(day_of_week)], "Schedules retrieved successfully")


@router.post("", status_code=201)
async def create_schedule(
    data: ScheduleCreate,
    current_user: User = Depends(require_admin),
    service: ScheduleService = Depends(get_schedule_service),
):
    return ok(service.create(data).model_dump(), "Schedule created successfully")


@router.get("/{schedule_id}")
async def get_schedule(schedule_id: str, service: ScheduleService = Depends(get_schedule_service)):
    return ok(service.get_by_id(schedule_id).model_dump(), "Schedule retrieved successfully")


@router.put("/{schedule_id}")
async def update_schedule(
    schedule_id: str,
    data: ScheduleUpdate,
    current_user: User = Depends(require_admin),
    service: ScheduleService = Depends(get_schedule_service),
):
    return ok(service.update(schedule_id, data).model_dump(), "Schedule updated successfully")


@router.delete("/{schedule_id}")
async def delete_schedule(
    schedule_id: str,
    current_user: User = Depends(require_admin),
    service: ScheduleService = Depends(get_schedule_service),
):
    service.delete(schedule_id)
    return ok(None, "Schedule deleted successfully")


__all__ = ["router"]
