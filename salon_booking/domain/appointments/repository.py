"""Appointment repository - SQLAlchemy persistence for appointments and statuses"""

import logging
from datetime import date, datetime, time, timedelta
from typing import Optional

from sqlalchemy.orm import Session, selectinload

from ... import models
from ...shared.validators import to_naive_utc
from .entities import CANCELLED, MAX_DURATION, Appointment, AppointmentStatus
from .interfaces import IAppointmentRepository, IAppointmentStatusRepository

logger = logging.getLogger(__name__)


class AppointmentRepository(IAppointmentRepository):
    """Repository for appointment database operations"""

    def __init__(self, db: Session):
        self.db = db

    def _query(self):
        return self.db.query(models.Appointment).options(selectinload(models.Appointment.services))

    @staticmethod
    def _to_domain(row: models.Appointment) -> Appointment:
        return Appointment.from_persistence(
            {
                "id": row.id,
                "date_time": row.date_time,
                "duration": row.duration,
                "user_id": row.user_id,
                "client_id": row.client_id,
                "stylist_id": row.stylist_id,
                "schedule_id": row.schedule_id,
                "status_id": row.status_id,
                "confirmed_at": row.confirmed_at,
                "service_ids": [link.service_id for link in row.services],
                "notes": row.notes,
                "created_at": row.created_at,
                "updated_at": row.updated_at,
            }
        )

    @staticmethod
    def _apply(row: models.Appointment, appointment: Appointment):
        data = appointment.to_persistence()
        service_ids = data.pop("service_ids")
        for key, value in data.items():
            if isinstance(value, datetime):
                value = to_naive_utc(value)
            setattr(row, key, value)
        row.services = [
            models.AppointmentService(appointment_id=appointment.id, service_id=service_id, position=index)
            for index, service_id in enumerate(service_ids)
        ]

    def find_by_id(self, appointment_id: str) -> Optional[Appointment]:
        row = self._query().filter(models.Appointment.id == appointment_id).first()
        return self._to_domain(row) if row else None

    def find_all(self) -> list[Appointment]:
        rows = self._query().order_by(models.Appointment.date_time).all()
        return [self._to_domain(row) for row in rows]

    def save(self, appointment: Appointment) -> Appointment:
        row = models.Appointment()
        self._apply(row, appointment)
        self.db.add(row)
        self.db.commit()
        logger.info(f"💾 Saved appointment {appointment.id}")
        return self.find_by_id(appointment.id)

    def update(self, appointment: Appointment) -> Appointment:
        row = self._query().filter(models.Appointment.id == appointment.id).first()
        if row is None:
            return self.save(appointment)
        # Full-row rewrite, including the ordered service links
        row.services.clear()
        self.db.flush()
        self._apply(row, appointment)
        self.db.commit()
        return self.find_by_id(appointment.id)

    def delete(self, appointment_id: str) -> None:
        row = self.db.query(models.Appointment).filter(models.Appointment.id == appointment_id).first()
        if row:
            self.db.delete(row)
            self.db.commit()

    def exists_by_id(self, appointment_id: str) -> bool:
        return (
            self.db.query(models.Appointment.id).filter(models.Appointment.id == appointment_id).first()
            is not None
        )

    def find_by_client_id(self, client_id: str) -> list[Appointment]:
        rows = (
            self._query()
            .filter(models.Appointment.client_id == client_id)
            .order_by(models.Appointment.date_time.desc())
            .all()
        )
        return [self._to_domain(row) for row in rows]

    def find_by_stylist_id(self, stylist_id: str) -> list[Appointment]:
        rows = (
            self._query()
            .filter(models.Appointment.stylist_id == stylist_id)
            .order_by(models.Appointment.date_time.desc())
            .all()
        )
        return [self._to_domain(row) for row in rows]

    def find_by_date_range(self, start: datetime, end: datetime) -> list[Appointment]:
        rows = (
            self._query()
            .filter(
                models.Appointment.date_time >= to_naive_utc(start),
                models.Appointment.date_time <= to_naive_utc(end),
            )
            .order_by(models.Appointment.date_time)
            .all()
        )
        return [self._to_domain(row) for row in rows]

    def find_by_date(self, day: date, stylist_id: Optional[str] = None) -> list[Appointment]:
        start = datetime.combine(day, time.min)
        query = self._query().filter(
            models.Appointment.date_time >= start,
            models.Appointment.date_time < start + timedelta(days=1),
        )
        if stylist_id:
            query = query.filter(models.Appointment.stylist_id == stylist_id)
        return [self._to_domain(row) for row in query.order_by(models.Appointment.date_time).all()]

    def find_conflicting_appointments(
        self,
        date_time: datetime,
        duration: int,
        stylist_id: Optional[str] = None,
        exclude_appointment_id: Optional[str] = None,
    ) -> list[Appointment]:
        if not stylist_id:
            return []

        start = to_naive_utc(date_time)
        end = start + timedelta(minutes=duration)
        # An overlapping appointment starts before our end and no earlier than
        # the longest possible appointment before our start
        query = (
            self._query()
            .join(models.AppointmentStatus, models.Appointment.status_id == models.AppointmentStatus.id)
            .filter(
                models.Appointment.stylist_id == stylist_id,
                models.Appointment.date_time < end,
                models.Appointment.date_time > start - timedelta(minutes=MAX_DURATION),
                models.AppointmentStatus.name != CANCELLED,
            )
        )
        if exclude_appointment_id:
            query = query.filter(models.Appointment.id != exclude_appointment_id)

        conflicts = []
        for row in query.all():
            row_end = row.date_time + timedelta(minutes=row.duration)
            if not (end <= row.date_time or start >= row_end):
                conflicts.append(self._to_domain(row))
        return conflicts

    def count_by_status(self, status_id: str) -> int:
        return self.db.query(models.Appointment).filter(models.Appointment.status_id == status_id).count()


class AppointmentStatusRepository(IAppointmentStatusRepository):
    """Repository for appointment status lookups"""

    def __init__(self, db: Session):
        self.db = db

    @staticmethod
    def _to_domain(row: models.AppointmentStatus) -> AppointmentStatus:
        return AppointmentStatus.from_persistence(
            {"id": row.id, "name": row.name, "description": row.description}
        )

    def find_by_id(self, status_id: str) -> Optional[AppointmentStatus]:
        row = self.db.query(models.AppointmentStatus).filter(models.AppointmentStatus.id == status_id).first()
        return self._to_domain(row) if row else None

    def find_by_name(self, name: str) -> Optional[AppointmentStatus]:
        row = self.db.query(models.AppointmentStatus).filter(models.AppointmentStatus.name == name).first()
        return self._to_domain(row) if row else None

    def find_all(self) -> list[AppointmentStatus]:
        return [self._to_domain(row) for row in self.db.query(models.AppointmentStatus).all()]

    def save(self, status: AppointmentStatus) -> AppointmentStatus:
        row = models.AppointmentStatus(**status.to_persistence())
        self.db.add(row)
        self.db.commit()
        return status

    def update(self, status: AppointmentStatus) -> AppointmentStatus:
        row = self.db.query(models.AppointmentStatus).filter(models.AppointmentStatus.id == status.id).first()
        if row is None:
            return self.save(status)
        row.name = status.name
        row.description = status.description
        self.db.commit()
        return status

    def delete(self, status_id: str) -> None:
        row = self.db.query(models.AppointmentStatus).filter(models.AppointmentStatus.id == status_id).first()
        if row:
            self.db.delete(row)
            self.db.commit()

    def exists_by_id(self, status_id: str) -> bool:
        return (
            self.db.query(models.AppointmentStatus.id).filter(models.AppointmentStatus.id == status_id).first()
            is not None
        )


__all__ = ["AppointmentRepository", "AppointmentStatusRepository"]
