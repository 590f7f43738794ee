"""In-memory repositories and fixtures for use-case tests"""

from __future__ import annotations

import copy
import uuid
from datetime import date, datetime, timedelta
from typing import Optional

from salon_booking.domain.appointments.entities import (
    CANCELLED,
    STATUS_DESCRIPTIONS,
    Appointment,
    AppointmentStatus,
)
from salon_booking.domain.appointments.interfaces import (
    IAppointmentRepository,
    IAppointmentStatusRepository,
)
from salon_booking.domain.catalog.entities import Category, Service, Stylist, StylistService
from salon_booking.domain.catalog.interfaces import (
    ICategoryRepository,
    IServiceRepository,
    IStylistRepository,
    IStylistServiceRepository,
)
from salon_booking.domain.notifications.entities import (
    NOTIFICATION_TRANSITIONS,
    Notification,
    NotificationStatus,
)
from salon_booking.domain.notifications.interfaces import (
    INotificationRepository,
    INotificationStatusRepository,
)
from salon_booking.domain.schedules.entities import DayOfWeek, Schedule
from salon_booking.domain.schedules.interfaces import IScheduleRepository
from salon_booking.domain.users.entities import ROLE_NAMES, Client, Role, User
from salon_booking.domain.users.interfaces import IClientRepository, IRoleRepository, IUserRepository
from salon_booking.shared.validators import utcnow


def new_id() -> str:
    return str(uuid.uuid4())


class FakeAppointmentStatusRepository(IAppointmentStatusRepository):
    def __init__(self):
        self.items = {}
        for name, description in STATUS_DESCRIPTIONS.items():
            status = AppointmentStatus.create(name, description)
            self.items[status.id] = status

    def find_by_id(self, status_id):
        return self.items.get(status_id)

    def find_by_name(self, name):
        return next((s for s in self.items.values() if s.name == name), None)

    def find_all(self):
        return list(self.items.values())

    def save(self, status):
        self.items[status.id] = status
        return status

    def update(self, status):
        return self.save(status)

    def delete(self, status_id):
        self.items.pop(status_id, None)

    def exists_by_id(self, status_id):
        return status_id in self.items

    def id_of(self, name: str) -> str:
        return self.find_by_name(name).id


class FakeAppointmentRepository(IAppointmentRepository):
    def __init__(self, statuses: Optional[FakeAppointmentStatusRepository] = None):
        self.items: dict[str, Appointment] = {}
        self.statuses = statuses

    def _copy(self, appointment):
        return copy.deepcopy(appointment) if appointment else None

    def _is_cancelled(self, appointment) -> bool:
        if self.statuses is None:
            return False
        status = self.statuses.find_by_id(appointment.status_id)
        return status is not None and status.name == CANCELLED

    def find_by_id(self, appointment_id):
        return self._copy(self.items.get(appointment_id))

    def find_all(self):
        return [self._copy(a) for a in self.items.values()]

    def save(self, appointment):
        self.items[appointment.id] = self._copy(appointment)
        return self._copy(appointment)

    def update(self, appointment):
        return self.save(appointment)

    def delete(self, appointment_id):
        self.items.pop(appointment_id, None)

    def exists_by_id(self, appointment_id):
        return appointment_id in self.items

    def _newest_first(self, appointments):
        return sorted((self._copy(a) for a in appointments), key=lambda a: a.date_time, reverse=True)

    def find_by_client_id(self, client_id):
        return self._newest_first(a for a in self.items.values() if a.client_id == client_id)

    def find_by_stylist_id(self, stylist_id):
        return self._newest_first(a for a in self.items.values() if a.stylist_id == stylist_id)

    def find_by_date_range(self, start, end):
        return sorted(
            (self._copy(a) for a in self.items.values() if start <= a.date_time <= end),
            key=lambda a: a.date_time,
        )

    def find_by_date(self, day: date, stylist_id=None):
        return [
            self._copy(a)
            for a in self.items.values()
            if a.date_time.date() == day and (stylist_id is None or a.stylist_id == stylist_id)
        ]

    def find_conflicting_appointments(self, date_time, duration, stylist_id=None, exclude_appointment_id=None):
        if not stylist_id:
            return []
        end = date_time + timedelta(minutes=duration)
        return [
            self._copy(a)
            for a in self.items.values()
            if a.stylist_id == stylist_id
            and a.id != exclude_appointment_id
            and not self._is_cancelled(a)
            and a.date_time < end
            and a.get_end_time() > date_time
        ]

    def count_by_status(self, status_id):
        return sum(1 for a in self.items.values() if a.status_id == status_id)


class FakeScheduleRepository(IScheduleRepository):
    def __init__(self):
        self.items: dict[str, Schedule] = {}
        self.holiday_ids: set[str] = set()

    def find_by_id(self, schedule_id):
        return self.items.get(schedule_id)

    def find_all(self):
        return list(self.items.values())

    def find_by_day_of_week(self, day_of_week):
        return sorted(
            (s for s in self.items.values() if s.day_of_week == day_of_week),
            key=lambda s: s.start_time,
        )

    def save(self, schedule):
        self.items[schedule.id] = schedule
        return schedule

    def update(self, schedule):
        return self.save(schedule)

    def delete(self, schedule_id):
        self.items.pop(schedule_id, None)

    def holiday_exists(self, holiday_id):
        return holiday_id in self.holiday_ids

    def open_every_day(self, start: str = "00:00", end: str = "23:59"):
        for day in DayOfWeek:
            self.save(Schedule.create(day, start, end))


class FakeCategoryRepository(ICategoryRepository):
    def __init__(self):
        self.items: dict[str, Category] = {}

    def find_by_id(self, category_id):
        return self.items.get(category_id)

    def find_all(self):
        return list(self.items.values())

    def find_active(self):
        return [c for c in self.items.values() if c.is_active]

    def exists_by_id(self, category_id):
        return category_id in self.items

    def exists_by_name(self, name, exclude_id=None):
        wanted = name.strip().lower()
        return any(c.name.lower() == wanted and c.id != exclude_id for c in self.items.values())

    def save(self, category):
        self.items[category.id] = category
        return category

    def update(self, category):
        return self.save(category)

    def delete(self, category_id):
        self.items.pop(category_id, None)


class FakeServiceRepository(IServiceRepository):
    def __init__(self):
        self.items: dict[str, Service] = {}

    def find_by_id(self, service_id):
        return self.items.get(service_id)

    def find_all(self):
        return list(self.items.values())

    def find_active(self):
        return [s for s in self.items.values() if s.is_active]

    def find_by_category(self, category_id):
        return [s for s in self.items.values() if s.category_id == category_id]

    def find_active_by_category(self, category_id):
        return [s for s in self.find_by_category(category_id) if s.is_active]

    def exists_by_id(self, service_id):
        return service_id in self.items

    def exists_by_name(self, name, exclude_id=None):
        wanted = name.strip().lower()
        return any(s.name.lower() == wanted and s.id != exclude_id for s in self.items.values())

    def save(self, service):
        self.items[service.id] = service
        return service

    def update(self, service):
        return self.save(service)

    def delete(self, service_id):
        self.items.pop(service_id, None)


class FakeStylistRepository(IStylistRepository):
    def __init__(self):
        self.items: dict[str, Stylist] = {}

    def find_by_id(self, stylist_id):
        return self.items.get(stylist_id)

    def find_by_user_id(self, user_id):
        return next((s for s in self.items.values() if s.user_id == user_id), None)

    def find_all(self):
        return list(self.items.values())

    def exists_by_id(self, stylist_id):
        return stylist_id in self.items

    def save(self, stylist):
        self.items[stylist.id] = stylist
        return stylist


class FakeStylistServiceRepository(IStylistServiceRepository):
    def __init__(self):
        self.items: dict[tuple[str, str], StylistService] = {}

    def find(self, stylist_id, service_id):
        return self.items.get((stylist_id, service_id))

    def find_by_stylist(self, stylist_id):
        return [a for (sid, _), a in self.items.items() if sid == stylist_id]

    def find_active_by_stylist(self, stylist_id):
        return [a for a in self.find_by_stylist(stylist_id) if a.is_offering]

    def find_by_service(self, service_id):
        return [a for (_, svc), a in self.items.items() if svc == service_id]

    def find_offering_by_service(self, service_id):
        return [a for a in self.find_by_service(service_id) if a.is_offering]

    def exists(self, stylist_id, service_id):
        return (stylist_id, service_id) in self.items

    def save(self, assignment):
        self.items[(assignment.stylist_id, assignment.service_id)] = assignment
        return assignment

    def update(self, assignment):
        return self.save(assignment)

    def delete(self, stylist_id, service_id):
        self.items.pop((stylist_id, service_id), None)


class FakeRoleRepository(IRoleRepository):
    def __init__(self):
        self.items = {}
        for name in ROLE_NAMES:
            role = Role(id=new_id(), name=name)
            self.items[role.id] = role

    def find_by_id(self, role_id):
        return self.items.get(role_id)

    def find_by_name(self, name):
        return next((r for r in self.items.values() if r.name == name), None)


class FakeUserRepository(IUserRepository):
    def __init__(self):
        self.items: dict[str, User] = {}

    def find_by_id(self, user_id):
        return self.items.get(user_id)

    def find_by_email(self, email):
        wanted = email.strip().lower()
        return next((u for u in self.items.values() if u.email == wanted), None)

    def exists_by_email(self, email):
        return self.find_by_email(email) is not None

    def save(self, user):
        self.items[user.id] = user
        return user

    def update(self, user):
        return self.save(user)


class FakeClientRepository(IClientRepository):
    def __init__(self):
        self.items: dict[str, Client] = {}

    def find_by_id(self, client_id):
        return self.items.get(client_id)

    def find_by_user_id(self, user_id):
        return next((c for c in self.items.values() if c.user_id == user_id), None)

    def save(self, client):
        self.items[client.id] = client
        return client


class FakeNotificationStatusRepository(INotificationStatusRepository):
    def __init__(self):
        self.items = {}
        for name in NOTIFICATION_TRANSITIONS:
            status = NotificationStatus(id=new_id(), name=name)
            self.items[status.id] = status

    def find_by_id(self, status_id):
        return self.items.get(status_id)

    def find_by_name(self, name):
        return next((s for s in self.items.values() if s.name == name), None)


class FakeNotificationRepository(INotificationRepository):
    def __init__(self):
        self.items: dict[str, Notification] = {}

    def find_by_id(self, notification_id):
        return self.items.get(notification_id)

    def find_by_user(self, user_id, unread_only=False, notification_type=None, offset=0, limit=20):
        matching = [
            n
            for n in self.items.values()
            if n.user_id == user_id
            and (not unread_only or not n.is_read())
            and (notification_type is None or n.type == notification_type)
        ]
        matching.sort(key=lambda n: n.created_at, reverse=True)
        return matching[offset : offset + limit], len(matching)

    def count_unread(self, user_id):
        return len(self.find_unread_by_user(user_id))

    def find_unread_by_user(self, user_id):
        return [n for n in self.items.values() if n.user_id == user_id and not n.is_read()]

    def save(self, notification):
        self.items[notification.id] = notification
        return notification

    def update(self, notification):
        return self.save(notification)


# ============================================================================
# FIXTURE BUILDERS
# ============================================================================


def make_user(role_name: str = "CLIENT", email: Optional[str] = None) -> User:
    return User(
        id=new_id(),
        role_id=new_id(),
        name="Test User",
        email=email or f"{uuid.uuid4().hex[:8]}@example.com",
        phone="+15550001111",
        password="hashed",
        role_name=role_name,
    )


def make_service(duration: int = 60, variation: int = 15, price: int = 5000, name: str = "Haircut") -> Service:
    return Service.create(new_id(), name, f"{name} service", duration, price, variation)


def future(days: int = 3, hour: int = 10, minute: int = 0) -> datetime:
    """A UTC datetime ``days`` ahead at a fixed wall-clock time"""
    base = utcnow() + timedelta(days=days)
    return base.replace(hour=hour, minute=minute, second=0, microsecond=0)


def make_appointment(
    status_id: str,
    date_time: Optional[datetime] = None,
    duration: int = 60,
    stylist_id: Optional[str] = None,
    user_id: Optional[str] = None,
    client_id: Optional[str] = None,
    service_ids: Optional[list[str]] = None,
) -> Appointment:
    return Appointment(
        id=new_id(),
        date_time=date_time or future(),
        duration=duration,
        user_id=user_id or new_id(),
        client_id=client_id or new_id(),
        schedule_id=new_id(),
        status_id=status_id,
        stylist_id=stylist_id,
        service_ids=list(service_ids or [new_id()]),
    )


class SalonFixture:
    """A small salon: one client, two stylists, two services, open every day"""

    def __init__(self):
        self.statuses = FakeAppointmentStatusRepository()
        self.appointments = FakeAppointmentRepository(self.statuses)
        self.schedules = FakeScheduleRepository()
        self.schedules.open_every_day()
        self.clients = FakeClientRepository()
        self.stylists = FakeStylistRepository()
        self.services = FakeServiceRepository()

        self.client_user = make_user("CLIENT")
        self.client = self.clients.save(Client.create(self.client_user.id))

        self.stylist_x_user = make_user("STYLIST")
        self.stylist_y_user = make_user("STYLIST")
        self.stylist_x = self.stylists.save(Stylist(id=new_id(), user_id=self.stylist_x_user.id, name="X"))
        self.stylist_y = self.stylists.save(Stylist(id=new_id(), user_id=self.stylist_y_user.id, name="Y"))

        self.haircut = self.services.save(make_service(60, 15, 5000, "Haircut"))
        self.coloring = self.services.save(make_service(40, 0, 8000, "Coloring"))

    def book(self, status_name: str = "PENDING", date_time: Optional[datetime] = None, **kwargs) -> Appointment:
        kwargs.setdefault("user_id", self.client_user.id)
        kwargs.setdefault("client_id", self.client.id)
        kwargs.setdefault("stylist_id", self.stylist_x.id)
        kwargs.setdefault("service_ids", [self.haircut.id])
        appointment = make_appointment(self.statuses.id_of(status_name), date_time, **kwargs)
        return self.appointments.save(appointment)


__all__ = [
    "SalonFixture",
    "FakeAppointmentRepository",
    "FakeAppointmentStatusRepository",
    "FakeScheduleRepository",
    "FakeCategoryRepository",
    "FakeServiceRepository",
    "FakeStylistRepository",
    "FakeStylistServiceRepository",
    "FakeRoleRepository",
    "FakeUserRepository",
    "FakeClientRepository",
    "FakeNotificationRepository",
    "FakeNotificationStatusRepository",
    "make_user",
    "make_service",
    "make_appointment",
    "future",
    "new_id",
]
