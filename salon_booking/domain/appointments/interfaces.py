"""Repository interfaces for the appointment domain.

Implementations return ``None`` or an empty list for missing rows and never
raise for absence.
"""

from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import Optional

from .entities import Appointment, AppointmentStatus


class IAppointmentRepository(ABC):
    @abstractmethod
    def find_by_id(self, appointment_id: str) -> Optional[Appointment]:
        pass

    @abstractmethod
    def find_all(self) -> list[Appointment]:
        pass

    @abstractmethod
    def save(self, appointment: Appointment) -> Appointment:
        pass

    @abstractmethod
    def update(self, appointment: Appointment) -> Appointment:
        pass

    @abstractmethod
    def delete(self, appointment_id: str) -> None:
        pass

    @abstractmethod
    def exists_by_id(self, appointment_id: str) -> bool:
        pass

    @abstractmethod
    def find_by_client_id(self, client_id: str) -> list[Appointment]:
        """Most recent first"""

    @abstractmethod
    def find_by_stylist_id(self, stylist_id: str) -> list[Appointment]:
        """Most recent first"""

    @abstractmethod
    def find_by_date_range(self, start: datetime, end: datetime) -> list[Appointment]:
        """Appointments starting in ``[start, end]``"""

    @abstractmethod
    def find_by_date(self, day: date, stylist_id: Optional[str] = None) -> list[Appointment]:
        pass

    @abstractmethod
    def find_conflicting_appointments(
        self,
        date_time: datetime,
        duration: int,
        stylist_id: Optional[str] = None,
        exclude_appointment_id: Optional[str] = None,
    ) -> list[Appointment]:
        """Appointments of the same stylist overlapping ``[date_time, date_time + duration)``.

        Without a stylist there is nothing to conflict with and the result is empty.
        """

    @abstractmethod
    def count_by_status(self, status_id: str) -> int:
        pass


class IAppointmentStatusRepository(ABC):
    @abstractmethod
    def find_by_id(self, status_id: str) -> Optional[AppointmentStatus]:
        pass

    @abstractmethod
    def find_by_name(self, name: str) -> Optional[AppointmentStatus]:
        pass

    @abstractmethod
    def find_all(self) -> list[AppointmentStatus]:
        pass

    @abstractmethod
    def save(self, status: AppointmentStatus) -> AppointmentStatus:
        pass

    @abstractmethod
    def update(self, status: AppointmentStatus) -> AppointmentStatus:
        pass

    @abstractmethod
    def delete(self, status_id: str) -> None:
        pass

    @abstractmethod
    def exists_by_id(self, status_id: str) -> bool:
        pass


__all__ = ["IAppointmentRepository", "IAppointmentStatusRepository"]
