"""Repository interfaces for the catalog domain"""

from abc import ABC, abstractmethod
from typing import Optional

from .entities import Category, Service, Stylist, StylistService


class ICategoryRepository(ABC):
    @abstractmethod
    def find_by_id(self, category_id: str) -> Optional[Category]:
        pass

    @abstractmethod
    def find_all(self) -> list[Category]:
        pass

    @abstractmethod
    def find_active(self) -> list[Category]:
        pass

    @abstractmethod
    def exists_by_id(self, category_id: str) -> bool:
        pass

    @abstractmethod
    def exists_by_name(self, name: str, exclude_id: Optional[str] = None) -> bool:
        """Case-insensitive name lookup"""

    @abstractmethod
    def save(self, category: Category) -> Category:
        pass

    @abstractmethod
    def update(self, category: Category) -> Category:
        pass

    @abstractmethod
    def delete(self, category_id: str) -> None:
        pass


class IServiceRepository(ABC):
    @abstractmethod
    def find_by_id(self, service_id: str) -> Optional[Service]:
        pass

    @abstractmethod
    def find_all(self) -> list[Service]:
        pass

    @abstractmethod
    def find_active(self) -> list[Service]:
        pass

    @abstractmethod
    def find_by_category(self, category_id: str) -> list[Service]:
        pass

    @abstractmethod
    def find_active_by_category(self, category_id: str) -> list[Service]:
        pass

    @abstractmethod
    def exists_by_id(self, service_id: str) -> bool:
        pass

    @abstractmethod
    def exists_by_name(self, name: str, exclude_id: Optional[str] = None) -> bool:
        """Case-insensitive name lookup"""

    @abstractmethod
    def save(self, service: Service) -> Service:
        pass

    @abstractmethod
    def update(self, service: Service) -> Service:
        pass

    @abstractmethod
    def delete(self, service_id: str) -> None:
        pass


class IStylistRepository(ABC):
    @abstractmethod
    def find_by_id(self, stylist_id: str) -> Optional[Stylist]:
        pass

    @abstractmethod
    def find_by_user_id(self, user_id: str) -> Optional[Stylist]:
        pass

    @abstractmethod
    def find_all(self) -> list[Stylist]:
        pass

    @abstractmethod
    def exists_by_id(self, stylist_id: str) -> bool:
        pass

    @abstractmethod
    def save(self, stylist: Stylist) -> Stylist:
        pass


class IStylistServiceRepository(ABC):
    @abstractmethod
    def find(self, stylist_id: str, service_id: str) -> Optional[StylistService]:
        pass

    @abstractmethod
    def find_by_stylist(self, stylist_id: str) -> list[StylistService]:
        pass

    @abstractmethod
    def find_active_by_stylist(self, stylist_id: str) -> list[StylistService]:
        pass

    @abstractmethod
    def find_by_service(self, service_id: str) -> list[StylistService]:
        pass

    @abstractmethod
    def find_offering_by_service(self, service_id: str) -> list[StylistService]:
        pass

    @abstractmethod
    def exists(self, stylist_id: str, service_id: str) -> bool:
        pass

    @abstractmethod
    def save(self, assignment: StylistService) -> StylistService:
        pass

    @abstractmethod
    def update(self, assignment: StylistService) -> StylistService:
        pass

    @abstractmethod
    def delete(self, stylist_id: str, service_id: str) -> None:
        pass


__all__ = [
    "ICategoryRepository",
    "IServiceRepository",
    "IStylistRepository",
    "IStylistServiceRepository",
]
