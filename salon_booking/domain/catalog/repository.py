"""Catalog repository - Database operations for categories, services and stylist offerings"""

from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from ... import models
from ...shared.validators import to_naive_utc
from .entities import Category, Service, Stylist, StylistService
from .interfaces import (
    ICategoryRepository,
    IServiceRepository,
    IStylistRepository,
    IStylistServiceRepository,
)


def _persistable(data: dict) -> dict:
    return {key: to_naive_utc(value) if key.endswith("_at") else value for key, value in data.items()}


class CategoryRepository(ICategoryRepository):
    """Repository for category database operations"""

    def __init__(self, db: Session):
        self.db = db

    @staticmethod
    def _to_domain(row: models.Category) -> Category:
        return Category.from_persistence(
            {
                "id": row.id,
                "name": row.name,
                "description": row.description,
                "is_active": row.is_active,
                "created_at": row.created_at,
                "updated_at": row.updated_at,
            }
        )

    def _row(self, category_id: str) -> Optional[models.Category]:
        return self.db.query(models.Category).filter(models.Category.id == category_id).first()

    def find_by_id(self, category_id: str) -> Optional[Category]:
        row = self._row(category_id)
        return self._to_domain(row) if row else None

    def find_all(self) -> list[Category]:
        rows = self.db.query(models.Category).order_by(models.Category.name).all()
        return [self._to_domain(row) for row in rows]

    def find_active(self) -> list[Category]:
        rows = (
            self.db.query(models.Category)
            .filter(models.Category.is_active.is_(True))
            .order_by(models.Category.name)
            .all()
        )
        return [self._to_domain(row) for row in rows]

    def exists_by_id(self, category_id: str) -> bool:
        return self._row(category_id) is not None

    def exists_by_name(self, name: str, exclude_id: Optional[str] = None) -> bool:
        query = self.db.query(models.Category.id).filter(
            func.lower(models.Category.name) == name.strip().lower()
        )
        if exclude_id:
            query = query.filter(models.Category.id != exclude_id)
        return query.first() is not None

    def save(self, category: Category) -> Category:
        self.db.add(models.Category(**_persistable(category.to_persistence())))
        self.db.commit()
        return category

    def update(self, category: Category) -> Category:
        row = self._row(category.id)
        for key, value in _persistable(category.to_persistence()).items():
            if key != "created_at":
                setattr(row, key, value)
        self.db.commit()
        return category

    def delete(self, category_id: str) -> None:
        row = self._row(category_id)
        if row:
            self.db.delete(row)
            self.db.commit()


class ServiceRepository(IServiceRepository):
    """Repository for service database operations"""

    def __init__(self, db: Session):
        self.db = db

    @staticmethod
    def _to_domain(row: models.Service) -> Service:
        return Service.from_persistence(
            {
                "id": row.id,
                "category_id": row.category_id,
                "name": row.name,
                "description": row.description,
                "duration": row.duration,
                "duration_variation": row.duration_variation,
                "price": row.price,
                "is_active": row.is_active,
                "created_at": row.created_at,
                "updated_at": row.updated_at,
            }
        )

    def _row(self, service_id: str) -> Optional[models.Service]:
        return self.db.query(models.Service).filter(models.Service.id == service_id).first()

    def _list(self, *criteria) -> list[Service]:
        rows = self.db.query(models.Service).filter(*criteria).order_by(models.Service.name).all()
        return [self._to_domain(row) for row in rows]

    def find_by_id(self, service_id: str) -> Optional[Service]:
        row = self._row(service_id)
        return self._to_domain(row) if row else None

    def find_all(self) -> list[Service]:
        return self._list()

    def find_active(self) -> list[Service]:
        return self._list(models.Service.is_active.is_(True))

    def find_by_category(self, category_id: str) -> list[Service]:
        return self._list(models.Service.category_id == category_id)

    def find_active_by_category(self, category_id: str) -> list[Service]:
        return self._list(models.Service.category_id == category_id, models.Service.is_active.is_(True))

    def exists_by_id(self, service_id: str) -> bool:
        return self._row(service_id) is not None

    def exists_by_name(self, name: str, exclude_id: Optional[str] = None) -> bool:
        query = self.db.query(models.Service.id).filter(
            func.lower(models.Service.name) == name.strip().lower()
        )
        if exclude_id:
            query = query.filter(models.Service.id != exclude_id)
        return query.first() is not None

    def save(self, service: Service) -> Service:
        self.db.add(models.Service(**_persistable(service.to_persistence())))
        self.db.commit()
        return service

    def update(self, service: Service) -> Service:
        row = self._row(service.id)
        for key, value in _persistable(service.to_persistence()).items():
            if key != "created_at":
                setattr(row, key, value)
        self.db.commit()
        return service

    def delete(self, service_id: str) -> None:
        row = self._row(service_id)
        if row:
            self.db.delete(row)
            self.db.commit()


class StylistRepository(IStylistRepository):
    """Repository for stylist profiles"""

    def __init__(self, db: Session):
        self.db = db

    @staticmethod
    def _to_domain(row: models.Stylist) -> Stylist:
        return Stylist(id=row.id, user_id=row.user_id, name=row.user.name if row.user else None)

    def _query(self):
        return self.db.query(models.Stylist).options(joinedload(models.Stylist.user))

    def find_by_id(self, stylist_id: str) -> Optional[Stylist]:
        row = self._query().filter(models.Stylist.id == stylist_id).first()
        return self._to_domain(row) if row else None

    def find_by_user_id(self, user_id: str) -> Optional[Stylist]:
        row = self._query().filter(models.Stylist.user_id == user_id).first()
        return self._to_domain(row) if row else None

    def find_all(self) -> list[Stylist]:
        return [self._to_domain(row) for row in self._query().all()]

    def exists_by_id(self, stylist_id: str) -> bool:
        return self.db.query(models.Stylist.id).filter(models.Stylist.id == stylist_id).first() is not None

    def save(self, stylist: Stylist) -> Stylist:
        self.db.add(models.Stylist(id=stylist.id, user_id=stylist.user_id))
        self.db.commit()
        return stylist


class StylistServiceRepository(IStylistServiceRepository):
    """Repository for the stylist/service join table"""

    def __init__(self, db: Session):
        self.db = db

    @staticmethod
    def _to_domain(row: models.StylistService) -> StylistService:
        return StylistService.from_persistence(
            {
                "stylist_id": row.stylist_id,
                "service_id": row.service_id,
                "custom_price": row.custom_price,
                "is_offering": row.is_offering,
                "created_at": row.created_at,
                "updated_at": row.updated_at,
            }
        )

    def _row(self, stylist_id: str, service_id: str) -> Optional[models.StylistService]:
        return (
            self.db.query(models.StylistService)
            .filter(
                models.StylistService.stylist_id == stylist_id,
                models.StylistService.service_id == service_id,
            )
            .first()
        )

    def _list(self, *criteria) -> list[StylistService]:
        rows = self.db.query(models.StylistService).filter(*criteria).all()
        return [self._to_domain(row) for row in rows]

    def find(self, stylist_id: str, service_id: str) -> Optional[StylistService]:
        row = self._row(stylist_id, service_id)
        return self._to_domain(row) if row else None

    def find_by_stylist(self, stylist_id: str) -> list[StylistService]:
        return self._list(models.StylistService.stylist_id == stylist_id)

    def find_active_by_stylist(self, stylist_id: str) -> list[StylistService]:
        return self._list(
            models.StylistService.stylist_id == stylist_id,
            models.StylistService.is_offering.is_(True),
        )

    def find_by_service(self, service_id: str) -> list[StylistService]:
        return self._list(models.StylistService.service_id == service_id)

    def find_offering_by_service(self, service_id: str) -> list[StylistService]:
        return self._list(
            models.StylistService.service_id == service_id,
            models.StylistService.is_offering.is_(True),
        )

    def exists(self, stylist_id: str, service_id: str) -> bool:
        return self._row(stylist_id, service_id) is not None

    def save(self, assignment: StylistService) -> StylistService:
        self.db.add(models.StylistService(**_persistable(assignment.to_persistence())))
        self.db.commit()
        return assignment

    def update(self, assignment: StylistService) -> StylistService:
        row = self._row(assignment.stylist_id, assignment.service_id)
        row.custom_price = assignment.custom_price
        row.is_offering = assignment.is_offering
        row.updated_at = to_naive_utc(assignment.updated_at)
        self.db.commit()
        return assignment

    def delete(self, stylist_id: str, service_id: str) -> None:
        row = self._row(stylist_id, service_id)
        if row:
            self.db.delete(row)
            self.db.commit()


__all__ = [
    "CategoryRepository",
    "ServiceRepository",
    "StylistRepository",
    "StylistServiceRepository",
]
