"""Catalog routers - FastAPI endpoints for categories, services and stylist offerings"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import require_admin
from ...database import get_db
from ...shared.responses import ok
from ..users.entities import User
from .repository import (
    CategoryRepository,
    ServiceRepository,
    StylistRepository,
    StylistServiceRepository,
)
from .schemas import (
    CategoryCreate,
    CategoryUpdate,
    ServiceCreate,
    ServiceUpdate,
    StylistServiceAssign,
    StylistServiceUpdate,
)
from .service import CategoryService, ServiceManagementService, StylistServiceService

logger = logging.getLogger(__name__)

categories_router = APIRouter(prefix="/categories", tags=["Categories"])
services_router = APIRouter(prefix="/services", tags=["Services"])
stylists_router = APIRouter(prefix="/stylists", tags=["Stylists"])


def get_category_service(db: Session = Depends(get_db)) -> CategoryService:
    """Dependency injection for CategoryService"""
    return CategoryService(CategoryRepository(db))


def get_service_management(db: Session = Depends(get_db)) -> ServiceManagementService:
    """Dependency injection for ServiceManagementService"""
    return ServiceManagementService(ServiceRepository(db), CategoryRepository(db))


def get_stylist_service_service(db: Session = Depends(get_db)) -> StylistServiceService:
    """Dependency injection for StylistServiceService"""
    return StylistServiceService(StylistServiceRepository(db), StylistRepository(db), ServiceRepository(db))


def _dump(items) -> list[dict]:
    return [item.model_dump() for item in items]


# ============================================================================
# CATEGORIES
# ============================================================================


@categories_router.get("")
async def list_categories(service: CategoryService = Depends(get_category_service)):
    return ok(_dump(service.get_all()), "Categories retrieved successfully")


@categories_router.get("/active")
async def list_active_categories(service: CategoryService = Depends(get_category_service)):
    return ok(_dump(service.get_active()), "Active categories retrieved successfully")


@categories_router.post("", status_code=201)
async def create_category(
    data: CategoryCreate,
    current_user: User = Depends(require_admin),
    service: CategoryService = Depends(get_category_service),
):
    return ok(service.create(data).model_dump(), "Category created successfully")


@categories_router.get("/{category_id}")
async def get_category(category_id: str, service: CategoryService = Depends(get_category_service)):
    return ok(service.get_by_id(category_id).model_dump(), "Category retrieved successfully")


@categories_router.put("/{category_id}")
async def update_category(
    category_id: str,
    data: CategoryUpdate,
    current_user: User = Depends(require_admin),
    service: CategoryService = Depends(get_category_service),
):
    return ok(service.update(category_id, data).model_dump(), "Category updated successfully")


@categories_router.patch("/{category_id}/activate")
async def activate_category(
    category_id: str,
    current_user: User = Depends(require_admin),
    service: CategoryService = Depends(get_category_service),
):
    return ok(service.activate(category_id).model_dump(), "Category activated successfully")


@categories_router.patch("/{category_id}/deactivate")
async def deactivate_category(
    category_id: str,
    current_user: User = Depends(require_admin),
    service: CategoryService = Depends(get_category_service),
):
    return ok(service.deactivate(category_id).model_dump(), "Category deactivated successfully")


@categories_router.delete("/{category_id}")
async def delete_category(
    category_id: str,
    current_user: User = Depends(require_admin),
    service: CategoryService = Depends(get_category_service),
):
    service.delete(category_id)
    return ok(None, "Category deleted successfully")


# ============================================================================
# SERVICES
# ============================================================================


@services_router.get("")
async def list_services(service: ServiceManagementService = Depends(get_service_management)):
    return ok(_dump(service.get_all()), "Services retrieved successfully")


@services_router.get("/active")
async def list_active_services(service: ServiceManagementService = Depends(get_service_management)):
    return ok(_dump(service.get_active()), "Active services retrieved successfully")


@services_router.get("/category/{category_id}")
async def list_services_by_category(
    category_id: str, service: ServiceManagementService = Depends(get_service_management)
):
    return ok(_dump(service.get_by_category(category_id)), "Services retrieved successfully")


@services_router.get("/category/{category_id}/active")
async def list_active_services_by_category(
    category_id: str, service: ServiceManagementService = Depends(get_service_management)
):
    return ok(_dump(service.get_active_by_category(category_id)), "Active services retrieved successfully")


@services_router.post("", status_code=201)
async def create_service(
    data: ServiceCreate,
    current_user: User = Depends(require_admin),
    service: ServiceManagementService = Depends(get_service_management),
):
    return ok(service.create(data).model_dump(), "Service created successfully")


@services_router.get("/{service_id}")
async def get_service(service_id: str, service: ServiceManagementService = Depends(get_service_management)):
    return ok(service.get_by_id(service_id).model_dump(), "Service retrieved successfully")


@services_router.put("/{service_id}")
async def update_service(
    service_id: str,
    data: ServiceUpdate,
    current_user: User = Depends(require_admin),
    service: ServiceManagementService = Depends(get_service_management),
):
    return ok(service.update(service_id, data).model_dump(), "Service updated successfully")


@services_router.patch("/{service_id}/activate")
async def activate_service(
    service_id: str,
    current_user: User = Depends(require_admin),
    service: ServiceManagementService = Depends(get_service_management),
):
    return ok(service.activate(service_id).model_dump(), "Service activated successfully")


@services_router.patch("/{service_id}/deactivate")
async def deactivate_service(
    service_id: str,
    current_user: User = Depends(require_admin),
    service: ServiceManagementService = Depends(get_service_management),
):
    return ok(service.deactivate(service_id).model_dump(), "Service deactivated successfully")


@services_router.delete("/{service_id}")
async def delete_service(
    service_id: str,
    current_user: User = Depends(require_admin),
    service: ServiceManagementService = Depends(get_service_management),
):
    service.delete(service_id)
    return ok(None, "Service deleted successfully")


@services_router.get("/{service_id}/stylists")
async def list_service_stylists(
    service_id: str, service: StylistServiceService = Depends(get_stylist_service_service)
):
    return ok(_dump(service.get_service_stylists(service_id)), "Stylists retrieved successfully")


@services_router.get("/{service_id}/stylists/offering")
async def list_stylists_offering_service(
    service_id: str, service: StylistServiceService = Depends(get_stylist_service_service)
):
    return ok(_dump(service.get_stylists_offering_service(service_id)), "Stylists retrieved successfully")


@services_router.get("/{service_id}/stylists/detailed")
async def service_with_stylists(
    service_id: str, service: StylistServiceService = Depends(get_stylist_service_service)
):
    return ok(service.get_service_with_stylists(service_id).model_dump(), "Service retrieved successfully")


# ============================================================================
# STYLIST OFFERINGS
# ============================================================================


@stylists_router.get("/{stylist_id}/services")
async def list_stylist_services(
    stylist_id: str, service: StylistServiceService = Depends(get_stylist_service_service)
):
    return ok(_dump(service.get_stylist_services(stylist_id)), "Stylist services retrieved successfully")


@stylists_router.get("/{stylist_id}/services/active")
async def list_stylist_active_services(
    stylist_id: str, service: StylistServiceService = Depends(get_stylist_service_service)
):
    return ok(_dump(service.get_active_offerings(stylist_id)), "Stylist services retrieved successfully")


@stylists_router.get("/{stylist_id}/services/detailed")
async def stylist_with_services(
    stylist_id: str, service: StylistServiceService = Depends(get_stylist_service_service)
):
    return ok(service.get_stylist_with_services(stylist_id).model_dump(), "Stylist retrieved successfully")


@stylists_router.post("/{stylist_id}/services", status_code=201)
async def assign_service(
    stylist_id: str,
    data: StylistServiceAssign,
    current_user: User = Depends(require_admin),
    service: StylistServiceService = Depends(get_stylist_service_service),
):
    return ok(service.assign(stylist_id, data).model_dump(), "Service assigned successfully")


@stylists_router.put("/{stylist_id}/services/{service_id}")
async def update_stylist_service(
    stylist_id: str,
    service_id: str,
    data: StylistServiceUpdate,
    current_user: User = Depends(require_admin),
    service: StylistServiceService = Depends(get_stylist_service_service),
):
    return ok(service.update(stylist_id, service_id, data).model_dump(), "Stylist service updated successfully")


@stylists_router.delete("/{stylist_id}/services/{service_id}")
async def remove_stylist_service(
    stylist_id: str,
    service_id: str,
    current_user: User = Depends(require_admin),
    service: StylistServiceService = Depends(get_stylist_service_service),
):
    service.remove(stylist_id, service_id)
    return ok(None, "Service removed from stylist successfully")


__all__ = ["categories_router", "services_router", "stylists_router"]
