"""Catalog services - Business logic for categories, services and stylist offerings"""

import logging
from typing import Optional

from ...shared.exceptions import ConflictError, NotFoundError, ValidationError
from ...shared.validators import require_uuid
from .entities import Category, Service, StylistService, format_cents
from .interfaces import (
    ICategoryRepository,
    IServiceRepository,
    IStylistRepository,
    IStylistServiceRepository,
)
from .schemas import (
    CategoryCreate,
    CategoryResponse,
    CategoryUpdate,
    ServiceCreate,
    ServiceResponse,
    ServiceUpdate,
    ServiceWithStylistsResponse,
    StylistServiceAssign,
    StylistServiceResponse,
    StylistServiceUpdate,
    StylistWithServicesResponse,
)

logger = logging.getLogger(__name__)


class CategoryService:
    """Service layer for category business logic"""

    def __init__(self, categories: ICategoryRepository):
        self.repo = categories

    def _get(self, category_id: str) -> Category:
        category_id = require_uuid(category_id, "Category")
        category = self.repo.find_by_id(category_id)
        if category is None:
            raise NotFoundError("Category", category_id)
        return category

    def create(self, data: CategoryCreate) -> CategoryResponse:
        if data.name and self.repo.exists_by_name(data.name):
            raise ConflictError(f"Category with name '{data.name.strip()}' already exists")
        category = Category.create(data.name, data.description)
        self.repo.save(category)
        logger.info(f"📁 Created category {category.id} ({category.name})")
        return CategoryResponse.from_entity(category)

    def update(self, category_id: str, data: CategoryUpdate) -> CategoryResponse:
        category = self._get(category_id)
        if data.name is not None and data.name.strip().lower() != category.name.lower():
            if self.repo.exists_by_name(data.name, exclude_id=category.id):
                raise ConflictError(f"Category with name '{data.name.strip()}' already exists")
        category.update_info(data.name, data.description)
        self.repo.update(category)
        return CategoryResponse.from_entity(category)

    def get_by_id(self, category_id: str) -> CategoryResponse:
        return CategoryResponse.from_entity(self._get(category_id))

    def get_all(self) -> list[CategoryResponse]:
        return [CategoryResponse.from_entity(c) for c in self.repo.find_all()]

    def get_active(self) -> list[CategoryResponse]:
        return [CategoryResponse.from_entity(c) for c in self.repo.find_active()]

    def activate(self, category_id: str) -> CategoryResponse:
        category = self._get(category_id)
        category.activate()
        self.repo.update(category)
        return CategoryResponse.from_entity(category)

    def deactivate(self, category_id: str) -> CategoryResponse:
        category = self._get(category_id)
        category.deactivate()
        self.repo.update(category)
        return CategoryResponse.from_entity(category)

    def delete(self, category_id: str) -> None:
        category_id = require_uuid(category_id, "Category")
        if not self.repo.exists_by_id(category_id):
            raise NotFoundError("Category", category_id)
        self.repo.delete(category_id)
        logger.info(f"🗑️ Deleted category {category_id}")


class ServiceManagementService:
    """Service layer for the salon's service catalog"""

    def __init__(self, services: IServiceRepository, categories: ICategoryRepository):
        self.repo = services
        self.categories = categories

    def _get(self, service_id: str) -> Service:
        service_id = require_uuid(service_id, "Service")
        service = self.repo.find_by_id(service_id)
        if service is None:
            raise NotFoundError("Service", service_id)
        return service

    def _require_category(self, category_id: str) -> Category:
        category_id = require_uuid(category_id, "Category")
        category = self.categories.find_by_id(category_id)
        if category is None:
            raise NotFoundError("Category", category_id)
        return category

    def _to_response(self, service: Service, category: Optional[Category] = None) -> ServiceResponse:
        if category is None:
            category = self.categories.find_by_id(service.category_id)
        return ServiceResponse.from_entity(service, category)

    def _to_responses(self, services: list[Service]) -> list[ServiceResponse]:
        cache: dict[str, Optional[Category]] = {}
        responses = []
        for service in services:
            if service.category_id not in cache:
                cache[service.category_id] = self.categories.find_by_id(service.category_id)
            responses.append(ServiceResponse.from_entity(service, cache[service.category_id]))
        return responses

    def create(self, data: ServiceCreate) -> ServiceResponse:
        category = self._require_category(data.categoryId)
        if self.repo.exists_by_name(data.name):
            raise ConflictError(f"Service with name '{data.name.strip()}' already exists")
        service = Service.create(
            category_id=category.id,
            name=data.name,
            description=data.description,
            duration=data.duration,
            price=data.price,
            duration_variation=data.durationVariation,
        )
        self.repo.save(service)
        logger.info(f"💇 Created service {service.id} ({service.name}) at {service.get_formatted_price()}")
        return self._to_response(service, category)

    def update(self, service_id: str, data: ServiceUpdate) -> ServiceResponse:
        service = self._get(service_id)
        if data.name is not None and data.name.strip().lower() != service.name.lower():
            if self.repo.exists_by_name(data.name, exclude_id=service.id):
                raise ConflictError(f"Service with name '{data.name.strip()}' already exists")
        category = None
        if data.categoryId is not None and data.categoryId != service.category_id:
            category = self._require_category(data.categoryId)
            service.update_category(category.id)
        service.update_details(
            name=data.name,
            description=data.description,
            duration=data.duration,
            duration_variation=data.durationVariation,
            price=data.price,
        )
        self.repo.update(service)
        return self._to_response(service, category)

    def get_by_id(self, service_id: str) -> ServiceResponse:
        return self._to_response(self._get(service_id))

    def get_all(self) -> list[ServiceResponse]:
        return self._to_responses(self.repo.find_all())

    def get_active(self) -> list[ServiceResponse]:
        return self._to_responses(self.repo.find_active())

    def get_by_category(self, category_id: str) -> list[ServiceResponse]:
        category = self._require_category(category_id)
        return [ServiceResponse.from_entity(s, category) for s in self.repo.find_by_category(category.id)]

    def get_active_by_category(self, category_id: str) -> list[ServiceResponse]:
        category = self._require_category(category_id)
        return [ServiceResponse.from_entity(s, category) for s in self.repo.find_active_by_category(category.id)]

    def activate(self, service_id: str) -> ServiceResponse:
        service = self._get(service_id)
        service.activate()
        self.repo.update(service)
        return self._to_response(service)

    def deactivate(self, service_id: str) -> ServiceResponse:
        service = self._get(service_id)
        service.deactivate()
        self.repo.update(service)
        return self._to_response(service)

    def delete(self, service_id: str) -> None:
        service_id = require_uuid(service_id, "Service")
        if not self.repo.exists_by_id(service_id):
            raise NotFoundError("Service", service_id)
        self.repo.delete(service_id)
        logger.info(f"🗑️ Deleted service {service_id}")


class StylistServiceService:
    """Service layer for which stylists offer which services, and at what price"""

    def __init__(
        self,
        assignments: IStylistServiceRepository,
        stylists: IStylistRepository,
        services: IServiceRepository,
    ):
        self.repo = assignments
        self.stylists = stylists
        self.services = services

    def _require_stylist(self, stylist_id: str):
        stylist_id = require_uuid(stylist_id, "Stylist")
        stylist = self.stylists.find_by_id(stylist_id)
        if stylist is None:
            raise NotFoundError("Stylist", stylist_id)
        return stylist

    def _require_service(self, service_id: str) -> Service:
        service_id = require_uuid(service_id, "Service")
        service = self.services.find_by_id(service_id)
        if service is None:
            raise NotFoundError("Service", service_id)
        return service

    def _require_assignment(self, stylist_id: str, service_id: str) -> StylistService:
        assignment = self.repo.find(stylist_id, service_id)
        if assignment is None:
            raise NotFoundError("StylistService", f"{stylist_id}/{service_id}")
        return assignment

    def _with_services(self, assignments: list[StylistService], stylist_name=None) -> list[StylistServiceResponse]:
        responses = []
        for assignment in assignments:
            service = self.services.find_by_id(assignment.service_id)
            if service is not None:
                responses.append(StylistServiceResponse.from_entity(assignment, service, stylist_name))
        return responses

    def _with_stylists(self, assignments: list[StylistService], service: Service) -> list[StylistServiceResponse]:
        responses = []
        for assignment in assignments:
            stylist = self.stylists.find_by_id(assignment.stylist_id)
            responses.append(
                StylistServiceResponse.from_entity(assignment, service, stylist.name if stylist else None)
            )
        return responses

    def assign(self, stylist_id: str, data: StylistServiceAssign) -> StylistServiceResponse:
        stylist = self._require_stylist(stylist_id)
        service = self._require_service(data.serviceId)
        if self.repo.exists(stylist.id, service.id):
            raise ConflictError("Service is already assigned to this stylist")
        assignment = StylistService.create(stylist.id, service.id, data.customPrice)
        self.repo.save(assignment)
        logger.info(f"✂️ Assigned service {service.id} to stylist {stylist.id}")
        return StylistServiceResponse.from_entity(assignment, service, stylist.name)

    def update(self, stylist_id: str, service_id: str, data: StylistServiceUpdate) -> StylistServiceResponse:
        stylist = self._require_stylist(stylist_id)
        service = self._require_service(service_id)
        assignment = self._require_assignment(stylist.id, service.id)
        if not data.model_fields_set & {"customPrice", "isOffering"}:
            raise ValidationError("At least one field must be provided for update")
        if "customPrice" in data.model_fields_set:
            assignment.update_price(data.customPrice)
        if data.isOffering is True:
            assignment.start_offering()
        elif data.isOffering is False:
            assignment.stop_offering()
        self.repo.update(assignment)
        return StylistServiceResponse.from_entity(assignment, service, stylist.name)

    def remove(self, stylist_id: str, service_id: str) -> None:
        stylist = self._require_stylist(stylist_id)
        service = self._require_service(service_id)
        self._require_assignment(stylist.id, service.id)
        self.repo.delete(stylist.id, service.id)
        logger.info(f"🗑️ Removed service {service.id} from stylist {stylist.id}")

    def get_stylist_services(self, stylist_id: str) -> list[StylistServiceResponse]:
        stylist = self._require_stylist(stylist_id)
        return self._with_services(self.repo.find_by_stylist(stylist.id), stylist.name)

    def get_active_offerings(self, stylist_id: str) -> list[StylistServiceResponse]:
        stylist = self._require_stylist(stylist_id)
        return self._with_services(self.repo.find_active_by_stylist(stylist.id), stylist.name)

    def get_service_stylists(self, service_id: str) -> list[StylistServiceResponse]:
        service = self._require_service(service_id)
        return self._with_stylists(self.repo.find_by_service(service.id), service)

    def get_stylists_offering_service(self, service_id: str) -> list[StylistServiceResponse]:
        service = self._require_service(service_id)
        return self._with_stylists(self.repo.find_offering_by_service(service.id), service)

    def get_stylist_with_services(self, stylist_id: str) -> StylistWithServicesResponse:
        stylist = self._require_stylist(stylist_id)
        services = self._with_services(self.repo.find_by_stylist(stylist.id), stylist.name)
        return StylistWithServicesResponse(
            stylistId=stylist.id,
            stylistName=stylist.name,
            totalServices=len(services),
            activeServices=sum(1 for s in services if s.isOffering),
            services=services,
        )

    def get_service_with_stylists(self, service_id: str) -> ServiceWithStylistsResponse:
        service = self._require_service(service_id)
        stylists = self._with_stylists(self.repo.find_by_service(service.id), service)
        return ServiceWithStylistsResponse(
            serviceId=service.id,
            serviceName=service.name,
            basePrice=service.price,
            formattedBasePrice=format_cents(service.price),
            totalStylists=len(stylists),
            offeringStylists=sum(1 for s in stylists if s.isOffering),
            stylists=stylists,
        )


__all__ = ["CategoryService", "ServiceManagementService", "StylistServiceService"]
