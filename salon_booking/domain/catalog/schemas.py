"""Catalog schemas - Pydantic models for categories, services and stylist offerings"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ...shared.validators import to_iso
from .entities import Category, Service, StylistService


# ============================================================================
# CATEGORIES
# ============================================================================


class CategoryCreate(BaseModel):
    name: str
    description: Optional[str] = None


class CategoryUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None


class CategoryResponse(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    isActive: bool
    createdAt: str
    updatedAt: str

    @classmethod
    def from_entity(cls, category: Category) -> "CategoryResponse":
        return cls(
            id=category.id,
            name=category.name,
            description=category.description,
            isActive=category.is_active,
            createdAt=to_iso(category.created_at),
            updatedAt=to_iso(category.updated_at),
        )


class CategoryBrief(BaseModel):
    id: str
    name: str


# ============================================================================
# SERVICES
# ============================================================================


class ServiceCreate(BaseModel):
    """Prices are integer cents"""

    categoryId: str
    name: str
    description: str
    duration: int
    durationVariation: int = 0
    price: int

    @field_validator("price")
    @classmethod
    def validate_price(cls, v):
        if v < 0:
            raise ValueError("Price must be a non-negative amount in cents")
        return v


class ServiceUpdate(BaseModel):
    categoryId: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    duration: Optional[int] = None
    durationVariation: Optional[int] = None
    price: Optional[int] = None


class ServiceResponse(BaseModel):
    id: str
    categoryId: str
    name: str
    description: str
    duration: int
    durationVariation: int
    minDuration: int
    maxDuration: int
    price: int
    formattedPrice: str
    isActive: bool
    createdAt: str
    updatedAt: str
    category: Optional[CategoryBrief] = None

    @classmethod
    def from_entity(cls, service: Service, category: Optional[Category] = None) -> "ServiceResponse":
        return cls(
            id=service.id,
            categoryId=service.category_id,
            name=service.name,
            description=service.description,
            duration=service.duration,
            durationVariation=service.duration_variation,
            minDuration=service.calculate_min_duration(),
            maxDuration=service.calculate_max_duration(),
            price=service.price,
            formattedPrice=service.get_formatted_price(),
            isActive=service.is_active,
            createdAt=to_iso(service.created_at),
            updatedAt=to_iso(service.updated_at),
            category=CategoryBrief(id=category.id, name=category.name) if category else None,
        )


# ============================================================================
# STYLIST OFFERINGS
# ============================================================================


class StylistServiceAssign(BaseModel):
    serviceId: str
    customPrice: Optional[int] = None


class StylistServiceUpdate(BaseModel):
    """An explicit ``customPrice: null`` reverts to the base price"""

    customPrice: Optional[int] = None
    isOffering: Optional[bool] = None


class StylistServiceResponse(BaseModel):
    stylistId: str
    serviceId: str
    stylistName: Optional[str] = None
    serviceName: Optional[str] = None
    duration: Optional[int] = None
    basePrice: int
    customPrice: Optional[int] = None
    effectivePrice: int
    formattedEffectivePrice: str
    hasCustomPrice: bool
    isOffering: bool
    createdAt: str
    updatedAt: str

    @classmethod
    def from_entity(
        cls, assignment: StylistService, service: Service, stylist_name: Optional[str] = None
    ) -> "StylistServiceResponse":
        return cls(
            stylistId=assignment.stylist_id,
            serviceId=assignment.service_id,
            stylistName=stylist_name,
            serviceName=service.name,
            duration=service.duration,
            basePrice=service.price,
            customPrice=assignment.custom_price,
            effectivePrice=assignment.get_effective_price(service.price),
            formattedEffectivePrice=assignment.get_formatted_price(service.price),
            hasCustomPrice=assignment.has_custom_price(),
            isOffering=assignment.is_offering,
            createdAt=to_iso(assignment.created_at),
            updatedAt=to_iso(assignment.updated_at),
        )


class StylistWithServicesResponse(BaseModel):
    stylistId: str
    stylistName: Optional[str] = None
    totalServices: int
    activeServices: int
    services: list[StylistServiceResponse] = Field(default_factory=list)


class ServiceWithStylistsResponse(BaseModel):
    serviceId: str
    serviceName: str
    basePrice: int
    formattedBasePrice: str
    totalStylists: int
    offeringStylists: int
    stylists: list[StylistServiceResponse] = Field(default_factory=list)


__all__ = [
    "CategoryCreate",
    "CategoryUpdate",
    "CategoryResponse",
    "CategoryBrief",
    "ServiceCreate",
    "ServiceUpdate",
    "ServiceResponse",
    "StylistServiceAssign",
    "StylistServiceUpdate",
    "StylistServiceResponse",
    "StylistWithServicesResponse",
    "ServiceWithStylistsResponse",
]
