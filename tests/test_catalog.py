"""Tests for categories, services and stylist offerings."""

from __future__ import annotations

import unittest

from salon_booking.domain.catalog.entities import Category, Service, Stylist, StylistService
from salon_booking.domain.catalog.schemas import (
    CategoryCreate,
    CategoryUpdate,
    ServiceCreate,
    ServiceUpdate,
    StylistServiceAssign,
    StylistServiceUpdate,
)
from salon_booking.domain.catalog.service import (
    CategoryService,
    ServiceManagementService,
    StylistServiceService,
)
from salon_booking.shared.exceptions import ConflictError, NotFoundError, ValidationError
from tests.fakes import (
    FakeCategoryRepository,
    FakeServiceRepository,
    FakeStylistRepository,
    FakeStylistServiceRepository,
    make_service,
    new_id,
)


class ServiceEntityTests(unittest.TestCase):
    """Duration bounds and price formatting on the service entity."""

    def test_duration_range_and_price(self) -> None:
        """A 60-minute service with 15 minutes of variation at 5000 cents."""
        service = Service.create(new_id(), "Haircut", "Wash, cut and style", 60, 5000, 15)

        self.assertEqual(service.get_formatted_price(), "50.00")
        self.assertEqual(service.calculate_min_duration(), 45)
        self.assertEqual(service.calculate_max_duration(), 75)

    def test_persistence_round_trip(self) -> None:
        service = make_service()
        self.assertEqual(Service.from_persistence(service.to_persistence()), service)

    def test_rejects_invalid_values(self) -> None:
        with self.assertRaises(ValidationError):
            Service.create(new_id(), "", "desc", 60, 5000)
        with self.assertRaises(ValidationError):
            Service.create(new_id(), "Cut", "desc", 0, 5000)
        with self.assertRaises(ValidationError):
            Service.create(new_id(), "Cut", "desc", 60, -1)
        with self.assertRaises(ValidationError):
            Service.create(new_id(), "Cut", "desc", 30, 5000, 45)

    def test_failed_update_rolls_back(self) -> None:
        service = make_service(price=5000)
        with self.assertRaises(ValidationError):
            service.update_details(name="Trim", price=-10)
        self.assertEqual(service.name, "Haircut")
        self.assertEqual(service.price, 5000)

    def test_category_name_limit(self) -> None:
        with self.assertRaises(ValidationError):
            Category.create("C" * 101)
        category = Category.create("  Nails  ")
        self.assertEqual(category.name, "Nails")


class StylistServiceEntityTests(unittest.TestCase):
    def test_effective_price_prefers_custom(self) -> None:
        assignment = StylistService.create(new_id(), new_id(), 6500)
        self.assertTrue(assignment.has_custom_price())
        self.assertEqual(assignment.get_effective_price(5000), 6500)
        self.assertEqual(assignment.get_formatted_price(5000), "65.00")

        assignment.update_price(None)
        self.assertEqual(assignment.get_effective_price(5000), 5000)

    def test_negative_custom_price_is_rejected(self) -> None:
        assignment = StylistService.create(new_id(), new_id(), 1000)
        with self.assertRaises(ValidationError):
            assignment.update_price(-1)
        self.assertEqual(assignment.custom_price, 1000)


class CategoryServiceTests(unittest.TestCase):
    """Category names are unique regardless of case."""

    def setUp(self) -> None:
        self.service = CategoryService(FakeCategoryRepository())

    def test_duplicate_name_ignores_case(self) -> None:
        self.service.create(CategoryCreate(name="Spa"))

        with self.assertRaises(ConflictError) as ctx:
            self.service.create(CategoryCreate(name="spa"))
        self.assertEqual(ctx.exception.status_code, 409)

    def test_rename_to_own_name_in_other_case(self) -> None:
        created = self.service.create(CategoryCreate(name="Spa"))
        updated = self.service.update(created.id, CategoryUpdate(name="SPA"))
        self.assertEqual(updated.name, "SPA")

    def test_deactivate_hides_from_active_list(self) -> None:
        created = self.service.create(CategoryCreate(name="Hair"))
        self.service.deactivate(created.id)
        self.assertEqual(self.service.get_active(), [])
        self.assertEqual(len(self.service.get_all()), 1)

    def test_unknown_and_malformed_ids(self) -> None:
        with self.assertRaises(ValidationError):
            self.service.get_by_id("not-a-uuid")
        with self.assertRaises(NotFoundError):
            self.service.get_by_id(new_id())


class ServiceManagementTests(unittest.TestCase):
    def setUp(self) -> None:
        self.categories = FakeCategoryRepository()
        self.category = self.categories.save(Category.create("Hair"))
        self.service = ServiceManagementService(FakeServiceRepository(), self.categories)

    def _create(self, name: str = "Haircut"):
        return self.service.create(
            ServiceCreate(
                categoryId=self.category.id,
                name=name,
                description="Wash, cut and style",
                duration=60,
                durationVariation=15,
                price=5000,
            )
        )

    def test_create_returns_derived_fields(self) -> None:
        created = self._create()
        self.assertEqual(created.formattedPrice, "50.00")
        self.assertEqual((created.minDuration, created.maxDuration), (45, 75))
        self.assertEqual(created.category.name, "Hair")

    def test_requires_existing_category(self) -> None:
        with self.assertRaises(NotFoundError):
            self.service.create(
                ServiceCreate(categoryId=new_id(), name="Cut", description="d", duration=30, price=100)
            )

    def test_duplicate_service_name(self) -> None:
        self._create("Blowout")
        with self.assertRaises(ConflictError):
            self._create("BLOWOUT")

    def test_partial_update(self) -> None:
        created = self._create()
        updated = self.service.update(created.id, ServiceUpdate(price=5500))
        self.assertEqual(updated.formattedPrice, "55.00")
        self.assertEqual(updated.duration, 60)


class StylistServiceServiceTests(unittest.TestCase):
    def setUp(self) -> None:
        self.stylists = FakeStylistRepository()
        self.services = FakeServiceRepository()
        self.stylist = self.stylists.save(Stylist(id=new_id(), user_id=new_id(), name="Ana"))
        self.haircut = self.services.save(make_service(price=5000))
        self.service = StylistServiceService(FakeStylistServiceRepository(), self.stylists, self.services)

    def test_assign_once(self) -> None:
        assigned = self.service.assign(self.stylist.id, StylistServiceAssign(serviceId=self.haircut.id))
        self.assertEqual(assigned.effectivePrice, 5000)
        with self.assertRaises(ConflictError):
            self.service.assign(self.stylist.id, StylistServiceAssign(serviceId=self.haircut.id))

    def test_clearing_custom_price(self) -> None:
        self.service.assign(self.stylist.id, StylistServiceAssign(serviceId=self.haircut.id, customPrice=7000))
        cleared = self.service.update(self.stylist.id, self.haircut.id, StylistServiceUpdate(customPrice=None))
        self.assertFalse(cleared.hasCustomPrice)
        self.assertEqual(cleared.formattedEffectivePrice, "50.00")

    def test_stop_offering_counts(self) -> None:
        self.service.assign(self.stylist.id, StylistServiceAssign(serviceId=self.haircut.id))
        self.service.update(self.stylist.id, self.haircut.id, StylistServiceUpdate(isOffering=False))

        summary = self.service.get_stylist_with_services(self.stylist.id)
        self.assertEqual((summary.totalServices, summary.activeServices), (1, 0))
        self.assertEqual(self.service.get_stylists_offering_service(self.haircut.id), [])

    def test_empty_update_is_rejected(self) -> None:
        self.service.assign(self.stylist.id, StylistServiceAssign(serviceId=self.haircut.id))
        with self.assertRaises(ValidationError):
            self.service.update(self.stylist.id, self.haircut.id, StylistServiceUpdate())


if __name__ == "__main__":
    unittest.main()
