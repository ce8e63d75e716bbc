"""Tests for catalog grouping and the menu service."""

import pytest

from mcnutrition.services.catalog import CatalogIndex, MenuService
from mcnutrition.services.errors import NotFoundError, ValidationError
from tests.conftest import InMemoryMenuRepository, make_item, sample_menu


def test_catalog_groups_in_first_seen_order_with_stable_ids() -> None:
    catalog = CatalogIndex(sample_menu())

    assert [summary.key for summary in catalog.categories()] == [
        "BURGERSANDWICH",
        "CHICKENFISH",
        "SALAD",
        "BEVERAGE",
    ]
    assert [listing.id for listing in catalog.group("CHICKENFISH")] == [
        "CHICKENFISH-0",
        "CHICKENFISH-1",
    ]
    assert catalog.categories()[1].display_name == "Chicken & Fish"
    assert len(catalog) == 6


def test_catalog_get_by_listing_id() -> None:
    catalog = CatalogIndex(sample_menu())

    listing = catalog.get("BURGERSANDWICH-1")

    assert listing is not None
    assert listing.item.name == "Hamburger"
    assert catalog.get("BURGERSANDWICH-9") is None
    assert catalog.get("nonsense") is None


def test_menu_service_create_drops_client_id(
    menu_repository: InMemoryMenuRepository,
) -> None:
    service = MenuService(menu_repository)

    created = service.create_item(
        {
            "id": "client-id",
            "ITEM": "McFlurry",
            "CATEGORY": "DESSERTSHAKE",
            "CAL": "510",
        }
    )

    assert created.id != "client-id"
    assert created.calories == "510"


def test_menu_service_create_requires_name_and_category(
    menu_repository: InMemoryMenuRepository,
) -> None:
    service = MenuService(menu_repository)

    with pytest.raises(ValidationError):
        service.create_item({"CAL": "100"})
    assert menu_repository.items == []


def test_menu_service_update_and_delete_missing_records(
    menu_repository: InMemoryMenuRepository,
) -> None:
    service = MenuService(menu_repository)

    with pytest.raises(NotFoundError):
        service.update_item("missing", {"CAL": "1"})
    with pytest.raises(NotFoundError):
        service.delete_item("missing")


def test_menu_service_update_ignores_body_id(
    menu_repository: InMemoryMenuRepository,
) -> None:
    service = MenuService(menu_repository)
    created = service.create_item({"ITEM": "Fries", "CATEGORY": "SNACKSIDE"})
    assert created.id is not None

    updated = service.update_item(created.id, {"id": "other", "CAL": "320"})

    assert updated.id == created.id
    assert updated.calories == "320"


def test_menu_service_search_limits_results(
    menu_repository: InMemoryMenuRepository,
) -> None:
    menu_repository.items = [make_item(f"Burger {index}") for index in range(15)]
    service = MenuService(menu_repository)

    assert len(service.search("burger")) == 10
    assert service.search("  nothing  ") == []
