"""Menu catalog grouping and admin CRUD."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from mcnutrition.domain.menu import MenuItem, format_category_name
from mcnutrition.services.errors import NotFoundError, ValidationError

_logger = logging.getLogger(__name__)

SEARCH_LIMIT = 10


class MenuRepository(Protocol):
    """Persistence interface for menu records."""

    def list_items(self) -> list[MenuItem]:
        """Return all menu items, newest first."""

    def search_items(self, term: str, limit: int) -> list[MenuItem]:
        """Return items whose name contains the term, ordered by name."""

    def create_item(self, record: dict[str, object]) -> MenuItem:
        """Create a menu record and return it."""

    def update_item(self, item_id: str, record: dict[str, object]) -> MenuItem | None:
        """Update a menu record, returning None when it does not exist."""

    def delete_item(self, item_id: str) -> MenuItem | None:
        """Delete a menu record, returning None when it does not exist."""


@dataclass(frozen=True)
class Listing:
    """A menu item with its stable per-category listing id."""

    id: str
    item: MenuItem


@dataclass(frozen=True)
class CategorySummary:
    key: str
    display_name: str
    count: int


class CatalogIndex:
    """Menu items grouped by category in first-seen order."""

    def __init__(self, items: Sequence[MenuItem]) -> None:
        self._listings: list[Listing] = []
        self._groups: dict[str, list[Listing]] = {}
        for item in items:
            group = self._groups.setdefault(item.category, [])
            listing = Listing(id=f"{item.category}-{len(group)}", item=item)
            group.append(listing)
            self._listings.append(listing)

    @property
    def listings(self) -> list[Listing]:
        """All listings in original item order."""
        return list(self._listings)

    def __len__(self) -> int:
        return len(self._listings)

    def group(self, category: str) -> list[Listing]:
        return list(self._groups.get(category, []))

    def groups(self) -> dict[str, list[Listing]]:
        return {category: list(group) for category, group in self._groups.items()}

    def categories(self) -> list[CategorySummary]:
        """Return non-empty categories with display names."""
        return [
            CategorySummary(
                key=category,
                display_name=format_category_name(category),
                count=len(group),
            )
            for category, group in self._groups.items()
            if group
        ]

    def get(self, listing_id: str) -> Listing | None:
        category, _, raw_index = listing_id.rpartition("-")
        group = self._groups.get(category)
        if not group or not raw_index.isdigit():
            return None
        index = int(raw_index)
        return group[index] if index < len(group) else None


@dataclass
class MenuService:
    """Application service for menu records."""

    repository: MenuRepository

    def list_items(self) -> list[MenuItem]:
        """Return every menu record, newest first."""
        return self.repository.list_items()

    def catalog(self) -> CatalogIndex:
        """Build a catalog index over the current menu."""
        return CatalogIndex(self.repository.list_items())

    def search(self, term: str | None) -> list[MenuItem]:
        """Return up to ten items whose name contains the term."""
        return self.repository.search_items((term or "").strip(), SEARCH_LIMIT)

    def create_item(self, record: dict[str, object]) -> MenuItem:
        """Create a menu record; any client-supplied id is dropped."""
        payload = _clean_record(record)
        created = self.repository.create_item(payload)
        _logger.info("Menu item created: id=%s", created.id)
        return created

    def update_item(self, item_id: str, record: dict[str, object]) -> MenuItem:
        """Update a menu record by id."""
        payload = {key: value for key, value in record.items() if key != "id"}
        updated = self.repository.update_item(item_id, payload)
        if updated is None:
            raise NotFoundError("Menu item not found")
        return updated

    def delete_item(self, item_id: str) -> MenuItem:
        """Delete a menu record by id."""
        deleted = self.repository.delete_item(item_id)
        if deleted is None:
            raise NotFoundError("Menu item not found")
        _logger.info("Menu item deleted: id=%s", item_id)
        return deleted


def _clean_record(record: dict[str, object]) -> dict[str, object]:
    payload = {key: value for key, value in record.items() if key != "id"}
    name = payload.get("ITEM")
    if not isinstance(name, str) or not name.strip():
        raise ValidationError("Menu item name is required")
    category = payload.get("CATEGORY")
    if not isinstance(category, str) or not category.strip():
        raise ValidationError("Menu item category is required")
    return payload
