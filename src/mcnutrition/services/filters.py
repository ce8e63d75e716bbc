"""Combined category, nutritional range and search filtering."""

from collections.abc import Sequence
from dataclasses import dataclass, replace
from typing import Literal

from mcnutrition.domain.filters import (
    FILTER_CRITERIA,
    FilterCriterion,
    FilterState,
    Highlight,
    NutrientRange,
)
from mcnutrition.domain.menu import MenuItem, format_category_name
from mcnutrition.services.catalog import CatalogIndex, Listing
from mcnutrition.services.errors import ValidationError

Handle = Literal["min", "max"]


@dataclass(frozen=True)
class ResultItem:
    """A listing that passed every active predicate."""

    listing_id: str
    item: MenuItem
    highlight: Highlight | None = None


@dataclass(frozen=True)
class ResultGroup:
    category: str
    display_name: str
    items: tuple[ResultItem, ...]


@dataclass(frozen=True)
class FilterResult:
    """Grouped listings for the current filter state."""

    groups: tuple[ResultGroup, ...]
    no_results_message: str | None = None

    @property
    def empty(self) -> bool:
        return not self.groups

    @property
    def count(self) -> int:
        return sum(len(group.items) for group in self.groups)

    def by_category(self) -> dict[str, list[MenuItem]]:
        return {
            group.category: [result.item for result in group.items]
            for group in self.groups
        }


class FilterEngine:
    """Holds the filter state over a catalog and recomputes on every change."""

    def __init__(
        self,
        catalog: CatalogIndex | Sequence[MenuItem],
        criteria: dict[str, FilterCriterion] | None = None,
    ) -> None:
        self._catalog = (
            catalog if isinstance(catalog, CatalogIndex) else CatalogIndex(catalog)
        )
        self._criteria = criteria if criteria is not None else FILTER_CRITERIA
        self._state = FilterState()

    @property
    def state(self) -> FilterState:
        """Return a copy of the current filter state."""
        return replace(self._state)

    @property
    def catalog(self) -> CatalogIndex:
        return self._catalog

    @property
    def active_criterion(self) -> FilterCriterion | None:
        if self._state.active_filter is None:
            return None
        return self._criteria[self._state.active_filter]

    def reload(self, catalog: CatalogIndex | Sequence[MenuItem]) -> FilterResult:
        """Swap the underlying items, keeping the filter state."""
        self._catalog = (
            catalog if isinstance(catalog, CatalogIndex) else CatalogIndex(catalog)
        )
        return self.compute()

    def set_category(self, category: str | None) -> FilterResult:
        """Replace the active category; None or empty shows every category."""
        self._state.active_category = category or None
        return self.compute()

    def set_nutritional_filter(
        self,
        key: str | None,
        minimum: int | None = None,
        maximum: int | None = None,
    ) -> FilterResult:
        """Activate one nutritional filter, replacing any other; None clears it."""
        if key is None:
            self._state.active_filter = None
            self._state.range = None
            return self.compute()
        criterion = self._criteria.get(key)
        if criterion is None:
            raise ValidationError(f"Unknown nutritional filter: {key}")
        low = criterion.clamp(criterion.default_min if minimum is None else minimum)
        high = criterion.clamp(criterion.default_max if maximum is None else maximum)
        self._state.active_filter = key
        self._state.range = NutrientRange(min(low, high), high)
        return self.compute()

    def set_range(
        self, minimum: int, maximum: int, handle: Handle | None = None
    ) -> FilterResult:
        """Move the slider handles of the active filter; no-op when none is active.

        When the handles cross, the dragged handle is pinned to the other one.
        If ``handle`` is omitted the dragged handle is whichever value changed,
        preferring the minimum.
        """
        criterion = self.active_criterion
        current = self._state.range
        if criterion is None or current is None:
            return self.compute()
        low = criterion.clamp(minimum)
        high = criterion.clamp(maximum)
        if handle is None:
            only_max_moved = low == current.minimum and high != current.maximum
            handle = "max" if only_max_moved else "min"
        if low > high:
            if handle == "min":
                low = high
            else:
                high = low
        self._state.range = NutrientRange(low, high)
        return self.compute()

    def set_search_term(self, term: str) -> FilterResult:
        """Narrow by case-insensitive substring of the item name."""
        self._state.search_term = term or ""
        return self.compute()

    def clear(self) -> FilterResult:
        """Reset category, nutritional filter and search."""
        self._state = FilterState()
        return self.compute()

    def compute(self) -> FilterResult:
        """Apply every active predicate and group the survivors by category."""
        state = self._state
        criterion = self.active_criterion
        bounds = state.range if criterion is not None else None
        term = state.normalized_search

        groups: dict[str, list[ResultItem]] = {}
        for listing in self._catalog.listings:
            if not _passes(listing, state.active_category, criterion, bounds, term):
                continue
            highlight = criterion.highlight(listing.item) if criterion else None
            groups.setdefault(listing.item.category, []).append(
                ResultItem(
                    listing_id=listing.id, item=listing.item, highlight=highlight
                )
            )

        result_groups = tuple(
            ResultGroup(
                category=category,
                display_name=format_category_name(category),
                items=tuple(items),
            )
            for category, items in groups.items()
        )
        message = None if result_groups else self._no_results_message()
        return FilterResult(groups=result_groups, no_results_message=message)

    def _no_results_message(self) -> str:
        state = self._state
        parts: list[str] = []
        if state.active_category:
            parts.append(f"category {format_category_name(state.active_category)}")
        criterion = self.active_criterion
        if criterion is not None and state.range is not None:
            parts.append(
                f"{criterion.display_name} "
                f"{state.range.minimum}-{state.range.maximum} {criterion.unit}"
            )
        if state.normalized_search:
            parts.append(f'search "{state.search_term.strip()}"')
        if not parts:
            return "No menu items available."
        return "No items found matching " + ", ".join(parts) + "."


def _passes(
    listing: Listing,
    category: str | None,
    criterion: FilterCriterion | None,
    bounds: NutrientRange | None,
    term: str,
) -> bool:
    item = listing.item
    if category is not None and item.category != category:
        return False
    if criterion is not None and bounds is not None:
        if not criterion.matches(item, bounds.minimum, bounds.maximum):
            return False
    return not term or term in item.name.lower()
