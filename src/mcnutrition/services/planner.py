"""In-memory meal planner store."""

from collections.abc import Iterable

from mcnutrition.domain.menu import MenuItem
from mcnutrition.domain.planner import (
    DEFAULT_MEAL_NAME,
    NutritionTotals,
    PlannerEntry,
    PlannerState,
    compute_totals,
    normalize_meal_name,
)


class PlannerStore:
    """Ordered set of selected listings for the current page session."""

    def __init__(self, default_meal_name: str = DEFAULT_MEAL_NAME) -> None:
        self.default_meal_name = default_meal_name
        self._entries: list[PlannerEntry] = []
        self._meal_name = default_meal_name

    @property
    def entries(self) -> tuple[PlannerEntry, ...]:
        return tuple(self._entries)

    @property
    def meal_name(self) -> str:
        return self._meal_name

    @property
    def totals(self) -> NutritionTotals:
        return self.compute_totals()

    def __len__(self) -> int:
        return len(self._entries)

    def is_selected(self, entry_id: str) -> bool:
        return any(entry.id == entry_id for entry in self._entries)

    def toggle(self, entry_id: str, item: MenuItem) -> bool:
        """Remove the entry if present, otherwise append it.

        Returns True when the listing is now selected.
        """
        for index, entry in enumerate(self._entries):
            if entry.id == entry_id:
                del self._entries[index]
                return False
        self._entries.append(PlannerEntry(id=entry_id, item=item))
        return True

    def remove(self, entry_id: str) -> bool:
        """Remove an entry by id; returns False when it was not present."""
        before = len(self._entries)
        self._entries = [entry for entry in self._entries if entry.id != entry_id]
        return len(self._entries) != before

    def clear(self) -> None:
        """Drop every entry; the meal name is kept."""
        self._entries = []

    def rename(self, name: str) -> bool:
        """Set the meal name, falling back to the default when blank.

        Returns True when the stored name changed.
        """
        resolved = normalize_meal_name(name, self.default_meal_name)
        changed = resolved != self._meal_name
        self._meal_name = resolved
        return changed

    def compute_totals(self) -> NutritionTotals:
        return compute_totals(self._entries)

    def restore(self, entries: Iterable[PlannerEntry], meal_name: str | None) -> None:
        """Replace the whole planner, e.g. from persisted state."""
        restored: list[PlannerEntry] = []
        seen: set[str] = set()
        for entry in entries:
            if entry.id in seen:
                continue
            seen.add(entry.id)
            restored.append(entry)
        self._entries = restored
        self._meal_name = normalize_meal_name(meal_name, self.default_meal_name)

    def snapshot(self) -> PlannerState:
        """Return an immutable copy of the current planner."""
        return PlannerState(entries=tuple(self._entries), meal_name=self._meal_name)
