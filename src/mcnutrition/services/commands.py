"""Typed UI commands routed to the filter engine and planner."""

from dataclasses import dataclass

from mcnutrition.domain.menu import MenuItem
from mcnutrition.services.filters import FilterEngine, FilterResult, Handle
from mcnutrition.services.planner_sync import PlannerSync


@dataclass(frozen=True)
class SetCategory:
    category: str | None


@dataclass(frozen=True)
class SetNutritionalFilter:
    key: str | None
    minimum: int | None = None
    maximum: int | None = None


@dataclass(frozen=True)
class SetRange:
    minimum: int
    maximum: int
    handle: Handle | None = None


@dataclass(frozen=True)
class SetSearchTerm:
    term: str


@dataclass(frozen=True)
class ClearFilters:
    """Show every category with no nutritional filter or search."""


@dataclass(frozen=True)
class ToggleItem:
    entry_id: str
    item: MenuItem


@dataclass(frozen=True)
class RemoveItem:
    entry_id: str


@dataclass(frozen=True)
class ClearPlanner:
    pass


@dataclass(frozen=True)
class RenameMeal:
    name: str


FilterCommand = (
    SetCategory | SetNutritionalFilter | SetRange | SetSearchTerm | ClearFilters
)
PlannerCommand = ToggleItem | RemoveItem | ClearPlanner | RenameMeal
Command = FilterCommand | PlannerCommand


@dataclass
class CommandDispatcher:
    """Route commands from the presentation layer to their owners."""

    engine: FilterEngine
    sync: PlannerSync | None = None

    def dispatch(self, command: Command) -> FilterResult | bool | None:
        """Apply a command.

        Filter commands return the recomputed result; ``ToggleItem`` and
        ``RenameMeal`` return whether the planner changed as reported by the
        store.
        """
        match command:
            case SetCategory(category=category):
                return self.engine.set_category(category)
            case SetNutritionalFilter(key=key, minimum=minimum, maximum=maximum):
                return self.engine.set_nutritional_filter(key, minimum, maximum)
            case SetRange(minimum=minimum, maximum=maximum, handle=handle):
                return self.engine.set_range(minimum, maximum, handle)
            case SetSearchTerm(term=term):
                return self.engine.set_search_term(term)
            case ClearFilters():
                return self.engine.clear()
        sync = self.sync
        if sync is None:
            raise TypeError(f"No planner attached for {command!r}")
        match command:
            case ToggleItem(entry_id=entry_id, item=item):
                return sync.toggle(entry_id, item)
            case RemoveItem(entry_id=entry_id):
                sync.remove(entry_id)
                return None
            case ClearPlanner():
                sync.clear()
                return None
            case RenameMeal(name=name):
                return sync.rename(name)
        raise TypeError(f"Unsupported command: {command!r}")
