"""Domain models for the meal planner."""

from collections.abc import Iterable
from dataclasses import dataclass, fields
from datetime import datetime

from mcnutrition.domain.menu import MenuItem, parse_nutrient

DEFAULT_MEAL_NAME = "My Meal Planner"


@dataclass(frozen=True)
class PlannerEntry:
    """A selected listing in the planner."""

    id: str
    item: MenuItem


@dataclass(frozen=True)
class NutritionTotals:
    """Field-wise nutrition sums across planner entries."""

    calories: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0
    saturated_fat: float = 0.0
    trans_fat: float = 0.0
    cholesterol: float = 0.0
    sodium: float = 0.0
    fiber: float = 0.0
    sugar: float = 0.0

    def to_payload(self) -> dict[str, float]:
        return {
            "calories": self.calories,
            "protein": self.protein,
            "carbs": self.carbs,
            "fat": self.fat,
            "saturatedFat": self.saturated_fat,
            "transFat": self.trans_fat,
            "cholesterol": self.cholesterol,
            "sodium": self.sodium,
            "fiber": self.fiber,
            "sugar": self.sugar,
        }


@dataclass(frozen=True)
class PlannerState:
    """Entries and meal name; totals are always derived from entries."""

    entries: tuple[PlannerEntry, ...] = ()
    meal_name: str = DEFAULT_MEAL_NAME

    @property
    def totals(self) -> NutritionTotals:
        return compute_totals(self.entries)


@dataclass(frozen=True)
class PlannerRecord:
    """Server-side persisted planner for one identity."""

    state: PlannerState
    updated_at: datetime | None = None
    expires_at: datetime | None = None


@dataclass(frozen=True)
class SavedMeal:
    """Immutable snapshot of a planner saved by a user."""

    id: str
    meal_name: str
    entries: tuple[PlannerEntry, ...]
    totals: NutritionTotals
    created_at: datetime
    user_id: str | None = None


def compute_totals(entries: Iterable[PlannerEntry]) -> NutritionTotals:
    """Sum every nutrition field; malformed values contribute 0."""
    sums = {field.name: 0.0 for field in fields(NutritionTotals)}
    for entry in entries:
        for name in sums:
            sums[name] += parse_nutrient(getattr(entry.item, name))
    return NutritionTotals(**sums)


def entry_to_payload(entry: PlannerEntry) -> dict[str, object]:
    """Serialize an entry in the stored `{id, data}` shape."""
    return {"id": entry.id, "data": entry.item.to_record()}


def entries_to_payload(entries: Iterable[PlannerEntry]) -> list[dict[str, object]]:
    return [entry_to_payload(entry) for entry in entries]


def entries_from_payload(raw: object) -> tuple[PlannerEntry, ...]:
    """Parse stored entries, skipping malformed rows and duplicate ids."""
    if not isinstance(raw, list):
        return ()
    entries: list[PlannerEntry] = []
    seen: set[str] = set()
    for row in raw:
        if not isinstance(row, dict):
            continue
        entry_id = row.get("id")
        data = row.get("data")
        if not isinstance(entry_id, str) or not isinstance(data, dict):
            continue
        if entry_id in seen:
            continue
        seen.add(entry_id)
        entries.append(PlannerEntry(id=entry_id, item=MenuItem.from_record(data)))
    return tuple(entries)


def state_to_payload(state: PlannerState) -> dict[str, object]:
    """Serialize a planner state in the API shape."""
    return {
        "items": entries_to_payload(state.entries),
        "mealName": state.meal_name,
        "totalNutrition": state.totals.to_payload(),
    }


def state_from_payload(
    payload: dict[str, object], default_name: str = DEFAULT_MEAL_NAME
) -> PlannerState:
    """Parse a planner state from the API shape; stored totals are ignored."""
    return PlannerState(
        entries=entries_from_payload(payload.get("items")),
        meal_name=normalize_meal_name(payload.get("mealName"), default_name),
    )


def saved_meal_to_payload(meal: SavedMeal) -> dict[str, object]:
    return {
        "id": meal.id,
        "mealName": meal.meal_name,
        "items": entries_to_payload(meal.entries),
        "totalNutrition": meal.totals.to_payload(),
        "createdAt": meal.created_at.isoformat(),
    }


def saved_meal_from_payload(payload: dict[str, object]) -> SavedMeal:
    entries = entries_from_payload(payload.get("items"))
    created_raw = payload.get("createdAt")
    user_id = payload.get("userId")
    return SavedMeal(
        id=str(payload.get("id", "")),
        meal_name=normalize_meal_name(payload.get("mealName")),
        entries=entries,
        totals=compute_totals(entries),
        created_at=datetime.fromisoformat(str(created_raw)),
        user_id=str(user_id) if user_id else None,
    )


def normalize_meal_name(raw: object, default_name: str = DEFAULT_MEAL_NAME) -> str:
    """Return a trimmed meal name, falling back to the default when blank."""
    if not isinstance(raw, str):
        return default_name
    cleaned = raw.strip()
    return cleaned or default_name
