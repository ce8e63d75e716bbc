"""Supabase-backed saved meal repository."""

from dataclasses import dataclass
from datetime import datetime

from supabase import Client

from mcnutrition.domain.planner import (
    NutritionTotals,
    PlannerEntry,
    SavedMeal,
    compute_totals,
    entries_from_payload,
    entries_to_payload,
    normalize_meal_name,
)
from mcnutrition.services.planners import SavedMealRepository

_TABLE = "saved_meals"


@dataclass
class SupabaseSavedMealRepository(SavedMealRepository):
    """Supabase implementation for saved meal snapshots."""

    client: Client

    def list_saved_meals(self, user_id: str) -> list[SavedMeal]:
        response = (
            self.client.table(_TABLE)
            .select("*")
            .eq("user_id", user_id)
            .order("created_at", desc=True)
            .execute()
        )
        return [_parse_meal(row) for row in response.data or []]

    def get_saved_meal(self, meal_id: str) -> SavedMeal | None:
        response = (
            self.client.table(_TABLE).select("*").eq("id", meal_id).limit(1).execute()
        )
        if not response.data:
            return None
        return _parse_meal(response.data[0])

    def create_saved_meal(
        self,
        user_id: str,
        meal_name: str,
        entries: tuple[PlannerEntry, ...],
        totals: NutritionTotals,
    ) -> SavedMeal:
        response = (
            self.client.table(_TABLE)
            .insert(
                {
                    "user_id": user_id,
                    "meal_name": meal_name,
                    "items": entries_to_payload(entries),
                    "total_nutrition": totals.to_payload(),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create saved meal")
        return _parse_meal(response.data[0])

    def delete_saved_meal(self, meal_id: str) -> None:
        self.client.table(_TABLE).delete().eq("id", meal_id).execute()


def _parse_meal(row: dict[str, object]) -> SavedMeal:
    entries = entries_from_payload(row.get("items"))
    return SavedMeal(
        id=str(row["id"]),
        meal_name=normalize_meal_name(row.get("meal_name")),
        entries=entries,
        totals=compute_totals(entries),
        created_at=datetime.fromisoformat(str(row["created_at"])),
        user_id=str(row["user_id"]) if row.get("user_id") else None,
    )
