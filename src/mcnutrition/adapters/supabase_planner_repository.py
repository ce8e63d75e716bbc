"""Supabase-backed active planner repository."""

from dataclasses import dataclass
from datetime import datetime

from supabase import Client

from mcnutrition.domain.planner import (
    PlannerRecord,
    PlannerState,
    entries_from_payload,
    entries_to_payload,
    normalize_meal_name,
)
from mcnutrition.services.planners import PlannerRepository

_USER_TABLE = "active_planners"
_SESSION_TABLE = "anonymous_planners"


@dataclass
class SupabasePlannerRepository(PlannerRepository):
    """Supabase implementation for user and anonymous-session planners."""

    client: Client

    def get_user_planner(self, user_id: str) -> PlannerRecord | None:
        return self._get(_USER_TABLE, "user_id", user_id)

    def upsert_user_planner(self, user_id: str, state: PlannerState) -> PlannerRecord:
        payload = {"user_id": user_id, **_state_row(state)}
        return self._upsert(_USER_TABLE, "user_id", payload)

    def delete_user_planner(self, user_id: str) -> None:
        self.client.table(_USER_TABLE).delete().eq("user_id", user_id).execute()

    def get_session_planner(self, session_id: str) -> PlannerRecord | None:
        return self._get(_SESSION_TABLE, "session_id", session_id)

    def upsert_session_planner(
        self, session_id: str, state: PlannerState, expires_at: datetime
    ) -> PlannerRecord:
        payload = {
            "session_id": session_id,
            **_state_row(state),
            "expires_at": expires_at.isoformat(),
        }
        return self._upsert(_SESSION_TABLE, "session_id", payload)

    def delete_session_planner(self, session_id: str) -> None:
        self.client.table(_SESSION_TABLE).delete().eq(
            "session_id", session_id
        ).execute()

    def _get(self, table: str, column: str, key: str) -> PlannerRecord | None:
        response = (
            self.client.table(table).select("*").eq(column, key).limit(1).execute()
        )
        if not response.data:
            return None
        return _parse_planner(response.data[0])

    def _upsert(
        self, table: str, conflict_column: str, payload: dict[str, object]
    ) -> PlannerRecord:
        response = (
            self.client.table(table)
            .upsert(payload, on_conflict=conflict_column)
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to save planner")
        return _parse_planner(response.data[0])


def _state_row(state: PlannerState) -> dict[str, object]:
    return {
        "items": entries_to_payload(state.entries),
        "meal_name": state.meal_name,
        "total_nutrition": state.totals.to_payload(),
    }


def _parse_planner(row: dict[str, object]) -> PlannerRecord:
    """Parse a planner row; stored totals are recomputed from the items."""
    return PlannerRecord(
        state=PlannerState(
            entries=entries_from_payload(row.get("items")),
            meal_name=normalize_meal_name(row.get("meal_name")),
        ),
        updated_at=_parse_timestamp(row.get("updated_at")),
        expires_at=_parse_timestamp(row.get("expires_at")),
    )


def _parse_timestamp(raw: object) -> datetime | None:
    if isinstance(raw, str) and raw:
        return datetime.fromisoformat(raw)
    return None
