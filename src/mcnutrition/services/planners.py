"""Server-side active planner and saved meal services."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Protocol

from mcnutrition.domain.models import Identity
from mcnutrition.domain.planner import (
    DEFAULT_MEAL_NAME,
    NutritionTotals,
    PlannerEntry,
    PlannerRecord,
    PlannerState,
    SavedMeal,
    compute_totals,
    normalize_meal_name,
)
from mcnutrition.services.errors import (
    AuthenticationRequiredError,
    NotAuthorizedError,
    NotFoundError,
    ValidationError,
)

_logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


class PlannerRepository(Protocol):
    """Persistence interface for active planners."""

    def get_user_planner(self, user_id: str) -> PlannerRecord | None:
        """Return the active planner for a user."""

    def upsert_user_planner(self, user_id: str, state: PlannerState) -> PlannerRecord:
        """Create or replace the active planner for a user."""

    def delete_user_planner(self, user_id: str) -> None:
        """Delete the active planner for a user if present."""

    def get_session_planner(self, session_id: str) -> PlannerRecord | None:
        """Return the planner for an anonymous session."""

    def upsert_session_planner(
        self, session_id: str, state: PlannerState, expires_at: datetime
    ) -> PlannerRecord:
        """Create or replace the planner for an anonymous session."""

    def delete_session_planner(self, session_id: str) -> None:
        """Delete the planner for an anonymous session if present."""


class SavedMealRepository(Protocol):
    """Persistence interface for saved meals."""

    def list_saved_meals(self, user_id: str) -> list[SavedMeal]:
        """Return saved meals for a user, newest first."""

    def get_saved_meal(self, meal_id: str) -> SavedMeal | None:
        """Return a saved meal by id."""

    def create_saved_meal(
        self,
        user_id: str,
        meal_name: str,
        entries: tuple[PlannerEntry, ...],
        totals: NutritionTotals,
    ) -> SavedMeal:
        """Persist a saved meal and return it."""

    def delete_saved_meal(self, meal_id: str) -> None:
        """Delete a saved meal by id."""


@dataclass
class PlannerRecordService:
    """Active planner persistence scoped by identity."""

    repository: PlannerRepository
    anonymous_ttl_days: int = 7
    default_meal_name: str = DEFAULT_MEAL_NAME
    clock: Callable[[], datetime] = field(default=_utcnow)

    def get(self, identity: Identity) -> PlannerRecord | None:
        """Return the planner for the identity; expired anonymous ones are absent."""
        if identity.authenticated:
            return self.repository.get_user_planner(identity.key)
        if not identity.key:
            return None
        record = self.repository.get_session_planner(identity.key)
        if record is None:
            return None
        if record.expires_at is not None and record.expires_at <= self.clock():
            _logger.info("Ignoring expired anonymous planner")
            return None
        return record

    def upsert(
        self,
        identity: Identity,
        entries: tuple[PlannerEntry, ...],
        meal_name: str | None,
    ) -> PlannerRecord:
        """Create or replace the planner for the identity."""
        state = PlannerState(
            entries=entries,
            meal_name=normalize_meal_name(meal_name, self.default_meal_name),
        )
        if identity.authenticated:
            record = self.repository.upsert_user_planner(identity.key, state)
        else:
            if not identity.key:
                raise ValidationError("Session ID required for logged-out users")
            expires_at = self.clock() + timedelta(days=self.anonymous_ttl_days)
            record = self.repository.upsert_session_planner(
                identity.key, state, expires_at
            )
        _logger.info(
            "Saved active planner with %s items (%s)", len(entries), identity.mode
        )
        return record

    def delete(self, identity: Identity) -> None:
        """Delete the planner for the identity; missing records are fine."""
        if identity.authenticated:
            self.repository.delete_user_planner(identity.key)
            return
        if not identity.key:
            raise ValidationError("Session ID required")
        self.repository.delete_session_planner(identity.key)


@dataclass
class SavedMealService:
    """Saved meal snapshots owned by authenticated users."""

    repository: SavedMealRepository
    default_meal_name: str = DEFAULT_MEAL_NAME

    def list_meals(self, identity: Identity) -> list[SavedMeal]:
        _require_user(identity)
        return self.repository.list_saved_meals(identity.key)

    def create_meal(
        self,
        identity: Identity,
        meal_name: str | None,
        entries: tuple[PlannerEntry, ...],
    ) -> SavedMeal:
        """Snapshot entries into a new saved meal; totals are recomputed."""
        _require_user(identity)
        if not isinstance(meal_name, str) or not meal_name.strip() or not entries:
            raise ValidationError("Missing required fields")
        meal = self.repository.create_saved_meal(
            identity.key,
            normalize_meal_name(meal_name, self.default_meal_name),
            entries,
            compute_totals(entries),
        )
        _logger.info("Saved meal %s with %s items", meal.id, len(entries))
        return meal

    def delete_meal(self, identity: Identity, meal_id: str) -> None:
        _require_user(identity)
        meal = self.repository.get_saved_meal(meal_id)
        if meal is None:
            raise NotFoundError("Meal not found")
        if meal.user_id != identity.key:
            raise NotAuthorizedError("Not authorized")
        self.repository.delete_saved_meal(meal_id)
        _logger.info("Deleted saved meal %s", meal_id)


def _require_user(identity: Identity) -> None:
    if not identity.authenticated:
        raise AuthenticationRequiredError("Not authenticated")
