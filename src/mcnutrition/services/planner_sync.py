"""Keeps the in-memory planner eventually consistent with the server."""

import logging
import secrets
import string
import time
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from enum import StrEnum
from typing import Protocol

from mcnutrition.domain.menu import MenuItem
from mcnutrition.domain.models import Identity
from mcnutrition.domain.planner import (
    PlannerState,
    SavedMeal,
    entries_from_payload,
    entries_to_payload,
    saved_meal_to_payload,
)
from mcnutrition.services.debounce import CoalescingDebouncer
from mcnutrition.services.errors import AuthenticationRequiredError, ValidationError
from mcnutrition.services.planner import PlannerStore
from mcnutrition.services.storage import (
    LOCAL_DRAFT_KEY,
    LOGIN_TRANSFER_KEY,
    SAVED_MEAL_LOAD_KEY,
    SESSION_ID_KEY,
    ClientStorage,
)

_logger = logging.getLogger(__name__)

_BASE36 = string.digits + string.ascii_lowercase


class PlannerGateway(Protocol):
    """Persistence collaborator for planners and saved meals."""

    async def get_planner(self, identity: Identity) -> PlannerState | None:
        """Return the persisted planner for the identity, if any."""

    async def upsert_planner(self, identity: Identity, state: PlannerState) -> None:
        """Create or replace the persisted planner for the identity."""

    async def delete_planner(self, identity: Identity) -> None:
        """Delete the persisted planner for the identity."""

    async def list_saved_meals(self, identity: Identity) -> list[SavedMeal]:
        """Return saved meals, newest first."""

    async def create_saved_meal(
        self, identity: Identity, state: PlannerState
    ) -> SavedMeal:
        """Persist a snapshot of the planner as a saved meal."""

    async def delete_saved_meal(self, identity: Identity, meal_id: str) -> None:
        """Delete a saved meal owned by the identity."""


class IdentityProvider(Protocol):
    """Identity collaborator."""

    async def current_identity(self) -> Identity:
        """Return the current user, or an anonymous identity."""


class LoadSource(StrEnum):
    """Where the planner state came from on startup."""

    SAVED_MEAL = "saved_meal"
    LOGIN_TRANSFER = "login_transfer"
    SERVER = "server"
    LOCAL_DRAFT = "local_draft"
    EMPTY = "empty"


def generate_session_key(now: float | None = None) -> str:
    """Return a time-seeded random anonymous session key."""
    millis = int((time.time() if now is None else now) * 1000)
    suffix = "".join(secrets.choice(_BASE36) for _ in range(13))
    return f"sess_{millis}_{suffix}"


class PlannerSync:
    """Applies planner mutations locally and persists them in the background."""

    def __init__(
        self,
        store: PlannerStore,
        gateway: PlannerGateway,
        identity_provider: IdentityProvider,
        session_storage: ClientStorage,
        local_storage: ClientStorage,
        debounce_seconds: float = 0.5,
        local_draft_max_age: timedelta = timedelta(days=7),
        delete_anonymous_planner_on_login: bool = False,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.store = store
        self.gateway = gateway
        self.identity_provider = identity_provider
        self.session_storage = session_storage
        self.local_storage = local_storage
        self.local_draft_max_age = local_draft_max_age
        self.delete_anonymous_planner_on_login = delete_anonymous_planner_on_login
        self._clock = clock or (lambda: datetime.now(UTC))
        self._debouncer = CoalescingDebouncer(debounce_seconds)

    @property
    def save_pending(self) -> bool:
        return self._debouncer.pending

    def session_key(self) -> str:
        """Return the anonymous session key, generating it on first use."""
        stored = self.local_storage.get(SESSION_ID_KEY)
        if isinstance(stored, str) and stored:
            return stored
        key = generate_session_key(self._clock().timestamp())
        self.local_storage.set(SESSION_ID_KEY, key)
        return key

    async def identity(self) -> Identity:
        """Return the current identity with the session key filled in."""
        identity = await self.identity_provider.current_identity()
        if identity.authenticated:
            return identity
        return Identity.anonymous(self.session_key())

    def toggle(self, entry_id: str, item: MenuItem) -> bool:
        selected = self.store.toggle(entry_id, item)
        self._changed()
        return selected

    def remove(self, entry_id: str) -> None:
        self.store.remove(entry_id)
        self._changed()

    def clear(self) -> None:
        self.store.clear()
        self._changed()

    def rename(self, name: str) -> bool:
        changed = self.store.rename(name)
        if changed:
            self._changed()
        return changed

    def _changed(self) -> None:
        self._write_local_draft()
        self._debouncer.arm(self._auto_save)

    def _write_local_draft(self) -> None:
        self.local_storage.set(
            LOCAL_DRAFT_KEY,
            {
                "items": entries_to_payload(self.store.entries),
                "mealName": self.store.meal_name,
                "timestamp": self._clock().isoformat(),
            },
        )

    async def _auto_save(self) -> None:
        state = self.store.snapshot()
        try:
            identity = await self.identity()
            await self.gateway.upsert_planner(identity, state)
        except Exception:
            _logger.exception("Auto-save of planner failed")
            return
        _logger.info(
            "Auto-saved planner with %s items (%s)", len(state.entries), identity.mode
        )

    async def flush(self) -> None:
        """Run a pending auto-save now."""
        await self._debouncer.flush()

    async def close(self) -> None:
        """Flush pending work and wait for in-flight saves."""
        await self._debouncer.flush()
        await self._debouncer.join()

    async def load(self) -> LoadSource:
        """Restore planner state on startup; the first available source wins."""
        if self._load_saved_meal_transfer():
            return LoadSource.SAVED_MEAL
        if await self._load_login_transfer():
            return LoadSource.LOGIN_TRANSFER
        if await self._load_from_server():
            return LoadSource.SERVER
        if self._load_local_draft():
            return LoadSource.LOCAL_DRAFT
        self.store.restore((), None)
        return LoadSource.EMPTY

    def _load_saved_meal_transfer(self) -> bool:
        payload = self.session_storage.get(SAVED_MEAL_LOAD_KEY)
        if not isinstance(payload, dict):
            return False
        self.store.restore(
            entries_from_payload(payload.get("items")), payload.get("mealName")
        )
        self.session_storage.remove(SAVED_MEAL_LOAD_KEY)
        self._changed()
        _logger.info("Loaded saved meal %r into planner", self.store.meal_name)
        return True

    async def _load_login_transfer(self) -> bool:
        payload = self.session_storage.get(LOGIN_TRANSFER_KEY)
        if not isinstance(payload, dict):
            return False
        self.store.restore(
            entries_from_payload(payload.get("items")), payload.get("mealName")
        )
        # Applied at most once.
        self.session_storage.remove(LOGIN_TRANSFER_KEY)
        self._write_local_draft()
        state = self.store.snapshot()
        save_requested = bool(payload.get("saveRequested")) and bool(state.entries)
        try:
            identity = await self.identity()
            await self.gateway.upsert_planner(identity, state)
            if identity.authenticated:
                if save_requested:
                    await self.gateway.create_saved_meal(identity, state)
                if self.delete_anonymous_planner_on_login:
                    await self._delete_anonymous_planner()
            elif save_requested:
                _logger.info("Skipped requested meal save: still logged out")
        except Exception:
            _logger.exception("Failed to migrate planner after login")
            self._debouncer.arm(self._auto_save)
            return True
        _logger.info("Migrated planner after login (%s)", identity.mode)
        return True

    async def _delete_anonymous_planner(self) -> None:
        stored = self.local_storage.get(SESSION_ID_KEY)
        if not isinstance(stored, str) or not stored:
            return
        await self.gateway.delete_planner(Identity.anonymous(stored))
        _logger.info("Deleted anonymous planner after login")

    async def _load_from_server(self) -> bool:
        try:
            identity = await self.identity()
            state = await self.gateway.get_planner(identity)
        except Exception:
            _logger.exception("Failed to load planner from server")
            return False
        if state is None:
            return False
        self.store.restore(state.entries, state.meal_name)
        self._write_local_draft()
        return True

    def _load_local_draft(self) -> bool:
        payload = self.local_storage.get(LOCAL_DRAFT_KEY)
        if not isinstance(payload, dict):
            return False
        entries = entries_from_payload(payload.get("items"))
        if not entries:
            return False
        try:
            saved_at = datetime.fromisoformat(str(payload.get("timestamp")))
        except ValueError:
            return False
        if saved_at.tzinfo is None:
            saved_at = saved_at.replace(tzinfo=UTC)
        if self._clock() - saved_at >= self.local_draft_max_age:
            return False
        self.store.restore(entries, payload.get("mealName"))
        _logger.info("Restored unsaved planner draft with %s items", len(entries))
        return True

    async def save_meal(self) -> SavedMeal:
        """Snapshot the planner into a new saved meal."""
        if not self.store.entries:
            raise ValidationError("Please add items to your meal before saving.")
        identity = await self.identity()
        if not identity.authenticated:
            self.stage_login_transfer(save_requested=True)
            raise AuthenticationRequiredError("Please log in to save your meal.")
        meal = await self.gateway.create_saved_meal(identity, self.store.snapshot())
        _logger.info("Saved meal %s", meal.id)
        return meal

    def stage_login_transfer(self, save_requested: bool = False) -> None:
        """Keep the planner across the identity provider redirect."""
        self.session_storage.set(
            LOGIN_TRANSFER_KEY,
            {
                "items": entries_to_payload(self.store.entries),
                "mealName": self.store.meal_name,
                "saveRequested": save_requested,
            },
        )

    def stage_saved_meal_load(self, meal: SavedMeal) -> None:
        """Queue a saved meal to replace the planner on the next load."""
        self.session_storage.set(SAVED_MEAL_LOAD_KEY, saved_meal_to_payload(meal))

    async def list_saved_meals(self) -> list[SavedMeal]:
        identity = await self.identity()
        if not identity.authenticated:
            raise AuthenticationRequiredError("Please log in to view saved meals.")
        return await self.gateway.list_saved_meals(identity)

    async def delete_saved_meal(self, meal_id: str) -> None:
        identity = await self.identity()
        if not identity.authenticated:
            raise AuthenticationRequiredError("Please log in to delete saved meals.")
        await self.gateway.delete_saved_meal(identity, meal_id)
