"""Client-side key-value storage ports."""

from dataclasses import dataclass, field
from typing import Protocol

SESSION_ID_KEY = "plannerSessionId"
LOCAL_DRAFT_KEY = "unsavedMeal"
SAVED_MEAL_LOAD_KEY = "loadMeal"
LOGIN_TRANSFER_KEY = "pendingMeal"


class ClientStorage(Protocol):
    """Browser-style storage holding JSON-compatible values."""

    def get(self, key: str) -> object | None:
        """Return a stored value if present."""

    def set(self, key: str, value: object) -> None:
        """Store a value under a key."""

    def remove(self, key: str) -> None:
        """Remove a key if present."""


@dataclass
class InMemoryStorage(ClientStorage):
    """Storage that lives as long as the page session."""

    values: dict[str, object] = field(default_factory=dict)

    def get(self, key: str) -> object | None:
        return self.values.get(key)

    def set(self, key: str, value: object) -> None:
        self.values[key] = value

    def remove(self, key: str) -> None:
        self.values.pop(key, None)
