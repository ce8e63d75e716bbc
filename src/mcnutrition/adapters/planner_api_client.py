"""HTTP client for the planner API."""

from dataclasses import dataclass

import httpx

from mcnutrition.domain.menu import MenuItem
from mcnutrition.domain.models import Identity
from mcnutrition.domain.planner import (
    PlannerState,
    SavedMeal,
    saved_meal_from_payload,
    state_from_payload,
    state_to_payload,
)
from mcnutrition.services.errors import PlannerApiError
from mcnutrition.services.planner_sync import IdentityProvider, PlannerGateway


@dataclass
class HttpxPlannerApiClient(PlannerGateway, IdentityProvider):
    """Planner gateway and identity provider talking to the HTTP API."""

    http_client: httpx.AsyncClient
    access_token: str | None = None

    @classmethod
    def create(
        cls, base_url: str, access_token: str | None = None
    ) -> "HttpxPlannerApiClient":
        """Create an API client with a managed httpx session."""
        return cls(
            http_client=httpx.AsyncClient(base_url=base_url, timeout=10),
            access_token=access_token,
        )

    async def current_identity(self) -> Identity:
        if not self.access_token:
            return Identity.anonymous()
        response = await self.http_client.get(
            "/api/user", headers=self._auth_headers()
        )
        data = _json_or_raise(response)
        if not data.get("isAuthenticated") or not data.get("sub"):
            return Identity.anonymous()
        return Identity.user(
            str(data["sub"]), display_name=data.get("name"), email=data.get("email")
        )

    async def list_menu_items(self) -> list[MenuItem]:
        response = await self.http_client.get("/data")
        data = _json_or_raise(response)
        return [MenuItem.from_record(row) for row in data]

    async def get_planner(self, identity: Identity) -> PlannerState | None:
        response = await self.http_client.get(
            "/active-planner",
            params=_session_params(identity),
            headers=self._headers(identity),
        )
        planner = _json_or_raise(response).get("planner")
        if not isinstance(planner, dict):
            return None
        return state_from_payload(planner)

    async def upsert_planner(self, identity: Identity, state: PlannerState) -> None:
        payload = state_to_payload(state)
        payload.update(_session_params(identity))
        response = await self.http_client.post(
            "/active-planner", json=payload, headers=self._headers(identity)
        )
        _json_or_raise(response)

    async def delete_planner(self, identity: Identity) -> None:
        response = await self.http_client.delete(
            "/active-planner",
            params=_session_params(identity),
            headers=self._headers(identity),
        )
        _json_or_raise(response)

    async def list_saved_meals(self, identity: Identity) -> list[SavedMeal]:
        response = await self.http_client.get(
            "/saved-meals", headers=self._headers(identity)
        )
        meals = _json_or_raise(response).get("meals") or []
        return [saved_meal_from_payload(meal) for meal in meals]

    async def create_saved_meal(
        self, identity: Identity, state: PlannerState
    ) -> SavedMeal:
        response = await self.http_client.post(
            "/saved-meals",
            json=state_to_payload(state),
            headers=self._headers(identity),
        )
        return saved_meal_from_payload(_json_or_raise(response)["meal"])

    async def delete_saved_meal(self, identity: Identity, meal_id: str) -> None:
        response = await self.http_client.delete(
            f"/saved-meals/{meal_id}", headers=self._headers(identity)
        )
        _json_or_raise(response)

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

    def _auth_headers(self) -> dict[str, str]:
        if not self.access_token:
            return {}
        return {"Authorization": f"Bearer {self.access_token}"}

    def _headers(self, identity: Identity) -> dict[str, str]:
        return self._auth_headers() if identity.authenticated else {}


def _session_params(identity: Identity) -> dict[str, str]:
    if identity.authenticated or not identity.key:
        return {}
    return {"sessionId": identity.key}


def _json_or_raise(response: httpx.Response):  # type: ignore[no-untyped-def]
    """Return the decoded body, raising PlannerApiError on error statuses."""
    if response.is_success:
        return response.json()
    message = f"Request failed with status {response.status_code}"
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and isinstance(body.get("error"), str):
        message = body["error"]
    raise PlannerApiError(response.status_code, message)
