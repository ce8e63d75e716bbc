"""End-to-end tests for a client page session against the HTTP API."""

import asyncio
from pathlib import Path

import httpx
import pytest

from mcnutrition.adapters.planner_api_client import HttpxPlannerApiClient
from mcnutrition.api.app import create_app
from mcnutrition.client import PlannerSession, open_session
from mcnutrition.services.commands import RenameMeal, SetSearchTerm, ToggleItem
from mcnutrition.services.errors import PlannerApiError
from mcnutrition.services.planner_sync import LoadSource
from tests.conftest import (
    InMemoryMenuRepository,
    InMemoryPlannerRepository,
    sample_menu,
)


def _api_client(container) -> HttpxPlannerApiClient:  # type: ignore[no-untyped-def]
    transport = httpx.ASGITransport(app=create_app(container))
    return HttpxPlannerApiClient(
        http_client=httpx.AsyncClient(transport=transport, base_url="http://testserver")
    )


async def _open(container, state_dir: Path) -> PlannerSession:  # type: ignore[no-untyped-def]
    return await open_session(
        "http://testserver",
        state_dir,
        autosave_debounce_ms=10,
        api_client=_api_client(container),
    )


def test_anonymous_session_persists_and_restores(
    container,
    tmp_path: Path,
    menu_repository: InMemoryMenuRepository,
    planner_repository: InMemoryPlannerRepository,
) -> None:
    menu_repository.items = list(reversed(sample_menu()))

    async def first_visit() -> LoadSource:
        session = await _open(container, tmp_path)
        result = session.dispatch(SetSearchTerm("big mac"))
        assert result is not None
        listing = session.engine.catalog.group("BURGERSANDWICH")[0]
        session.dispatch(ToggleItem(listing.id, listing.item))
        session.dispatch(RenameMeal("Lunch"))
        await session.close()
        return session.load_source

    async def second_visit() -> PlannerSession:
        session = await _open(container, tmp_path)
        await session.close()
        return session

    assert asyncio.run(first_visit()) == LoadSource.EMPTY
    assert len(planner_repository.session_planners) == 1

    session = asyncio.run(second_visit())

    assert session.load_source == LoadSource.SERVER
    assert session.store.meal_name == "Lunch"
    assert [entry.item.name for entry in session.store.entries] == ["Big Mac"]
    assert session.store.totals.calories == 590


def _failing_api_client() -> HttpxPlannerApiClient:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, json={"success": False, "error": "Menu offline"})

    return HttpxPlannerApiClient(
        http_client=httpx.AsyncClient(
            transport=httpx.MockTransport(handler), base_url="http://testserver"
        )
    )


def test_failed_open_closes_created_client(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    created = _failing_api_client()
    monkeypatch.setattr(
        HttpxPlannerApiClient,
        "create",
        classmethod(lambda cls, base_url, access_token=None: created),
    )

    with pytest.raises(PlannerApiError, match="Menu offline"):
        asyncio.run(open_session("http://testserver", tmp_path))

    assert created.http_client.is_closed


def test_failed_open_leaves_injected_client_open(tmp_path: Path) -> None:
    injected = _failing_api_client()

    with pytest.raises(PlannerApiError):
        asyncio.run(open_session("http://testserver", tmp_path, api_client=injected))

    assert not injected.http_client.is_closed
    asyncio.run(injected.close())
