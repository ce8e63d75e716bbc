"""Client-side page session wiring."""

import logging
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path

from mcnutrition.adapters.file_storage import JsonFileStorage
from mcnutrition.adapters.planner_api_client import HttpxPlannerApiClient
from mcnutrition.domain.planner import DEFAULT_MEAL_NAME
from mcnutrition.services.commands import Command, CommandDispatcher
from mcnutrition.services.filters import FilterEngine, FilterResult
from mcnutrition.services.planner import PlannerStore
from mcnutrition.services.planner_sync import LoadSource, PlannerSync
from mcnutrition.services.storage import ClientStorage, InMemoryStorage

_logger = logging.getLogger(__name__)


@dataclass
class PlannerSession:
    """Owned filter, planner and sync instances for one page session."""

    engine: FilterEngine
    store: PlannerStore
    sync: PlannerSync
    dispatcher: CommandDispatcher
    api_client: HttpxPlannerApiClient
    load_source: LoadSource

    def dispatch(self, command: Command) -> FilterResult | bool | None:
        return self.dispatcher.dispatch(command)

    async def close(self) -> None:
        """Flush the pending save and release the HTTP session."""
        await self.sync.close()
        await self.api_client.close()


async def open_session(  # noqa: PLR0913
    base_url: str,
    state_dir: Path,
    access_token: str | None = None,
    session_storage: ClientStorage | None = None,
    autosave_debounce_ms: int = 500,
    local_draft_max_age_days: int = 7,
    delete_anonymous_planner_on_login: bool = False,
    default_meal_name: str = DEFAULT_MEAL_NAME,
    api_client: HttpxPlannerApiClient | None = None,
) -> PlannerSession:
    """Fetch the menu, restore the planner and return a ready session."""
    owns_client = api_client is None
    if api_client is None:
        api_client = HttpxPlannerApiClient.create(base_url, access_token=access_token)
    try:
        engine = FilterEngine(await api_client.list_menu_items())
        store = PlannerStore(default_meal_name)
        sync = PlannerSync(
            store=store,
            gateway=api_client,
            identity_provider=api_client,
            session_storage=session_storage or InMemoryStorage(),
            local_storage=JsonFileStorage(state_dir / "local_storage.json"),
            debounce_seconds=autosave_debounce_ms / 1000,
            local_draft_max_age=timedelta(days=local_draft_max_age_days),
            delete_anonymous_planner_on_login=delete_anonymous_planner_on_login,
        )
        load_source = await sync.load()
    except BaseException:
        if owns_client:
            await api_client.close()
        raise
    _logger.info(
        "Opened planner session with %s menu items (%s)",
        len(engine.catalog),
        load_source,
    )
    return PlannerSession(
        engine=engine,
        store=store,
        sync=sync,
        dispatcher=CommandDispatcher(engine, sync),
        api_client=api_client,
        load_source=load_source,
    )
