"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from mcnutrition.adapters.auth0_verifier import Auth0TokenVerifier, TokenVerifier
from mcnutrition.adapters.supabase_menu_repository import SupabaseMenuRepository
from mcnutrition.adapters.supabase_planner_repository import (
    SupabasePlannerRepository,
)
from mcnutrition.adapters.supabase_saved_meal_repository import (
    SupabaseSavedMealRepository,
)
from mcnutrition.config import Settings
from mcnutrition.services.catalog import MenuService
from mcnutrition.services.planners import PlannerRecordService, SavedMealService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    menu_service: MenuService
    planner_service: PlannerRecordService
    saved_meal_service: SavedMealService
    token_verifier: TokenVerifier
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    menu_service = MenuService(SupabaseMenuRepository(supabase_client))
    planner_service = PlannerRecordService(
        repository=SupabasePlannerRepository(supabase_client),
        anonymous_ttl_days=resolved_settings.anonymous_planner_ttl_days,
        default_meal_name=resolved_settings.default_meal_name,
    )
    saved_meal_service = SavedMealService(
        repository=SupabaseSavedMealRepository(supabase_client),
        default_meal_name=resolved_settings.default_meal_name,
    )
    token_verifier = Auth0TokenVerifier.create(
        domain=resolved_settings.auth0_domain,
        audience=resolved_settings.auth0_audience,
    )

    async def close_resources() -> None:
        await token_verifier.close()

    return AppContainer(
        settings=resolved_settings,
        menu_service=menu_service,
        planner_service=planner_service,
        saved_meal_service=saved_meal_service,
        token_verifier=token_verifier,
        close_resources=close_resources,
    )
