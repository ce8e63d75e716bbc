"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from mcnutrition.api.admin import router as admin_router
from mcnutrition.api.auth import current_identity, with_session
from mcnutrition.api.models import PlannerPayload, SavedMealPayload
from mcnutrition.app_logging import configure_logging
from mcnutrition.config import parse_cors_origins
from mcnutrition.containers import AppContainer
from mcnutrition.domain.models import Identity
from mcnutrition.domain.planner import (
    PlannerRecord,
    entries_from_payload,
    saved_meal_to_payload,
    state_to_payload,
)
from mcnutrition.services.commands import (
    CommandDispatcher,
    SetCategory,
    SetNutritionalFilter,
    SetSearchTerm,
)
from mcnutrition.services.display import parse_item_name
from mcnutrition.services.errors import McNutritionError, ValidationError
from mcnutrition.services.filters import FilterEngine, FilterResult, ResultItem


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.add_middleware(
        CORSMiddleware,
        allow_origins=parse_cors_origins(container.settings.cors_allowed_origins),
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Accept", "Authorization", "X-Admin-Token"],
    )
    app.include_router(admin_router)

    @app.exception_handler(McNutritionError)
    async def handle_app_error(request: Request, exc: McNutritionError) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "error": exc.message},
        )

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("%s %s failed", request.method, request.url.path)
        content: dict[str, object] = {
            "success": False,
            "error": "Internal server error",
        }
        if request.app.state.container.settings.environment == "local":
            content["details"] = str(exc)
        return JSONResponse(status_code=500, content=content)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/data")
    async def list_menu(request: Request) -> list[dict[str, object]]:
        """Return every menu record, newest first."""
        state_container: AppContainer = request.app.state.container
        return [item.to_record() for item in state_container.menu_service.list_items()]

    @app.get("/search")
    async def search_menu(request: Request, terms: str = "") -> list[dict[str, object]]:
        """Return up to ten records whose name contains the terms."""
        state_container: AppContainer = request.app.state.container
        return [item.to_record() for item in state_container.menu_service.search(terms)]

    @app.get("/catalog")
    async def catalog(  # noqa: PLR0913
        request: Request,
        category: str | None = None,
        filter: str | None = None,  # noqa: A002
        min: int | None = None,  # noqa: A002
        max: int | None = None,  # noqa: A002
        search: str = "",
    ) -> dict[str, object]:
        """Return the menu grouped by category with the given filters applied."""
        state_container: AppContainer = request.app.state.container
        dispatcher = CommandDispatcher(
            FilterEngine(state_container.menu_service.catalog())
        )
        dispatcher.dispatch(SetCategory(category))
        if filter:
            dispatcher.dispatch(SetNutritionalFilter(filter, min, max))
        dispatcher.dispatch(SetSearchTerm(search))
        engine = dispatcher.engine
        return _catalog_payload(engine.compute(), engine)

    @app.get("/api/user")
    async def user(identity: Identity = Depends(current_identity)) -> dict[str, object]:
        """Return the current identity summary."""
        if not identity.authenticated:
            return {"isAuthenticated": False}
        return {
            "isAuthenticated": True,
            "sub": identity.key,
            "name": identity.display_name,
            "email": identity.email,
        }

    @app.get("/active-planner")
    async def get_active_planner(
        request: Request,
        sessionId: str | None = None,  # noqa: N803
        identity: Identity = Depends(current_identity),
    ) -> dict[str, object]:
        """Return the persisted planner for the user or anonymous session."""
        state_container: AppContainer = request.app.state.container
        resolved = with_session(identity, sessionId)
        record = state_container.planner_service.get(resolved)
        return {
            "success": True,
            "planner": _planner_payload(record) if record else None,
            "authenticated": resolved.authenticated,
        }

    @app.post("/active-planner")
    async def save_active_planner(
        payload: PlannerPayload,
        request: Request,
        identity: Identity = Depends(current_identity),
    ) -> dict[str, object]:
        """Create or replace the persisted planner."""
        state_container: AppContainer = request.app.state.container
        if payload.items is None or not payload.meal_name:
            raise ValidationError("Missing required fields")
        resolved = with_session(identity, payload.session_id)
        record = state_container.planner_service.upsert(
            resolved, entries_from_payload(payload.items), payload.meal_name
        )
        return {
            "success": True,
            "planner": _planner_payload(record),
            "authenticated": resolved.authenticated,
        }

    @app.delete("/active-planner")
    async def clear_active_planner(
        request: Request,
        sessionId: str | None = None,  # noqa: N803
        identity: Identity = Depends(current_identity),
    ) -> dict[str, object]:
        """Delete the persisted planner."""
        state_container: AppContainer = request.app.state.container
        resolved = with_session(identity, sessionId)
        state_container.planner_service.delete(resolved)
        return {"success": True, "authenticated": resolved.authenticated}

    @app.get("/saved-meals")
    async def list_saved_meals(
        request: Request, identity: Identity = Depends(current_identity)
    ) -> dict[str, object]:
        """Return the user's saved meals, newest first."""
        state_container: AppContainer = request.app.state.container
        meals = state_container.saved_meal_service.list_meals(identity)
        return {"success": True, "meals": [saved_meal_to_payload(m) for m in meals]}

    @app.post("/saved-meals")
    async def create_saved_meal(
        payload: SavedMealPayload,
        request: Request,
        identity: Identity = Depends(current_identity),
    ) -> dict[str, object]:
        """Snapshot the submitted planner as a saved meal."""
        state_container: AppContainer = request.app.state.container
        meal = state_container.saved_meal_service.create_meal(
            identity, payload.meal_name, entries_from_payload(payload.items)
        )
        return {"success": True, "meal": saved_meal_to_payload(meal)}

    @app.delete("/saved-meals/{meal_id}")
    async def delete_saved_meal(
        meal_id: str, request: Request, identity: Identity = Depends(current_identity)
    ) -> dict[str, object]:
        """Delete one of the user's saved meals."""
        state_container: AppContainer = request.app.state.container
        state_container.saved_meal_service.delete_meal(identity, meal_id)
        return {"success": True}

    return app


def _planner_payload(record: PlannerRecord) -> dict[str, object]:
    payload = state_to_payload(record.state)
    payload["updatedAt"] = record.updated_at.isoformat() if record.updated_at else None
    payload["expiresAt"] = record.expires_at.isoformat() if record.expires_at else None
    return payload


def _catalog_payload(result: FilterResult, engine: FilterEngine) -> dict[str, object]:
    state = engine.state
    return {
        "filters": {
            "category": state.active_category,
            "filter": state.active_filter,
            "min": state.range.minimum if state.range else None,
            "max": state.range.maximum if state.range else None,
            "search": state.search_term,
        },
        "categories": [
            {"key": summary.key, "displayName": summary.display_name}
            for summary in engine.catalog.categories()
        ],
        "empty": result.empty,
        "count": result.count,
        "noResultsMessage": result.no_results_message,
        "sections": [
            {
                "category": group.category,
                "displayName": group.display_name,
                "count": len(group.items),
                "items": [_result_item_payload(entry) for entry in group.items],
            }
            for group in result.groups
        ],
    }


def _result_item_payload(entry: ResultItem) -> dict[str, object]:
    display = parse_item_name(entry.item.name, entry.item.category)
    highlight = None
    if entry.highlight is not None:
        highlight = {
            "criterion": entry.highlight.criterion,
            "value": entry.highlight.value,
            "label": entry.highlight.label,
        }
    return {
        "id": entry.listing_id,
        "name": display.name,
        "quantity": display.quantity,
        "highlight": highlight,
        "item": entry.item.to_record(),
    }
