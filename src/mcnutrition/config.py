"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

from mcnutrition.domain.planner import DEFAULT_MEAL_NAME

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    admin_token: str
    auth0_domain: str
    auth0_audience: str
    auth0_client_id: str | None = None
    cors_allowed_origins: str = "*"
    autosave_debounce_ms: int = 500
    anonymous_planner_ttl_days: int = 7
    local_draft_max_age_days: int = 7
    delete_anonymous_planner_on_login: bool = False
    default_meal_name: str = DEFAULT_MEAL_NAME
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_cors_origins(raw: str | None) -> list[str]:
    """Parse allowed CORS origins from env; `*` or empty allows every origin."""
    if raw is None:
        return ["*"]
    cleaned = raw.strip()
    if cleaned in {"", "*"}:
        return ["*"]
    origins = [chunk.strip().rstrip("/") for chunk in cleaned.split(",")]
    return [origin for origin in origins if origin] or ["*"]
