"""Tests for configuration parsing."""

import pytest

from mcnutrition.config import Settings, parse_cors_origins


@pytest.mark.parametrize("raw", [None, "", "  ", "*"])
def test_cors_allows_everything_by_default(raw: str | None) -> None:
    assert parse_cors_origins(raw) == ["*"]


def test_cors_origin_list_is_trimmed() -> None:
    raw = "https://menu.example.com/, https://admin.example.com ,,"

    assert parse_cors_origins(raw) == [
        "https://menu.example.com",
        "https://admin.example.com",
    ]


def test_settings_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SUPABASE_URL", "https://example.supabase.co")
    monkeypatch.setenv("SUPABASE_SERVICE_KEY", "key")
    monkeypatch.setenv("ADMIN_TOKEN", "admin")
    monkeypatch.setenv("AUTH0_DOMAIN", "example.us.auth0.com")
    monkeypatch.setenv("AUTH0_AUDIENCE", "https://api.example.com")
    monkeypatch.setenv("AUTOSAVE_DEBOUNCE_MS", "250")

    settings = Settings(_env_file=None)

    assert settings.autosave_debounce_ms == 250
    assert settings.anonymous_planner_ttl_days == 7
    assert settings.delete_anonymous_planner_on_login is False
    assert settings.default_meal_name == "My Meal Planner"
