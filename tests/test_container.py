"""Tests for container wiring."""

import asyncio

from mcnutrition.adapters.auth0_verifier import Auth0TokenVerifier
from mcnutrition.containers import build_container


def test_build_container_creates_services(settings) -> None:
    container = build_container(settings)

    assert container.menu_service is not None
    assert container.planner_service.anonymous_ttl_days == 7
    assert isinstance(container.token_verifier, Auth0TokenVerifier)
    assert container.token_verifier.issuer == "https://example.us.auth0.com/"
    asyncio.run(container.close_resources())
