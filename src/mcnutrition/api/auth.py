"""Request identity resolution."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import Header, Request

from mcnutrition.domain.models import Identity

if TYPE_CHECKING:
    from mcnutrition.containers import AppContainer

_BEARER_PREFIX = "bearer "


async def current_identity(
    request: Request, authorization: str | None = Header(default=None)
) -> Identity:
    """Return the verified user for a bearer token, otherwise anonymous."""
    if not authorization or not authorization.lower().startswith(_BEARER_PREFIX):
        return Identity.anonymous()
    token = authorization[len(_BEARER_PREFIX) :].strip()
    if not token:
        return Identity.anonymous()
    container: AppContainer = request.app.state.container
    return await container.token_verifier.identity(token)


def with_session(identity: Identity, session_id: str | None) -> Identity:
    """Attach the client-supplied session key to an anonymous identity."""
    if identity.authenticated:
        return identity
    return Identity.anonymous((session_id or "").strip())
