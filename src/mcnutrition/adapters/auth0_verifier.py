"""Auth0 access token verification."""

import logging
from dataclasses import dataclass, field
from typing import Protocol

import httpx
import jwt
from jwt import PyJWK
from jwt.exceptions import ExpiredSignatureError, InvalidTokenError

from mcnutrition.domain.models import Identity
from mcnutrition.services.cache import Cache, InMemoryCache
from mcnutrition.services.errors import AuthenticationRequiredError

_logger = logging.getLogger(__name__)

JWKS_TTL_SECONDS = 3600


class TokenVerifier(Protocol):
    """Bearer token verification interface."""

    async def identity(self, token: str) -> Identity:
        """Return the authenticated identity for a bearer token."""


@dataclass
class Auth0TokenVerifier(TokenVerifier):
    """Verifies RS256 bearer tokens against the tenant's published JWKS."""

    domain: str
    audience: str
    http_client: httpx.AsyncClient
    cache: Cache = field(default_factory=InMemoryCache)

    @classmethod
    def create(cls, domain: str, audience: str) -> "Auth0TokenVerifier":
        """Create a verifier with a managed httpx session."""
        return cls(domain=domain, audience=audience, http_client=httpx.AsyncClient())

    @property
    def issuer(self) -> str:
        return f"https://{self.domain}/"

    async def verify(self, token: str) -> dict[str, object]:
        """Return the token claims or raise AuthenticationRequiredError."""
        try:
            header = jwt.get_unverified_header(token)
        except InvalidTokenError as exc:
            raise AuthenticationRequiredError("Invalid token") from exc
        kid = header.get("kid")
        if not kid:
            raise AuthenticationRequiredError("Token header missing 'kid'")

        key_data = self.cache.get(_cache_key(kid))
        if key_data is None:
            await self._refresh_jwks()
            key_data = self.cache.get(_cache_key(kid))
        if not isinstance(key_data, dict):
            raise AuthenticationRequiredError("Signing key not found")

        try:
            return jwt.decode(
                token,
                PyJWK.from_dict(key_data).key,
                algorithms=["RS256"],
                audience=self.audience,
                issuer=self.issuer,
            )
        except ExpiredSignatureError as exc:
            raise AuthenticationRequiredError("Token has expired") from exc
        except InvalidTokenError as exc:
            _logger.info("Rejected bearer token: %s", exc)
            raise AuthenticationRequiredError("Invalid token") from exc

    async def identity(self, token: str) -> Identity:
        """Verify the token and build the authenticated identity."""
        return identity_from_claims(await self.verify(token))

    async def _refresh_jwks(self) -> None:
        url = f"https://{self.domain}/.well-known/jwks.json"
        try:
            response = await self.http_client.get(url, timeout=5)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            _logger.warning("Failed to fetch JWKS from %s: %s", url, exc)
            raise AuthenticationRequiredError("Unable to verify token") from exc
        for key in response.json().get("keys", []):
            kid = key.get("kid")
            if kid:
                self.cache.set(_cache_key(kid), key, JWKS_TTL_SECONDS)

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()


def identity_from_claims(claims: dict[str, object]) -> Identity:
    """Build an identity from verified token claims."""
    sub = claims.get("sub")
    if not isinstance(sub, str) or not sub:
        raise AuthenticationRequiredError("Token missing subject")
    name = claims.get("name") or claims.get("nickname")
    email = claims.get("email")
    return Identity.user(
        sub,
        display_name=str(name) if name else None,
        email=str(email) if email else None,
    )


def _cache_key(kid: str) -> str:
    return f"jwks:{kid}"
