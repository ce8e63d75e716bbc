"""Identity model shared by the client and server layers."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Identity:
    """Either an authenticated user or an anonymous browser session."""

    authenticated: bool
    key: str
    display_name: str | None = None
    email: str | None = None

    @classmethod
    def user(
        cls, sub: str, display_name: str | None = None, email: str | None = None
    ) -> "Identity":
        return cls(authenticated=True, key=sub, display_name=display_name, email=email)

    @classmethod
    def anonymous(cls, session_key: str = "") -> "Identity":
        return cls(authenticated=False, key=session_key)

    @property
    def mode(self) -> str:
        """Storage mode label used in logs and API responses."""
        return "user" if self.authenticated else "session"
