"""FastAPI dependencies for dependency injection."""

from __future__ import annotations

import secrets
from collections.abc import Generator  # noqa: TC003
from dataclasses import dataclass
from typing import Annotated, Protocol

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from boardsync.config import Settings
from boardsync.remote import RemoteBoardClient


@dataclass(frozen=True)
class Session:
    """An authenticated caller."""

    subject: str


class Authenticator(Protocol):
    """Interface for request authentication."""

    def authenticate(self, token: str | None) -> Session | None:
        """Return a session for a valid token, None otherwise."""
        ...


class BearerTokenAuthenticator:
    """Accepts a fixed set of bearer tokens."""

    def __init__(self, tokens: tuple[str, ...]) -> None:
        self._tokens = tuple(t for t in tokens if t)

    def authenticate(self, token: str | None) -> Session | None:
        if not token:
            return None
        for index, accepted in enumerate(self._tokens):
            if secrets.compare_digest(token.encode(), accepted.encode()):
                return Session(subject=f"token-{index}")
        return None


# Global Settings instance (initialized on app startup)
_settings: Settings | None = None


def init_settings(settings: Settings | None = None) -> Settings:
    """Initialize the global Settings instance."""
    global _settings  # noqa: PLW0603
    _settings = settings or Settings.from_env()
    return _settings


def get_settings() -> Settings:
    """Dependency that provides the Settings instance."""
    if _settings is None:
        raise RuntimeError("Settings not initialized. Call init_settings() first.")
    return _settings


SettingsDep = Annotated[Settings, Depends(get_settings)]

# Global RemoteBoardClient instance (initialized on app startup)
_remote_client: RemoteBoardClient | None = None


def init_remote_client(settings: Settings) -> RemoteBoardClient:
    """Initialize the global RemoteBoardClient instance."""
    global _remote_client  # noqa: PLW0603
    _remote_client = RemoteBoardClient(settings)
    return _remote_client


async def close_remote_client() -> None:
    """Close the global RemoteBoardClient instance."""
    global _remote_client  # noqa: PLW0603
    if _remote_client is not None:
        await _remote_client.close()
        _remote_client = None


def get_remote_client() -> Generator[RemoteBoardClient, None, None]:
    """Dependency that provides the RemoteBoardClient instance."""
    if _remote_client is None:
        raise RuntimeError("RemoteBoardClient not initialized. Call init_remote_client() first.")
    yield _remote_client


RemoteClientDep = Annotated[RemoteBoardClient, Depends(get_remote_client)]

# Global Authenticator instance (initialized on app startup)
_authenticator: Authenticator | None = None


def init_authenticator(authenticator: Authenticator) -> None:
    """Initialize the global Authenticator instance."""
    global _authenticator  # noqa: PLW0603
    _authenticator = authenticator


def close_authenticator() -> None:
    """Close the global Authenticator instance."""
    global _authenticator  # noqa: PLW0603
    _authenticator = None


def get_authenticator() -> Generator[Authenticator, None, None]:
    """Dependency that provides the Authenticator instance."""
    if _authenticator is None:
        raise RuntimeError("Authenticator not initialized. Call init_authenticator() first.")
    yield _authenticator


AuthenticatorDep = Annotated[Authenticator, Depends(get_authenticator)]

_bearer = HTTPBearer(auto_error=False)


def get_session(
    authenticator: AuthenticatorDep,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_bearer)],
) -> Session | None:
    """Dependency resolving the caller's session; None when unauthenticated."""
    token = credentials.credentials if credentials is not None else None
    return authenticator.authenticate(token)


SessionDep = Annotated[Session | None, Depends(get_session)]
