"""
Protocol for the OAuth client used by the route registrar.

Implementations (e.g. AuthlibOAuthClient) own the browser redirect and the
authorization-code exchange; after a successful exchange they call on_token
with the request and the access token and return its response.
"""

from typing import Any, Awaitable, Callable, Optional, Protocol, Sequence, runtime_checkable

from fastapi import APIRouter, Request

from federated_login.models import ClientCredentials
from federated_login.services import OAuthService

TokenHandler = Callable[[Request, str], Awaitable[Any]]


@runtime_checkable
class OAuthClient(Protocol):
    """Protocol for an OAuth client that can serve login/callback routes for a provider."""

    def is_registered(self, name: str) -> bool:
        """Return True if routes for name were already registered on this client."""
        ...

    def register_provider(
        self,
        router: APIRouter,
        *,
        name: str,
        service: OAuthService,
        credentials: ClientCredentials,
        login_path: Sequence[str],
        callback_path: Sequence[str],
        scope: Sequence[str],
        on_token: TokenHandler,
        callback_url: Optional[str] = None,
    ) -> None:
        """Add the login and callback routes for one provider; raise RegistrationError on failure."""
        ...
