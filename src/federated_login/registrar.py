"""
Route registrar: federated login configuration -> login/callback routes.

Decisions:
- Everything that can fail at configuration time (duplicate names, unknown
  provider names, missing fetchers, missing credentials, names the OAuth
  client already serves) is checked for every provider before the first
  route is added, so registration is all-or-nothing.
- The provider name -> OAuth service table is injected; DEFAULT_SERVICES covers
  github and google.
- Callback handlers hand on_identity a normalized FederatedIdentity, never the
  raw access token.
- One httpx.AsyncClient is shared by every provider and callback.
"""

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Mapping, Optional

import httpx
from fastapi import APIRouter, Request

from federated_login.config import resolve_credentials
from federated_login.dispatcher import fetcher_for
from federated_login.errors import DuplicateProvider, RegistrationError, UnsupportedProvider
from federated_login.models import (
    ClientCredentials,
    FederatedIdentity,
    FederatedLoginConfiguration,
    FederatedProvider,
    path_string,
)
from federated_login.oauth_client import AuthlibOAuthClient
from federated_login.protocol import OAuthClient
from federated_login.services import DEFAULT_SERVICES, OAuthService, ProfileFetcher

logger = logging.getLogger(__name__)

IdentityHandler = Callable[[Request, FederatedIdentity], Awaitable[Any]]


@dataclass(frozen=True)
class _ResolvedProvider:
    provider: FederatedProvider
    service: OAuthService
    fetch: ProfileFetcher
    credentials: ClientCredentials


class FederatedLoginRegistrar:
    """Registers configured providers with an OAuth client and resolves identities on callback."""

    def __init__(
        self,
        services: Mapping[str, OAuthService] = DEFAULT_SERVICES,
        oauth_client: Optional[OAuthClient] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.services = services
        self.oauth_client = oauth_client or AuthlibOAuthClient()
        self._owns_http_client = http_client is None
        self.http_client = http_client or httpx.AsyncClient(timeout=20)

    async def aclose(self) -> None:
        """Close the shared HTTP client if this registrar created it."""
        if self._owns_http_client:
            await self.http_client.aclose()

    def _resolve(self, config: FederatedLoginConfiguration) -> list[_ResolvedProvider]:
        seen = set()
        resolved = []
        for provider in config.providers:
            if provider.name in seen:
                raise DuplicateProvider(provider.name)
            seen.add(provider.name)

            service = self.services.get(provider.name)
            if service is None:
                raise UnsupportedProvider(provider.name)
            if self.oauth_client.is_registered(provider.name):
                raise RegistrationError(f"Provider {provider.name!r} is already registered with this OAuth client")

            resolved.append(
                _ResolvedProvider(
                    provider=provider,
                    service=service,
                    fetch=fetcher_for(service),
                    credentials=resolve_credentials(provider),
                )
            )
        return resolved

    def _token_handler(self, entry: _ResolvedProvider, on_identity: IdentityHandler):
        fetch = entry.fetch
        provider = entry.provider
        http_client = self.http_client

        async def on_token(request: Request, access_token: str):
            identity = await fetch(access_token, provider, http_client)
            return await on_identity(request, identity)

        return on_token

    def register(
        self,
        router: APIRouter,
        config: FederatedLoginConfiguration,
        on_identity: IdentityHandler,
    ) -> None:
        """
        Add login and callback routes for every configured provider to router.

        Raises ConfigurationError (UnsupportedProvider, DuplicateProvider,
        MissingCredentials, RegistrationError) without adding any route when the
        configuration is invalid.
        """
        resolved = self._resolve(config)

        for entry in resolved:
            login_path = config.login_path(entry.provider)
            callback_path = config.callback_path(entry.provider)
            callback_url = None
            if config.origin:
                callback_url = config.origin.rstrip("/") + path_string(callback_path)

            self.oauth_client.register_provider(
                router,
                name=entry.provider.name,
                service=entry.service,
                credentials=entry.credentials,
                login_path=login_path,
                callback_path=callback_path,
                scope=entry.provider.scope,
                on_token=self._token_handler(entry, on_identity),
                callback_url=callback_url,
            )
            logger.info(
                "Federated login for %s at %s (callback %s)",
                entry.provider.name,
                path_string(login_path),
                path_string(callback_path),
            )


def create_federated_router(
    config: FederatedLoginConfiguration,
    on_identity: IdentityHandler,
    registrar: Optional[FederatedLoginRegistrar] = None,
) -> APIRouter:
    """Create an APIRouter with login and callback routes for every configured provider."""
    registrar = registrar or FederatedLoginRegistrar()
    router = APIRouter()
    registrar.register(router, config, on_identity)
    return router
