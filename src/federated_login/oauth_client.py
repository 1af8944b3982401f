"""
Authlib-backed OAuth client.

Uses Authlib's Starlette integration for the redirect and the code exchange.
The state parameter lives in request.session, so the app must install
Starlette's SessionMiddleware.
"""

import logging
from typing import Optional, Sequence

from authlib.integrations.starlette_client import OAuth, OAuthError
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from federated_login.errors import RegistrationError
from federated_login.models import ClientCredentials, path_string
from federated_login.protocol import TokenHandler
from federated_login.services import OAuthService

logger = logging.getLogger(__name__)


def login_route_name(name: str) -> str:
    return f"federated_login_{name}"


def callback_route_name(name: str) -> str:
    return f"federated_callback_{name}"


class AuthlibOAuthClient:
    """OAuth client that registers providers on an Authlib OAuth registry and serves their routes."""

    def __init__(self, oauth: Optional[OAuth] = None):
        self.oauth = oauth or OAuth()
        self._registered: set[str] = set()

    def is_registered(self, name: str) -> bool:
        return name in self._registered

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
        """Register name with Authlib and add GET routes for login_path and callback_path."""
        if self.is_registered(name):
            raise RegistrationError(f"Provider {name!r} is already registered with this OAuth client")

        client_kwargs = {"scope": " ".join(scope)} if scope else {}
        self.oauth.register(
            name=name,
            client_id=credentials.id,
            client_secret=credentials.secret,
            client_kwargs=client_kwargs,
            **service.client_kwargs(),
        )
        client = self.oauth.create_client(name)
        if client is None:
            raise RegistrationError(f"Authlib did not create a client for provider {name!r}")
        self._registered.add(name)

        callback_name = callback_route_name(name)

        async def login(request: Request):
            """Redirect the user to the provider's authorization page."""
            redirect_uri = callback_url or str(request.url_for(callback_name))
            return await client.authorize_redirect(request, redirect_uri)

        async def callback(request: Request):
            """Exchange the code for a token and hand the access token to on_token."""
            try:
                token = await client.authorize_access_token(request)
            except OAuthError as e:
                return JSONResponse({"error": str(e)}, status_code=400)
            access_token = (token or {}).get("access_token")
            if not access_token:
                return JSONResponse({"error": "missing_access_token"}, status_code=400)
            return await on_token(request, access_token)

        router.add_api_route(path_string(login_path), login, methods=["GET"], name=login_route_name(name))
        router.add_api_route(path_string(callback_path), callback, methods=["GET"], name=callback_name)
        logger.debug("Registered OAuth routes for %s", name)
