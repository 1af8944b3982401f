"""
OAuth service descriptors and the default provider name -> service table.

A service describes how the OAuth client talks to an identity provider
(authorize/token endpoints or OIDC metadata) and which profile fetcher
normalizes its users. The set of service kinds is closed: GITHUB, GOOGLE, or
CUSTOM with an application-supplied fetcher.
"""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Awaitable, Callable, Mapping, Optional

import httpx

from federated_login.models import GITHUB, GOOGLE, FederatedIdentity, FederatedProvider

# (access_token, provider, http_client) -> FederatedIdentity
ProfileFetcher = Callable[[str, FederatedProvider, httpx.AsyncClient], Awaitable[FederatedIdentity]]


class ServiceKind(str, Enum):
    GITHUB = "github"
    GOOGLE = "google"
    CUSTOM = "custom"


@dataclass(frozen=True)
class OAuthService:
    """Static description of an OAuth provider, passed to Authlib when registering."""

    kind: ServiceKind
    label: str
    authorize_url: Optional[str] = None
    access_token_url: Optional[str] = None
    server_metadata_url: Optional[str] = None
    api_base_url: Optional[str] = None
    fetch_identity: Optional[ProfileFetcher] = None

    def client_kwargs(self) -> dict:
        """Endpoint keyword arguments for authlib's OAuth.register (unset ones omitted)."""
        kwargs = {
            "authorize_url": self.authorize_url,
            "access_token_url": self.access_token_url,
            "server_metadata_url": self.server_metadata_url,
            "api_base_url": self.api_base_url,
        }
        return {k: v for k, v in kwargs.items() if v is not None}


GITHUB_SERVICE = OAuthService(
    kind=ServiceKind.GITHUB,
    label="Github",
    authorize_url="https://github.com/login/oauth/authorize",
    access_token_url="https://github.com/login/oauth/access_token",
    api_base_url="https://api.github.com/",
)

GOOGLE_SERVICE = OAuthService(
    kind=ServiceKind.GOOGLE,
    label="Google",
    server_metadata_url="https://accounts.google.com/.well-known/openid-configuration",
    api_base_url="https://www.googleapis.com/",
)


def custom_service(
    label: str,
    fetch_identity: ProfileFetcher,
    *,
    authorize_url: Optional[str] = None,
    access_token_url: Optional[str] = None,
    server_metadata_url: Optional[str] = None,
    api_base_url: Optional[str] = None,
) -> OAuthService:
    """Describe a provider that is not built in; fetch_identity normalizes its profile."""
    return OAuthService(
        kind=ServiceKind.CUSTOM,
        label=label,
        authorize_url=authorize_url,
        access_token_url=access_token_url,
        server_metadata_url=server_metadata_url,
        api_base_url=api_base_url,
        fetch_identity=fetch_identity,
    )


# Read-only; copy with dict(DEFAULT_SERVICES) to extend.
DEFAULT_SERVICES: Mapping[str, OAuthService] = MappingProxyType(
    {
        GITHUB: GITHUB_SERVICE,
        GOOGLE: GOOGLE_SERVICE,
    }
)
