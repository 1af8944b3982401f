"""
Identity resolution: pick the profile fetcher for an OAuth service.

The OAuth client identifies providers by service, the application by name; this
module is the seam between the two. fetcher_for is called once per provider at
registration time so request handlers hold a direct function reference.
"""

import httpx

from federated_login.errors import UnsupportedService
from federated_login.github import fetch_github_identity
from federated_login.google import fetch_google_identity
from federated_login.models import FederatedIdentity, FederatedProvider
from federated_login.services import OAuthService, ProfileFetcher, ServiceKind


def fetcher_for(service: OAuthService) -> ProfileFetcher:
    """Return the fetcher for service; raise UnsupportedService when there is none."""
    kind = getattr(service, "kind", None)
    if kind is ServiceKind.GITHUB:
        return fetch_github_identity
    if kind is ServiceKind.GOOGLE:
        return fetch_google_identity
    if kind is ServiceKind.CUSTOM and service.fetch_identity is not None:
        return service.fetch_identity
    raise UnsupportedService(service)


async def resolve_identity(
    service: OAuthService,
    access_token: str,
    provider: FederatedProvider,
    client: httpx.AsyncClient,
) -> FederatedIdentity:
    """Fetch and normalize the identity behind access_token using the service's fetcher."""
    fetch = fetcher_for(service)
    return await fetch(access_token, provider, client)
