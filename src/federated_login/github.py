"""
GitHub profile fetcher.

Decisions:
- Two sequential calls: GET /user (required) then GET /user/emails (optional).
- A failing /user call raises UpstreamError and the emails call is skipped.
- Any failure of /user/emails (status, body, transport) degrades to an empty
  verified-email list: the email scope may be denied while the identity is
  still usable.
"""

import logging
from typing import Optional

import httpx
from pydantic import BaseModel, ValidationError

from federated_login.errors import DecodeError, UpstreamError
from federated_login.models import FederatedIdentity, FederatedProvider, Identifier
from federated_login.services import GITHUB_SERVICE

logger = logging.getLogger(__name__)

GITHUB_API_BASE: str = "https://api.github.com"
GITHUB_API_VERSION: str = "2022-11-28"
USER_AGENT: str = "federated-login"


class GitHubUser(BaseModel):
    id: int
    login: str
    name: Optional[str] = None
    avatar_url: Optional[str] = None


class GitHubEmail(BaseModel):
    email: str
    primary: bool = False
    verified: bool = False


def _headers(access_token: str) -> dict:
    return {
        "Authorization": f"Bearer {access_token}",
        "Accept": "application/vnd.github+json",
        "User-Agent": USER_AGENT,
    }


async def _fetch_user(client: httpx.AsyncClient, access_token: str) -> GitHubUser:
    try:
        r = await client.get(f"{GITHUB_API_BASE}/user", headers=_headers(access_token))
    except httpx.HTTPError as e:
        raise UpstreamError(None, f"GitHub API request failed: {e}") from e

    if not r.is_success:
        logger.debug("GitHub /user returned %s", r.status_code)
        raise UpstreamError(r.status_code, f"GitHub API returned status {r.status_code}")

    try:
        return GitHubUser.model_validate(r.json())
    except (ValueError, ValidationError) as e:
        raise DecodeError(r.status_code, f"GitHub API returned an invalid user profile: {e}") from e


async def _fetch_verified_emails(client: httpx.AsyncClient, access_token: str) -> list[str]:
    """Return verified emails in API order, or [] when the lookup fails for any reason."""
    headers = {**_headers(access_token), "X-GitHub-Api-Version": GITHUB_API_VERSION}
    try:
        r = await client.get(f"{GITHUB_API_BASE}/user/emails", headers=headers)
    except httpx.HTTPError as e:
        logger.warning("GitHub /user/emails request failed, continuing without emails: %s", e)
        return []

    if not r.is_success:
        logger.warning("GitHub /user/emails returned %s, continuing without emails", r.status_code)
        return []

    try:
        payload = r.json()
        emails = [GitHubEmail.model_validate(item) for item in payload]
    except (ValueError, TypeError, ValidationError) as e:
        logger.warning("GitHub /user/emails body could not be decoded, continuing without emails: %s", e)
        return []

    return [e.email for e in emails if e.verified]


async def fetch_github_identity(
    access_token: str, provider: FederatedProvider, client: httpx.AsyncClient
) -> FederatedIdentity:
    """Fetch the GitHub user behind access_token and normalize it."""
    user = await _fetch_user(client, access_token)
    emails = await _fetch_verified_emails(client, access_token)

    return FederatedIdentity(
        identifier=Identifier.federated(provider.name, str(user.id)),
        provider=GITHUB_SERVICE.label,
        verified_emails=tuple(emails),
        verified_phone_numbers=(),
        display_name=user.name,
        profile_picture_url=user.avatar_url,
    )
