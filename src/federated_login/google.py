"""
Google profile fetcher: one call to the OAuth2 v2 userinfo endpoint.

An email is reported as verified only when Google says verified_email is true.
"""

import logging
from typing import Optional

import httpx
from pydantic import BaseModel, ValidationError

from federated_login.errors import DecodeError, UpstreamError
from federated_login.models import FederatedIdentity, FederatedProvider, Identifier
from federated_login.services import GOOGLE_SERVICE

logger = logging.getLogger(__name__)

GOOGLE_USERINFO_URL: str = "https://www.googleapis.com/oauth2/v2/userinfo"


class GoogleUser(BaseModel):
    id: str
    email: Optional[str] = None
    name: Optional[str] = None
    picture: Optional[str] = None
    verified_email: Optional[bool] = None


async def fetch_google_identity(
    access_token: str, provider: FederatedProvider, client: httpx.AsyncClient
) -> FederatedIdentity:
    """Fetch the Google user behind access_token and normalize it."""
    headers = {"Authorization": f"Bearer {access_token}"}
    try:
        r = await client.get(GOOGLE_USERINFO_URL, headers=headers)
    except httpx.HTTPError as e:
        raise UpstreamError(None, f"Google API request failed: {e}") from e

    if not r.is_success:
        logger.debug("Google userinfo returned %s", r.status_code)
        raise UpstreamError(r.status_code, f"Google API returned status {r.status_code}")

    try:
        user = GoogleUser.model_validate(r.json())
    except (ValueError, ValidationError) as e:
        raise DecodeError(r.status_code, f"Google API returned an invalid user profile: {e}") from e

    verified = [user.email] if user.verified_email is True and user.email else []

    return FederatedIdentity(
        identifier=Identifier.federated(provider.name, user.id),
        provider=GOOGLE_SERVICE.label,
        verified_emails=tuple(verified),
        verified_phone_numbers=(),
        display_name=user.name,
        profile_picture_url=user.picture,
    )
