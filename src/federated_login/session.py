"""
Session helpers for apps that keep the federated identity in request.session.

remember_identity(config) is a ready-made on_identity handler: it stores the
identity in the session and redirects to config.redirect_location.
require_identity is a FastAPI dependency for protected routes.

Optional: set SESSION_MAX_IDLE_SECONDS to treat the user as signed out after
that long without a request (default 0 = disabled).
"""

import os
import time
from typing import Optional

from fastapi import HTTPException, Request
from fastapi.responses import RedirectResponse

from federated_login.models import FederatedIdentity, FederatedLoginConfiguration

SESSION_KEY = "federated_identity"


def _session_max_idle_seconds() -> int:
    """Max seconds without a request before the identity is considered stale. 0 = disabled."""
    return int(os.getenv("SESSION_MAX_IDLE_SECONDS", "0"))


def touch_session_activity(request: Request) -> None:
    """Update last_activity_at in the session so idle timeout is based on recent requests."""
    request.session["last_activity_at"] = int(time.time())


def is_session_stale(request: Request) -> bool:
    max_idle = _session_max_idle_seconds()
    if max_idle <= 0:
        return False
    now = int(time.time())
    last_at = request.session.get("last_activity_at", now)
    return now - last_at >= max_idle


def get_identity(request: Request) -> Optional[FederatedIdentity]:
    """Return the identity stored in the session, or None when nobody is signed in."""
    raw = request.session.get(SESSION_KEY)
    if not raw:
        return None
    return FederatedIdentity.model_validate(raw)


def remember_identity(config: FederatedLoginConfiguration):
    """Build an on_identity handler that stores the identity and redirects to config.redirect_location."""

    async def _on_identity(request: Request, identity: FederatedIdentity):
        request.session[SESSION_KEY] = identity.model_dump(mode="json")
        touch_session_activity(request)
        return RedirectResponse(url=config.redirect_location, status_code=302)

    return _on_identity


async def require_identity(request: Request) -> FederatedIdentity:
    """Dependency: a federated identity must be in the session and not idle for too long."""
    identity = get_identity(request)
    if identity is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    if is_session_stale(request):
        raise HTTPException(status_code=401, detail="Session expired or inactive; please log in again")
    touch_session_activity(request)
    return identity


def forget_identity(request: Request) -> None:
    request.session.pop(SESSION_KEY, None)
    request.session.pop("last_activity_at", None)
