"""
FastAPI app: GitHub/Google federated login with the identity kept in the session.

Decisions:
- .env is loaded before importing federated_login so GITHUB_*, GOOGLE_*,
  FEDERATED_* and SESSION_SECRET are available when the routes are registered
  (Ruff E402 suppressed for that).
- Login routes live under FEDERATED_ROUTE_GROUP (default /connect/<provider>).
- The shared outbound HTTP client is closed on shutdown via the lifespan hook.
- Session secret from SESSION_SECRET env; default "change-me" is for dev only.
"""

import os
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, Request
from fastapi.responses import RedirectResponse
from starlette.middleware.sessions import SessionMiddleware

load_dotenv()

# Load .env before federated_login so provider credentials are set; Ruff E402.
from federated_login import (  # noqa: E402
    FederatedIdentity,
    FederatedLoginRegistrar,
    create_federated_router,
    install_error_handlers,
    load_configuration,
)
from federated_login.logging_config import setup_logging  # noqa: E402
from federated_login.session import (  # noqa: E402
    forget_identity,
    get_identity,
    remember_identity,
    require_identity,
)

SESSION_SECRET = os.getenv("SESSION_SECRET", "change-me")

setup_logging()

config = load_configuration()
registrar = FederatedLoginRegistrar()


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await registrar.aclose()


app = FastAPI(lifespan=lifespan)
app.add_middleware(SessionMiddleware, secret_key=SESSION_SECRET)
install_error_handlers(app)

app.include_router(create_federated_router(config, remember_identity(config), registrar))


@app.get("/")
async def home(request: Request):
    identity = get_identity(request)
    return {
        "logged_in": identity is not None,
        "providers": [p.name for p in config.providers],
        "identity": identity.model_dump(mode="json") if identity else None,
    }


@app.get("/me")
async def me(identity: FederatedIdentity = Depends(require_identity)):
    return {
        "id": identity.identifier.value,
        "provider": identity.provider,
        "email": identity.email,
        "display_name": identity.display_name,
    }


@app.get("/logout")
async def logout(request: Request):
    """Clear the stored identity and redirect to home."""
    forget_identity(request)
    return RedirectResponse(url="/")
