"""
Error taxonomy shared by the registrar, the dispatcher and the profile fetchers.

Configuration errors are raised while wiring routes and abort startup. Upstream
errors are raised per request when a required provider API call fails; the
hosting app decides how to render them (see install_error_handlers).
"""

from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse


class FederatedLoginError(Exception):
    """Base class for every error raised by this package."""


class ConfigurationError(FederatedLoginError):
    """Invalid federated login configuration; raised before any route is registered."""


class UnsupportedProvider(ConfigurationError):
    """No OAuth service is registered for the provider name."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unsupported provider {name!r}: no OAuth service is registered for it")


class DuplicateProvider(ConfigurationError):
    """Two providers in one configuration share the same name."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Provider {name!r} is configured more than once")


class MissingCredentials(ConfigurationError):
    """Conventional credentials were requested but the environment variable is not set."""

    def __init__(self, name: str, variable: str):
        self.name = name
        self.variable = variable
        super().__init__(f"Provider {name!r} requires environment variable {variable}")


class RegistrationError(ConfigurationError):
    """The OAuth client refused to register a provider."""


class UnsupportedService(FederatedLoginError):
    """The dispatcher has no profile fetcher for this OAuth service."""

    def __init__(self, service):
        self.service = service
        super().__init__(f"Unsupported OAuth provider service: {service!r}")


class UpstreamError(FederatedLoginError):
    """A required provider API call failed. status is None for transport failures."""

    def __init__(self, status: Optional[int], message: str):
        self.status = status
        self.message = message
        super().__init__(f"{message} (status={status})")


class DecodeError(UpstreamError):
    """A provider answered with a body that could not be decoded."""


def install_error_handlers(app: FastAPI) -> None:
    """Render UpstreamError raised from a login callback as a 502 JSON response."""

    @app.exception_handler(UpstreamError)
    async def _upstream_error(request: Request, exc: UpstreamError):
        return JSONResponse({"error": exc.message, "upstream_status": exc.status}, status_code=502)
