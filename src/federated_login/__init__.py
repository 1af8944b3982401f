"""
Federated login for FastAPI apps.

Exposes the configuration and identity models, the route registrar
(FederatedLoginRegistrar, create_federated_router), the identity dispatcher,
the built-in GitHub/Google services and the error taxonomy.
"""

from .config import load_configuration, resolve_credentials
from .dispatcher import fetcher_for, resolve_identity
from .errors import (
    ConfigurationError,
    DecodeError,
    DuplicateProvider,
    FederatedLoginError,
    MissingCredentials,
    RegistrationError,
    UnsupportedProvider,
    UnsupportedService,
    UpstreamError,
    install_error_handlers,
)
from .models import (
    GITHUB,
    GOOGLE,
    ClientCredentials,
    ConventionalCredentials,
    FederatedIdentity,
    FederatedLoginConfiguration,
    FederatedProvider,
    Identifier,
    IdentifierKind,
    ProviderName,
)
from .registrar import FederatedLoginRegistrar, create_federated_router
from .services import DEFAULT_SERVICES, GITHUB_SERVICE, GOOGLE_SERVICE, OAuthService, custom_service

__all__ = [
    "GITHUB",
    "GOOGLE",
    "ProviderName",
    "ClientCredentials",
    "ConventionalCredentials",
    "FederatedProvider",
    "FederatedLoginConfiguration",
    "Identifier",
    "IdentifierKind",
    "FederatedIdentity",
    "OAuthService",
    "GITHUB_SERVICE",
    "GOOGLE_SERVICE",
    "DEFAULT_SERVICES",
    "custom_service",
    "fetcher_for",
    "resolve_identity",
    "FederatedLoginRegistrar",
    "create_federated_router",
    "load_configuration",
    "resolve_credentials",
    "FederatedLoginError",
    "ConfigurationError",
    "UnsupportedProvider",
    "DuplicateProvider",
    "MissingCredentials",
    "RegistrationError",
    "UnsupportedService",
    "UpstreamError",
    "DecodeError",
    "install_error_handlers",
]
