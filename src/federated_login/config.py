"""
Environment-driven configuration.

Provider credentials follow the conventional variable names <NAME>_CLIENT_ID and
<NAME>_CLIENT_SECRET (e.g. GITHUB_CLIENT_ID). load_configuration builds a
FederatedLoginConfiguration from FEDERATED_* variables:

- FEDERATED_PROVIDERS: comma-separated provider names (default "github,google")
- FEDERATED_ROUTE_GROUP: slash-separated route prefix (default "connect")
- FEDERATED_REDIRECT_LOCATION: where to go after login (default "/")
- FEDERATED_ORIGIN: public base URL for absolute callback URLs (optional)
- FEDERATED_<NAME>_SCOPE: space-separated scopes for one provider; github and
  google default to DEFAULT_SCOPES when unset, custom providers to no scope
"""

import os
from typing import Mapping, Optional

from federated_login.errors import MissingCredentials
from federated_login.models import (
    GITHUB,
    GOOGLE,
    ClientCredentials,
    ConventionalCredentials,
    FederatedLoginConfiguration,
    FederatedProvider,
)

DEFAULT_SCOPES = {
    GITHUB: ("read:user", "user:email"),
    GOOGLE: ("openid", "email", "profile"),
}


def _env_prefix(name: str) -> str:
    return name.upper().replace("-", "_")


def credential_variables(name: str) -> tuple[str, str]:
    """Return the (client id, client secret) environment variable names for a provider."""
    prefix = _env_prefix(name)
    return f"{prefix}_CLIENT_ID", f"{prefix}_CLIENT_SECRET"


def resolve_credentials(provider: FederatedProvider, environ: Optional[Mapping[str, str]] = None) -> ClientCredentials:
    """Return literal credentials, reading the environment for conventional ones."""
    if isinstance(provider.credentials, ClientCredentials):
        return provider.credentials

    env = os.environ if environ is None else environ
    id_var, secret_var = credential_variables(provider.name)
    client_id = env.get(id_var)
    if not client_id:
        raise MissingCredentials(provider.name, id_var)
    client_secret = env.get(secret_var)
    if not client_secret:
        raise MissingCredentials(provider.name, secret_var)
    return ClientCredentials(id=client_id, secret=client_secret)


def load_configuration(environ: Optional[Mapping[str, str]] = None) -> FederatedLoginConfiguration:
    """Build the federated login configuration from FEDERATED_* environment variables."""
    env = os.environ if environ is None else environ

    names = [n.strip() for n in env.get("FEDERATED_PROVIDERS", "github,google").split(",") if n.strip()]
    providers = []
    for name in names:
        raw_scope = env.get(f"FEDERATED_{_env_prefix(name)}_SCOPE")
        scope = raw_scope.split() if raw_scope is not None else DEFAULT_SCOPES.get(name, ())
        providers.append(FederatedProvider.custom(name, scope, ConventionalCredentials()))

    group = [s for s in env.get("FEDERATED_ROUTE_GROUP", "connect").split("/") if s]

    return FederatedLoginConfiguration(
        route_group=tuple(group),
        providers=tuple(providers),
        redirect_location=env.get("FEDERATED_REDIRECT_LOCATION", "/"),
        origin=env.get("FEDERATED_ORIGIN") or None,
    )
