import pytest
from fastapi import APIRouter

from federated_login import (
    DEFAULT_SERVICES,
    GITHUB_SERVICE,
    ClientCredentials,
    DuplicateProvider,
    FederatedLoginConfiguration,
    FederatedLoginRegistrar,
    FederatedProvider,
    MissingCredentials,
    RegistrationError,
    UnsupportedProvider,
    UpstreamError,
)
from federated_login.oauth_client import AuthlibOAuthClient

from .conftest import GITHUB_USER_URL

CREDS = ClientCredentials(id="client-id", secret="client-secret")


class RecordingOAuthClient:
    """OAuth client stand-in that keeps each registration instead of serving routes."""

    def __init__(self):
        self.registrations = {}

    def is_registered(self, name):
        return name in self.registrations

    def register_provider(self, router, **kwargs):
        self.registrations[kwargs["name"]] = kwargs


async def echo_identity(request, identity):
    return {"request": request, "identity": identity}


def route_paths(router: APIRouter) -> list[str]:
    return [route.path for route in router.routes]


def test_default_services_cover_github_and_google():
    assert set(DEFAULT_SERVICES) == {"github", "google"}


def test_registers_login_and_callback_per_provider(http_client):
    config = FederatedLoginConfiguration(
        route_group=["api", "v1", "oauth"],
        providers=[
            FederatedProvider.github(credentials=CREDS),
            FederatedProvider.google(scope=["openid", "email"], credentials=CREDS),
        ],
    )
    router = APIRouter()

    FederatedLoginRegistrar(http_client=http_client).register(router, config, echo_identity)

    assert route_paths(router) == [
        "/api/v1/oauth/github",
        "/api/v1/oauth/github/callback",
        "/api/v1/oauth/google",
        "/api/v1/oauth/google/callback",
    ]


def test_conventional_credentials_come_from_environment(provider_env, http_client):
    config = FederatedLoginConfiguration(providers=[FederatedProvider.github()])
    oauth_client = RecordingOAuthClient()

    FederatedLoginRegistrar(oauth_client=oauth_client, http_client=http_client).register(
        APIRouter(), config, echo_identity
    )

    registration = oauth_client.registrations["github"]
    assert registration["credentials"] == ClientCredentials(id="test-github-id", secret="test-github-secret")
    assert registration["login_path"] == ["connect", "github"]
    assert registration["callback_path"] == ["connect", "github", "callback"]
    assert registration["service"] is GITHUB_SERVICE
    assert registration["callback_url"] is None


def test_unknown_provider_registers_nothing(http_client):
    config = FederatedLoginConfiguration(
        providers=[
            FederatedProvider.github(credentials=CREDS),
            FederatedProvider.custom("gitlab", credentials=CREDS),
        ]
    )
    router = APIRouter()

    with pytest.raises(UnsupportedProvider) as excinfo:
        FederatedLoginRegistrar(http_client=http_client).register(router, config, echo_identity)

    assert excinfo.value.name == "gitlab"
    assert router.routes == []


def test_duplicate_provider_registers_nothing(http_client):
    config = FederatedLoginConfiguration(
        providers=[
            FederatedProvider.github(credentials=CREDS),
            FederatedProvider.google(credentials=CREDS),
            FederatedProvider.github(scope=["user:email"], credentials=CREDS),
        ]
    )
    router = APIRouter()

    with pytest.raises(DuplicateProvider):
        FederatedLoginRegistrar(http_client=http_client).register(router, config, echo_identity)

    assert router.routes == []


def test_missing_credentials_registers_nothing(monkeypatch, http_client):
    monkeypatch.delenv("GOOGLE_CLIENT_ID", raising=False)
    config = FederatedLoginConfiguration(
        providers=[FederatedProvider.github(credentials=CREDS), FederatedProvider.google()]
    )
    router = APIRouter()

    with pytest.raises(MissingCredentials):
        FederatedLoginRegistrar(http_client=http_client).register(router, config, echo_identity)

    assert router.routes == []


def test_registering_a_provider_twice_on_one_client_fails(http_client):
    config = FederatedLoginConfiguration(providers=[FederatedProvider.github(credentials=CREDS)])
    registrar = FederatedLoginRegistrar(oauth_client=AuthlibOAuthClient(), http_client=http_client)
    registrar.register(APIRouter(), config, echo_identity)

    with pytest.raises(RegistrationError):
        registrar.register(APIRouter(), config, echo_identity)


def test_already_registered_second_provider_registers_nothing(http_client):
    registrar = FederatedLoginRegistrar(oauth_client=AuthlibOAuthClient(), http_client=http_client)
    registrar.register(
        APIRouter(),
        FederatedLoginConfiguration(providers=[FederatedProvider.google(credentials=CREDS)]),
        echo_identity,
    )
    config = FederatedLoginConfiguration(
        providers=[
            FederatedProvider.github(credentials=CREDS),
            FederatedProvider.google(credentials=CREDS),
        ]
    )
    router = APIRouter()

    with pytest.raises(RegistrationError):
        registrar.register(router, config, echo_identity)

    assert router.routes == []
    assert not registrar.oauth_client.is_registered("github")


def test_custom_name_bound_to_builtin_service(http_client):
    services = {**DEFAULT_SERVICES, "corp-github": GITHUB_SERVICE}
    config = FederatedLoginConfiguration(providers=[FederatedProvider.custom("corp-github", credentials=CREDS)])
    router = APIRouter()

    FederatedLoginRegistrar(services=services, http_client=http_client).register(router, config, echo_identity)

    assert route_paths(router) == ["/connect/corp-github", "/connect/corp-github/callback"]


def test_origin_builds_absolute_callback_url(http_client):
    config = FederatedLoginConfiguration(
        route_group=["api"],
        providers=[FederatedProvider.github(credentials=CREDS)],
        origin="https://myapp.example.com/",
    )
    oauth_client = RecordingOAuthClient()

    FederatedLoginRegistrar(oauth_client=oauth_client, http_client=http_client).register(
        APIRouter(), config, echo_identity
    )

    assert oauth_client.registrations["github"]["callback_url"] == "https://myapp.example.com/api/github/callback"


@pytest.mark.asyncio
async def test_token_handler_hands_identity_to_on_identity(upstream, http_client):
    upstream.github_user()
    upstream.github_emails([("octocat@github.com", True, True)])
    config = FederatedLoginConfiguration(providers=[FederatedProvider.github(credentials=CREDS)])
    oauth_client = RecordingOAuthClient()
    FederatedLoginRegistrar(oauth_client=oauth_client, http_client=http_client).register(
        APIRouter(), config, echo_identity
    )

    on_token = oauth_client.registrations["github"]["on_token"]
    result = await on_token("request-context", "access-token")

    assert result["request"] == "request-context"
    assert result["identity"].identifier.value == "12345"
    assert result["identity"].verified_emails == ("octocat@github.com",)
    assert upstream.requests[0].headers["Authorization"] == "Bearer access-token"


@pytest.mark.asyncio
async def test_token_handler_propagates_upstream_error(upstream, http_client):
    upstream.set(GITHUB_USER_URL, status_code=401)
    calls = []

    async def on_identity(request, identity):
        calls.append(identity)

    config = FederatedLoginConfiguration(providers=[FederatedProvider.github(credentials=CREDS)])
    oauth_client = RecordingOAuthClient()
    FederatedLoginRegistrar(oauth_client=oauth_client, http_client=http_client).register(
        APIRouter(), config, on_identity
    )

    with pytest.raises(UpstreamError) as excinfo:
        await oauth_client.registrations["github"]["on_token"]("request-context", "expired")

    assert excinfo.value.status == 401
    assert calls == []


@pytest.mark.asyncio
async def test_registrar_closes_only_its_own_client(http_client):
    owned = FederatedLoginRegistrar()
    await owned.aclose()
    assert owned.http_client.is_closed

    borrowed = FederatedLoginRegistrar(http_client=http_client)
    await borrowed.aclose()
    assert not http_client.is_closed
