"""
Configuration and canonical identity models.

Provider configuration (FederatedProvider, FederatedLoginConfiguration) is owned
by the application and read-only here. FederatedIdentity is what every profile
fetcher normalizes into; instances are created per callback and never cached.
All models are frozen pydantic models so they compare by value.
"""

from enum import Enum
from typing import NewType, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict

ProviderName = NewType("ProviderName", str)

GITHUB = ProviderName("github")
GOOGLE = ProviderName("google")


class ConventionalCredentials(BaseModel):
    """Read <NAME>_CLIENT_ID / <NAME>_CLIENT_SECRET from the environment."""

    model_config = ConfigDict(frozen=True)


class ClientCredentials(BaseModel):
    """Literal client id and secret."""

    model_config = ConfigDict(frozen=True)

    id: str
    secret: str


Credentials = Union[ConventionalCredentials, ClientCredentials]


class FederatedProvider(BaseModel):
    """One configured identity provider."""

    model_config = ConfigDict(frozen=True)

    name: ProviderName
    scope: Tuple[str, ...] = ()
    credentials: Credentials = ConventionalCredentials()

    @classmethod
    def github(cls, scope=(), credentials: Optional[Credentials] = None) -> "FederatedProvider":
        return cls.custom(GITHUB, scope, credentials)

    @classmethod
    def google(cls, scope=(), credentials: Optional[Credentials] = None) -> "FederatedProvider":
        return cls.custom(GOOGLE, scope, credentials)

    @classmethod
    def custom(cls, name: str, scope=(), credentials: Optional[Credentials] = None) -> "FederatedProvider":
        return cls(
            name=ProviderName(name),
            scope=tuple(scope),
            credentials=credentials or ConventionalCredentials(),
        )


class FederatedLoginConfiguration(BaseModel):
    """
    The whole federated login surface.

    route_group is a sequence of path segments prefixed to every provider route.
    origin, when set, is the public base URL used to build absolute callback
    URLs; otherwise the callback URL is derived from the incoming request.
    """

    model_config = ConfigDict(frozen=True)

    route_group: Tuple[str, ...] = ("connect",)
    providers: Tuple[FederatedProvider, ...] = ()
    redirect_location: str = "/"
    origin: Optional[str] = None

    def login_path(self, provider: FederatedProvider) -> list[str]:
        return [*self.route_group, provider.name]

    def callback_path(self, provider: FederatedProvider) -> list[str]:
        return [*self.login_path(provider), "callback"]


def path_string(segments) -> str:
    """Join path segments into an absolute route path ("/connect/github")."""
    return "/" + "/".join(s.strip("/") for s in segments if s.strip("/"))


class IdentifierKind(str, Enum):
    FEDERATED = "federated"


class Identifier(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: IdentifierKind = IdentifierKind.FEDERATED
    provider: ProviderName
    value: str

    @classmethod
    def federated(cls, provider: str, value: str) -> "Identifier":
        return cls(kind=IdentifierKind.FEDERATED, provider=ProviderName(provider), value=value)


class UserInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    email: Optional[str] = None
    phone: Optional[str] = None


class FederatedIdentity(BaseModel):
    """Provider-independent identity produced by a successful login callback."""

    model_config = ConfigDict(frozen=True)

    identifier: Identifier
    provider: str
    verified_emails: Tuple[str, ...] = ()
    verified_phone_numbers: Tuple[str, ...] = ()
    display_name: Optional[str] = None
    profile_picture_url: Optional[str] = None

    @property
    def email(self) -> Optional[str]:
        return self.verified_emails[0] if self.verified_emails else None

    @property
    def phone(self) -> Optional[str]:
        return self.verified_phone_numbers[0] if self.verified_phone_numbers else None

    @property
    def user_info(self) -> UserInfo:
        return UserInfo(email=self.email, phone=self.phone)
