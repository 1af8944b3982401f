import httpx
import pytest

GITHUB_USER_URL = "https://api.github.com/user"
GITHUB_EMAILS_URL = "https://api.github.com/user/emails"
GOOGLE_USERINFO_URL = "https://www.googleapis.com/oauth2/v2/userinfo"


class FakeUpstream:
    """Serves canned responses by exact URL and records every request it sees."""

    def __init__(self):
        self.responses = {}
        self.requests: list[httpx.Request] = []
        self.transport = httpx.MockTransport(self._handle)

    def set(self, url: str, status_code: int = 200, json=None, content=None, error=None):
        self.responses[url] = (status_code, json, content, error)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        url = str(request.url)
        if url not in self.responses:
            return httpx.Response(404)
        status_code, json, content, error = self.responses[url]
        if error is not None:
            raise error
        if json is not None:
            return httpx.Response(status_code, json=json)
        return httpx.Response(status_code, content=content or b"")

    def github_user(self, id=12345, login="octocat", name="The Octocat", avatar_url="https://github.com/octocat.png"):
        body = {"id": id, "login": login}
        if name is not None:
            body["name"] = name
        if avatar_url is not None:
            body["avatar_url"] = avatar_url
        self.set(GITHUB_USER_URL, json=body)

    def github_emails(self, emails):
        self.set(
            GITHUB_EMAILS_URL,
            json=[{"email": e, "primary": p, "verified": v} for e, p, v in emails],
        )

    def google_user(self, id="google-123", email="user@gmail.com", name="Google User",
                    picture="https://google.com/avatar.png", verified_email=True):
        body = {"id": id, "verified_email": verified_email}
        if email is not None:
            body["email"] = email
        if name is not None:
            body["name"] = name
        if picture is not None:
            body["picture"] = picture
        self.set(GOOGLE_USERINFO_URL, json=body)


@pytest.fixture
def upstream():
    return FakeUpstream()


@pytest.fixture
def http_client(upstream):
    return httpx.AsyncClient(transport=upstream.transport)


@pytest.fixture
def provider_env(monkeypatch):
    """Conventional credentials for the built-in providers."""
    monkeypatch.setenv("GITHUB_CLIENT_ID", "test-github-id")
    monkeypatch.setenv("GITHUB_CLIENT_SECRET", "test-github-secret")
    monkeypatch.setenv("GOOGLE_CLIENT_ID", "test-google-id")
    monkeypatch.setenv("GOOGLE_CLIENT_SECRET", "test-google-secret")
