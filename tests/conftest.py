"""Shared fixtures: a fake resource service, fake Redis, and wired clients."""

import fakeredis
import httpx
import pytest
import pytest_asyncio

from fake_backend import create_app
from todo_client.api_client import ApiClient
from todo_client.auth_client import AuthClient
from todo_client.session import SessionStore
from todo_client.token_repo import TokenRepo

BASE_URL = "http://testserver"
PROFILE = 42


@pytest.fixture
def backend():
    return create_app()


@pytest.fixture
def transport(backend):
    return httpx.ASGITransport(app=backend)


@pytest.fixture
def redis_client():
    return fakeredis.FakeAsyncRedis(server=fakeredis.FakeServer(), decode_responses=True)


@pytest.fixture
def repo(redis_client):
    return TokenRepo(client=redis_client)


@pytest.fixture
def auth(transport):
    return AuthClient(BASE_URL, transport=transport)


@pytest.fixture
def store(repo, auth):
    return SessionStore(repo, auth, profile=PROFILE)


@pytest.fixture
def api(store, transport):
    return ApiClient(BASE_URL, store, transport=transport)


@pytest_asyncio.fixture
async def logged_in(store):
    """A store that has just signed up Ann."""
    await store.signup("ann@example.com", "secret", "Ann")
    return store


def mock_transport(status_code: int, **kwargs) -> httpx.MockTransport:
    """Transport answering every request with the same canned response."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, **kwargs)

    return httpx.MockTransport(handler)


def failing_transport() -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    return httpx.MockTransport(handler)
