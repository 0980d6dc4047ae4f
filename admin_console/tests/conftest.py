"""
Shared fixtures for console tests.

- backend: in-memory fake of the platform backend (see fake_backend.py)
- admin_api / anonymous_api: AdminAPI wired to it through httpx.ASGITransport
- clock: manual clock for QueryClient staleness
- client / admin_client: TestClient over the console app (anonymous / logged in)
"""
from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from admin_console.admin_api import AdminAPI
from admin_console.api_client import APIClient
from admin_console.config import Settings
from admin_console.query_cache import QueryClient
from admin_console.token_storage import MemoryTokenStorage
from admin_console.web.app import create_app

from .fake_backend import ADMIN_EMAIL, ADMIN_TOKEN, BASE_URL, PASSWORD, FakeBackend


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def storage():
    return MemoryTokenStorage(ADMIN_TOKEN)


@pytest.fixture
def auth_failures():
    """Records every on_auth_failure callback."""
    return []


@pytest.fixture
def api_client(backend, storage, auth_failures):
    return APIClient(
        BASE_URL,
        storage,
        on_auth_failure=lambda: auth_failures.append(True),
        transport=backend.transport(),
    )


@pytest.fixture
def admin_api(api_client):
    return AdminAPI(api_client)


class ManualClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def queries(clock):
    return QueryClient(stale_time=30.0, clock=clock)


@pytest.fixture
def console_settings(tmp_path):
    return Settings(
        _env_file=None,
        API_BASE_URL=BASE_URL,
        LOGS_DIR=str(tmp_path / "logs"),
        PAGE_SIZE=10,
    )


@pytest.fixture
def app(backend, console_settings):
    return create_app(console_settings, transport=backend.transport())


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def admin_client(client):
    response = client.post("/login", data={"email": ADMIN_EMAIL, "password": PASSWORD}, follow_redirects=False)
    assert response.status_code == 303
    return client
