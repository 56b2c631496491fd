"""
Test fixtures and configuration.

Every app and container built here uses in-memory stores, a controllable
clock and a cheap Argon2 configuration.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from messager.config.settings import Settings
from messager.di import Container
from messager.domain.entities import Connection, User
from messager.infrastructure.auth import Argon2PasswordHasher
from messager.main import MessagerApp
from messager.reporter import SystemReporter

ACCESS_SECRET = "test-access-secret-0123456789abcdef"
REFRESH_SECRET = "test-refresh-secret-fedcba9876543210"
PASSWORD = "secret123"


class FakeClock:
    """Manually advanced UTC clock."""

    def __init__(self, start: Optional[datetime] = None):
        self.now = start or datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: Any) -> None:
        self.now += timedelta(**kwargs)


class FakeConnection(Connection):
    """
    Connection that records pushed events.

    Pass a shared `log` list to observe the global push order across
    several connections.
    """

    def __init__(self, user_id: str, log: Optional[List] = None, closed: bool = False):
        super().__init__(user_id=user_id)
        self.events: List[Dict[str, Any]] = []
        self.log = log
        self.closed = closed

    def push(self, event: Dict[str, Any]) -> bool:
        if self.closed:
            return False
        self.events.append(event)
        if self.log is not None:
            self.log.append((self.user_id, event))
        return True

    def of_type(self, event_type: str) -> List[Dict[str, Any]]:
        return [e for e in self.events if e.get("type") == event_type]


def make_settings(**overrides: Any) -> Settings:
    values: Dict[str, Any] = {
        "ENV": "test",
        "access_token_secret": ACCESS_SECRET,
        "refresh_token_secret": REFRESH_SECRET,
        "refresh_cookie_secure": False,
        "heartbeat_interval": 5,
        "shutdown_grace_period": 0,
        "log_level": "warning",
        "verbose": 0,
        "mail_service_url": None,
        "auth_rate_limit": 0,
    }
    values.update(overrides)
    return Settings(**values)


def fast_hasher() -> Argon2PasswordHasher:
    return Argon2PasswordHasher(time_cost=1, memory_cost=8, parallelism=1)


def make_user(user_id: str) -> User:
    """User with a predictable id and email, for store-level tests."""
    return User(
        full_name=user_id.title(),
        email=f"{user_id}@example.com",
        password_hash="unused",
        user_id=user_id,
    )


# ================================================================
# Fixtures
# ================================================================


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def reporter() -> SystemReporter:
    return SystemReporter(name="messager-test", level="warning", verbose=0)


@pytest.fixture
def container(settings, clock, reporter) -> Container:
    return Container(
        settings, reporter=reporter, clock=clock, password_hasher=fast_hasher()
    )


@pytest.fixture
def messager_app(settings, clock) -> MessagerApp:
    return MessagerApp(settings, clock=clock, password_hasher=fast_hasher())


@pytest.fixture
def client(messager_app):
    with TestClient(messager_app.app) as test_client:
        yield test_client


def signup(client: TestClient, name: str, email: str, password: str = PASSWORD):
    """Sign a user up through the API and return the response body."""
    response = client.post(
        "/api/auth/signup",
        json={"fullName": name, "email": email, "password": password},
    )
    assert response.status_code == 201, response.text
    return response.json()


def bearer(token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
