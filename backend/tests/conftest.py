"""
Shared fixtures for the Secret Keeper test suite.

Everything runs against an in-memory SQLite database; nothing touches the
network or the environment.
"""

import base64
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from keeper.core.config import Settings
from keeper.crypto.envelope import EnvelopeCipher
from keeper.db.base import make_engine, make_session_factory
from keeper.db.init_db import init_db
from keeper.db.repository import SecretRepository, UserRepository
from keeper.main import create_app
from keeper.services.auth import AuthService, TokenAuthority
from keeper.services.vault import VaultService

TEST_DATA_KEY = b"k" * 32
TEST_SIGNING_KEY = "test-signing-key"


class FakeClock:
    """Manually advanced UTC clock for token expiry tests."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now += delta


@pytest.fixture
def clock():
    return FakeClock(datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def cipher():
    return EnvelopeCipher(TEST_DATA_KEY)


@pytest.fixture
def engine():
    engine = make_engine("sqlite://")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return make_session_factory(engine)


@pytest.fixture
def secret_repository(session_factory):
    return SecretRepository(session_factory)


@pytest.fixture
def user_repository(session_factory):
    return UserRepository(session_factory)


@pytest.fixture
def vault(secret_repository, cipher):
    return VaultService(secret_repository, cipher)


@pytest.fixture
def token_authority(clock):
    return TokenAuthority(TEST_SIGNING_KEY, ttl=timedelta(hours=3), clock=clock)


@pytest.fixture
def auth_service(user_repository, token_authority):
    return AuthService(user_repository, token_authority)


@pytest.fixture
def settings():
    return Settings(
        DATABASE_URL="sqlite://",
        SECRET_KEY=TEST_SIGNING_KEY,
        DATA_ENCRYPTION_KEY=base64.b64encode(TEST_DATA_KEY).decode("ascii"),
        LOG_JSON=False,
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as client:
        yield client
