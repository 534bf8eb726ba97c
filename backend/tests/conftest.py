"""Shared fixtures: in-memory database, fake clock, users and authenticated clients."""

import datetime as dt

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from padsync.main import app
from padsync.deps import get_clock
from padsync.shared.db import Base, get_db
from padsync.auth.models import User
from padsync.auth.utils import create_token
from padsync.locks import models as _lock_models  # noqa: F401
from padsync.locks.store import memory_store
from padsync.pads import models as _pad_models  # noqa: F401


class FakeClock:
    """Callable returning a controllable aware UTC datetime."""

    def __init__(self, start: dt.datetime | None = None):
        self.now = start or dt.datetime(2026, 1, 5, 9, 0, 0, tzinfo=dt.timezone.utc)

    def __call__(self) -> dt.datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += dt.timedelta(seconds=seconds)


class MonoClock:
    """Float clock for client-side idle timers."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(autouse=True)
def _reset_memory_store():
    memory_store.clear()
    yield
    memory_store.clear()


@pytest.fixture(name="session")
def session_fixture():
    """Create a fresh in-memory database for each test."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    SessionTest = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
    with SessionTest() as session:
        yield session


@pytest.fixture(name="clock")
def clock_fixture():
    return FakeClock()


@pytest.fixture(name="users")
def users_fixture(session: Session):
    alice = User(email="alice@example.com", name="Alice", password_hash="!")
    bob = User(email="bob@example.com", name="Bob", password_hash="!")
    session.add_all([alice, bob])
    session.commit()
    return {"alice": alice, "bob": bob}


@pytest.fixture(name="overrides")
def overrides_fixture(session: Session, clock: FakeClock):
    """Point the app at the test session and the fake clock."""

    def get_session_override():
        yield session

    app.dependency_overrides[get_db] = get_session_override
    app.dependency_overrides[get_clock] = lambda: clock
    yield
    app.dependency_overrides.clear()


@pytest.fixture(name="client_for")
def client_for_fixture(overrides):
    """Factory: TestClient authenticated as the given user."""
    clients = []

    def _make(user: User | None = None) -> TestClient:
        headers = {"Authorization": f"Bearer {create_token(user.id)}"} if user else {}
        c = TestClient(app, headers=headers)
        clients.append(c)
        return c

    yield _make
    for c in clients:
        c.close()


@pytest.fixture(name="alice_client")
def alice_client_fixture(client_for, users):
    return client_for(users["alice"])


@pytest.fixture(name="bob_client")
def bob_client_fixture(client_for, users):
    return client_for(users["bob"])
