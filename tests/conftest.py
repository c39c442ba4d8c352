"""
Shared fixtures.

Settings are read from the environment when ``core.config`` is first
imported, so the test configuration is put in place before any application
module is loaded.
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key-0123456789abcdef-0123456789abcdef")
os.environ.setdefault("SESSION_COOKIE_SECURE", "false")
os.environ.setdefault("ARGON2_TIME_COST", "1")
os.environ.setdefault("ARGON2_MEMORY_COST", "64")
os.environ.setdefault("ARGON2_PARALLELISM", "1")

from datetime import datetime, timedelta, timezone  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from core.digest import DigestEngine  # noqa: E402
from core.gateway import AuthGateway  # noqa: E402
from core.session import SessionManager  # noqa: E402
from database import Database  # noqa: E402
from store.entries import EntryStore  # noqa: E402
from store.feed import ChangeFeed  # noqa: E402
from store.users import UserStore  # noqa: E402


class FakeClock:
    """Settable UTC clock, callable like ``datetime.now``."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def clock():
    return FakeClock(datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def database():
    """Fresh in-memory SQLite database with the schema created."""
    db = Database(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    ).connect()
    db.create_all()
    yield db
    db.dispose()


@pytest.fixture
def digests():
    # Smallest legal cost; the algorithm is the same, only faster
    return DigestEngine(time_cost=1, memory_cost=64, parallelism=1, hash_len=192)


@pytest.fixture
def users(database):
    return UserStore(database)


@pytest.fixture
def entries(database, clock):
    return EntryStore(database, clock=clock)


@pytest.fixture
def feed(database, entries):
    return ChangeFeed(database, entries)


@pytest.fixture
def sessions(users, clock):
    return SessionManager(users.exists, ttl=timedelta(minutes=10), clock=clock)


@pytest.fixture
def gateway(users, digests, sessions):
    return AuthGateway(users, digests, sessions, default_allowance=4096)


@pytest.fixture
def make_user(users):
    """Factory: insert a bare user row and return its id."""
    counter = {"n": 0}

    def _make(allowance: int = 4096, username: str = None) -> int:
        counter["n"] += 1
        name = username or f"user{counter['n']}@example.com"
        return users.create(name, b"\x01" * 192, b"\x02" * 32, allowance=allowance)

    return _make


@pytest.fixture
def client(database, digests):
    from main import create_app

    app = create_app(db=database, digests=digests)
    with TestClient(app) as test_client:
        yield test_client
