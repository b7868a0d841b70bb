"""
Test infrastructure for the Blog API.

Strategy
--------
- SQLite in-memory via aiosqlite eliminates the need for a running Postgres
  instance in CI, keeping the suite fast and self-contained.
- StaticPool forces all async tasks to share the same in-memory database
  connection, which is required because SQLite in-memory databases are
  connection-scoped; a new connection would see an empty database.
- The app's get_db dependency is overridden so every test-time request uses
  the test session factory rather than the production one.
- get_clock is overridden with a FixedClock so publish timestamps are known
  in advance.
- All tables are created fresh before each test and dropped after.
"""
from datetime import datetime, timezone

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

from blog.database import Base, get_db
from blog.dependencies import get_clock
from blog.main import app
from blog.middleware import install_query_counter
from blog.models import User

# ---------------------------------------------------------------------------
# Test database engine — SQLite in-memory with aiosqlite
# ---------------------------------------------------------------------------

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

engine_test = create_async_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

install_query_counter(engine_test)

async_session_test = async_sessionmaker(
    engine_test,
    class_=AsyncSession,
    expire_on_commit=False,
)


class FixedClock:
    """Callable clock that returns ``current`` until moved."""

    def __init__(self, current: datetime) -> None:
        self.current = current

    def __call__(self) -> datetime:
        return self.current


def naive(value: datetime | None) -> datetime | None:
    """SQLite drops tzinfo on round-trip; compare wall-clock values."""
    return value.replace(tzinfo=None) if value is not None else None


T1 = datetime(2026, 3, 1, 9, 30, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Dependency overrides
# ---------------------------------------------------------------------------

async def override_get_db():
    async with async_session_test() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


app.dependency_overrides[get_db] = override_get_db


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest_asyncio.fixture(autouse=True)
async def setup_db():
    """Create all tables before each test, drop after to guarantee isolation."""
    async with engine_test.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine_test.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
def clock():
    """A FixedClock at T1, also wired into the app's get_clock dependency."""
    fixed = FixedClock(T1)
    app.dependency_overrides[get_clock] = lambda: fixed
    yield fixed
    app.dependency_overrides.pop(get_clock, None)


@pytest_asyncio.fixture
async def db_session() -> AsyncSession:
    """Yield a live AsyncSession for direct service-layer tests."""
    async with async_session_test() as session:
        yield session


@pytest_asyncio.fixture
async def make_user():
    """
    Factory that commits a user straight to the database and returns its id.

    Administrators cannot be created anonymously over HTTP, so endpoint
    tests seed them through here.
    """
    counter = 0

    async def _make(username: str | None = None, is_admin: bool = False) -> int:
        nonlocal counter
        counter += 1
        name = username or f"user{counter}"
        async with async_session_test() as session:
            user = User(username=name, email=f"{name}@example.com", is_admin=is_admin)
            session.add(user)
            await session.commit()
            return user.id

    return _make


@pytest_asyncio.fixture
async def async_client() -> AsyncClient:
    """Yield an httpx.AsyncClient wired to the FastAPI app via ASGITransport."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
