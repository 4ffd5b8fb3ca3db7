"""
Test infrastructure for the users service.

Strategy
--------
- SQLite in-memory via aiosqlite eliminates the need for a running Postgres
  instance in CI, keeping the suite fast and self-contained.
- StaticPool forces all async tasks to share the same in-memory database
  connection, which is required because SQLite in-memory databases are
  connection-scoped; a new connection would see an empty database.
- The app's get_user_service dependency is overridden so every test-time
  request uses a repository bound to the test session factory.
- All tables are created fresh before each test and dropped after, giving
  each test a clean isolated state without needing transactions or truncation.
- bcrypt runs at its minimum work factor so hashing does not dominate the
  suite's runtime.
"""
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

from users_service.config import settings
from users_service.database import Base
from users_service.dependencies import get_user_service
from users_service.main import app
from users_service.middleware import install_query_counter
from users_service.repository import UserRepository
from users_service.services.user_service import UserService

settings.BCRYPT_ROUNDS = 4

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


# ---------------------------------------------------------------------------
# Dependency override — wire the service to the test session factory
# ---------------------------------------------------------------------------

def override_get_user_service() -> UserService:
    return UserService(UserRepository(async_session_test, timeout=5))


app.dependency_overrides[get_user_service] = override_get_user_service


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
def make_repository():
    """Return a factory building repositories on the test engine."""
    def _make(timeout: float | None = 5) -> UserRepository:
        return UserRepository(async_session_test, timeout=timeout)
    return _make


@pytest.fixture
def repository(make_repository) -> UserRepository:
    return make_repository()


@pytest.fixture
def service(repository: UserRepository) -> UserService:
    return UserService(repository)


@pytest_asyncio.fixture
async def db_session() -> AsyncSession:
    """
    Yield a live AsyncSession for tests that need to interact with the
    database directly (e.g. seeding data, asserting ORM state).
    """
    async with async_session_test() as session:
        yield session


@pytest_asyncio.fixture
async def async_client() -> AsyncClient:
    """
    Yield an httpx.AsyncClient wired to the FastAPI app via ASGITransport.

    ASGITransport does not run the lifespan, so the production database is
    never contacted.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def count_rows():
    """Return a coroutine function counting the rows of a table or model."""
    async def _count(table) -> int:
        async with async_session_test() as session:
            return (await session.execute(select(func.count()).select_from(table))).scalar_one()
    return _count
